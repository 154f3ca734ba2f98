"""Mythic Beasts CLI entry point.

Thin command-line front end over the client library: credential checks and
waiting on provisioning jobs.
"""

from __future__ import annotations

import logging

import typer

from mythicbeasts.commands.auth_cmd import app as auth_app
from mythicbeasts.commands.provision_cmd import app as provision_app

app = typer.Typer(
    name="mythicbeasts",
    help="Client for the Mythic Beasts VPS and Raspberry Pi provisioning APIs.",
    no_args_is_help=True,
)

app.add_typer(auth_app, name="auth")
app.add_typer(provision_app, name="provision")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Mythic Beasts CLI: check credentials and follow provisioning."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
