"""CLI tests for the provision command group."""
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from mythicbeasts.errors import PollFailed, PollTimedOut
from mythicbeasts.main import app

runner = CliRunner()

QUEUE_URL = "https://api.example.com/beta/queue/vps/7"


def _invoke(fake_config, client, *extra):
    with patch("mythicbeasts.commands.provision_cmd.get_config", return_value=fake_config), \
         patch("mythicbeasts.commands.provision_cmd.MythicBeastsClient", return_value=client):
        return runner.invoke(
            app, ["provision", "wait", QUEUE_URL, "--identifier", "web1", "--output", "json", *extra]
        )


def test_wait_success(fake_config):
    client = MagicMock()
    client.poll_provisioning.return_value = "/vps/servers/web1"

    result = _invoke(fake_config, client)

    assert result.exit_code == 0
    assert '"location": "/vps/servers/web1"' in result.stdout
    assert '"status": "ready"' in result.stdout
    args = client.poll_provisioning.call_args.args
    assert args[:4] == ("https://api.example.com/beta", QUEUE_URL, 1.0, "web1")
    client.close.assert_called_once()


def test_wait_ready_check_uses_family_and_status(fake_config):
    client = MagicMock()
    client.poll_provisioning.return_value = "/pi/servers/web1"

    result = _invoke(fake_config, client, "--family", "pi", "--ready-status", "live", "--timeout", "30")

    assert result.exit_code == 0
    base_url, _, timeout, _, check = client.poll_provisioning.call_args.args
    assert timeout == 30.0
    assert check({"status": "live"}, "web1") == ("/pi/servers/web1", True)
    assert check({"status": "running"}, "web1") == ("", False)


def test_wait_timeout(fake_config):
    client = MagicMock()
    client.poll_provisioning.side_effect = PollTimedOut(1.0)

    result = _invoke(fake_config, client)

    assert result.exit_code == 1
    assert "TIMEOUT" in result.stdout
    client.close.assert_called_once()


def test_wait_provisioning_failed(fake_config):
    client = MagicMock()
    client.poll_provisioning.side_effect = PollFailed("out of capacity")

    result = _invoke(fake_config, client)

    assert result.exit_code == 1
    assert "PROVISIONING_FAILED" in result.stdout


def test_wait_unknown_family(fake_config):
    client = MagicMock()

    result = _invoke(fake_config, client, "--family", "dns")

    assert result.exit_code == 1
    assert "Unknown resource family" in result.stdout
    client.poll_provisioning.assert_not_called()


def test_wait_requires_identifier():
    result = runner.invoke(app, ["provision", "wait", QUEUE_URL])
    assert result.exit_code != 0
