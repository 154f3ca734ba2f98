"""Request target resolution."""

from __future__ import annotations

import httpx

from mythicbeasts.errors import InvalidBaseURL, InvalidEndpoint


def resolve_url(base_url: str, endpoint: str) -> httpx.URL:
    """Resolve ``endpoint`` against ``base_url``.

    Absolute endpoints (scheme and host present) are returned as-is so that
    server-supplied poll and redirect locations can be followed. Anything else
    is joined onto the base path, keeping the endpoint's query and fragment::

        resolve_url("https://api.example.com/beta", "/vps/servers?x=1")
        # https://api.example.com/beta/vps/servers?x=1

    Raises:
        InvalidEndpoint: ``endpoint`` is not a parseable URL.
        InvalidBaseURL: ``base_url`` has no scheme or no host.
    """
    try:
        target = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidEndpoint(endpoint, str(e)) from e

    if target.scheme and target.host:
        return target

    try:
        base = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidBaseURL(base_url) from e
    if not base.scheme or not base.host:
        raise InvalidBaseURL(base_url)

    base_path = base.path if base.path.endswith("/") else base.path + "/"
    relative = target.raw_path.decode("ascii").lstrip("/")
    if target.fragment:
        relative += "#" + target.fragment
    return base.copy_with(path=base_path).join(relative)
