"""Remote check for a newer published version."""

from __future__ import annotations

import json
import logging
import re

import requests

from tui_kanban.core.errors import NetworkTimeout, NetworkUnavailable

logger = logging.getLogger(__name__)

_RELEASE = re.compile(r"v?(\d+(?:\.\d+)*)")


def fetch_latest_version(url: str, timeout: float) -> str:
    """
    Ask `url` for the latest published version string.

    Raises NetworkTimeout when the server does not answer within
    `timeout` seconds and NetworkUnavailable for any other failure.
    """
    try:
        response = requests.get(
            url,
            timeout=timeout,
            headers={"Accept": "application/json, text/plain"},
        )
        response.raise_for_status()
    except requests.Timeout as e:
        raise NetworkTimeout(f"Version check timed out after {timeout:g}s") from e
    except requests.RequestException as e:
        raise NetworkUnavailable(f"Version check skipped: {e}") from e
    return parse_version_response(response.text)


def parse_version_response(text: str) -> str:
    """
    Extract a version from a plain text or JSON body.

    Accepts "1.2.3", {"version": "1.2.3"} and PyPI's
    {"info": {"version": "1.2.3"}}.
    """
    body = text.strip()
    if not body:
        raise NetworkUnavailable("Version check returned an empty response")
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return body.splitlines()[0].strip()

    if isinstance(data, str):
        return data.strip()
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        return str(data)
    if isinstance(data, dict):
        version = data.get("version")
        if version is None and isinstance(data.get("info"), dict):
            version = data["info"].get("version")
        if version:
            return str(version).strip()
    raise NetworkUnavailable("Version check response has no version")


def version_tuple(version: str) -> tuple[int, ...]:
    """Release components of a version string, e.g. "v0.10.2rc1" -> (0, 10, 2)."""
    match = _RELEASE.match(version.strip())
    if match is None:
        return ()
    return tuple(int(part) for part in match.group(1).split("."))


def is_newer(latest: str, current: str) -> bool:
    return version_tuple(latest) > version_tuple(current)
