"""Read-only clients for third-party status APIs.

- Crowdin: translation progress of the web frontend.
- UptimeRobot: state of the station's monitors.
- GitHub: release notes of the station's repositories.

Every call has a 10 second timeout; failures become ``UpstreamError``.
"""
import logging
from typing import Any, Optional

import requests

from ..core.config import get_settings
from ..core.errors import UpstreamError

logger = logging.getLogger(__name__)

TIMEOUT = 10
CROWDIN_BASE = "https://api.crowdin.com/api/project"
UPTIMEROBOT_URL = "https://api.uptimerobot.com/v2/getMonitors"
GITHUB_BASE = "https://api.github.com/repos"


def _json(resp: requests.Response, what: str) -> Any:
    try:
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as exc:
        raise UpstreamError(f"Could not load {what}.", exc) from exc


def translation_status(session: Optional[requests.Session] = None) -> Any:
    settings = get_settings()
    http = session or requests
    params = {
        "login": settings.crowdin_login or settings.github_owner,
        "account-key": settings.crowdin_account_key or "",
        "json": "",
    }
    url = f"{CROWDIN_BASE}/{settings.crowdin_project}/status"
    try:
        resp = http.get(url, params=params, timeout=TIMEOUT)
    except requests.RequestException as exc:
        raise UpstreamError("Could not load the available languages.", exc) from exc
    return _json(resp, "the available languages")


def monitors(session: Optional[requests.Session] = None) -> Any:
    settings = get_settings()
    if not settings.uptimerobot_api_key:
        raise UpstreamError("No status monitor is configured.")
    http = session or requests
    data = {"api_key": settings.uptimerobot_api_key, "format": "json"}
    try:
        resp = http.post(UPTIMEROBOT_URL, data=data, timeout=TIMEOUT)
    except requests.RequestException as exc:
        raise UpstreamError("Could not load the system status.", exc) from exc
    return _json(resp, "the system status")


def releases(repository: str, session: Optional[requests.Session] = None) -> Any:
    settings = get_settings()
    if repository not in settings.changelog_repositories:
        return None
    http = session or requests
    url = f"{GITHUB_BASE}/{settings.github_owner}/{repository}/releases"
    try:
        resp = http.get(url, headers={"Accept": "application/vnd.github+json"}, timeout=TIMEOUT)
    except requests.RequestException as exc:
        raise UpstreamError("Could not load the changelog.", exc) from exc
    logger.debug("github releases %s -> %s", repository, resp.status_code)
    return _json(resp, "the changelog")
