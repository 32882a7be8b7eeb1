import requests
from typing import Any, Optional

from ..core.config import get_settings
from ..core.errors import UpstreamError

TIMEOUT = 10
UNAVAILABLE = "The radio metadata service is currently unavailable."

LIVE_INFO = "live-info-v2"
WEEK_INFO = "week-info"


def _get(endpoint: str, session: Optional[requests.Session] = None) -> Any:
    url = get_settings().radio_url.rstrip("/") + "/" + endpoint
    http = session or requests
    try:
        resp = http.get(url, timeout=TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as exc:
        raise UpstreamError(UNAVAILABLE, exc) from exc


def live_info(session: Optional[requests.Session] = None) -> dict:
    return _get(LIVE_INFO, session)


def station(session: Optional[requests.Session] = None):
    return live_info(session).get("station")


def track(which: str, session: Optional[requests.Session] = None):
    """``which`` is one of previous, current, next."""
    return (live_info(session).get("tracks") or {}).get(which)


def show(which: str, session: Optional[requests.Session] = None):
    return (live_info(session).get("shows") or {}).get(which)


def schedule(session: Optional[requests.Session] = None):
    return _get(WEEK_INFO, session)
