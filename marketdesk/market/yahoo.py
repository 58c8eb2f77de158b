"""Yahoo Finance cookie + crumb handshake.

Authenticated Yahoo endpoints want both a session cookie and a crumb token
minted for that cookie. The cookie comes from ``fc.yahoo.com`` (which answers
with a redirect or a 404, either way carrying ``Set-Cookie``); the crumb is
then requested with that cookie attached.
"""

import requests

from marketdesk.config import settings
from marketdesk.exceptions import ShapeError, TransportError
from marketdesk.market import http

COOKIE_URL = "https://fc.yahoo.com"
CRUMB_URL = "https://query2.finance.yahoo.com/v1/test/getcrumb"
QUOTE_URL = "https://query2.finance.yahoo.com/v7/finance/quote"
CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
CRUMB_CHART_URL = "https://query2.finance.yahoo.com/v8/finance/chart/{symbol}"


def open_session(session_factory: http.SessionFactory = requests.Session) -> requests.Session:
    session = session_factory()
    session.headers.update(http.BROWSER_HEADERS)
    return session


def authenticate(session: requests.Session, provider: str) -> str:
    """Run the two-step handshake on ``session`` and return the crumb.

    The cookie lands in the session's jar, so later requests made with the
    same session carry it automatically.
    """
    try:
        cookie_response = session.get(
            COOKIE_URL, allow_redirects=False, timeout=settings.http_timeout_seconds
        )
    except requests.exceptions.RequestException as exc:
        raise TransportError(provider, f"session cookie request failed: {exc}") from exc

    set_cookie = cookie_response.headers.get("set-cookie", "")
    cookie = set_cookie.split(";")[0]
    if cookie:
        session.headers["Cookie"] = cookie

    crumb_response = http.get(session, provider, CRUMB_URL)
    crumb = crumb_response.text.strip()
    if not crumb or "<" in crumb:
        raise ShapeError(provider, "crumb endpoint returned no token")
    return crumb
