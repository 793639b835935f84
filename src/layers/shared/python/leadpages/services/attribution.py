"""Marketing attribution capture.

Ad clicks land with ``utm_*``, ``gclid`` and ``fbclid`` query parameters.
The site keeps them in first-party cookies for 30 days so the form can send
them with the lead. When the form body lacks them, the submit handler
recovers them from the request cookies and then from the landing page URL.
"""

from collections.abc import Mapping
from http.cookies import CookieError, SimpleCookie
from typing import Any
from urllib.parse import parse_qs, urlparse

import structlog

logger = structlog.get_logger()

# Query/cookie parameter -> lead body key
PARAMETERS: dict[str, str] = {
    "utm_source": "utmSource",
    "utm_medium": "utmMedium",
    "utm_campaign": "utmCampaign",
    "gclid": "gclid",
    "fbclid": "fbclid",
}


def from_params(params: Mapping[str, str] | None) -> dict[str, str]:
    """Pick attribution values out of query parameters or cookies."""
    if not params:
        return {}
    return {
        key: params[name]
        for name, key in PARAMETERS.items()
        if params.get(name)
    }


def from_url(url: str | None) -> dict[str, str]:
    """Read attribution from a URL's query string."""
    if not url or not isinstance(url, str):
        return {}
    query = parse_qs(urlparse(url).query)
    return from_params({name: values[0] for name, values in query.items() if values})


def parse_cookies(event: dict) -> dict[str, str]:
    """Parse request cookies from an API Gateway event (REST or HTTP API)."""
    headers = event.get("headers") or {}
    parts = list(event.get("cookies") or [])
    header = headers.get("Cookie") or headers.get("cookie")
    if header:
        parts.append(header)
    if not parts:
        return {}

    jar = SimpleCookie()
    try:
        jar.load("; ".join(parts))
    except CookieError:
        logger.debug("Ignoring malformed Cookie header")
        return {}
    return {name: morsel.value for name, morsel in jar.items()}


def fill_attribution(body: Mapping[str, Any], event: dict) -> dict[str, Any]:
    """Return a copy of ``body`` with missing attribution fields filled in.

    Values already in the body win, then cookies, then the landing page URL.
    """
    filled = dict(body)
    sources = (
        from_params(parse_cookies(event)),
        from_url(body.get("landingPageUrl")),
    )
    for source in sources:
        for key, value in source.items():
            if not filled.get(key):
                filled[key] = value
    return filled
