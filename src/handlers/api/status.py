"""Status API handler: reports which integrations are configured."""

import os
from typing import Any

import structlog

from leadpages.services.content_generator import API_KEY_ENV
from leadpages.utils.request_context import bind_request_context
from leadpages.utils.responses import error, get_cors_headers, method_not_allowed, preflight, success

logger = structlog.get_logger()

ALLOWED_METHODS = "GET, OPTIONS"
STATUS_HEADERS = get_cors_headers(ALLOWED_METHODS)


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle status checks.

    Routes:
        GET /status  - Configuration presence check (never returns values)
    """
    bind_request_context(event, context, "status")

    try:
        http_method = event.get("httpMethod", "").upper()

        if http_method == "OPTIONS":
            return preflight(ALLOWED_METHODS)
        if http_method != "GET":
            return method_not_allowed(STATUS_HEADERS)

        return success(
            {"envCheck": env_check()},
            message="API route working",
            headers=STATUS_HEADERS,
        )

    except Exception as e:
        logger.exception("Status handler error", error=str(e))
        return error("Internal server error", 500, headers=STATUS_HEADERS)


def env_check() -> dict[str, bool]:
    """Which settings are present, as booleans."""
    return {
        "hasAirtableKey": bool(os.environ.get("AIRTABLE_API_KEY")),
        "hasAirtableBase": bool(os.environ.get("AIRTABLE_BASE_ID")),
        "hasClaudeKey": bool(os.environ.get(API_KEY_ENV)),
        "hasRecaptchaSecret": bool(os.environ.get("RECAPTCHA_SECRET_KEY")),
        "hasMakeWebhook": bool(os.environ.get("MAKE_WEBHOOK_URL")),
    }
