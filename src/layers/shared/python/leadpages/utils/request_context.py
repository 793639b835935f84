"""Per-invocation structlog context."""

from typing import Any

import structlog

from leadpages.models.base import generate_ulid


def bind_request_context(event: dict, context: Any, function: str) -> str:
    """Reset contextvars and bind the request id for this invocation.

    Lambda containers are reused between invocations, so any context bound
    by a previous request is cleared first.

    Returns:
        The request id that was bound.
    """
    request_id = getattr(context, "aws_request_id", None) or generate_ulid()
    request_context = event.get("requestContext") or {}

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        function=function,
        api_request_id=request_context.get("requestId"),
    )
    return request_id


def mask_email(email: str | None) -> str | None:
    """Shorten an email for log output: ``ja***@example.com``."""
    if not email or "@" not in email:
        return email
    local, _, domain = email.partition("@")
    return f"{local[:2]}***@{domain}"


def mask_phone(phone: str | None) -> str | None:
    """Keep only the last four digits of a phone number."""
    if not phone:
        return phone
    digits = [c for c in phone if c.isdigit()]
    return "***" + "".join(digits[-4:])
