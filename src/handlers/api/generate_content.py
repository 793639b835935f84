"""Generate content API handler.

Drafts landing page copy for a page type and location, either directly
with Claude or by handing the request to a Make.com scenario.
"""

import json
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from leadpages.models.content import ContentRequest
from leadpages.services.content_generator import ContentGenerator
from leadpages.services.make_service import MakeService
from leadpages.utils.exceptions import ConfigurationError, LeadPagesError, ValidationFailed
from leadpages.utils.request_context import bind_request_context
from leadpages.utils.responses import (
    error,
    method_not_allowed,
    preflight,
    success,
    validation_error,
)

logger = structlog.get_logger()

GENERIC_FAILURE_MESSAGE = "Content generation failed"


def get_content_generator() -> ContentGenerator:
    """Build the Claude content generator from the environment."""
    return ContentGenerator.from_env()


def get_make_service() -> MakeService:
    """Build the Make.com client from the environment."""
    return MakeService.from_env()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle content generation requests.

    Routes:
        OPTIONS /generate-content  - CORS preflight
        POST    /generate-content  - Generate landing page content
    """
    bind_request_context(event, context, "generate_content")

    try:
        http_method = event.get("httpMethod", "").upper()

        if http_method == "OPTIONS":
            return preflight()
        if http_method != "POST":
            return method_not_allowed()

        return generate_content(event)

    except ValueError as e:
        return error(str(e), 400)
    except ConfigurationError as e:
        logger.error("Content generation not configured", setting=e.setting)
        return error(e.message, 500)
    except LeadPagesError as e:
        # Upstream detail stays in the logs
        logger.error(
            "Content generation error",
            error_code=e.error_code,
            error=e.message,
            details=e.details,
        )
        return error(GENERIC_FAILURE_MESSAGE, 500)
    except Exception as e:
        logger.exception("Content generation error", error=str(e))
        return error(GENERIC_FAILURE_MESSAGE, 500)


def generate_content(event: dict) -> dict:
    """Generate content, or trigger the Make.com scenario when asked to."""
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return error("Invalid JSON body", 400)

    if not isinstance(body, dict) or not body.get("pageType"):
        return error("pageType is required", 400)

    try:
        request = ContentRequest.model_validate(body)
    except PydanticValidationError as e:
        return validation_error(ValidationFailed.from_pydantic(e).errors)

    if request.use_make:
        make = get_make_service()
        webhook_url = make.resolve_webhook_url(request.make_webhook_url)
        if webhook_url:
            make_response = make.trigger_scenario(webhook_url, body)
            return success(
                {"makeResponse": make_response},
                message="Content generation triggered via Make.com",
            )
        logger.info("useMake requested without a webhook URL, generating directly")

    content = get_content_generator().generate(request)
    return success({"content": content.to_wire()})
