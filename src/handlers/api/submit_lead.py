"""Submit lead API handler (public, no authentication required)."""

import json
from typing import Any

import structlog

from leadpages.services.attribution import fill_attribution
from leadpages.services.submission import GENERIC_FAILURE_MESSAGE, LeadSubmissionService
from leadpages.utils.exceptions import ConfigurationError
from leadpages.utils.request_context import bind_request_context
from leadpages.utils.responses import (
    error,
    json_response,
    method_not_allowed,
    preflight,
    validation_error,
)

logger = structlog.get_logger()


def get_submission_service() -> LeadSubmissionService:
    """Build the submission pipeline from the environment."""
    return LeadSubmissionService.from_env()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle lead form submissions.

    Routes:
        OPTIONS /submit-lead  - CORS preflight
        POST    /submit-lead  - Validate, screen and store a lead
    """
    bind_request_context(event, context, "submit_lead")

    try:
        http_method = event.get("httpMethod", "").upper()

        if http_method == "OPTIONS":
            return preflight()
        if http_method != "POST":
            return method_not_allowed()

        return submit_lead(event)

    except ConfigurationError as e:
        logger.error("Submission pipeline not configured", setting=e.setting, error=e.message)
        return error(GENERIC_FAILURE_MESSAGE, 500)
    except Exception as e:
        logger.exception("Submit lead handler error", error=str(e))
        return error(GENERIC_FAILURE_MESSAGE, 500)


def submit_lead(event: dict) -> dict:
    """Run the request body through the submission pipeline."""
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return validation_error(
            [{"field": "__root__", "message": "Invalid JSON body"}],
            message="Invalid JSON body",
        )

    if isinstance(body, dict):
        body = fill_attribution(body, event)

    outcome = get_submission_service().submit(body)
    return json_response(outcome.body, outcome.status_code)
