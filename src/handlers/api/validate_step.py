"""Validate step API handler: checks one page of the lead form."""

import json
from typing import Any

import structlog

from leadpages.services.form_stepper import TOTAL_STEPS, FormState, advance
from leadpages.utils.request_context import bind_request_context
from leadpages.utils.responses import (
    error,
    method_not_allowed,
    preflight,
    success,
    validation_error,
)

logger = structlog.get_logger()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle per-step form validation.

    Routes:
        OPTIONS /validate-step  - CORS preflight
        POST    /validate-step  - Validate the fields of one form step
    """
    bind_request_context(event, context, "validate_step")

    try:
        http_method = event.get("httpMethod", "").upper()

        if http_method == "OPTIONS":
            return preflight()
        if http_method != "POST":
            return method_not_allowed()

        return validate_form_step(event)

    except Exception as e:
        logger.exception("Validate step handler error", error=str(e))
        return error("Internal server error", 500)


def validate_form_step(event: dict) -> dict:
    """Advance a form state built from ``{step, fields}``.

    Valid input answers with the next step (or ``complete``) and the
    normalized fields. Invalid input answers 400 with per-field errors and
    the visitor stays on the same step.
    """
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return validation_error(
            [{"field": "__root__", "message": "Invalid JSON body"}],
            message="Invalid JSON body",
        )
    if not isinstance(body, dict):
        body = {}

    step = body.get("step")
    # bool is an int subclass
    if isinstance(step, bool) or not isinstance(step, int) or not 1 <= step <= TOTAL_STEPS:
        return validation_error(
            [{"field": "step", "message": f"Step must be between 1 and {TOTAL_STEPS}"}],
            message="Invalid form step",
        )

    fields = body.get("fields") or {}
    if not isinstance(fields, dict):
        return validation_error(
            [{"field": "fields", "message": "Fields must be an object"}],
            message="Invalid form fields",
        )

    state = advance(FormState(step=step), fields)
    if state.errors:
        logger.info("Form step rejected", step=step, error_count=len(state.errors))
        return validation_error(state.errors)

    return success({
        "step": state.step,
        "complete": state.complete,
        "progress": state.progress,
        "fields": state.fields,
    })
