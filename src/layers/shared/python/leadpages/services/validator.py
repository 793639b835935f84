"""Field validation for lead form submissions.

Pure functions, no I/O. Every check a submission needs before any network
call (email and phone formats, enumerations, consent) happens here.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from leadpages.models.lead import STEP_MODELS, Lead
from leadpages.utils.exceptions import ValidationFailed

INVALID_OPTION = "Invalid option"

# Client-facing message per field; pydantic's own text is too technical
FIELD_MESSAGES: dict[str, str] = {
    "fullName": "Name must be at least 2 characters",
    "email": "Invalid email address",
    "phone": "Invalid phone number",
    "zipCode": "Invalid ZIP code",
    "projectType": INVALID_OPTION,
    "timeframe": INVALID_OPTION,
    "budget": INVALID_OPTION,
    "propertyType": INVALID_OPTION,
    "ownRent": INVALID_OPTION,
    "tcpaConsent": "You must agree to receive communications",
    "recaptchaToken": "reCAPTCHA verification required",
    "landingPageUrl": "Invalid URL",
}


def validate_lead(raw: Mapping[str, Any]) -> Lead:
    """Validate and normalize a complete submission.

    Args:
        raw: Decoded request body (camelCase keys).

    Returns:
        The normalized, immutable Lead.

    Raises:
        ValidationFailed: With one ``{field, message}`` entry per bad field.
    """
    if not isinstance(raw, Mapping):
        raise ValidationFailed(
            message="Request body must be a JSON object",
            errors=[{"field": "__root__", "message": "Expected an object"}],
        )

    try:
        return Lead.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise ValidationFailed.from_pydantic(e, FIELD_MESSAGES) from e


def validate_step(step: int, raw: Mapping[str, Any]) -> dict[str, Any]:
    """Validate only the fields that belong to one form step.

    Args:
        step: Form step number (1, 2 or 3).
        raw: Field values collected so far; fields of other steps are ignored.

    Returns:
        The normalized field values of that step, camelCase keyed.

    Raises:
        ValueError: If ``step`` is not a known step.
        ValidationFailed: If any field of the step is invalid.
    """
    model = STEP_MODELS.get(step)
    if model is None:
        raise ValueError(f"Unknown form step: {step}")

    try:
        validated = model.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise ValidationFailed.from_pydantic(e, FIELD_MESSAGES) from e

    return validated.model_dump(mode="json", by_alias=True)
