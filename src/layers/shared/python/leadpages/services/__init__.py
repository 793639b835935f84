"""Service classes for business logic."""

from leadpages.services.content_generator import ContentGenerator, build_prompt, extract_json_object
from leadpages.services.duplicate_detection import DuplicateDetector
from leadpages.services.form_stepper import TOTAL_STEPS, FormState, advance, back, start, to_submission
from leadpages.services.make_service import MakeService
from leadpages.services.risk_assessor import RecaptchaAssessor, RiskVerdict
from leadpages.services.submission import (
    LeadSubmissionService,
    RejectionReason,
    SubmissionOutcome,
    SubmissionState,
)
from leadpages.services.validator import validate_lead, validate_step

__all__ = [
    "ContentGenerator",
    "DuplicateDetector",
    "FormState",
    "LeadSubmissionService",
    "MakeService",
    "RecaptchaAssessor",
    "RejectionReason",
    "RiskVerdict",
    "SubmissionOutcome",
    "SubmissionState",
    "TOTAL_STEPS",
    "advance",
    "back",
    "build_prompt",
    "extract_json_object",
    "start",
    "to_submission",
    "validate_lead",
    "validate_step",
]
