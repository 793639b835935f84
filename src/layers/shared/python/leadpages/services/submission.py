"""Lead submission pipeline.

Runs once per request, strictly in order:

    received -> validated -> risk_checked -> duplicate_checked -> persisted -> acknowledged

Bad input, a bot verdict and a duplicate each end the run early as a
rejection. A store failure (or missing store configuration) ends it as a
hard failure. Nothing is retried.

This module is the only place that turns pipeline failures into response
envelopes; the components below it raise or return typed results.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from leadpages.models.lead import Lead
from leadpages.repositories.lead_store import AirtableLeadStore, LeadStore
from leadpages.services.duplicate_detection import DuplicateChecker, DuplicateDetector
from leadpages.services.risk_assessor import (
    DEFAULT_EXPECTED_ACTION,
    RecaptchaAssessor,
    RiskAssessor,
    RiskVerdict,
)
from leadpages.services.validator import validate_lead
from leadpages.utils.exceptions import (
    DuplicateSubmission,
    LeadPagesError,
    RiskRejected,
    ValidationFailed,
)
from leadpages.utils.request_context import mask_email

logger = structlog.get_logger()

SUCCESS_MESSAGE = "Thank you! We will contact you shortly."
GENERIC_FAILURE_MESSAGE = "An error occurred processing your submission"
RISK_UNAVAILABLE_MESSAGE = "We could not verify your submission. Please try again."


class SubmissionState(str, Enum):
    """Pipeline states."""

    RECEIVED = "received"
    VALIDATED = "validated"
    RISK_CHECKED = "risk_checked"
    DUPLICATE_CHECKED = "duplicate_checked"
    PERSISTED = "persisted"
    ACKNOWLEDGED = "acknowledged"
    REJECTED = "rejected"
    FAILED = "failed"


class RejectionReason(str, Enum):
    """Why a submission was rejected."""

    VALIDATION = "validation"
    RISK = "risk"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class SubmissionOutcome:
    """Final state of one pipeline run and the response it maps to."""

    state: SubmissionState
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
    reason: RejectionReason | None = None
    submission_id: str | None = None

    @property
    def accepted(self) -> bool:
        """True if the lead was persisted and acknowledged."""
        return self.state == SubmissionState.ACKNOWLEDGED


class LeadSubmissionService:
    """Validates, screens and persists lead submissions."""

    def __init__(
        self,
        store: LeadStore,
        duplicates: DuplicateChecker,
        risk_assessor: RiskAssessor | None = None,
        expected_action: str = DEFAULT_EXPECTED_ACTION,
    ):
        """Initialize the service.

        Args:
            store: Where leads are persisted.
            duplicates: Duplicate lookup.
            risk_assessor: Bot-risk check; None skips the check.
            expected_action: Action name the form page executes reCAPTCHA with.
        """
        self.store = store
        self.duplicates = duplicates
        self.risk_assessor = risk_assessor
        self.expected_action = expected_action

    @classmethod
    def from_env(cls) -> "LeadSubmissionService":
        """Wire the service from environment configuration."""
        store = AirtableLeadStore.from_env()
        return cls(
            store=store,
            duplicates=DuplicateDetector.from_env(store),
            risk_assessor=RecaptchaAssessor.from_env(),
            expected_action=os.environ.get("RECAPTCHA_EXPECTED_ACTION", DEFAULT_EXPECTED_ACTION),
        )

    def submit(self, raw: Mapping[str, Any]) -> SubmissionOutcome:
        """Run one submission through the pipeline.

        Args:
            raw: Decoded request body.

        Returns:
            The outcome, including the HTTP status and response body.
        """
        state = SubmissionState.RECEIVED

        try:
            lead = validate_lead(raw)
            state = SubmissionState.VALIDATED

            self._check_risk(lead)
            state = SubmissionState.RISK_CHECKED

            if self.duplicates.is_duplicate(lead):
                raise DuplicateSubmission()
            state = SubmissionState.DUPLICATE_CHECKED

            submission_id = self.store.create(lead)
            state = SubmissionState.PERSISTED

        except ValidationFailed as e:
            logger.info("Submission rejected", reason="validation", fields=e.fields)
            return self._rejected(RejectionReason.VALIDATION, e)
        except RiskRejected as e:
            logger.warning("Submission rejected", reason="risk", verdict=e.details.get("verdict"))
            return self._rejected(RejectionReason.RISK, e)
        except DuplicateSubmission as e:
            return self._rejected(RejectionReason.DUPLICATE, e)
        except LeadPagesError as e:
            logger.error(
                "Submission failed",
                failed_after=state.value,
                error_code=e.error_code,
                error=e.message,
                details=e.details,
            )
            return SubmissionOutcome(
                state=SubmissionState.FAILED,
                status_code=500,
                body={"success": False, "message": GENERIC_FAILURE_MESSAGE},
            )

        logger.info(
            "Form submission successful",
            submission_id=submission_id,
            email=mask_email(lead.email),
            project_type=lead.project_type,
        )
        return SubmissionOutcome(
            state=SubmissionState.ACKNOWLEDGED,
            status_code=200,
            body={
                "success": True,
                "message": SUCCESS_MESSAGE,
                "submissionId": submission_id,
            },
            submission_id=submission_id,
        )

    def _check_risk(self, lead: Lead) -> None:
        """Run the bot-risk check if one is configured.

        Raises:
            RiskRejected: On a bot verdict, or when the check could not run.
        """
        if self.risk_assessor is None:
            return

        verdict = self.risk_assessor.assess(lead.recaptcha_token, self.expected_action)
        if verdict == RiskVerdict.HUMAN:
            return
        if verdict == RiskVerdict.INDETERMINATE:
            raise RiskRejected(message=RISK_UNAVAILABLE_MESSAGE, verdict=verdict.value)
        raise RiskRejected(verdict=verdict.value)

    @staticmethod
    def _rejected(reason: RejectionReason, exc: LeadPagesError) -> SubmissionOutcome:
        """Map a rejection to its outcome."""
        return SubmissionOutcome(
            state=SubmissionState.REJECTED,
            status_code=exc.status_code,
            body=exc.to_dict(),
            reason=reason,
        )
