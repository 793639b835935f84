"""Bot-risk assessment via reCAPTCHA Enterprise.

The assessment is a single call with no retry. Any failure to get an
answer is reported as ``INDETERMINATE``, which callers must treat as a
block: when the check is configured, infrastructure trouble must not let
spam through.
"""

import os
from enum import Enum
from typing import Protocol

import httpx
import structlog

from leadpages.utils.exceptions import ConfigurationError

logger = structlog.get_logger()

ASSESSMENT_URL = "https://recaptchaenterprise.googleapis.com/v1/projects/{project_id}/assessments"
DEFAULT_EXPECTED_ACTION = "SUBMIT_LEAD_FORM"
DEFAULT_MINIMUM_SCORE = 0.5
REQUEST_TIMEOUT = 10.0


class RiskVerdict(str, Enum):
    """Outcome of a bot-risk assessment."""

    HUMAN = "human"
    BOT = "bot"
    INDETERMINATE = "indeterminate"


class RiskAssessor(Protocol):
    """Anything that can classify a client token as human or bot."""

    def assess(self, token: str, expected_action: str) -> RiskVerdict:
        """Classify the token."""
        ...


class RecaptchaAssessor:
    """Scores reCAPTCHA Enterprise tokens against a minimum score."""

    def __init__(
        self,
        secret_key: str,
        site_key: str | None = None,
        project_id: str | None = None,
        minimum_score: float = DEFAULT_MINIMUM_SCORE,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the assessor.

        Args:
            secret_key: API key used to authorize assessment calls.
            site_key: Public site key the token was issued for.
            project_id: Google Cloud project that owns the site key.
            minimum_score: Lowest score accepted as human, in [0, 1].
            http_client: Optional client (tests inject a mock transport).
        """
        self.secret_key = secret_key
        self.site_key = site_key
        self.project_id = project_id
        self.minimum_score = DEFAULT_MINIMUM_SCORE
        self.set_minimum_score(minimum_score)
        self._http_client = http_client

    @classmethod
    def from_env(cls) -> "RecaptchaAssessor | None":
        """Build an assessor from the environment.

        Returns None when ``RECAPTCHA_SECRET_KEY`` is unset, which disables
        the check entirely.

        Raises:
            ConfigurationError: If the secret is set without a project ID.
        """
        secret_key = os.environ.get("RECAPTCHA_SECRET_KEY")
        if not secret_key:
            return None

        project_id = os.environ.get("RECAPTCHA_PROJECT_ID")
        if not project_id:
            raise ConfigurationError(
                "RECAPTCHA_PROJECT_ID",
                "reCAPTCHA project ID must be set with RECAPTCHA_SECRET_KEY",
            )

        return cls(
            secret_key=secret_key,
            site_key=os.environ.get("RECAPTCHA_SITE_KEY"),
            project_id=project_id,
            minimum_score=float(os.environ.get("RECAPTCHA_MIN_SCORE", DEFAULT_MINIMUM_SCORE)),
        )

    @property
    def http_client(self) -> httpx.Client:
        """Get the HTTP client (lazy initialization)."""
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=REQUEST_TIMEOUT)
        return self._http_client

    def set_minimum_score(self, score: float) -> None:
        """Change the score threshold.

        Raises:
            ValueError: If the score is outside [0, 1].
        """
        if score < 0 or score > 1:
            raise ValueError("Minimum score must be between 0 and 1")
        self.minimum_score = score

    def assess(self, token: str, expected_action: str = DEFAULT_EXPECTED_ACTION) -> RiskVerdict:
        """Assess a client token.

        Args:
            token: Token produced by the reCAPTCHA client script.
            expected_action: Action name the page passed when executing.

        Returns:
            HUMAN, BOT, or INDETERMINATE when the service could not be asked.
        """
        url = ASSESSMENT_URL.format(project_id=self.project_id or "")
        payload = {
            "event": {
                "token": token,
                "expectedAction": expected_action,
                "siteKey": self.site_key,
            }
        }

        try:
            response = self.http_client.post(url, params={"key": self.secret_key}, json=payload)
        except httpx.HTTPError as e:
            logger.error("reCAPTCHA assessment request failed", error=str(e))
            return RiskVerdict.INDETERMINATE

        if not response.is_success:
            logger.error(
                "reCAPTCHA assessment returned an error",
                status_code=response.status_code,
                response=response.text[:500],
            )
            return RiskVerdict.INDETERMINATE

        try:
            result = response.json()
        except ValueError:
            logger.error("reCAPTCHA assessment returned invalid JSON")
            return RiskVerdict.INDETERMINATE

        return self._decide(result, expected_action)

    def _decide(self, result: dict, expected_action: str) -> RiskVerdict:
        """Apply the decision policy to an assessment response."""
        token_properties = result.get("tokenProperties") or {}
        risk_analysis = result.get("riskAnalysis") or {}

        action = token_properties.get("action")
        if action != expected_action:
            logger.warning("reCAPTCHA action mismatch", action=action, expected=expected_action)
            return RiskVerdict.BOT

        if not token_properties.get("valid"):
            logger.warning(
                "reCAPTCHA token invalid",
                reason=token_properties.get("invalidReason"),
            )
            return RiskVerdict.BOT

        score = risk_analysis.get("score") or 0.0
        if score < self.minimum_score:
            logger.warning("reCAPTCHA score too low", score=score, minimum=self.minimum_score)
            return RiskVerdict.BOT

        logger.debug("reCAPTCHA assessment passed", score=score)
        return RiskVerdict.HUMAN
