"""Custom exception classes for Lead Pages."""


class LeadPagesError(Exception):
    """Base exception for all Lead Pages errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 500,
        details: dict | None = None,
    ):
        """Initialize LeadPagesError.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            status_code: HTTP status code for API responses.
            details: Additional error details (logged, not returned).
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to the response envelope."""
        return {"success": False, "message": self.message}


class ValidationFailed(LeadPagesError):
    """Raised when client input is malformed.

    Carries an ordered list of ``{"field", "message"}`` entries, at most one
    per field.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[dict] | None = None,
    ):
        """Initialize ValidationFailed.

        Args:
            message: Error message.
            errors: List of validation errors with field and message.
        """
        self.errors = errors or []
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"errors": self.errors},
        )

    @property
    def fields(self) -> list[str]:
        """Names of the offending fields, in report order."""
        return [e["field"] for e in self.errors]

    def to_dict(self) -> dict:
        """Convert exception to the response envelope."""
        return {"success": False, "message": self.message, "errors": self.errors}

    @classmethod
    def from_pydantic(
        cls,
        exc: Exception,
        messages: dict[str, str] | None = None,
    ) -> "ValidationFailed":
        """Create ValidationFailed from a Pydantic ValidationError.

        Keeps the first error reported for each field. Missing fields are
        reported as "Required"; other failures use ``messages[field]`` when
        given, else pydantic's own message.
        """
        messages = messages or {}
        errors = []
        seen: set[str] = set()
        if hasattr(exc, "errors"):
            for error in exc.errors():
                loc = error.get("loc") or ()
                field = str(loc[0]) if loc else "__root__"
                if field in seen:
                    continue
                seen.add(field)

                if error.get("type") == "missing":
                    message = "Required"
                else:
                    message = messages.get(field, error.get("msg", "Invalid value"))
                errors.append({"field": field, "message": message})
        return cls(message="Validation failed", errors=errors)


class RiskRejected(LeadPagesError):
    """Raised when a submission is classified as automated traffic."""

    def __init__(self, message: str = "reCAPTCHA verification failed", verdict: str | None = None):
        """Initialize RiskRejected."""
        super().__init__(
            message=message,
            error_code="RISK_REJECTED",
            status_code=400,
            details={"verdict": verdict} if verdict else None,
        )


class DuplicateSubmission(LeadPagesError):
    """Raised when the same contact already submitted inside the window."""

    def __init__(
        self,
        message: str = "We already have your recent submission. We will contact you shortly!",
        window_hours: int | None = None,
    ):
        """Initialize DuplicateSubmission."""
        super().__init__(
            message=message,
            error_code="DUPLICATE_SUBMISSION",
            status_code=409,
            details={"window_hours": window_hours} if window_hours else None,
        )


class UpstreamFailure(LeadPagesError):
    """Raised when an external service call fails or is unreachable."""

    def __init__(
        self,
        service: str,
        message: str | None = None,
        original_error: str | None = None,
    ):
        """Initialize UpstreamFailure."""
        self.service = service
        self.original_error = original_error
        super().__init__(
            message=message or f"External service '{service}' returned an error",
            error_code="UPSTREAM_FAILURE",
            status_code=500,
            details={
                "service": service,
                "original_error": original_error,
            },
        )


class ContentParseError(UpstreamFailure):
    """Raised when generated text holds no parseable JSON object."""

    def __init__(self, message: str = "Could not extract JSON from model response"):
        """Initialize ContentParseError."""
        super().__init__(service="bedrock", message=message)
        self.error_code = "CONTENT_PARSE_ERROR"


class ConfigurationError(LeadPagesError):
    """Raised when a required setting is missing at call time."""

    def __init__(self, setting: str, message: str | None = None):
        """Initialize ConfigurationError."""
        self.setting = setting
        super().__init__(
            message=message or f"{setting} is not configured",
            error_code="CONFIGURATION_ERROR",
            status_code=500,
            details={"setting": setting},
        )
