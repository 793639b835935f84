"""Utility functions and helpers."""

from leadpages.utils.responses import (
    error,
    json_response,
    method_not_allowed,
    preflight,
    success,
    validation_error,
)
from leadpages.utils.exceptions import (
    ConfigurationError,
    ContentParseError,
    DuplicateSubmission,
    LeadPagesError,
    RiskRejected,
    UpstreamFailure,
    ValidationFailed,
)

__all__ = [
    # Response helpers
    "error",
    "json_response",
    "method_not_allowed",
    "preflight",
    "success",
    "validation_error",
    # Exceptions
    "ConfigurationError",
    "ContentParseError",
    "DuplicateSubmission",
    "LeadPagesError",
    "RiskRejected",
    "UpstreamFailure",
    "ValidationFailed",
]
