"""Tests for response helpers, exceptions and request context."""

import json

import structlog

from leadpages.utils.exceptions import (
    ConfigurationError,
    ContentParseError,
    DuplicateSubmission,
    RiskRejected,
    UpstreamFailure,
    ValidationFailed,
)
from leadpages.utils.request_context import bind_request_context, mask_email, mask_phone
from leadpages.utils.responses import (
    CORS_HEADERS,
    error,
    method_not_allowed,
    preflight,
    success,
    validation_error,
)


class TestResponses:
    """Tests for API Gateway response helpers."""

    def test_success(self):
        """Success merges data into the envelope."""
        response = success({"submissionId": "rec1"}, message="Thanks")

        assert response["statusCode"] == 200
        assert response["headers"] == CORS_HEADERS
        assert json.loads(response["body"]) == {
            "success": True,
            "message": "Thanks",
            "submissionId": "rec1",
        }

    def test_error(self):
        """Errors carry success false and a message."""
        response = error("Nope", 409)

        assert response["statusCode"] == 409
        assert json.loads(response["body"]) == {"success": False, "message": "Nope"}

    def test_validation_error(self):
        """Validation errors list the offending fields."""
        errors = [{"field": "email", "message": "Invalid email address"}]

        body = json.loads(validation_error(errors)["body"])

        assert body == {"success": False, "message": "Validation failed", "errors": errors}

    def test_method_not_allowed(self):
        """Unsupported methods get a 405."""
        response = method_not_allowed()

        assert response["statusCode"] == 405
        assert json.loads(response["body"])["message"] == "Method not allowed"

    def test_preflight(self):
        """Preflight is a bare 200 with CORS headers."""
        response = preflight()

        assert response["statusCode"] == 200
        assert response["headers"]["Access-Control-Allow-Methods"] == "POST, OPTIONS"
        assert response["body"] == ""


class TestExceptions:
    """Tests for exception status codes and envelopes."""

    def test_status_codes(self):
        """Each failure kind maps to its HTTP status."""
        assert ValidationFailed().status_code == 400
        assert RiskRejected().status_code == 400
        assert DuplicateSubmission().status_code == 409
        assert UpstreamFailure("airtable").status_code == 500
        assert ConfigurationError("AIRTABLE_API_KEY").status_code == 500

    def test_envelope_hides_details(self):
        """Internal details never reach the response body."""
        e = UpstreamFailure("airtable", original_error="401 AUTHENTICATION_REQUIRED")

        assert e.to_dict() == {
            "success": False,
            "message": "External service 'airtable' returned an error",
        }
        assert e.details["original_error"] == "401 AUTHENTICATION_REQUIRED"

    def test_content_parse_error(self):
        """Parse errors are upstream failures from Bedrock."""
        e = ContentParseError()

        assert isinstance(e, UpstreamFailure)
        assert e.service == "bedrock"
        assert e.error_code == "CONTENT_PARSE_ERROR"
        assert e.message == "Could not extract JSON from model response"


class TestRequestContext:
    """Tests for logging context helpers."""

    def test_bind_request_context(self, api_gateway_event, lambda_context):
        """The Lambda request id is bound for every log line."""
        structlog.contextvars.bind_contextvars(stale="value")

        request_id = bind_request_context(api_gateway_event(), lambda_context, "submit_lead")

        bound = structlog.contextvars.get_contextvars()
        assert request_id == "test-request-id"
        assert bound == {
            "request_id": "test-request-id",
            "function": "submit_lead",
            "api_request_id": "api-request-id",
        }

    def test_generated_request_id(self, api_gateway_event):
        """Without a Lambda context a ULID is generated."""
        request_id = bind_request_context(api_gateway_event(), None, "status")

        assert len(request_id) == 26

    def test_masking(self):
        """Contact details are shortened for logs."""
        assert mask_email("jane@example.com") == "ja***@example.com"
        assert mask_phone("(555) 123-4567") == "***4567"
        assert mask_email(None) is None
