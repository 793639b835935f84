"""Pytest configuration and fixtures."""

import json
import os
from datetime import datetime, timezone

import pytest

# Set environment variables before imports
os.environ["STAGE"] = "test"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

# Integrations are opted into per test with monkeypatch
for _name in (
    "AIRTABLE_API_KEY",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_TABLE_ID",
    "RECAPTCHA_SECRET_KEY",
    "RECAPTCHA_SITE_KEY",
    "RECAPTCHA_PROJECT_ID",
    "RECAPTCHA_MIN_SCORE",
    "DUPLICATE_WINDOW_HOURS",
    "AWS_BEARER_TOKEN_BEDROCK",
    "MAKE_WEBHOOK_URL",
    "MAKE_API_KEY",
):
    os.environ.pop(_name, None)


FIXED_NOW = datetime(2025, 3, 14, 15, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for window tests."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryLeadStore:
    """Lead store fake that keeps records in a list.

    Mirrors the Airtable adapter: records carry the column names and a
    submission timestamp from the shared clock.
    """

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.records: list[dict] = []
        self.fail_create = False
        self.fail_query = False

    def create(self, lead) -> str:
        from leadpages.repositories.lead_store import to_airtable_fields
        from leadpages.utils.exceptions import UpstreamFailure

        if self.fail_create:
            raise UpstreamFailure("airtable", original_error="INVALID_PERMISSIONS")

        record_id = f"rec{len(self.records) + 1:014d}"
        submitted_at = self.clock()
        self.records.append({
            "id": record_id,
            "submitted_at": submitted_at,
            "fields": to_airtable_fields(lead, submitted_at),
            "lead": lead,
        })
        return record_id

    def query_recent(self, criteria, since):
        from leadpages.utils.exceptions import UpstreamFailure

        if self.fail_query:
            raise UpstreamFailure("airtable", original_error="timeout")

        return [
            record for record in self.records
            if record["submitted_at"] > since
            and any(
                value and getattr(record["lead"], attr) == value
                for attr, value in criteria.items()
            )
        ]


class StubAssessor:
    """Risk assessor that returns a fixed verdict and records calls."""

    def __init__(self, verdict):
        self.verdict = verdict
        self.calls: list[tuple[str, str]] = []

    def assess(self, token: str, expected_action: str):
        self.calls.append((token, expected_action))
        return self.verdict


@pytest.fixture
def clock():
    """A clock pinned to FIXED_NOW."""
    return FakeClock()


@pytest.fixture
def lead_store(clock):
    """In-memory lead store sharing the test clock."""
    return InMemoryLeadStore(clock)


@pytest.fixture
def stub_assessor():
    """Factory for fixed-verdict risk assessors."""
    return StubAssessor


@pytest.fixture
def lead_payload():
    """A valid submit-lead request body."""
    def _payload(**overrides) -> dict:
        payload = {
            "fullName": "Jane Doe",
            "email": "jane@example.com",
            "phone": "(555) 123-4567",
            "zipCode": "90210",
            "projectType": "walk-in-shower",
            "timeframe": "immediate",
            "budget": "5k-10k",
            "propertyType": "single-family",
            "ownRent": "own",
            "tcpaConsent": True,
            "recaptchaToken": "tok",
            "landingPageUrl": "https://example.com/x",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def api_gateway_event():
    """Create a sample API Gateway proxy event."""
    def _create_event(
        method: str = "POST",
        path: str = "/",
        body: dict | str | None = None,
        headers: dict | None = None,
        query_params: dict | None = None,
    ):
        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": {},
            "queryStringParameters": query_params or {},
            "body": body if isinstance(body, str) or body is None else json.dumps(body),
            "headers": {
                "Content-Type": "application/json",
                **(headers or {}),
            },
            "requestContext": {
                "requestId": "api-request-id",
                "identity": {"sourceIp": "203.0.113.7"},
            },
        }

    return _create_event


class LambdaContext:
    """Mock Lambda context."""

    def __init__(self):
        self.function_name = "test-function"
        self.memory_limit_in_mb = 128
        self.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789:function:test"
        self.aws_request_id = "test-request-id"

    def get_remaining_time_in_millis(self):
        return 30000


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context."""
    return LambdaContext()
