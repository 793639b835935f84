"""Tests for the generate content API handler."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from leadpages.models.content import GeneratedContent
from leadpages.services.content_generator import ContentGenerator
from leadpages.services.make_service import MakeService
from leadpages.utils.exceptions import ContentParseError, UpstreamFailure

CONTENT = GeneratedContent(
    heroTitle="Walk-In Showers in Austin",
    heroSubtitle="Safe, stylish and installed in days",
    metaTitle="Walk-In Shower Installation Austin",
    metaDescription="Free quotes for walk-in showers in Austin.",
    h1="Austin Walk-In Shower Installation",
    benefits=["No-step entry"],
    processSteps=["Consult", "Install"],
    faq=[{"question": "How long?", "answer": "One to two days."}],
    cta="Get your free quote",
)


def _parse_body(response: dict) -> dict:
    """Parse JSON response body."""
    return json.loads(response["body"])


@pytest.fixture
def invoke(api_gateway_event, lambda_context):
    """Invoke the handler."""
    def _invoke(body=None, method="POST"):
        from api.generate_content import handler

        event = api_gateway_event(method=method, path="/generate-content", body=body)
        return handler(event, lambda_context)

    return _invoke


class TestGenerateContent:
    """Tests for POST /generate-content."""

    def test_missing_api_key(self, invoke):
        """Without a Claude key the endpoint fails with a 500."""
        response = invoke({"pageType": "walk-in-shower", "location": "austin-tx"})

        assert response["statusCode"] == 500
        assert _parse_body(response) == {
            "success": False,
            "message": "Claude API key not configured",
        }

    @pytest.mark.parametrize("body", [{}, {"location": "austin-tx"}, {"pageType": ""}])
    def test_page_type_required(self, invoke, body):
        """pageType is required."""
        response = invoke(body)

        assert response["statusCode"] == 400
        assert _parse_body(response)["message"] == "pageType is required"

    def test_invalid_json(self, invoke):
        """A body that is not JSON is a 400."""
        response = invoke("not json")

        assert response["statusCode"] == 400

    def test_invalid_field_type(self, invoke):
        """Badly typed fields are validation errors."""
        response = invoke({"pageType": "walk-in-shower", "targetKeywords": "not-a-list"})

        assert response["statusCode"] == 400
        assert _parse_body(response)["errors"][0]["field"] == "targetKeywords"

    @patch("api.generate_content.get_content_generator")
    def test_generated(self, mock_get_generator, invoke):
        """Generated content is returned under "content"."""
        generator = MagicMock(spec=ContentGenerator)
        generator.generate.return_value = CONTENT
        mock_get_generator.return_value = generator

        response = invoke({"pageType": "walk-in-shower", "location": "Austin"})

        assert response["statusCode"] == 200
        body = _parse_body(response)
        assert body["success"] is True
        assert body["content"]["heroTitle"] == "Walk-In Showers in Austin"
        assert body["content"]["faq"] == [{"question": "How long?", "answer": "One to two days."}]

        request = generator.generate.call_args.args[0]
        assert request.page_type == "walk-in-shower"
        assert request.location == "Austin"

    @patch("api.generate_content.get_content_generator")
    def test_upstream_failure(self, mock_get_generator, invoke):
        """Bedrock failures are a generic 500 without upstream detail."""
        mock_get_generator.return_value.generate.side_effect = UpstreamFailure(
            "bedrock", message="Unexpected response type from Claude"
        )

        response = invoke({"pageType": "walk-in-shower"})

        assert response["statusCode"] == 500
        assert _parse_body(response) == {"success": False, "message": "Content generation failed"}
        assert "Claude" not in response["body"]
        assert "bedrock" not in response["body"]

    @patch("api.generate_content.get_content_generator")
    def test_unparseable_reply(self, mock_get_generator, invoke):
        """A reply without usable JSON is a generic 500."""
        mock_get_generator.return_value.generate.side_effect = ContentParseError()

        response = invoke({"pageType": "walk-in-shower"})

        assert response["statusCode"] == 500
        assert _parse_body(response)["message"] == "Content generation failed"

    @patch("api.generate_content.get_content_generator")
    def test_unexpected_error(self, mock_get_generator, invoke):
        """Unexpected exceptions become a generic 500."""
        mock_get_generator.return_value.generate.side_effect = RuntimeError("boom")

        response = invoke({"pageType": "walk-in-shower"})

        assert response["statusCode"] == 500
        assert _parse_body(response)["message"] == "Content generation failed"


class TestMakeDelegation:
    """Tests for useMake requests."""

    @patch("api.generate_content.get_content_generator")
    @patch("api.generate_content.get_make_service")
    def test_triggers_scenario(self, mock_get_make, mock_get_generator, invoke):
        """The full request body goes to the webhook and its reply comes back."""
        make = MagicMock(spec=MakeService)
        make.resolve_webhook_url.return_value = "https://hook.us1.make.com/abc"
        make.trigger_scenario.return_value = {"status": "queued"}
        mock_get_make.return_value = make
        body = {
            "pageType": "walk-in-shower",
            "useMake": True,
            "makeWebhookUrl": "https://hook.us1.make.com/abc",
        }

        response = invoke(body)

        assert response["statusCode"] == 200
        assert _parse_body(response) == {
            "success": True,
            "message": "Content generation triggered via Make.com",
            "makeResponse": {"status": "queued"},
        }
        make.trigger_scenario.assert_called_once_with("https://hook.us1.make.com/abc", body)
        mock_get_generator.assert_not_called()

    @patch("api.generate_content.get_content_generator")
    def test_no_webhook_falls_back_to_claude(self, mock_get_generator, invoke):
        """useMake without any webhook generates directly."""
        mock_get_generator.return_value.generate.return_value = CONTENT

        response = invoke({"pageType": "walk-in-shower", "useMake": True})

        assert response["statusCode"] == 200
        assert "content" in _parse_body(response)

    def test_foreign_webhook_rejected(self, invoke):
        """Webhooks outside Make.com are refused."""
        response = invoke({
            "pageType": "walk-in-shower",
            "useMake": True,
            "makeWebhookUrl": "https://example.com/hook",
        })

        assert response["statusCode"] == 400
        assert "makeWebhookUrl" in _parse_body(response)["message"]

    @patch("api.generate_content.get_make_service")
    def test_webhook_failure(self, mock_get_make, invoke):
        """Webhook errors are a generic 500; the reply never reaches the client."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(502, text="internal scenario trace")
        )
        mock_get_make.return_value = MakeService(http_client=httpx.Client(transport=transport))

        response = invoke({
            "pageType": "walk-in-shower",
            "useMake": True,
            "makeWebhookUrl": "https://hook.us1.make.com/abc",
        })

        assert response["statusCode"] == 500
        assert _parse_body(response) == {"success": False, "message": "Content generation failed"}
        assert "Bad Gateway" not in response["body"]
        assert "internal scenario trace" not in response["body"]


class TestRouting:
    """Tests for method handling."""

    def test_options_preflight(self, invoke):
        """OPTIONS returns an empty 200."""
        assert invoke(method="OPTIONS")["statusCode"] == 200

    def test_method_not_allowed(self, invoke):
        """GET is not supported."""
        assert invoke(method="GET")["statusCode"] == 405
