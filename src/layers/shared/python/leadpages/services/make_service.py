"""Make.com webhook client.

Content generation can be delegated to a Make.com scenario: the request is
forwarded as JSON to the scenario's custom webhook and whatever the
scenario answers is handed back unchanged.
"""

import os
from typing import Any
from urllib.parse import urlparse

import httpx
import structlog

from leadpages.utils.exceptions import UpstreamFailure

logger = structlog.get_logger()

REQUEST_TIMEOUT = 30.0

# Requests may name their own webhook; only Make.com hosts are accepted
WEBHOOK_HOST_SUFFIXES = (".make.com", ".integromat.com")


class MakeService:
    """Triggers Make.com scenarios through custom webhooks."""

    def __init__(
        self,
        api_key: str | None = None,
        default_webhook_url: str | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Webhook API key, sent as ``x-make-apikey`` when set.
            default_webhook_url: Webhook used when a request names none.
            http_client: Optional client (tests inject a mock transport).
        """
        self.api_key = api_key
        self.default_webhook_url = default_webhook_url
        self._http_client = http_client

    @classmethod
    def from_env(cls) -> "MakeService":
        """Build a client from MAKE_* environment variables."""
        return cls(
            api_key=os.environ.get("MAKE_API_KEY"),
            default_webhook_url=os.environ.get("MAKE_WEBHOOK_URL"),
        )

    @property
    def http_client(self) -> httpx.Client:
        """Get the HTTP client (lazy initialization)."""
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=REQUEST_TIMEOUT)
        return self._http_client

    def resolve_webhook_url(self, webhook_url: str | None) -> str | None:
        """Pick the request's webhook URL, else the configured default.

        Raises:
            ValueError: If the URL is not an https Make.com webhook.
        """
        url = webhook_url or self.default_webhook_url
        if url is None:
            return None

        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
        if parsed.scheme != "https" or not host.endswith(WEBHOOK_HOST_SUFFIXES):
            raise ValueError("makeWebhookUrl must be an https Make.com webhook URL")
        return url

    def trigger_scenario(self, webhook_url: str, data: dict[str, Any]) -> Any:
        """POST ``data`` to a scenario webhook.

        Args:
            webhook_url: The scenario's custom webhook URL.
            data: JSON payload.

        Returns:
            The webhook's JSON reply, or ``{"text": ...}`` for non-JSON replies.

        Raises:
            UpstreamFailure: On transport errors or non-2xx replies.
        """
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-make-apikey"] = self.api_key

        logger.info("Triggering Make.com scenario", url=webhook_url)

        try:
            response = self.http_client.post(webhook_url, json=data, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Make.com webhook request failed", error=str(e))
            raise UpstreamFailure("make", original_error=str(e)) from e

        if not response.is_success:
            logger.error(
                "Make.com webhook returned an error",
                status_code=response.status_code,
                response=response.text[:500],
            )
            raise UpstreamFailure(
                "make",
                message=f"Make.com webhook failed: {response.reason_phrase}",
                original_error=response.text[:500],
            )

        try:
            return response.json()
        except ValueError:
            return {"text": response.text}
