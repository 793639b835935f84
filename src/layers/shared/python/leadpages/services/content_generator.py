"""AI landing page copy generation.

Builds an SEO copywriting prompt for a page type and location, sends it to
Claude on Amazon Bedrock and parses the JSON object out of the reply.
"""

import json
import os
import re

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from leadpages.models.content import ContentRequest, GeneratedContent
from leadpages.utils.exceptions import ConfigurationError, ContentParseError, UpstreamFailure

logger = structlog.get_logger()

DEFAULT_MODEL = "us.anthropic.claude-sonnet-4-5-20250929-v1:0"  # Claude Sonnet 4.5

# botocore reads this variable itself to sign Bedrock calls with an API key
API_KEY_ENV = "AWS_BEARER_TOKEN_BEDROCK"

# One attempt only; the caller sees the failure instead of a slow retry
BEDROCK_CONFIG = Config(
    read_timeout=60,
    connect_timeout=10,
    retries={
        "max_attempts": 1,
        "mode": "standard",
    },
)

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?")


def build_prompt(request: ContentRequest) -> str:
    """Build the copywriting prompt for a landing page.

    Args:
        request: Page type, optional location and keywords.

    Returns:
        The prompt text.
    """
    location = request.location or "your area"
    keywords = ", ".join(request.target_keywords) or request.page_type

    return f"""Generate SEO-optimized landing page content for a bathroom remodeling service.

Project Type: {request.page_type}
Location: {location}
Target Keywords: {keywords}

Generate the following content in JSON format:
{{
  "heroTitle": "Compelling hero headline with primary keyword",
  "heroSubtitle": "Supporting subtitle that addresses customer pain points",
  "metaTitle": "SEO-optimized title tag (60 chars max)",
  "metaDescription": "SEO meta description (155 chars max)",
  "h1": "Primary H1 heading with keyword",
  "benefits": ["Benefit 1", "Benefit 2", "Benefit 3", "Benefit 4"],
  "processSteps": ["Step 1", "Step 2", "Step 3", "Step 4"],
  "faq": [
    {{"question": "Question 1?", "answer": "Answer 1"}},
    {{"question": "Question 2?", "answer": "Answer 2"}},
    {{"question": "Question 3?", "answer": "Answer 3"}}
  ],
  "cta": "Call-to-action text"
}}

Requirements:
- Use {location} naturally in the content
- Include {keywords} in meta and H1
- Benefits should focus on value, not features
- Process steps should be simple and clear
- FAQ answers should be 2-3 sentences
- CTA should create urgency

Return ONLY valid JSON, no markdown or additional text."""


def extract_json_object(text: str) -> dict:
    """Parse the first balanced ``{...}`` object out of model output.

    Markdown code fences are removed first. Braces inside JSON strings are
    ignored when balancing. There is no attempt to repair broken JSON.

    Raises:
        ContentParseError: If no object is found or it does not parse.
    """
    cleaned = _FENCE_RE.sub("", text).strip()

    start = cleaned.find("{")
    if start == -1:
        raise ContentParseError()

    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(cleaned)):
        char = cleaned[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                try:
                    return json.loads(cleaned[start:index + 1])
                except json.JSONDecodeError as e:
                    raise ContentParseError("Invalid JSON response from model") from e

    raise ContentParseError()


class ContentGenerator:
    """Generates landing page copy with Claude on Bedrock."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        client=None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ):
        """Initialize the generator.

        Args:
            api_key: Bedrock API key. botocore picks the key up from
                ``AWS_BEARER_TOKEN_BEDROCK``; here it only gates generation.
            model: Bedrock model or inference profile ID.
            client: Optional bedrock-runtime client (tests pass a mock).
            max_tokens: Maximum tokens to generate.
            temperature: Sampling temperature.
        """
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client

    @classmethod
    def from_env(cls) -> "ContentGenerator":
        """Build a generator from the environment."""
        return cls(
            api_key=os.environ.get(API_KEY_ENV),
            model=os.environ.get("BEDROCK_MODEL_ID", DEFAULT_MODEL),
        )

    @property
    def client(self):
        """Get the bedrock-runtime client (lazy initialization)."""
        if self._client is None:
            self._client = boto3.client("bedrock-runtime", config=BEDROCK_CONFIG)
        return self._client

    def generate(self, request: ContentRequest) -> GeneratedContent:
        """Generate landing page content.

        Args:
            request: What to write about.

        Returns:
            The parsed content.

        Raises:
            ConfigurationError: If no API key is configured.
            UpstreamFailure: If Bedrock fails.
            ContentParseError: If the reply holds no usable JSON object.
        """
        if not self.api_key:
            raise ConfigurationError(API_KEY_ENV, "Claude API key not configured")

        text = self.invoke(build_prompt(request))
        data = extract_json_object(text)

        try:
            content = GeneratedContent.model_validate(data)
        except PydanticValidationError as e:
            raise ContentParseError("Model response is missing required content fields") from e

        logger.info(
            "Landing page content generated",
            page_type=request.page_type,
            location=request.location,
            model=self.model,
        )
        return content

    def invoke(self, prompt: str) -> str:
        """Send one user prompt to Claude and return the text reply."""
        request_body = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            response = self.client.invoke_model(
                modelId=self.model,
                body=json.dumps(request_body),
                contentType="application/json",
                accept="application/json",
            )
            response_body = json.loads(response["body"].read())
        except (BotoCoreError, ClientError, ValueError) as e:
            logger.error("Claude invocation failed", error=str(e), model=self.model)
            raise UpstreamFailure("bedrock", original_error=str(e)) from e

        content = response_body.get("content") or []
        if not content or content[0].get("type") != "text":
            raise UpstreamFailure("bedrock", message="Unexpected response type from Claude")

        return content[0]["text"]
