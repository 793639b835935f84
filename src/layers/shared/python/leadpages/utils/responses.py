"""API response helper functions."""

import json
import os
from datetime import datetime
from typing import Any

from pydantic import BaseModel as PydanticBaseModel

# Landing pages are served from arbitrary domains, so any origin by default
_ALLOWED_ORIGIN = os.environ.get("CORS_ALLOWED_ORIGIN", "*")

DEFAULT_METHODS = "POST, OPTIONS"


def get_cors_headers(methods: str = DEFAULT_METHODS) -> dict:
    """Get CORS headers for a public endpoint.

    Args:
        methods: Value of Access-Control-Allow-Methods for this endpoint.
    """
    return {
        "Access-Control-Allow-Origin": _ALLOWED_ORIGIN,
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": methods,
        "Content-Type": "application/json",
    }


CORS_HEADERS = get_cors_headers()


def _json_serializer(obj: Any) -> Any:
    """JSON serializer for objects not serializable by default."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, PydanticBaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def _serialize(data: Any) -> str:
    """Serialize data to JSON string."""
    return json.dumps(data, default=_json_serializer)


def json_response(body: Any, status_code: int = 200, headers: dict | None = None) -> dict:
    """Create an API Gateway proxy response with a JSON body.

    Args:
        body: Response data (dict, list, or Pydantic model).
        status_code: HTTP status code.
        headers: Response headers, default CORS_HEADERS.

    Returns:
        API Gateway response dict.
    """
    if isinstance(body, PydanticBaseModel):
        body = body.model_dump(mode="json", by_alias=True)

    return {
        "statusCode": status_code,
        "headers": headers or CORS_HEADERS,
        "body": _serialize(body),
    }


def success(
    data: dict | None = None,
    message: str | None = None,
    status_code: int = 200,
    headers: dict | None = None,
) -> dict:
    """Create a successful envelope: ``{"success": true, ...}``.

    Args:
        data: Extra top-level keys merged into the envelope.
        message: Optional human-readable message.
        status_code: HTTP status code (default 200).
        headers: Response headers, default CORS_HEADERS.
    """
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data:
        body.update(data)
    return json_response(body, status_code, headers)


def error(
    message: str,
    status_code: int = 500,
    errors: list[dict] | None = None,
    headers: dict | None = None,
) -> dict:
    """Create an error envelope: ``{"success": false, "message": ...}``.

    Args:
        message: Error message shown to the client.
        status_code: HTTP status code.
        errors: Per-field validation errors, included only when given.
        headers: Response headers, default CORS_HEADERS.
    """
    body: dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return json_response(body, status_code, headers)


def validation_error(errors: list[dict], message: str = "Validation failed") -> dict:
    """Create a 400 response listing per-field errors."""
    return error(message, status_code=400, errors=errors)


def method_not_allowed(headers: dict | None = None) -> dict:
    """Create a 405 response for unsupported HTTP methods."""
    return error("Method not allowed", status_code=405, headers=headers)


def preflight(methods: str = DEFAULT_METHODS) -> dict:
    """Answer a CORS preflight (OPTIONS) request."""
    return {
        "statusCode": 200,
        "headers": get_cors_headers(methods),
        "body": "",
    }
