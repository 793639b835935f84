"""Base Pydantic models shared by the lead and content models."""

from datetime import datetime, timezone

from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


class BaseModel(PydanticBaseModel):
    """Base model for wire-facing values.

    Fields are snake_case in Python and camelCase on the wire; either name is
    accepted on input. Instances are immutable.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    def to_wire(self) -> dict:
        """Dump to the camelCase JSON shape used by the HTTP endpoints."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
