"""Pydantic models for Lead Pages."""

from leadpages.models.base import BaseModel, generate_ulid, utc_now
from leadpages.models.content import ContentRequest, FaqItem, GeneratedContent
from leadpages.models.lead import (
    ATTRIBUTION_FIELDS,
    STEP_MODELS,
    Attribution,
    BasicInfo,
    Budget,
    Consent,
    Lead,
    LeadStatus,
    OwnRent,
    ProjectDetails,
    ProjectType,
    PropertyType,
    Timeframe,
)

__all__ = [
    # Base
    "BaseModel",
    "generate_ulid",
    "utc_now",
    # Content
    "ContentRequest",
    "FaqItem",
    "GeneratedContent",
    # Lead
    "ATTRIBUTION_FIELDS",
    "STEP_MODELS",
    "Attribution",
    "BasicInfo",
    "Budget",
    "Consent",
    "Lead",
    "LeadStatus",
    "OwnRent",
    "ProjectDetails",
    "ProjectType",
    "PropertyType",
    "Timeframe",
]
