"""Lead model for the three-step lead capture form.

The form is split into three steps and the models mirror that split:

    Step 1 (BasicInfo):       fullName, email, phone, zipCode
    Step 2 (ProjectDetails):  projectType, timeframe, budget, propertyType, ownRent
    Step 3 (Consent):         tcpaConsent, recaptchaToken

``Lead`` combines all three with the marketing attribution fields and the
landing page URL. It is frozen; the only later change to a lead is its
``Status`` column, which is edited in the store by people or downstream
automation.
"""

import re
from enum import Enum
from typing import Literal
from urllib.parse import urlparse

from pydantic import EmailStr, Field, field_validator

from leadpages.models.base import BaseModel

PHONE_REGEX = re.compile(r"^\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})$")
ZIP_PATTERN = r"^\d{5}(-\d{4})?$"


class ProjectType(str, Enum):
    """Bathroom project categories (also the landing page types)."""

    WALK_IN_SHOWER = "walk-in-shower"
    FULL_BATHROOM_REMODEL = "full-bathroom-remodel"
    BATHTUB_INSTALLATION = "bathtub-installation"
    SHOWER_INSTALLATION = "shower-installation"
    ACCESSIBILITY_BATHROOM = "accessibility-bathroom"
    LUXURY_BATHROOM = "luxury-bathroom"
    SMALL_BATHROOM = "small-bathroom"
    MASTER_BATHROOM = "master-bathroom"


class Timeframe(str, Enum):
    """When the customer wants the project done."""

    IMMEDIATE = "immediate"
    ONE_TO_THREE_MONTHS = "1-3-months"
    THREE_TO_SIX_MONTHS = "3-6-months"
    SIX_TO_TWELVE_MONTHS = "6-12-months"
    JUST_EXPLORING = "just-exploring"


class Budget(str, Enum):
    """Budget bands."""

    UNDER_5K = "under-5k"
    FROM_5K_TO_10K = "5k-10k"
    FROM_10K_TO_20K = "10k-20k"
    FROM_20K_TO_50K = "20k-50k"
    OVER_50K = "over-50k"


class PropertyType(str, Enum):
    """Property types."""

    SINGLE_FAMILY = "single-family"
    CONDO = "condo"
    APARTMENT = "apartment"
    TOWNHOUSE = "townhouse"
    MOBILE_HOME = "mobile-home"


class OwnRent(str, Enum):
    """Ownership status."""

    OWN = "own"
    RENT = "rent"


class LeadStatus(str, Enum):
    """Lead review status, as stored in the lead table."""

    PENDING = "Pending"
    APPROVED = "Approved"
    PUBLISHED = "Published"
    ARCHIVED = "Archived"


class BasicInfo(BaseModel):
    """Step 1: contact details."""

    full_name: str = Field(..., alias="fullName", min_length=2, description="Full name")
    email: EmailStr = Field(..., alias="email", description="Email address")
    phone: str = Field(..., alias="phone", description="US phone, stored as (ddd) ddd-dddd")
    zip_code: str = Field(..., alias="zipCode", pattern=ZIP_PATTERN, description="ZIP or ZIP+4")

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: object) -> object:
        """Trim surrounding whitespace before address validation."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase for consistent duplicate lookups."""
        return v.lower()

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        """Validate a 10-digit North American number and canonicalize it."""
        match = PHONE_REGEX.match(v)
        if not match:
            raise ValueError("Invalid phone number")
        area, exchange, line = match.groups()
        return f"({area}) {exchange}-{line}"


class ProjectDetails(BaseModel):
    """Step 2: what the customer wants done."""

    project_type: ProjectType = Field(..., alias="projectType")
    timeframe: Timeframe = Field(..., alias="timeframe")
    budget: Budget = Field(..., alias="budget")
    property_type: PropertyType = Field(..., alias="propertyType")
    own_rent: OwnRent = Field(..., alias="ownRent")


class Consent(BaseModel):
    """Step 3: TCPA consent and the bot-risk token."""

    tcpa_consent: Literal[True] = Field(..., alias="tcpaConsent")
    recaptcha_token: str = Field(..., alias="recaptchaToken", min_length=1)

    @field_validator("tcpa_consent", mode="before")
    @classmethod
    def require_explicit_consent(cls, v: object) -> object:
        """Only the boolean ``True`` counts as consent; "true" or 1 do not."""
        if v is not True:
            raise ValueError("You must agree to receive communications")
        return v


class Attribution(BaseModel):
    """Marketing attribution captured from the ad click."""

    utm_source: str | None = Field(None, alias="utmSource")
    utm_medium: str | None = Field(None, alias="utmMedium")
    utm_campaign: str | None = Field(None, alias="utmCampaign")
    gclid: str | None = Field(None, alias="gclid", description="Google Ads click ID")
    fbclid: str | None = Field(None, alias="fbclid", description="Facebook Ads click ID")

    @field_validator("utm_source", "utm_medium", "utm_campaign", "gclid", "fbclid")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty strings as absent so they are never written."""
        return v or None


ATTRIBUTION_FIELDS: tuple[str, ...] = tuple(
    field.alias for field in Attribution.model_fields.values()
)


class Lead(BasicInfo, ProjectDetails, Consent, Attribution):
    """A complete, validated form submission."""

    landing_page_url: str = Field(..., alias="landingPageUrl")

    @field_validator("landing_page_url")
    @classmethod
    def require_absolute_url(cls, v: str) -> str:
        """The landing page URL must carry a scheme and a host."""
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("Invalid URL")
        return v


STEP_MODELS: dict[int, type[BaseModel]] = {
    1: BasicInfo,
    2: ProjectDetails,
    3: Consent,
}
