"""Models for AI landing page content drafts."""

from pydantic import Field, field_validator

from leadpages.models.base import BaseModel


class ContentRequest(BaseModel):
    """Request body for the generate-content endpoint."""

    page_type: str = Field(..., alias="pageType", min_length=1, description="Landing page type slug")
    location: str | None = Field(None, alias="location", description="Location slug or name")
    target_keywords: list[str] = Field(default_factory=list, alias="targetKeywords")
    use_make: bool = Field(default=False, alias="useMake", description="Delegate to Make.com")
    make_webhook_url: str | None = Field(None, alias="makeWebhookUrl")

    @field_validator("target_keywords", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        """Accept an explicit null for the keyword list."""
        return [] if v is None else v


class FaqItem(BaseModel):
    """A single FAQ entry."""

    question: str
    answer: str


class GeneratedContent(BaseModel):
    """Structured landing page copy returned by the model."""

    hero_title: str = Field(..., alias="heroTitle")
    hero_subtitle: str = Field(..., alias="heroSubtitle")
    meta_title: str = Field(..., alias="metaTitle")
    meta_description: str = Field(..., alias="metaDescription")
    h1: str = Field(..., alias="h1")
    benefits: list[str] = Field(default_factory=list)
    process_steps: list[str] = Field(default_factory=list, alias="processSteps")
    faq: list[FaqItem] = Field(default_factory=list)
    cta: str = Field(..., alias="cta")
