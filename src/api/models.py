"""
Request and response models for the feedback API.

Wire field names are camelCase (``sourceType``, ``rawText``,
``createdAt``); request bodies also accept the snake_case field names.
Successful responses share the ``{"success": true, "data": {...}}``
envelope.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str | list[dict[str, Any]] = Field(
        ...,
        description="Error message, or the list of failed constraints for BAD_REQUEST",
    )
    error_type: str = Field(
        default="error",
        description="Machine-readable code: UNAUTHORIZED, NOT_FOUND, BAD_REQUEST, internal",
    )


class ComponentHealth(BaseModel):
    """Health of a single infrastructure dependency."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency in milliseconds")
    details: dict[str, Any] = Field(default_factory=dict, description="Extra diagnostics")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Overall service status: healthy or unhealthy")
    components: dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Per-dependency health",
    )
    version: str = Field(..., description="Service version")


# Source models


class CreateSourceRequest(CamelModel):
    """Input for createFeedbackSource."""

    name: str = Field(..., min_length=1, description='Source name, e.g. "Website feedback form"')
    source_type: str | None = Field(
        default=None,
        description="Optional kind: survey, email, nps, review, ...",
    )
    description: str | None = Field(default=None, description="Optional description")


class UpdateSourceRequest(CamelModel):
    """Input for updateFeedbackSource. At least one field is required."""

    name: str | None = Field(default=None, min_length=1, description="New name")
    source_type: str | None = Field(default=None, description="New source type")
    description: str | None = Field(default=None, description="New description")

    @model_validator(mode="after")
    def _require_one_field(self) -> "UpdateSourceRequest":
        if self.name is None and self.source_type is None and self.description is None:
            raise ValueError("At least one field must be provided to update.")
        return self


class SourceItem(CamelModel):
    """Single feedback source."""

    id: str = Field(..., description="Source identifier")
    user_id: str = Field(..., description="Owner identity")
    name: str = Field(..., description="Source name")
    source_type: str | None = Field(default=None, description="Source kind")
    description: str | None = Field(default=None, description="Description")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
    updated_at: str = Field(..., description="Last update timestamp (ISO format)")


class SourceData(CamelModel):
    source: SourceItem


class SourceResponse(CamelModel):
    """Response for createFeedbackSource and updateFeedbackSource."""

    success: bool = True
    data: SourceData
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


class SourceListData(CamelModel):
    items: list[SourceItem]
    total: int


class SourceListResponse(CamelModel):
    """Response for listFeedbackSources."""

    success: bool = True
    data: SourceListData
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


# Entry models


class CreateEntryRequest(CamelModel):
    """Input for createFeedbackEntry."""

    source_id: str = Field(..., min_length=1, description="Parent source id")
    channel: str | None = Field(default=None, description="Channel: email, web, play-store, ...")
    author: str | None = Field(default=None, description="Customer name or identifier")
    rating: float | None = Field(
        default=None,
        strict=True,
        description="Numeric rating, e.g. 1-5 stars or NPS",
    )
    raw_text: str = Field(..., min_length=1, description="Original feedback text")


class EntryItem(CamelModel):
    """Single feedback entry."""

    id: str = Field(..., description="Entry identifier")
    source_id: str = Field(..., description="Parent source id")
    user_id: str = Field(..., description="Owner identity")
    channel: str | None = Field(default=None, description="Channel")
    author: str | None = Field(default=None, description="Author")
    rating: float | None = Field(default=None, description="Rating")
    raw_text: str = Field(..., description="Feedback text")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")


class EntryData(CamelModel):
    entry: EntryItem


class EntryResponse(CamelModel):
    """Response for createFeedbackEntry."""

    success: bool = True
    data: EntryData
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


class EntryListData(CamelModel):
    items: list[EntryItem]
    total: int


class EntryListResponse(CamelModel):
    """Response for listFeedbackEntries."""

    success: bool = True
    data: EntryListData
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


# Tag models


class AddTagRequest(CamelModel):
    """Input for addFeedbackTag."""

    feedback_id: str = Field(..., min_length=1, description="Entry id to tag")
    tag: str = Field(..., min_length=1, description="Label: pricing, support, performance, ...")
    sentiment: str | None = Field(
        default=None,
        description="Optional sentiment: positive, neutral, negative",
    )
    importance: float | None = Field(
        default=None,
        strict=True,
        description="Optional numeric importance, e.g. 1-3",
    )


class TagItem(CamelModel):
    """Single feedback tag."""

    id: str = Field(..., description="Tag identifier")
    feedback_id: str = Field(..., description="Tagged entry id")
    tag: str = Field(..., description="Label")
    sentiment: str | None = Field(default=None, description="Sentiment")
    importance: float | None = Field(default=None, description="Importance")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")


class TagData(CamelModel):
    tag: TagItem


class TagResponse(CamelModel):
    """Response for addFeedbackTag."""

    success: bool = True
    data: TagData
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


class TagListData(CamelModel):
    items: list[TagItem]
    total: int


class TagListResponse(CamelModel):
    """Response for listFeedbackTags."""

    success: bool = True
    data: TagListData
    latency_ms: float = Field(..., description="Processing latency in milliseconds")
