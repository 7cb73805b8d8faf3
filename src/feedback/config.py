"""Feedback service configuration.

Controls field-length limits applied to incoming sources, entries, and
tags. All settings can be overridden via ``FEEDBACK_*`` environment
variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedbackConfig(BaseSettings):
    """Configuration for feedback validation."""

    model_config = SettingsConfigDict(
        env_prefix="FEEDBACK_",
        case_sensitive=False,
        extra="ignore",
    )

    max_name_length: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Maximum length for a source name",
    )
    max_text_length: int = Field(
        default=10000,
        ge=1,
        le=100000,
        description="Maximum length for raw feedback text",
    )
    max_tag_length: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum length for a tag label",
    )
    max_field_length: int = Field(
        default=500,
        ge=1,
        le=10000,
        description="Maximum length for short optional fields (source type, description, channel, author, sentiment)",
    )
