"""Configuration settings using Pydantic Settings.

Provides typed configuration for the copy engine with environment variable
support.

Usage:
    from ccopy.config import CopySettings

    # Load from environment variables (CCOPY_*)
    settings = CopySettings()

    # Or override with explicit values
    settings = CopySettings(max_depth=50, tag_key="anon")
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TAG_KEY = "ccopy"


class CopySettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the copy engine and registry.

    Attributes:
        tag_key: Metadata key under which field tags are declared.
        max_depth: Maximum nesting depth followed before giving up. Guards
            against cyclic graphs, which are not supported.
        validate_signatures: Check transformer signatures when a registry is built.
        check_return_types: Check transformer return values against the
            declared field type at copy time.

    Environment Variables:
        CCOPY_TAG_KEY
        CCOPY_MAX_DEPTH
        CCOPY_VALIDATE_SIGNATURES
        CCOPY_CHECK_RETURN_TYPES
    """

    model_config = SettingsConfigDict(
        env_prefix="CCOPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    tag_key: str = Field(default=DEFAULT_TAG_KEY, min_length=1)
    max_depth: int = Field(default=200, ge=1)
    validate_signatures: bool = True
    check_return_types: bool = True
