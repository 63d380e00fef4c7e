"""Configuration module using Pydantic Settings.

Usage:
    from ccopy.config import CopySettings

    settings = CopySettings(max_depth=50)
"""

from ccopy.config.settings import DEFAULT_TAG_KEY, CopySettings

__all__ = [
    "CopySettings",
    "DEFAULT_TAG_KEY",
]
