"""MLS core configuration.

Provides settings for the key-management core with env var support.
The calling application can inject its own settings at startup via
set_config(); otherwise they are read from OUR_MLS_ variables on first use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = ("1", "true", "yes")


@dataclass
class MLSSettings:
    """Concrete MLS core configuration.

    Reads from environment variables with OUR_MLS_ prefix.
    Can be instantiated directly for testing.
    """

    # Identity
    identity_id_size: int = 4  # Length of the random label drawn by Identity.random()

    # Codec
    strict_decoding: bool = True  # Reject trailing/unconsumed bytes

    def __post_init__(self) -> None:
        if not 0 <= self.identity_id_size <= 255:
            raise ValueError(f"identity_id_size must fit a u8 length prefix, got {self.identity_id_size}")

    @classmethod
    def from_env(cls) -> MLSSettings:
        """Create settings from environment variables."""
        return cls(
            identity_id_size=int(os.environ.get("OUR_MLS_IDENTITY_ID_SIZE", "4")),
            strict_decoding=os.environ.get("OUR_MLS_STRICT_DECODING", "true").lower() in _TRUTHY,
        )


# Global settings - set by application layer at startup or loaded lazily from env
_settings: MLSSettings | None = None


def set_config(settings: MLSSettings) -> None:
    """Set the global MLS settings.

    Args:
        settings: Settings to use for subsequent operations
    """
    global _settings
    _settings = settings


def get_config() -> MLSSettings:
    """Get MLS core settings.

    Returns:
        The injected settings, or MLSSettings loaded from environment.
    """
    global _settings
    if _settings is None:
        _settings = MLSSettings.from_env()
    return _settings


def clear_config_cache() -> None:
    """Clear the settings cache. For testing."""
    global _settings
    _settings = None
