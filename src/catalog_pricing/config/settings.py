"""
Centralized settings for the catalog pricing engine.
"""
import os
from dataclasses import dataclass
from typing import Optional


ENV_PREFIX = "CATALOG_PRICING_"


def _env(name: str, default: str) -> str:
    """Read a prefixed environment variable, falling back to ``default``."""
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass
class Settings:
    """Engine settings with sensible defaults."""

    # Only one margin mode is supported by the catalog backend
    margin_type: int = 1

    # Synthetic channel used when a product is saved without any channel
    default_channel_id: int = 1
    default_channel_name: str = "Primary"

    log_level: str = "INFO"

    @classmethod
    def load(cls) -> 'Settings':
        """Load settings, applying CATALOG_PRICING_* environment overrides."""
        return cls(
            margin_type=int(_env("MARGIN_TYPE", "1")),
            default_channel_id=int(_env("DEFAULT_CHANNEL_ID", "1")),
            default_channel_name=_env("DEFAULT_CHANNEL_NAME", "Primary"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
