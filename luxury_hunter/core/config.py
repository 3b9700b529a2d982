"""
Configuration management for Luxury Hunter.

Settings are read once at process start (environment variables prefixed with
LUXURY_HUNTER_, or a .env file). A reload builds a complete new Settings
object before swapping it in, so readers always see one consistent snapshot.
"""
import math
import threading
from typing import Dict, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from luxury_hunter.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    app_name: str = "Luxury Hunter - Authentication Engine"
    version: str = "1.0.0"
    log_level: str = "INFO"

    # Decision thresholds (strict greater-than)
    brand_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    authenticity_threshold: float = Field(default=0.85, ge=0.0, le=1.0)

    # Per-method weight overrides; None keeps the preset weights
    brand_weights: Optional[Dict[str, float]] = None
    authenticity_weights: Optional[Dict[str, float]] = None

    # Signal producers
    producer_timeout_sec: float = Field(default=10.0, gt=0.0)

    # Remote model service (optional HTTP signal producer)
    model_service_url: Optional[str] = None
    model_service_token: Optional[str] = None
    model_service_retries: int = Field(default=1, ge=0, le=5)

    # Optional YAML file with decision specs
    decision_config_path: Optional[str] = None

    @field_validator("brand_weights", "authenticity_weights")
    @classmethod
    def weights_finite_non_negative(cls, v):
        if v is None:
            return v
        invalid = [name for name, weight in v.items() if not math.isfinite(weight) or weight < 0]
        if invalid:
            raise ValueError(f"weights must be finite and non-negative; invalid for methods: {invalid}")
        return v

    class Config:
        env_prefix = "LUXURY_HUNTER_"
        env_file = ".env"
        case_sensitive = False


_settings_lock = threading.Lock()
_settings: Optional[Settings] = None


def _build_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def get_settings() -> Settings:
    """Get the current settings snapshot (loaded on first use)."""
    global _settings
    current = _settings
    if current is None:
        with _settings_lock:
            if _settings is None:
                _settings = _build_settings()
            current = _settings
    return current


def reload_settings(**overrides) -> Settings:
    """
    Re-read settings and publish them atomically.

    The new snapshot is fully validated before it replaces the old one; on a
    ConfigurationError the previous snapshot stays in place.
    """
    global _settings
    fresh = _build_settings(**overrides)
    with _settings_lock:
        _settings = fresh
    return fresh


def reset_settings() -> None:
    """Drop the cached snapshot (for testing)."""
    global _settings
    with _settings_lock:
        _settings = None
