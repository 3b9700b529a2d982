"""Decision presets and brand reference data."""
from luxury_hunter.policies.presets import (
    AUTHENTICITY_PRESET,
    BRAND_DETECTION_PRESET,
    BrandProfile,
    PresetNotFoundError,
    get_brand_profile,
    get_preset,
    get_supported_brands,
    list_presets,
    load_presets,
)

__all__ = [
    "AUTHENTICITY_PRESET",
    "BRAND_DETECTION_PRESET",
    "BrandProfile",
    "PresetNotFoundError",
    "get_brand_profile",
    "get_preset",
    "get_supported_brands",
    "list_presets",
    "load_presets",
]
