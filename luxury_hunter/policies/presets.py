"""
Decision presets - pre-configured DecisionSpecs plus the brand reference data.

Two decisions ship built in:
- brand_detection: which of the supported brands the item shows
- authenticity: whether the item is authentic

Weights and thresholds can be overridden through settings or a YAML file
(see Settings.decision_config_path).
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from luxury_hunter.core.config import Settings, get_settings
from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.core.logging import get_logger
from luxury_hunter.evaluation.categories import AUTHENTICITY_REGISTRY, BRAND_REGISTRY
from luxury_hunter.evaluation.spec import DecisionSpec, load_decision_specs

logger = get_logger("policies.presets")


class PresetNotFoundError(ConfigurationError):
    """Raised when a preset is not found."""
    pass


# ===== BRAND REFERENCE DATA =====

@dataclass(frozen=True)
class BrandProfile:
    """Visual signature of a brand, shared with remote signal producers as hints."""
    brand: str
    logo_patterns: Tuple[str, ...]
    color_signatures: Tuple[Tuple[int, int, int], ...]
    patterns: Tuple[str, ...]
    hardware_colors: Tuple[str, ...]


BRAND_PROFILES: Dict[str, BrandProfile] = {
    profile.brand: profile
    for profile in (
        BrandProfile(
            brand="Louis Vuitton",
            logo_patterns=("LV", "LOUIS VUITTON", "VUITTON"),
            color_signatures=((139, 69, 19), (255, 215, 0)),  # brown, gold
            patterns=("monogram", "damier", "epi"),
            hardware_colors=("gold", "silver", "rose gold"),
        ),
        BrandProfile(
            brand="Gucci",
            logo_patterns=("GG", "GUCCI", "GUCCIO GUCCI"),
            color_signatures=((0, 128, 0), (255, 0, 0)),  # green, red
            patterns=("gg supreme", "dionysus", "bamboo"),
            hardware_colors=("gold", "silver", "antique gold"),
        ),
        BrandProfile(
            brand="Chanel",
            logo_patterns=("CC", "CHANEL", "COCO CHANEL"),
            color_signatures=((0, 0, 0), (255, 255, 255)),  # black, white
            patterns=("quilted", "caviar", "lambskin"),
            hardware_colors=("gold", "silver", "ruthenium"),
        ),
        BrandProfile(
            brand="Hermès",
            logo_patterns=("HERMÈS", "HERMES", "H"),
            color_signatures=((255, 140, 0), (139, 69, 19)),  # orange, brown
            patterns=("birkin", "kelly", "constance"),
            hardware_colors=("gold", "palladium", "rose gold"),
        ),
        BrandProfile(
            brand="Prada",
            logo_patterns=("PRADA", "MILANO", "P"),
            color_signatures=((0, 0, 0), (128, 128, 128)),  # black, gray
            patterns=("saffiano", "nylon", "tessuto"),
            hardware_colors=("silver", "gold", "black"),
        ),
    )
}

# Known models per brand, in tie-break order
MODEL_CATALOG: Dict[str, Tuple[str, ...]] = {
    "Louis Vuitton": ("Speedy", "Neverfull", "Alma", "Artsy"),
    "Gucci": ("Dionysus", "Marmont", "Bamboo", "Jackie"),
    "Chanel": ("Classic Flap", "Boy Bag", "2.55", "Gabrielle"),
    "Hermès": ("Birkin", "Kelly", "Constance", "Evelyne"),
}


def get_supported_brands() -> List[str]:
    """Supported brands in registry order (a copy)."""
    return list(BRAND_REGISTRY)


def get_brand_profile(brand: str) -> Optional[BrandProfile]:
    """Visual profile of a brand, or None if the brand has none."""
    return BRAND_PROFILES.get(brand)


# ===== DECISION PRESETS =====

BRAND_DETECTION_PRESET = DecisionSpec(
    name="brand_detection",
    categories=list(BRAND_REGISTRY),
    weights={
        "logo": 0.5,
        "colors": 0.3,
        "patterns": 0.2,
    },
    threshold=0.6,
)

AUTHENTICITY_PRESET = DecisionSpec(
    name="authenticity",
    categories=list(AUTHENTICITY_REGISTRY),
    weights={
        "logo": 0.2,
        "stitching": 0.25,
        "material": 0.2,
        "craftsmanship": 0.2,
        "hardware": 0.15,
        "classifier": 1.0,
    },
    threshold=0.85,
)

PRESETS: Dict[str, DecisionSpec] = {
    BRAND_DETECTION_PRESET.name: BRAND_DETECTION_PRESET,
    AUTHENTICITY_PRESET.name: AUTHENTICITY_PRESET,
}

# Settings fields overriding each preset: (weights field, threshold field)
_SETTINGS_OVERRIDES = {
    "brand_detection": ("brand_weights", "brand_threshold"),
    "authenticity": ("authenticity_weights", "authenticity_threshold"),
}


def load_presets(settings: Optional[Settings] = None) -> Dict[str, DecisionSpec]:
    """
    Build the effective decision specs.

    Precedence, lowest first: built-in presets, the YAML file named by
    settings.decision_config_path, explicitly set weight/threshold settings.
    """
    settings = settings or get_settings()
    specs = dict(PRESETS)

    if settings.decision_config_path:
        loaded = load_decision_specs(settings.decision_config_path)
        logger.info(
            f"Loaded decision specs {sorted(loaded)} from {settings.decision_config_path}"
        )
        specs.update(loaded)

    explicit = settings.model_fields_set
    for name, (weights_field, threshold_field) in _SETTINGS_OVERRIDES.items():
        if name not in specs:
            continue
        weights = getattr(settings, weights_field)
        threshold = getattr(settings, threshold_field) if threshold_field in explicit else None
        if weights is not None or threshold is not None:
            specs[name] = specs[name].with_overrides(weights=weights, threshold=threshold)

    return specs


def get_preset(name: str, settings: Optional[Settings] = None) -> DecisionSpec:
    """
    Get the effective spec for a decision.

    Raises:
        PresetNotFoundError: If no decision with that name exists
    """
    specs = load_presets(settings)
    if name not in specs:
        raise PresetNotFoundError(f"Preset '{name}' not found. Available: {sorted(specs)}")
    return specs[name]


def list_presets(settings: Optional[Settings] = None) -> List[str]:
    """List available decision names."""
    return sorted(load_presets(settings))
