"""
Authenticity signals derived from an already-computed feature breakdown.

Each authenticity method reads one feature sub-score v and reports
authentic = v, not_authentic = 1 - v. A missing feature abstains (all zeros).
"""
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from luxury_hunter.core.errors import ProducerFailure
from luxury_hunter.detectors.base import SignalProducer
from luxury_hunter.evaluation.categories import AUTHENTIC, NOT_AUTHENTIC
from luxury_hunter.evaluation.evidence import FeatureBreakdown


# Method name -> accessor over the breakdown
FEATURE_METHODS: Dict[str, Callable[[FeatureBreakdown], Optional[float]]] = {
    "logo": lambda f: f.logo_quality,
    "stitching": lambda f: f.stitching_consistency,
    "material": lambda f: f.material_texture,
    "craftsmanship": lambda f: f.craftsmanship_overall,
    "hardware": lambda f: f.hardware_quality,
    "serial": lambda f: f.serial_number,
    "classifier": lambda f: f.classifier_score,
}


class FeatureSignalProducer(SignalProducer):
    """
    Request-scoped producer over one item's FeatureBreakdown.

    The image argument is ignored: the breakdown was computed from it before
    the producer was built.
    """

    producer_type = "features"

    def __init__(self, breakdown: FeatureBreakdown):
        self.breakdown = breakdown

    def supports(self, method: str) -> bool:
        return method in FEATURE_METHODS

    def extract_signal(
        self,
        image: Any,
        method: str,
        categories: Sequence[str]
    ) -> Mapping[str, float]:
        if method not in FEATURE_METHODS:
            raise ProducerFailure(method, reason="no feature backs this method")

        value = FEATURE_METHODS[method](self.breakdown)
        if value is None:
            return {c: 0.0 for c in categories}

        signals = {AUTHENTIC: value, NOT_AUTHENTIC: 1.0 - value}
        return {c: signals.get(c, 0.0) for c in categories}
