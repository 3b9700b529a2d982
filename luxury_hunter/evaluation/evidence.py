"""
Standardized evidence values passed between producers, ranker and engine.

All values are immutable. A SignalScore is one producer's score for one
category; a MethodVote is one producer's best category after ranking;
FeatureBreakdown holds the raw feature sub-scores used for explanations.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from luxury_hunter.evaluation.categories import UNKNOWN


def _check_unit_interval(value: float, what: str) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{what} must be a number, got {type(value).__name__}")
    if not math.isfinite(value) or value < 0.0 or value > 1.0:
        raise ValueError(f"{what} must be a finite value in [0, 1], got {value}")


@dataclass(frozen=True)
class SignalScore:
    """
    One producer's score for one category.

    has_evidence is False for the "no evidence" sentinel emitted when a
    producer fails or returns an unusable value; its score is always 0.
    """
    category: str
    score: float
    has_evidence: bool = True

    def __post_init__(self):
        _check_unit_interval(self.score, f"score for '{self.category}'")
        if not self.has_evidence and self.score != 0.0:
            raise ValueError("no-evidence scores must be 0")

    @classmethod
    def no_evidence(cls, category: str) -> "SignalScore":
        return cls(category=category, score=0.0, has_evidence=False)

    @classmethod
    def from_raw(cls, category: str, raw: Any) -> "SignalScore":
        """
        Build a score from an untrusted producer value.

        Finite numbers are clamped to [0, 1]; None, NaN, infinities and
        non-numeric values become the no-evidence sentinel.
        """
        if raw is None or isinstance(raw, bool):
            return cls.no_evidence(category)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return cls.no_evidence(category)
        if not math.isfinite(value):
            return cls.no_evidence(category)
        return cls(category=category, score=min(max(value, 0.0), 1.0))


@dataclass(frozen=True)
class MethodVote:
    """
    Result of ranking one producer's scores across the registry.

    A vote for UNKNOWN is an abstention and always carries score 0.
    """
    method: str
    category: str
    score: float

    def __post_init__(self):
        _check_unit_interval(self.score, f"vote score of method '{self.method}'")
        if self.category == UNKNOWN and self.score != 0.0:
            raise ValueError(f"method '{self.method}' voted '{UNKNOWN}' with a non-zero score")

    @classmethod
    def abstain(cls, method: str) -> "MethodVote":
        return cls(method=method, category=UNKNOWN, score=0.0)

    @property
    def abstained(self) -> bool:
        return self.category == UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "category": self.category,
            "score": round(self.score, 3),
        }


class FeatureBreakdown(BaseModel):
    """
    Feature sub-scores computed by the vision layer for one item.

    Every field is optional; a missing feature means that analysis produced
    nothing usable and the corresponding signal abstains.
    """
    model_config = ConfigDict(frozen=True)

    logo_quality: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    stitching_consistency: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    material_texture: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    craftsmanship_symmetry: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    craftsmanship_alignment: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    hardware_quality: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    serial_number: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    classifier_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @property
    def logo_present(self) -> bool:
        return self.logo_quality is not None and self.logo_quality > 0.6

    @property
    def craftsmanship_overall(self) -> Optional[float]:
        if self.craftsmanship_symmetry is None or self.craftsmanship_alignment is None:
            return None
        return (self.craftsmanship_symmetry + self.craftsmanship_alignment) / 2

    @property
    def craftsmanship_precise(self) -> bool:
        overall = self.craftsmanship_overall
        return overall is not None and overall > 0.7

    @property
    def stitching_grade(self) -> str:
        if self.stitching_consistency is None:
            return "unknown"
        if self.stitching_consistency > 0.7:
            return "excellent"
        if self.stitching_consistency > 0.5:
            return "good"
        return "poor"

    @property
    def hardware_grade(self) -> str:
        if self.hardware_quality is None:
            return "unknown"
        if self.hardware_quality > 0.7:
            return "premium"
        if self.hardware_quality > 0.4:
            return "standard"
        return "poor"

    @property
    def material_genuine(self) -> bool:
        return self.material_texture is not None and self.material_texture > 0.5
