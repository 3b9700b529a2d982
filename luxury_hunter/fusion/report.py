"""
Decision reporter - explains a fusion result.

Reasons come from a fixed, ordered tuple of threshold rules over feature
sub-scores and the fused result. Rules are evaluated in tuple order, so the
reason list is identical for identical inputs. No fusion happens here.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from luxury_hunter.evaluation.categories import AUTHENTIC, NOT_AUTHENTIC
from luxury_hunter.evaluation.evidence import FeatureBreakdown
from luxury_hunter.fusion.engine import FusionResult


UNABLE_TO_DETERMINE = "Unable to determine"


@dataclass(frozen=True)
class ReasonRule:
    """A named predicate that contributes one reason when it holds."""
    name: str
    predicate: Callable[[FusionResult, FeatureBreakdown], bool]
    reason: str


def _voted_categories(result: FusionResult) -> set:
    return {v.category for v in result.votes if not v.abstained}


# Evaluation order is part of the contract
REASON_RULES: Tuple[ReasonRule, ...] = (
    ReasonRule(
        "logo_quality",
        lambda r, f: f.logo_present and f.logo_quality > 0.7,
        "High-quality logo detected",
    ),
    ReasonRule(
        "stitching_consistency",
        lambda r, f: f.stitching_consistency is not None and f.stitching_consistency > 0.7,
        "Consistent, professional stitching",
    ),
    ReasonRule(
        "craftsmanship_precision",
        lambda r, f: f.craftsmanship_precise,
        "Precise craftsmanship and symmetry",
    ),
    ReasonRule(
        "hardware_premium",
        lambda r, f: f.hardware_grade == "premium",
        "Premium hardware quality",
    ),
    ReasonRule(
        "authenticity_concerns",
        lambda r, f: r.category == NOT_AUTHENTIC or (r.category == AUTHENTIC and r.confidence < 0.5),
        "Multiple authenticity concerns detected",
    ),
    ReasonRule(
        "split_votes",
        lambda r, f: len(_voted_categories(r)) > 1,
        "Signals disagree on the category",
    ),
    ReasonRule(
        "no_evidence",
        lambda r, f: r.evidence_absent,
        "No usable evidence from any signal",
    ),
)


def explain(
    fusion_result: FusionResult,
    feature_breakdown: Optional[FeatureBreakdown] = None
) -> List[str]:
    """
    Deterministic reason list for a fusion result.

    Args:
        fusion_result: Result to explain
        feature_breakdown: Feature sub-scores of the item (optional)

    Returns:
        Reasons in rule order
    """
    features = feature_breakdown or FeatureBreakdown()
    return [
        rule.reason
        for rule in REASON_RULES
        if rule.predicate(fusion_result, features)
    ]


@dataclass(frozen=True)
class MethodLine:
    """How one method voted and whether it backed the winner."""
    method: str
    category: str
    score: float
    agrees: bool

    def render(self) -> str:
        stance = "agrees" if self.agrees else "disagrees"
        return f"{self.method}: {label(self.category)} ({self.score:.0%}) - {stance}"


@dataclass(frozen=True)
class DecisionReport:
    """Presentation-ready explanation of one decision."""
    headline: str
    method_lines: Tuple[MethodLine, ...] = ()
    reasons: Tuple[str, ...] = ()
    evidence_absent: bool = False

    def render(self) -> List[str]:
        lines = [self.headline]
        lines.extend(line.render() for line in self.method_lines)
        lines.extend(f"- {reason}" for reason in self.reasons)
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headline": self.headline,
            "evidence_absent": self.evidence_absent,
            "methods": [
                {
                    "method": line.method,
                    "category": line.category,
                    "score": round(line.score, 3),
                    "agrees": line.agrees,
                }
                for line in self.method_lines
            ],
            "reasons": list(self.reasons),
        }


def label(category: str) -> str:
    """Human-readable category label ("not_authentic" -> "Not authentic")."""
    text = category.replace("_", " ")
    return text[:1].upper() + text[1:]


def headline(result: FusionResult) -> str:
    """
    One-line summary.

    Absence of evidence is never rendered as a negative decision with 0%
    confidence.
    """
    if result.evidence_absent:
        return UNABLE_TO_DETERMINE
    if result.outcome:
        return f"{label(result.category)}, confidence {result.confidence:.0%}"
    return (
        f"Inconclusive: best match {label(result.category)} at {result.confidence:.0%} "
        f"(threshold {result.threshold:.0%})"
    )


def build_report(
    fusion_result: FusionResult,
    feature_breakdown: Optional[FeatureBreakdown] = None
) -> DecisionReport:
    """Build the full report: headline, per-method lines in vote order, reasons."""
    lines = tuple(
        MethodLine(
            method=vote.method,
            category=vote.category,
            score=vote.score,
            agrees=fusion_result.agrees(vote),
        )
        for vote in fusion_result.votes
    )
    return DecisionReport(
        headline=headline(fusion_result),
        method_lines=lines,
        reasons=tuple(explain(fusion_result, feature_breakdown)),
        evidence_absent=fusion_result.evidence_absent,
    )
