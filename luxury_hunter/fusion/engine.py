"""
Fusion engine - combines method votes into one decision.

For every candidate category the engine takes the weighted average of the
scores of only those methods that voted for it:

    score(c) = sum(score_m * w_m) / sum(w_m)   over methods m voting for c

Methods that voted for another category (or abstained) are excluded rather
than counted as zero evidence. Categories nobody voted for get no score and
cannot win. The highest aggregated score wins, ties going to the category
listed first in the registry, and the outcome is confidence > threshold.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.core.logging import get_logger
from luxury_hunter.evaluation.categories import UNKNOWN, CandidateRegistry
from luxury_hunter.evaluation.evidence import MethodVote
from luxury_hunter.evaluation.spec import DecisionSpec

logger = get_logger("fusion.engine")


@dataclass(frozen=True)
class FusionResult:
    """Complete, immutable result of one fusion."""
    # Winning category, or UNKNOWN when no method produced usable evidence
    category: str
    confidence: float
    outcome: bool
    threshold: float

    # Per-category aggregated scores, registry order, voted categories only
    category_scores: Tuple[Tuple[str, float], ...] = ()

    # Per-method breakdown, in the order the votes were supplied
    votes: Tuple[MethodVote, ...] = ()

    decision: Optional[str] = None

    @property
    def evidence_absent(self) -> bool:
        """True when no method produced usable evidence ("unable to determine")."""
        return self.category == UNKNOWN

    @property
    def scores(self) -> Dict[str, float]:
        return dict(self.category_scores)

    def agrees(self, vote: MethodVote) -> bool:
        """Whether a method voted for the winning category."""
        return not self.evidence_absent and vote.category == self.category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decision": self.decision,
            "category": self.category,
            "confidence": round(self.confidence, 3),
            "outcome": self.outcome,
            "threshold": self.threshold,
            "evidence_absent": self.evidence_absent,
            "category_scores": {c: round(s, 3) for c, s in self.category_scores},
            "votes": [
                dict(v.to_dict(), agrees=self.agrees(v))
                for v in self.votes
            ],
        }


def _as_registry(registry: Union[CandidateRegistry, Sequence[str]]) -> CandidateRegistry:
    if isinstance(registry, CandidateRegistry):
        return registry
    return CandidateRegistry("adhoc", registry)


def _validate_weights(weights: Mapping[str, float], votes: Sequence[MethodVote]) -> None:
    invalid = sorted(
        m for m, w in weights.items()
        if not isinstance(w, (int, float)) or isinstance(w, bool)
        or not math.isfinite(w) or w < 0.0
    )
    if invalid:
        raise ConfigurationError(
            f"Weights must be finite and non-negative; invalid for methods {invalid}"
        )

    voted_methods = {v.method for v in votes}
    unknown = sorted(m for m in weights if m not in voted_methods)
    if unknown:
        raise ConfigurationError(
            f"Weights reference methods that supplied no vote: {unknown}"
        )


def fuse(
    method_votes: Iterable[MethodVote],
    weights: Mapping[str, float],
    threshold: float,
    registry: Union[CandidateRegistry, Sequence[str]],
    decision: Optional[str] = None
) -> FusionResult:
    """
    Fuse method votes into a single decision.

    Pure and deterministic: identical inputs always give an identical result.
    Never fails on empty or degenerate evidence; that yields
    (UNKNOWN, 0.0, outcome=False).

    Args:
        method_votes: One vote per configured method, in configured order
        weights: method -> non-negative weight (missing methods weigh 0)
        threshold: Decision threshold in [0, 1] (strict greater-than)
        registry: Candidate categories in tie-break order
        decision: Optional decision context name recorded on the result

    Raises:
        ConfigurationError: Negative or non-finite weight, weight for a method with no
            vote, invalid threshold or empty registry
    """
    votes = tuple(method_votes)
    registry = _as_registry(registry)

    if not isinstance(threshold, (int, float)) or isinstance(threshold, bool) \
            or not math.isfinite(threshold) \
            or not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(f"Decision threshold must be in [0, 1], got {threshold}")
    _validate_weights(weights, votes)

    # Request-scoped accumulators
    score_sum: Dict[str, float] = {}
    weight_sum: Dict[str, float] = {}
    sole_score: Dict[str, Optional[float]] = {}

    for vote in votes:
        if vote.abstained:
            continue
        if vote.category not in registry:
            logger.warning(
                f"Method '{vote.method}' voted for '{vote.category}', "
                f"which is not in registry '{registry.name}'; ignored"
            )
            continue

        weight = weights.get(vote.method, 0.0)
        if weight <= 0.0:
            continue

        category = vote.category
        score_sum[category] = score_sum.get(category, 0.0) + vote.score * weight
        weight_sum[category] = weight_sum.get(category, 0.0) + weight
        # A lone contributor's score is used as-is, avoiding (s * w) / w rounding
        sole_score[category] = vote.score if category not in sole_score else None

    category_scores = []
    for category in registry:
        if weight_sum.get(category, 0.0) > 0.0:
            aggregated = sole_score[category]
            if aggregated is None:
                aggregated = score_sum[category] / weight_sum[category]
            category_scores.append((category, min(max(aggregated, 0.0), 1.0)))

    winner = UNKNOWN
    confidence = 0.0
    best = None
    for category, aggregated in category_scores:
        if best is None or aggregated > best:
            best = aggregated
            winner = category
            confidence = aggregated

    outcome = winner != UNKNOWN and confidence > threshold

    logger.debug(
        f"Fused {len(votes)} votes in '{registry.name}': "
        f"{winner} ({confidence:.3f}) outcome={outcome}"
    )

    return FusionResult(
        category=winner,
        confidence=confidence,
        outcome=outcome,
        threshold=float(threshold),
        category_scores=tuple(category_scores),
        votes=votes,
        decision=decision,
    )


class FusionEngine:
    """
    Engine bound to one validated DecisionSpec.
    """

    def __init__(self, spec: DecisionSpec):
        self.spec = spec
        self.registry = spec.registry

    @property
    def methods(self) -> Tuple[str, ...]:
        return tuple(self.spec.methods)

    def fuse(self, method_votes: Iterable[MethodVote]) -> FusionResult:
        """
        Fuse one request's votes using the bound spec.

        Args:
            method_votes: Votes for the configured methods

        Returns:
            FusionResult with winner, confidence and per-method breakdown
        """
        return fuse(
            method_votes,
            self.spec.weights,
            self.spec.threshold,
            self.registry,
            decision=self.spec.name,
        )
