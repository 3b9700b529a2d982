"""
Decision vocabulary: candidate registries, evidence values and decision specs.
"""
from luxury_hunter.evaluation.categories import (
    UNKNOWN,
    AUTHENTIC,
    NOT_AUTHENTIC,
    CandidateRegistry,
    BRAND_REGISTRY,
    AUTHENTICITY_REGISTRY,
)
from luxury_hunter.evaluation.evidence import SignalScore, MethodVote, FeatureBreakdown
from luxury_hunter.evaluation.spec import DecisionSpec, load_decision_specs

__all__ = [
    "UNKNOWN",
    "AUTHENTIC",
    "NOT_AUTHENTIC",
    "CandidateRegistry",
    "BRAND_REGISTRY",
    "AUTHENTICITY_REGISTRY",
    "SignalScore",
    "MethodVote",
    "FeatureBreakdown",
    "DecisionSpec",
    "load_decision_specs",
]
