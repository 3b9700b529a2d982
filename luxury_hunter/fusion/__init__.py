"""
Fusion of method votes into decisions.

The fusion module provides:
- Per-method ranking of producer scores into votes
- Agreement-restricted weighted fusion of votes into one decision
- Deterministic explanations for audit trails
"""
from luxury_hunter.fusion.ranker import rank_scores, score_method, vote_from_mapping
from luxury_hunter.fusion.engine import FusionEngine, FusionResult, fuse
from luxury_hunter.fusion.report import (
    DecisionReport,
    MethodLine,
    ReasonRule,
    REASON_RULES,
    UNABLE_TO_DETERMINE,
    build_report,
    explain,
)

__all__ = [
    "rank_scores",
    "score_method",
    "vote_from_mapping",
    "FusionEngine",
    "FusionResult",
    "fuse",
    "DecisionReport",
    "MethodLine",
    "ReasonRule",
    "REASON_RULES",
    "UNABLE_TO_DETERMINE",
    "build_report",
    "explain",
]
