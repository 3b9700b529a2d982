"""
Per-method ranker - turns one producer's per-category scores into a vote.

Selection starts from a zero baseline and only a strictly greater score
displaces the current best, walking the registry in order. So:
- exact ties go to the category listed first in the registry
- an all-zero (or all-failed) method votes UNKNOWN with score 0
"""
from typing import Any, Iterable, Mapping, Sequence

from luxury_hunter.core.errors import ProducerFailure
from luxury_hunter.core.logging import get_logger
from luxury_hunter.detectors.base import SignalProducer
from luxury_hunter.evaluation.categories import UNKNOWN
from luxury_hunter.evaluation.evidence import MethodVote, SignalScore

logger = get_logger("fusion.ranker")


def rank_scores(
    method: str,
    scores: Iterable[SignalScore],
    registry: Sequence[str]
) -> MethodVote:
    """
    Select the winning category from one method's scores.

    Args:
        method: Method name recorded on the vote
        scores: SignalScores for this method (missing categories count as 0)
        registry: Candidate categories in tie-break order

    Returns:
        MethodVote for the best category, or an UNKNOWN abstention
    """
    by_category = {}
    for signal in scores:
        if signal.category not in registry:
            logger.warning(
                f"Method '{method}' scored '{signal.category}', which is not a candidate; ignored"
            )
            continue
        by_category[signal.category] = signal.score

    best_category = UNKNOWN
    best_score = 0.0
    for category in registry:
        score = by_category.get(category, 0.0)
        if score > best_score:
            best_category = category
            best_score = score

    return MethodVote(method=method, category=best_category, score=best_score)


def vote_from_mapping(
    method: str,
    mapping: Mapping[str, Any],
    registry: Sequence[str]
) -> MethodVote:
    """Rank a raw category -> value mapping returned by a producer in one call."""
    if not isinstance(mapping, Mapping):
        logger.warning(
            f"Method '{method}' returned {type(mapping).__name__} instead of a mapping; abstaining"
        )
        return MethodVote.abstain(method)

    scores = [SignalScore.from_raw(category, value) for category, value in mapping.items()]
    return rank_scores(method, scores, registry)


def score_method(
    producer: SignalProducer,
    image: Any,
    method: str,
    registry: Sequence[str]
) -> MethodVote:
    """
    Invoke a producer once per category, in registry order, and rank.

    A failure for one category is recovered as a zero score for that
    category; the remaining categories are still scored.
    """
    scores = []
    failures = 0

    for category in registry:
        try:
            raw = producer.score(image, method, category)
        except Exception as e:
            failure = e if isinstance(e, ProducerFailure) else ProducerFailure(method, category, str(e))
            logger.warning(str(failure))
            failures += 1
            scores.append(SignalScore.no_evidence(category))
            continue

        signal = SignalScore.from_raw(category, raw)
        if not signal.has_evidence:
            logger.warning(f"Method '{method}' returned unusable score {raw!r} for '{category}'")
        scores.append(signal)

    if failures and failures == len(scores):
        logger.warning(f"Method '{method}' failed for every category; abstaining")
        return MethodVote.abstain(method)

    return rank_scores(method, scores, registry)
