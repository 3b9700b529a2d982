"""
Base signal producer interface.

A signal producer scores image evidence against candidate categories for one
named method (logo, colors, stitching, ...). Its internals (image decoding,
vision heuristics, learned models) are opaque to the fusion engine; only the
per-category scores in [0, 1] matter.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Sequence


class SignalProducer(ABC):
    """
    Abstract base class for all signal producers.

    Subclasses must implement extract_signal(). Producers should return
    zeros rather than raise on transient failures; the ranker still guards
    against producers that raise.
    """

    producer_type: str = "base"

    @abstractmethod
    def extract_signal(
        self,
        image: Any,
        method: str,
        categories: Sequence[str]
    ) -> Mapping[str, float]:
        """
        Score every category for one method.

        Args:
            image: Opaque image handle (path, bytes, decoded array...)
            method: Method name being evaluated
            categories: Categories to score, in registry order

        Returns:
            Mapping of category -> score in [0, 1]
        """
        pass

    def score(self, image: Any, method: str, category: str) -> float:
        """Score a single category (per-category form used by the ranker)."""
        return self.extract_signal(image, method, [category]).get(category, 0.0)

    async def aextract_signal(
        self,
        image: Any,
        method: str,
        categories: Sequence[str]
    ) -> Mapping[str, float]:
        """
        Async form used by the request runner.

        Synchronous producers run in a worker thread so they never block the
        event loop; I/O-bound producers override this directly.
        """
        return await asyncio.to_thread(self.extract_signal, image, method, list(categories))

    def supports(self, method: str) -> bool:
        """Whether this producer can evaluate the given method."""
        return True


class CallableProducer(SignalProducer):
    """
    Producer backed by a plain function.

    The function receives (image, method, categories) and returns a
    category -> score mapping. Handy for fixed stand-in producers.
    """

    producer_type = "callable"

    def __init__(
        self,
        func: Callable[[Any, str, Sequence[str]], Mapping[str, float]],
        name: Optional[str] = None
    ):
        self._func = func
        self.name = name or getattr(func, "__name__", "callable")

    def extract_signal(
        self,
        image: Any,
        method: str,
        categories: Sequence[str]
    ) -> Mapping[str, float]:
        return self._func(image, method, categories)

    def __repr__(self) -> str:
        return f"CallableProducer({self.name!r})"


class FixedScoresProducer(SignalProducer):
    """Producer that always answers with the same per-category scores."""

    producer_type = "fixed"

    def __init__(self, scores: Mapping[str, float]):
        self._scores: Dict[str, float] = dict(scores)

    def extract_signal(
        self,
        image: Any,
        method: str,
        categories: Sequence[str]
    ) -> Mapping[str, float]:
        return {c: self._scores.get(c, 0.0) for c in categories}
