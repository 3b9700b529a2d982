"""
Signal runner - collects one vote per configured method for a request.

The runner:
1. Starts every method's producer concurrently
2. Bounds each producer call with a timeout
3. Turns timeouts and producer errors into abstentions (score 0)
4. Returns the votes in configured method order once all have reported

Fusion only ever sees a complete vote list: if the caller cancels, the
in-flight producer calls are cancelled and CancelledError propagates.
"""
import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from luxury_hunter.core.errors import ProducerFailure
from luxury_hunter.core.logging import get_logger
from luxury_hunter.detectors.registry import ProducerRegistry
from luxury_hunter.evaluation.evidence import MethodVote
from luxury_hunter.fusion.ranker import vote_from_mapping

logger = get_logger("pipeline.runner")


class MethodStatus(str, Enum):
    """How a method's producer call ended."""
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class MethodRun:
    """Record of one producer call."""
    method: str
    status: MethodStatus
    duration_ms: float
    vote: MethodVote
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 1),
            "error": self.error,
        }


@dataclass(frozen=True)
class SignalCollection:
    """All method runs of one request, in configured method order."""
    runs: Tuple[MethodRun, ...]

    @property
    def votes(self) -> Tuple[MethodVote, ...]:
        return tuple(run.vote for run in self.runs)

    @property
    def failed_methods(self) -> List[str]:
        return [r.method for r in self.runs if r.status != MethodStatus.COMPLETED]

    def to_dict(self) -> Dict[str, Any]:
        return {"runs": [r.to_dict() for r in self.runs]}


class SignalRunner:
    """
    Runs a request's signal producers concurrently.
    """

    def __init__(self, producers: ProducerRegistry, timeout_sec: float = 10.0):
        """
        Args:
            producers: Producers keyed by method name
            timeout_sec: Per-producer time bound; exceeding it abstains
        """
        self.producers = producers
        self.timeout_sec = timeout_sec

    async def collect(
        self,
        image: Any,
        methods: Sequence[str],
        registry: Sequence[str]
    ) -> SignalCollection:
        """
        Collect one vote per method.

        Args:
            image: Opaque image handle passed to every producer
            methods: Configured methods, in the order votes are returned
            registry: Candidate categories in tie-break order

        Returns:
            SignalCollection with one MethodRun per method
        """
        self.producers.require(methods)
        categories = list(registry)

        logger.info(f"Collecting {len(methods)} signals over {len(categories)} categories")

        # gather cancels the children when the caller cancels this coroutine
        runs = await asyncio.gather(*(
            self._run_method(image, method, categories)
            for method in methods
        ))

        collection = SignalCollection(runs=tuple(runs))
        if collection.failed_methods:
            logger.warning(f"Methods without usable signal: {collection.failed_methods}")
        return collection

    async def _run_method(
        self,
        image: Any,
        method: str,
        categories: List[str]
    ) -> MethodRun:
        producer = self.producers.get(method)
        started = time.perf_counter()

        try:
            mapping = await asyncio.wait_for(
                producer.aextract_signal(image, method, categories),
                timeout=self.timeout_sec,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Method '{method}' timed out after {self.timeout_sec}s; abstaining")
            return MethodRun(
                method=method,
                status=MethodStatus.TIMED_OUT,
                duration_ms=(time.perf_counter() - started) * 1000,
                vote=MethodVote.abstain(method),
                error=f"Timeout after {self.timeout_sec}s",
            )
        except Exception as e:
            failure = e if isinstance(e, ProducerFailure) else ProducerFailure(method, reason=str(e))
            logger.warning(f"{failure}; abstaining")
            return MethodRun(
                method=method,
                status=MethodStatus.FAILED,
                duration_ms=(time.perf_counter() - started) * 1000,
                vote=MethodVote.abstain(method),
                error=str(failure),
            )

        vote = vote_from_mapping(method, mapping, categories)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"Method '{method}' voted {vote.category} ({vote.score:.3f}) in {duration_ms:.0f}ms")

        return MethodRun(
            method=method,
            status=MethodStatus.COMPLETED,
            duration_ms=duration_ms,
            vote=vote,
        )
