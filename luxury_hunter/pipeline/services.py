"""
Brand detection and item authentication services.

Both run the same flow over a different decision spec:
collect method votes concurrently -> fuse -> report.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from luxury_hunter.core.config import get_settings
from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.core.logging import get_logger
from luxury_hunter.detectors.base import SignalProducer
from luxury_hunter.detectors.feature_producers import FEATURE_METHODS, FeatureSignalProducer
from luxury_hunter.detectors.registry import ProducerRegistry
from luxury_hunter.evaluation.categories import AUTHENTIC
from luxury_hunter.evaluation.evidence import FeatureBreakdown
from luxury_hunter.evaluation.spec import DecisionSpec
from luxury_hunter.fusion.engine import FusionEngine, FusionResult
from luxury_hunter.fusion.ranker import vote_from_mapping
from luxury_hunter.fusion.report import DecisionReport, build_report
from luxury_hunter.pipeline.runner import SignalCollection, SignalRunner
from luxury_hunter.policies.presets import MODEL_CATALOG, get_preset

logger = get_logger("pipeline.services")


UNKNOWN_MODEL = "Unknown Model"

ProducerSource = Union[ProducerRegistry, Mapping[str, SignalProducer], None]


def _as_producer_registry(producers: ProducerSource) -> ProducerRegistry:
    if isinstance(producers, ProducerRegistry):
        return producers
    return ProducerRegistry(producers)


def identify_model(brand: str, model_scores: Optional[Mapping[str, float]] = None) -> str:
    """
    Identify the model/style of an item within its brand's catalog.

    Ranks the catalog with the same rule as any method vote; without scores,
    for an uncatalogued brand, or when nothing scores above zero, returns
    the UNKNOWN_MODEL sentinel. Never guesses.
    """
    catalog = MODEL_CATALOG.get(brand)
    if not catalog or not model_scores:
        return UNKNOWN_MODEL

    vote = vote_from_mapping("model", model_scores, catalog)
    return UNKNOWN_MODEL if vote.abstained else vote.category


# ===== BRAND DETECTION =====

@dataclass(frozen=True)
class BrandDetection:
    """Result of brand detection."""
    detected: bool
    brand: str
    confidence: float
    fusion: FusionResult
    report: DecisionReport
    signals: SignalCollection

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detected": self.detected,
            "brand": self.brand,
            "confidence": round(self.confidence, 3),
            "summary": self.report.headline,
            "fusion": self.fusion.to_dict(),
            "report": self.report.to_dict(),
            "signals": self.signals.to_dict(),
        }


class BrandDetector:
    """
    Identifies the brand of an item from its image.
    """

    def __init__(
        self,
        producers: ProducerSource,
        spec: Optional[DecisionSpec] = None,
        timeout_sec: Optional[float] = None
    ):
        """
        Args:
            producers: One producer per configured method (logo, colors, patterns)
            spec: Decision spec (defaults to the brand_detection preset)
            timeout_sec: Per-producer timeout (defaults to settings)
        """
        spec = spec or get_preset("brand_detection")
        self.engine = FusionEngine(spec)
        self.producers = _as_producer_registry(producers)
        self.producers.require(spec.methods)
        self.runner = SignalRunner(
            self.producers,
            timeout_sec if timeout_sec is not None else get_settings().producer_timeout_sec,
        )

    async def detect(self, image: Any) -> BrandDetection:
        """Detect the brand shown in an image."""
        signals = await self.runner.collect(image, self.engine.methods, self.engine.registry)
        fusion = self.engine.fuse(signals.votes)
        report = build_report(fusion)

        logger.info(f"Brand detection: {report.headline}")

        return BrandDetection(
            detected=fusion.outcome,
            brand=fusion.category,
            confidence=fusion.confidence,
            fusion=fusion,
            report=report,
            signals=signals,
        )


# ===== AUTHENTICATION =====

class AuthenticityVerdict(str, Enum):
    """Possible authentication outcomes."""
    AUTHENTIC = "AUTHENTIC"
    NOT_AUTHENTIC = "NOT_AUTHENTIC"
    UNDETERMINED = "UNDETERMINED"


@dataclass(frozen=True)
class AuthenticationResult:
    """Result of authenticating one item."""
    verdict: AuthenticityVerdict
    brand: str
    model: str
    confidence: float
    features: FeatureBreakdown
    fusion: FusionResult
    report: DecisionReport
    signals: SignalCollection

    @property
    def authentic(self) -> bool:
        return self.verdict == AuthenticityVerdict.AUTHENTIC

    @property
    def reasons(self) -> List[str]:
        return list(self.report.reasons)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "authentic": self.authentic,
            "brand": self.brand,
            "model": self.model,
            "confidence": round(self.confidence, 3),
            "summary": self.report.headline,
            "reasons": self.reasons,
            "features": self.features.model_dump(exclude_none=True),
            "fusion": self.fusion.to_dict(),
            "signals": self.signals.to_dict(),
        }


def verdict_for(fusion: FusionResult) -> AuthenticityVerdict:
    """
    Map an authenticity fusion result onto a verdict.

    Evidence absence is UNDETERMINED, never NOT_AUTHENTIC.
    """
    if fusion.evidence_absent:
        return AuthenticityVerdict.UNDETERMINED
    if fusion.category == AUTHENTIC and fusion.outcome:
        return AuthenticityVerdict.AUTHENTIC
    return AuthenticityVerdict.NOT_AUTHENTIC


class ItemAuthenticator:
    """
    Decides whether an item is authentic.

    Methods without an injected producer are served from the item's feature
    breakdown (see FeatureSignalProducer).
    """

    def __init__(
        self,
        producers: ProducerSource = None,
        spec: Optional[DecisionSpec] = None,
        feature_extractor: Optional[Callable[[Any], FeatureBreakdown]] = None,
        timeout_sec: Optional[float] = None
    ):
        """
        Args:
            producers: Producers for methods not backed by features (e.g. classifier)
            spec: Decision spec (defaults to the authenticity preset)
            feature_extractor: Computes a FeatureBreakdown from an image
            timeout_sec: Per-producer timeout (defaults to settings)
        """
        self.spec = spec or get_preset("authenticity")
        self.engine = FusionEngine(self.spec)
        self.producers = _as_producer_registry(producers)
        self.feature_extractor = feature_extractor
        self.timeout_sec = (
            timeout_sec if timeout_sec is not None else get_settings().producer_timeout_sec
        )

        unserved = [
            m for m in self.spec.methods
            if m not in self.producers and m not in FEATURE_METHODS
        ]
        if unserved:
            raise ConfigurationError(f"No signal producer can serve methods {unserved}")

    async def authenticate(
        self,
        image: Any,
        brand: str,
        breakdown: Optional[FeatureBreakdown] = None,
        model_scores: Optional[Mapping[str, float]] = None
    ) -> AuthenticationResult:
        """
        Authenticate an item.

        Args:
            image: Opaque image handle
            brand: Brand the item claims (or was detected as)
            breakdown: Precomputed feature sub-scores (skips the extractor)
            model_scores: Optional model-name -> score mapping for identification

        Returns:
            AuthenticationResult with verdict, confidence, reasons and breakdown
        """
        if breakdown is None:
            breakdown = await self._extract_features(image)

        # Request-scoped producer set
        request_producers = ProducerRegistry()
        feature_producer = FeatureSignalProducer(breakdown)
        for method in self.spec.methods:
            if method in self.producers:
                request_producers.register(method, self.producers.get(method))
            else:
                request_producers.register(method, feature_producer)

        runner = SignalRunner(request_producers, self.timeout_sec)
        signals = await runner.collect(image, self.engine.methods, self.engine.registry)
        fusion = self.engine.fuse(signals.votes)
        report = build_report(fusion, breakdown)
        verdict = verdict_for(fusion)

        logger.info(f"Authentication of {brand} item: {verdict.value} ({report.headline})")

        return AuthenticationResult(
            verdict=verdict,
            brand=brand,
            model=identify_model(brand, model_scores),
            confidence=fusion.confidence,
            features=breakdown,
            fusion=fusion,
            report=report,
            signals=signals,
        )

    async def _extract_features(self, image: Any) -> FeatureBreakdown:
        if self.feature_extractor is None:
            return FeatureBreakdown()
        try:
            return await asyncio.to_thread(self.feature_extractor, image)
        except Exception as e:
            logger.warning(f"Feature extraction failed, feature signals will abstain: {e}")
            return FeatureBreakdown()
