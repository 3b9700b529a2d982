"""
Signal producers and the producer registry.
"""
from luxury_hunter.detectors.base import SignalProducer, CallableProducer, FixedScoresProducer
from luxury_hunter.detectors.registry import ProducerRegistry
from luxury_hunter.detectors.feature_producers import FeatureSignalProducer, FEATURE_METHODS
from luxury_hunter.detectors.http_producer import HttpSignalProducer

__all__ = [
    "SignalProducer",
    "CallableProducer",
    "FixedScoresProducer",
    "ProducerRegistry",
    "FeatureSignalProducer",
    "FEATURE_METHODS",
    "HttpSignalProducer",
]
