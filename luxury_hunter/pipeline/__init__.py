"""
Request orchestration: concurrent signal collection and the decision services.
"""
from luxury_hunter.pipeline.runner import MethodRun, MethodStatus, SignalCollection, SignalRunner
from luxury_hunter.pipeline.services import (
    UNKNOWN_MODEL,
    AuthenticationResult,
    AuthenticityVerdict,
    BrandDetection,
    BrandDetector,
    ItemAuthenticator,
    identify_model,
    verdict_for,
)

__all__ = [
    "MethodRun",
    "MethodStatus",
    "SignalCollection",
    "SignalRunner",
    "UNKNOWN_MODEL",
    "AuthenticationResult",
    "AuthenticityVerdict",
    "BrandDetection",
    "BrandDetector",
    "ItemAuthenticator",
    "identify_model",
    "verdict_for",
]
