"""
Error taxonomy.

Only configuration problems are fatal. Producer failures are recovered as
zero scores inside the ranker, and absence of evidence is a result flag
(FusionResult.evidence_absent), not an exception.
"""
from typing import Optional


class LuxuryHunterError(Exception):
    """Base class for all package errors."""
    pass


class ConfigurationError(LuxuryHunterError):
    """Invalid static configuration: empty registry, negative weight, unknown method."""
    pass


class ProducerFailure(LuxuryHunterError):
    """A signal producer could not score a category."""

    def __init__(self, method: str, category: Optional[str] = None, reason: str = ""):
        self.method = method
        self.category = category
        self.reason = reason
        target = f" for '{category}'" if category else ""
        super().__init__(f"Producer '{method}' failed{target}: {reason}")
