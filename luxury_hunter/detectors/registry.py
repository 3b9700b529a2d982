"""
Producer registry - maps method names to signal producer instances.

Each service owns its registry; there is no module-level producer cache, so
tests can wire fixed stand-in producers without touching global state.
"""
from typing import Dict, Iterable, List, Mapping, Optional

from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.detectors.base import SignalProducer


class ProducerRegistry:
    """
    Registry of signal producers keyed by method name.
    """

    def __init__(self, producers: Optional[Mapping[str, SignalProducer]] = None):
        self._producers: Dict[str, SignalProducer] = {}
        for method, producer in (producers or {}).items():
            self.register(method, producer)

    def register(self, method: str, producer: SignalProducer) -> None:
        """
        Register a producer for a method.

        Args:
            method: Method name (e.g., "logo")
            producer: SignalProducer instance
        """
        if not method:
            raise ConfigurationError("Producer method name must not be empty")
        if not isinstance(producer, SignalProducer):
            raise ConfigurationError(
                f"Producer for '{method}' must be a SignalProducer, got {type(producer).__name__}"
            )
        self._producers[method] = producer

    def get(self, method: str) -> SignalProducer:
        """
        Get the producer for a method.

        Raises:
            ConfigurationError: If no producer is registered for the method
        """
        if method not in self._producers:
            available = list(self._producers.keys())
            raise ConfigurationError(
                f"No signal producer registered for method '{method}'. "
                f"Available: {available}"
            )
        return self._producers[method]

    def require(self, methods: Iterable[str]) -> None:
        """Fail fast if any of the given methods has no producer."""
        missing = [m for m in methods if m not in self._producers]
        if missing:
            raise ConfigurationError(f"No signal producer registered for methods {missing}")

    def list_methods(self) -> List[str]:
        """List registered method names."""
        return list(self._producers.keys())

    def is_registered(self, method: str) -> bool:
        return method in self._producers

    def __contains__(self, method: object) -> bool:
        return method in self._producers

    def __len__(self) -> int:
        return len(self._producers)
