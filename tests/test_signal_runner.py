"""
Tests for the concurrent signal runner.

Verifies that:
- Votes come back in configured method order
- Timeouts and producer errors become abstentions
- Caller cancellation reaches the in-flight producers
"""
import asyncio

import pytest

from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.detectors.base import CallableProducer, FixedScoresProducer, SignalProducer
from luxury_hunter.detectors.registry import ProducerRegistry
from luxury_hunter.pipeline.runner import MethodStatus, SignalRunner


class SleepyProducer(SignalProducer):
    """Async producer that answers after a delay and records cancellation."""

    producer_type = "sleepy"

    def __init__(self, delay, scores):
        self.delay = delay
        self.scores = scores
        self.cancelled = False

    def extract_signal(self, image, method, categories):
        return {c: self.scores.get(c, 0.0) for c in categories}

    async def aextract_signal(self, image, method, categories):
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.extract_signal(image, method, categories)


class TestProducerRegistry:
    """Tests for ProducerRegistry."""

    def test_register_and_get(self):
        """Test registration and lookup."""
        producer = FixedScoresProducer({"Gucci": 0.5})
        registry = ProducerRegistry({"logo": producer})

        assert registry.get("logo") is producer
        assert "logo" in registry
        assert registry.is_registered("colors") is False
        assert registry.list_methods() == ["logo"]
        assert len(registry) == 1

    def test_unknown_method(self):
        """Test that a missing producer is a configuration error."""
        registry = ProducerRegistry({"logo": FixedScoresProducer({})})
        with pytest.raises(ConfigurationError, match="Available: \\['logo'\\]"):
            registry.get("colors")

    def test_require(self):
        """Test fail-fast checking of several methods."""
        registry = ProducerRegistry({"logo": FixedScoresProducer({})})
        with pytest.raises(ConfigurationError, match="colors"):
            registry.require(["logo", "colors"])

    def test_register_rejects_non_producers(self):
        """Test that only SignalProducer instances can be registered."""
        with pytest.raises(ConfigurationError):
            ProducerRegistry({"logo": lambda image, method, categories: {}})
        with pytest.raises(ConfigurationError):
            ProducerRegistry().register("", FixedScoresProducer({}))


class TestSignalRunner:
    """Tests for SignalRunner.collect()."""

    def test_votes_in_method_order(self, brands):
        """Test that slow and fast producers report in configured order."""
        producers = ProducerRegistry({
            "logo": SleepyProducer(0.05, {"Louis Vuitton": 0.9}),
            "colors": FixedScoresProducer({"Gucci": 0.4}),
            "patterns": SleepyProducer(0.01, {"Louis Vuitton": 0.2}),
        })
        runner = SignalRunner(producers, timeout_sec=2.0)

        collection = asyncio.run(runner.collect("bag.jpg", ["logo", "colors", "patterns"], brands))

        assert [v.method for v in collection.votes] == ["logo", "colors", "patterns"]
        assert [v.category for v in collection.votes] == ["Louis Vuitton", "Gucci", "Louis Vuitton"]
        assert collection.failed_methods == []
        assert all(run.status == MethodStatus.COMPLETED for run in collection.runs)

    def test_timeout_abstains(self, brands):
        """Test that a producer over its time bound abstains."""
        producers = ProducerRegistry({
            "logo": SleepyProducer(5.0, {"Gucci": 0.9}),
            "colors": FixedScoresProducer({"Gucci": 0.4}),
        })
        runner = SignalRunner(producers, timeout_sec=0.05)

        collection = asyncio.run(runner.collect("bag.jpg", ["logo", "colors"], brands))
        logo, colors = collection.runs

        assert logo.status == MethodStatus.TIMED_OUT
        assert logo.vote.abstained
        assert "Timeout" in logo.error
        assert colors.vote.category == "Gucci"
        assert collection.failed_methods == ["logo"]

    def test_producer_error_abstains(self, brands):
        """Test that a raising producer abstains instead of failing the request."""
        def broken(image, method, categories):
            raise RuntimeError("weights file missing")

        producers = ProducerRegistry({
            "logo": FixedScoresProducer({"Chanel": 0.7}),
            "colors": CallableProducer(broken),
        })
        runner = SignalRunner(producers, timeout_sec=2.0)

        collection = asyncio.run(runner.collect("bag.jpg", ["logo", "colors"], brands))
        colors = collection.runs[1]

        assert colors.status == MethodStatus.FAILED
        assert colors.vote.abstained
        assert "Producer 'colors' failed" in colors.error
        assert "weights file missing" in colors.error

    def test_malformed_return_abstains(self, brands):
        """Test that a producer returning garbage still completes, abstaining."""
        producers = ProducerRegistry({
            "logo": CallableProducer(lambda image, method, categories: "Gucci"),
        })
        collection = asyncio.run(SignalRunner(producers).collect("bag.jpg", ["logo"], brands))
        assert collection.runs[0].status == MethodStatus.COMPLETED
        assert collection.votes[0].abstained

    def test_missing_producer_fails_fast(self, brands):
        """Test that an unserved method is a configuration error."""
        runner = SignalRunner(ProducerRegistry({"logo": FixedScoresProducer({})}))
        with pytest.raises(ConfigurationError):
            asyncio.run(runner.collect("bag.jpg", ["logo", "colors"], brands))

    def test_cancellation_propagates(self, brands):
        """Test that cancelling the request cancels in-flight producers."""
        slow = SleepyProducer(5.0, {"Gucci": 0.9})
        runner = SignalRunner(ProducerRegistry({"logo": slow}), timeout_sec=10.0)

        async def cancel_midway():
            task = asyncio.create_task(runner.collect("bag.jpg", ["logo"], brands))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(cancel_midway())
        assert slow.cancelled is True

    def test_to_dict(self, brands):
        """Test the serialized run records."""
        producers = ProducerRegistry({"logo": FixedScoresProducer({"Gucci": 0.4})})
        collection = asyncio.run(SignalRunner(producers).collect("bag.jpg", ["logo"], brands))
        data = collection.to_dict()

        assert data["runs"][0]["method"] == "logo"
        assert data["runs"][0]["status"] == "completed"
        assert data["runs"][0]["error"] is None
