"""
HTTP signal producer - scores categories through a remote model service.

The producer POSTs one request per method:
```json
{"method": "logo", "categories": ["Louis Vuitton", "Gucci"], "image": "<path, url or base64>"}
```
and expects `{"scores": {"Louis Vuitton": 0.9, "Gucci": 0.1}}` back.

Timeouts, HTTP errors and malformed responses never raise: after the
configured retries the producer reports zeros for every category.
"""
import asyncio
import base64
from dataclasses import asdict
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from luxury_hunter.core.config import Settings, get_settings
from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.core.logging import get_logger
from luxury_hunter.detectors.base import SignalProducer
from luxury_hunter.policies.presets import get_brand_profile

logger = get_logger("detectors.http")

# Share of the per-method budget given to HTTP attempts; the rest covers
# connection setup and scheduling slack
_ATTEMPT_BUDGET_SHARE = 0.9


class HttpSignalProducer(SignalProducer):
    """
    Signal producer backed by a remote scoring endpoint.
    """

    producer_type = "http"

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout_sec: float = 10.0,
        retries: int = 1,
        retry_delay_sec: float = 0.5,
        send_profiles: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            url: Scoring endpoint URL
            token: Optional bearer token
            timeout_sec: Per-attempt HTTP timeout
            retries: Extra attempts after the first failure
            retry_delay_sec: Pause between attempts
            send_profiles: Attach known brand profiles to the request as hints
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.url = url
        self.token = token
        self.timeout_sec = timeout_sec
        self.retries = retries
        self.retry_delay_sec = retry_delay_sec
        self.send_profiles = send_profiles
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "HttpSignalProducer":
        """
        Build a producer for the model service configured in settings.

        All attempts and the pauses between them share the runner's
        per-method bound (producer_timeout_sec), so a retry after a timed
        out attempt still finishes before the runner abstains.
        """
        settings = settings or get_settings()
        if not settings.model_service_url:
            raise ConfigurationError("model_service_url is not configured")

        retries = settings.model_service_retries
        retry_delay_sec = kwargs.pop("retry_delay_sec", 0.5)
        budget = settings.producer_timeout_sec - retries * retry_delay_sec
        if budget <= 0:
            raise ConfigurationError(
                f"producer_timeout_sec={settings.producer_timeout_sec} leaves no time for "
                f"{retries + 1} attempts with {retry_delay_sec}s between them"
            )

        return cls(
            url=settings.model_service_url,
            token=settings.model_service_token,
            timeout_sec=budget * _ATTEMPT_BUDGET_SHARE / (retries + 1),
            retries=retries,
            retry_delay_sec=retry_delay_sec,
            **kwargs,
        )

    def extract_signal(
        self,
        image: Any,
        method: str,
        categories: Sequence[str]
    ) -> Mapping[str, float]:
        """Blocking form; must not be called from inside a running event loop."""
        return asyncio.run(self.aextract_signal(image, method, categories))

    async def aextract_signal(
        self,
        image: Any,
        method: str,
        categories: Sequence[str]
    ) -> Mapping[str, float]:
        categories = list(categories)
        payload = {
            "method": method,
            "categories": categories,
            "image": self._encode_image(image),
        }
        if self.send_profiles:
            payload["profiles"] = {
                c: asdict(profile)
                for c in categories
                if (profile := get_brand_profile(c)) is not None
            }

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Signal-Method": method,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        last_error = None
        for attempt in range(self.retries + 1):
            try:
                response = await self._make_request(payload, headers)
                return self._parse_scores(response, categories)

            except httpx.TimeoutException:
                last_error = f"Timeout after {self.timeout_sec}s"
                logger.warning(f"Signal '{method}' timeout (attempt {attempt + 1})")
            except httpx.HTTPStatusError as e:
                last_error = f"HTTP {e.response.status_code}: {e.response.text[:200]}"
                logger.warning(f"Signal '{method}' HTTP error: {last_error} (attempt {attempt + 1})")
            except (httpx.HTTPError, ValueError) as e:
                last_error = str(e)
                logger.warning(f"Signal '{method}' error: {e} (attempt {attempt + 1})")

            if attempt < self.retries:
                await asyncio.sleep(self.retry_delay_sec)

        logger.error(
            f"Signal '{method}' failed after {self.retries + 1} attempts: {last_error}"
        )
        return {c: 0.0 for c in categories}

    async def _make_request(
        self,
        payload: Dict[str, Any],
        headers: Dict[str, str]
    ) -> Any:
        timeout = httpx.Timeout(self.timeout_sec)

        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            response = await client.post(self.url, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()

    @staticmethod
    def _encode_image(image: Any) -> Any:
        if isinstance(image, (bytes, bytearray)):
            return base64.b64encode(bytes(image)).decode("ascii")
        return str(image)

    @staticmethod
    def _parse_scores(response: Any, categories: Sequence[str]) -> Dict[str, float]:
        if not isinstance(response, dict) or not isinstance(response.get("scores"), dict):
            raise ValueError("response has no 'scores' mapping")
        scores = response["scores"]
        return {c: scores.get(c, 0.0) for c in categories}
