"""
Latency injection for the mock server.

``LatencySimulator`` is an HTTP middleware stage that delays every request by
a random duration between the configured minimum and maximum, emulating the
network and processing time of a real inference API.

The delay uses ``asyncio.sleep()``, so only the request that triggered it is
suspended; the event loop keeps serving other requests, which may therefore
complete out of arrival order.
"""

import asyncio
import logging
import random as random_module
from typing import Awaitable, Callable, Optional

from fastapi import Request, Response

logger = logging.getLogger(__name__)


class LatencySimulator:
    """
    Computes and applies a per-request artificial delay.

    Usage:
        simulator = LatencySimulator(min_latency=0.1, max_latency=0.5)
        app.middleware("http")(simulator)

    Delay rules (seconds):
        - min_latency <= 0: no delay
        - max_latency > min_latency: uniform in [min_latency, max_latency)
        - otherwise: exactly min_latency
    """

    def __init__(
        self,
        min_latency: float,
        max_latency: float,
        *,
        rng: Optional[random_module.Random] = None,
    ) -> None:
        """
        Args:
            min_latency: Minimum delay in seconds
            max_latency: Maximum delay in seconds
            rng: Random instance; inject a seeded one for deterministic tests
        """
        self.min_latency = min_latency
        self.max_latency = max_latency
        self._rng = rng if rng is not None else random_module.Random()

    def compute_delay(self) -> float:
        if self.min_latency <= 0:
            return 0.0
        if self.max_latency > self.min_latency:
            return self.min_latency + self._rng.random() * (self.max_latency - self.min_latency)
        return self.min_latency

    async def __call__(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        delay = self.compute_delay()
        if delay > 0:
            logger.debug("Delaying %s %s by %.3fs", request.method, request.url.path, delay)
            await asyncio.sleep(delay)
        return await call_next(request)
