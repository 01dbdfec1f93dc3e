import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from coachbook.core.config import settings
from coachbook.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Retry transient store failures a bounded number of times with a fixed delay.

    ``retries`` counts attempts after the first one, so ``retries=2`` means at
    most three calls. Only ``StoreUnavailableError`` is retried.
    """

    def __init__(self, retries: int | None = None, delay_seconds: float | None = None) -> None:
        self.retries = settings.store_retry_attempts if retries is None else retries
        self.delay_seconds = settings.store_retry_delay_seconds if delay_seconds is None else delay_seconds

    async def run(self, fn: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        name = getattr(fn, "__name__", type(fn).__name__)
        attempt = 0
        while True:
            try:
                return await fn(*args, **kwargs)
            except StoreUnavailableError as e:
                if attempt >= self.retries:
                    logger.error("%s failed after %d attempt(s): %s", name, attempt + 1, e)
                    raise
                attempt += 1
                logger.warning("Retry %d/%d for %s: %s", attempt, self.retries, name, e)
                await asyncio.sleep(self.delay_seconds)
