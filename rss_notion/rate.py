"""Rate Governor: one token bucket shared by every feed worker.

Notion allows an average of 3 requests per second per integration
(https://developers.notion.com/reference/request-limits#rate-limits).
Tokens are released at a steady pace, one every `per / rate` seconds with
a burst of one, so no window of `per` seconds ever starts more than `rate`
calls. Callers reserve the next free slot under a lock and then sleep
outside it, which keeps grants exact when many threads call acquire().
"""
import threading
import time
from collections.abc import Callable
from typing import Optional

from rss_notion.errors import CancelledError

NOTION_RATE = 3        # requests
NOTION_PER = 1.0       # seconds


class RateGovernor:
    def __init__(
        self,
        rate: int = NOTION_RATE,
        per: float = NOTION_PER,
        clock: Callable[[], float] = time.monotonic,
    ):
        if rate <= 0 or per <= 0:
            raise ValueError("rate and per must be positive")
        self.rate = rate
        self.per = per
        self.interval = per / rate
        self._clock = clock
        self._lock = threading.Lock()
        self._next_slot: Optional[float] = None
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _claim(self, max_wait: Optional[float]) -> Optional[tuple[float, float]]:
        with self._lock:
            now = self._clock()
            slot = now if self._next_slot is None else max(now, self._next_slot)
            delay = slot - now
            if max_wait is not None and delay > max_wait:
                return None
            self._next_slot = slot + self.interval
            return slot, delay

    def reserve(self, max_wait: Optional[float] = None) -> Optional[float]:
        """Claim the next slot and return how long to wait for it.

        Returns None, claiming nothing, when the wait would exceed max_wait.
        """
        claim = self._claim(max_wait)
        return None if claim is None else claim[1]

    def acquire(self, timeout: Optional[float] = None) -> None:
        """Block until a token is granted.

        Raises CancelledError if cancel() is called while waiting (or was
        called before), or if the wait would be longer than `timeout`.
        """
        if self._cancelled.is_set():
            raise CancelledError("rate governor cancelled")
        claim = self._claim(timeout)
        if claim is None:
            raise CancelledError(f"no rate token available within {timeout}s")
        slot, delay = claim
        if delay > 0 and self._cancelled.wait(delay):
            with self._lock:
                # hand the slot back if nobody queued behind it
                if self._next_slot == slot + self.interval:
                    self._next_slot = slot
            raise CancelledError("rate governor cancelled while waiting")

    def cancel(self) -> None:
        """Wake every waiter with CancelledError; later acquires fail at once."""
        self._cancelled.set()
