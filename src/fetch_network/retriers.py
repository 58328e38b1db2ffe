"""
Ready-made response validators and request restorers.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, Optional

from .types import RequestRestorer, TransportResponse

logger = logging.getLogger("fetch_network.retriers")

# Status codes that usually mean the credential expired
DEFAULT_REJECT_STATUS = (401,)


class StatusCodeValidator:
    """Rejects responses whose status code is in ``reject_status``."""

    def __init__(self, reject_status: Iterable[int] = DEFAULT_REJECT_STATUS) -> None:
        self.reject_status = frozenset(reject_status)

    def is_valid(self, response: TransportResponse) -> bool:
        return response.status_code not in self.reject_status


class CallableRestorer:
    """Adapts an async callable (e.g. ``token_store.refresh``) to ``RequestRestorer``."""

    def __init__(self, fn: Callable[[], Awaitable[None]]) -> None:
        self._fn = fn

    async def restore(self) -> None:
        await self._fn()


class CoalescingRestorer:
    """
    Shares one in-flight restore between concurrent callers.

    When several requests are rejected at the same time (for example all of
    them carried the same expired token), only the first caller runs the
    wrapped restorer; the others wait for that run and see its outcome.
    If every waiter is cancelled, the shared restore is cancelled too.

    Example:
        restorer = CoalescingRestorer(CallableRestorer(tokens.refresh))
        env = Environment(..., retriers=Retriers(StatusCodeValidator(), restorer))
    """

    def __init__(self, restorer: RequestRestorer) -> None:
        self._restorer = restorer
        self._task: Optional[asyncio.Future] = None
        self._waiters: Dict[asyncio.Future, int] = {}
        self.runs = 0

    @property
    def in_flight(self) -> bool:
        return self._task is not None

    def _clear(self, task: asyncio.Future) -> None:
        if self._task is task:
            self._task = None

    async def restore(self) -> None:
        if self._task is None:
            self._task = asyncio.ensure_future(self._restorer.restore())
            self._task.add_done_callback(self._clear)
            self.runs += 1
            logger.debug(f"CoalescingRestorer.restore: started run #{self.runs}")
        else:
            logger.debug(f"CoalescingRestorer.restore: joining in-flight run ({self._waiters.get(self._task, 0)} waiting)")

        task = self._task
        self._waiters[task] = self._waiters.get(task, 0) + 1
        try:
            await asyncio.shield(task)
        finally:
            self._waiters[task] -= 1
            if not self._waiters[task]:
                del self._waiters[task]
                if not task.done():
                    logger.debug("CoalescingRestorer.restore: all waiters cancelled, cancelling restore")
                    # Detach first so a caller arriving before cancellation completes starts a fresh run
                    self._clear(task)
                    task.cancel()
