"""Background refetch that keeps expiry labels current.

Every `expiry_poll_seconds` the quotation list is invalidated and fetched
again. Ticks run on a fixed interval and do not wait on one another's
requests beyond the await in the loop.
"""

import asyncio
import logging

from ..config import settings

log = logging.getLogger("quotedesk.client")


class ExpirySweep:
    def __init__(self, board, interval: float | None = None):
        self.board = board
        self.interval = interval if interval is not None else settings.expiry_poll_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self._run())
        return self._task

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            state = await self.board.refresh()
            if state is not None and state.is_error:
                log.warning("Expiry refetch failed: %s", state.error)

    async def stop(self) -> None:
        """Cancel the loop, and with it the sweep's own refetch if one is in flight.

        Fetches started elsewhere on the board keep running.
        """
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
