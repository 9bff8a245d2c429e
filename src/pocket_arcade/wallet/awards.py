"""Fire-and-forget dispatch of point awards.

Games call ``award`` from their transition code and carry on; the wallet
call runs as an asyncio task and its outcome only produces events.
"""

import asyncio
import logging
from typing import List, Optional, Set, Tuple

from pocket_arcade.core.events import Event, EventBus, EventType, notification_event
from pocket_arcade.wallet.points_client import AwardResult, PointsService

logger = logging.getLogger(__name__)


class AwardDispatcher:
    """Sends award requests without blocking the host loop."""

    def __init__(self, service: PointsService, event_bus: EventBus):
        self.service = service
        self.event_bus = event_bus
        self._tasks: Set[asyncio.Task] = set()
        self._backlog: List[Tuple[int, str, str]] = []
        self.results: List[AwardResult] = []

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    @property
    def backlog(self) -> int:
        return len(self._backlog)

    def award(self, amount: int, reason: str, source: str = "arcade") -> bool:
        """Request an award. Returns True if a request was issued or queued."""
        if amount <= 0:
            return False

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running loop, queueing award of {amount} ({reason})")
            self._backlog.append((amount, reason, source))
            return True

        task = loop.create_task(self._send(amount, reason, source))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def flush(self) -> int:
        """Send awards queued while no loop was running."""
        pending, self._backlog = self._backlog, []
        for amount, reason, source in pending:
            await self._send(amount, reason, source)
        return len(pending)

    async def wait_idle(self) -> None:
        """Wait for every in-flight award to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        await self.wait_idle()
        await self.service.close()

    async def _send(self, amount: int, reason: str, source: str) -> Optional[AwardResult]:
        try:
            result = await self.service.award_points(amount, reason)
        except Exception as e:
            logger.exception(f"Points service raised: {e}")
            result = AwardResult(success=False, amount=amount, reason=reason, error=str(e))

        self.results.append(result)

        if result.success:
            self.event_bus.emit(Event(
                EventType.POINTS_AWARDED,
                data={"amount": amount, "reason": reason, "balance": result.balance},
                source=source,
            ))
            self.event_bus.emit(notification_event(
                "Points Earned!",
                f"You earned {amount} points!",
                source=source,
            ))
        else:
            logger.error(f"Award of {amount} points lost: {result.error}")
            self.event_bus.emit(Event(
                EventType.POINTS_AWARD_FAILED,
                data={"amount": amount, "reason": reason, "error": result.error},
                source=source,
            ))
            self.event_bus.emit(notification_event(
                "Couldn't save points",
                result.error or "Unknown error",
                variant="destructive",
                source=source,
            ))
        return result
