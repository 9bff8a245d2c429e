"""Cancellable delayed-task scheduler owned by a game session.

Time only moves when the host calls ``advance(delta_ms)``, so every
timer callback runs on the host loop between frames, never concurrently
with input handling. Resetting a session cancels its scheduler as a
unit, which keeps stale callbacks away from a superseded session.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import itertools
import logging

logger = logging.getLogger(__name__)


@dataclass
class TimerHandle:
    """A pending one-shot or repeating callback."""

    callback: Callable[[], None]
    due_ms: float
    interval_ms: Optional[float] = None
    group: str = "default"
    order: int = 0
    cancelled: bool = field(default=False, repr=False)

    @property
    def repeating(self) -> bool:
        return self.interval_ms is not None

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Elapsed-time driven timer wheel.

    Callbacks due inside one ``advance`` window fire in (due time, arm order)
    order, and the scheduler clock reads the due time while they run.
    Repeating timers catch up when one large delta spans several intervals.
    """

    def __init__(self, name: str = "scheduler") -> None:
        self.name = name
        self._now: float = 0.0
        self._timers: List[TimerHandle] = []
        self._counter = itertools.count()

    @property
    def now_ms(self) -> float:
        """Scheduler clock in milliseconds since creation."""
        return self._now

    def call_later(
        self,
        delay_ms: float,
        callback: Callable[[], None],
        group: str = "default",
    ) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``."""
        handle = TimerHandle(
            callback=callback,
            due_ms=self._now + max(0.0, delay_ms),
            group=group,
            order=next(self._counter),
        )
        self._timers.append(handle)
        return handle

    def call_every(
        self,
        interval_ms: float,
        callback: Callable[[], None],
        group: str = "default",
    ) -> TimerHandle:
        """Run ``callback`` every ``interval_ms``, first after one interval."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        handle = TimerHandle(
            callback=callback,
            due_ms=self._now + interval_ms,
            interval_ms=interval_ms,
            group=group,
            order=next(self._counter),
        )
        self._timers.append(handle)
        return handle

    def cancel(self, handle: TimerHandle) -> bool:
        """Cancel one timer. Returns False if it was already gone."""
        if handle.cancelled or handle not in self._timers:
            return False
        handle.cancel()
        self._timers.remove(handle)
        return True

    def cancel_group(self, group: str) -> int:
        """Cancel every timer in ``group``. Returns number cancelled."""
        doomed = [t for t in self._timers if t.group == group]
        for handle in doomed:
            handle.cancel()
            self._timers.remove(handle)
        if doomed:
            logger.debug(f"{self.name}: cancelled {len(doomed)} timer(s) in group {group}")
        return len(doomed)

    def cancel_all(self) -> int:
        """Cancel every pending timer."""
        count = len(self._timers)
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
        return count

    def pending(self, group: Optional[str] = None) -> int:
        """Number of live timers, optionally within one group."""
        if group is None:
            return len(self._timers)
        return sum(1 for t in self._timers if t.group == group)

    def groups(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for handle in self._timers:
            counts[handle.group] = counts.get(handle.group, 0) + 1
        return counts

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward and fire everything that came due.

        Returns:
            Number of callbacks fired
        """
        target = self._now + max(0.0, delta_ms)
        fired = 0

        while True:
            handle = self._next_due(target)
            if handle is None:
                break

            self._now = handle.due_ms
            if handle.repeating:
                handle.due_ms += handle.interval_ms
            else:
                self._timers.remove(handle)
                handle.cancelled = True

            handle.callback()
            fired += 1

        self._now = target
        return fired

    def _next_due(self, target: float) -> Optional[TimerHandle]:
        due = [t for t in self._timers if not t.cancelled and t.due_ms <= target]
        if not due:
            return None
        return min(due, key=lambda t: (t.due_ms, t.order))
