"""Cooperative scheduler for delayed feedback reverts.

Practice-mode exercises flash incorrect answers and revert them after a short
delay. Rather than spawning threads, reverts are queued here and fired when
the caller polls with run_due(), so every state change still happens on the
caller's thread, in order.
"""

import itertools
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field

from loguru import logger


@dataclass(order=True)
class _PendingRevert:
    deadline: float
    sequence: int
    key: Hashable = field(compare=False)
    callback: Callable[[], None] = field(compare=False)


class RevertScheduler:
    """Keyed, cancellable delayed callbacks driven by an injectable clock.

    Scheduling under a key that already has a pending callback replaces it,
    so the most recent flash of an item always gets the full delay.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._pending: dict[Hashable, _PendingRevert] = {}
        self._sequence = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def schedule(
        self, key: Hashable, delay_ms: int, callback: Callable[[], None]
    ) -> None:
        """Run callback once delay_ms has elapsed on the clock."""
        deadline = self._clock() + delay_ms / 1000.0
        self._pending[key] = _PendingRevert(
            deadline=deadline,
            sequence=next(self._sequence),
            key=key,
            callback=callback,
        )

    def cancel(self, key: Hashable) -> bool:
        """Drop the pending callback for key. Returns True if one existed."""
        return self._pending.pop(key, None) is not None

    def cancel_matching(self, predicate: Callable[[Hashable], bool]) -> int:
        """Drop every pending callback whose key satisfies predicate."""
        doomed = [key for key in self._pending if predicate(key)]
        for key in doomed:
            del self._pending[key]
        return len(doomed)

    def cancel_all(self) -> None:
        self._pending.clear()

    def run_due(self) -> int:
        """Fire all callbacks whose deadline has passed, oldest first.

        Returns:
            Number of callbacks fired.
        """
        now = self._clock()
        due = sorted(p for p in self._pending.values() if p.deadline <= now)
        fired = 0
        for pending in due:
            # A callback may have been cancelled or replaced by an earlier one
            if self._pending.get(pending.key) is not pending:
                continue
            del self._pending[pending.key]
            logger.debug(f"Firing revert for {pending.key!r}")
            pending.callback()
            fired += 1
        return fired
