"""Per-trip admission locks.

Booking admission reads the committed seats of a trip and then inserts a
new booking. Both steps must run under one lock so that two requests for
the same trip cannot both pass the capacity check. Within one process the
lock is an ``asyncio.Lock`` keyed by trip id; across processes the trip row
is additionally locked with ``SELECT ... FOR UPDATE`` by the caller.
"""

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID


class TripLockRegistry:
    """Hands out one lock per trip id.

    Entries are weakly referenced, so a lock disappears once no request
    holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, trip_id: UUID) -> asyncio.Lock:
        """Get (or create) the lock guarding a trip."""
        lock = self._locks.get(trip_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[trip_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, trip_id: UUID) -> AsyncIterator[None]:
        """Hold the trip's lock for the duration of the block."""
        lock = self.lock_for(trip_id)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


trip_locks = TripLockRegistry()
