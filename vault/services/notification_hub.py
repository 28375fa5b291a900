"""Per-namespace publish/subscribe registry for live viewers."""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Set

from common.logging_config import get_logger

logger = get_logger(__name__)


class EventSink(Protocol):
    """A live connection that receives JSON events (e.g. a FastAPI WebSocket)."""

    async def send_json(self, data: Any) -> None:
        ...

    async def close(self) -> None:
        ...


class NotificationHub:
    """
    Registry of subscription groups keyed by user namespace.

    Membership changes are guarded by a registry lock. Each non-empty group
    also has its own lock that serializes publishes, so events for one user
    reach every subscriber in publish order. Delivery is best-effort: a sink
    that fails or stalls past ``send_timeout`` is dropped from all of its
    groups and closed, which tells the client to reconnect and re-sync.
    """

    def __init__(self, send_timeout: float = 5.0):
        self.send_timeout = send_timeout
        self._groups: Dict[str, Set[EventSink]] = {}
        self._group_locks: Dict[str, asyncio.Lock] = {}
        self._registry_lock = asyncio.Lock()

    async def subscribe(
        self,
        sink: EventSink,
        user: str,
        on_join: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        """
        Join a sink to a user's group.

        ``on_join`` runs while the group's publish lock is held, so a snapshot
        sent from it cannot interleave with a concurrent publish.
        """
        async with self._registry_lock:
            lock = self._group_locks.setdefault(user, asyncio.Lock())
        async with lock:
            async with self._registry_lock:
                self._group_locks.setdefault(user, lock)
                members = self._groups.setdefault(user, set())
                members.add(sink)
                viewers = len(members)
            logger.info(f"Viewer joined [user={user}] [viewers={viewers}]")
            if on_join is not None:
                await on_join()

    async def unsubscribe(self, sink: EventSink, user: str) -> None:
        async with self._registry_lock:
            self._discard(sink, user)

    async def unsubscribe_all(self, sink: EventSink) -> None:
        async with self._registry_lock:
            for user in list(self._groups):
                self._discard(sink, user)

    def _discard(self, sink: EventSink, user: str) -> None:
        members = self._groups.get(user)
        if members is None or sink not in members:
            return
        members.discard(sink)
        if not members:
            del self._groups[user]
            self._group_locks.pop(user, None)
        logger.info(f"Viewer left [user={user}]")

    async def subscriber_count(self, user: str) -> int:
        async with self._registry_lock:
            return len(self._groups.get(user, ()))

    async def publish(self, user: str, event: Dict[str, Any]) -> int:
        """
        Deliver an event to every sink currently subscribed to ``user``.

        Returns:
            Number of sinks the event was delivered to
        """
        async with self._registry_lock:
            if not self._groups.get(user):
                return 0
            lock = self._group_locks.setdefault(user, asyncio.Lock())

        async with lock:
            async with self._registry_lock:
                sinks = list(self._groups.get(user, ()))

            delivered = 0
            for sink in sinks:
                try:
                    await asyncio.wait_for(sink.send_json(event), timeout=self.send_timeout)
                    delivered += 1
                except Exception as e:
                    logger.warning(f"Dropping viewer after failed delivery [user={user}]: {e!r}")
                    await self.unsubscribe_all(sink)
                    await self._close(sink)

            return delivered

    async def _close(self, sink: EventSink) -> None:
        try:
            await asyncio.wait_for(sink.close(), timeout=self.send_timeout)
        except Exception as e:
            logger.debug(f"Closing dropped viewer failed: {e!r}")
