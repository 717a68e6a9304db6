"""In-process change feed.

Writers publish a ``ChangeEvent`` after every insert, update or delete of a
row that clients watch. Websocket handlers subscribe to one table, optionally
narrowed by a ``column=eq.value`` filter, and drain their own queue.
"""

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel

ChangeType = Literal["INSERT", "UPDATE", "DELETE"]


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    type: ChangeType
    new: dict[str, Any] | None = None
    old: dict[str, Any] | None = None

    def to_message(self) -> dict[str, Any]:
        return {"table": self.table, "eventType": self.type, "new": self.new, "old": self.old}


@dataclass(frozen=True)
class RowFilter:
    column: str
    value: str

    @classmethod
    def parse(cls, expression: str | None) -> "RowFilter | None":
        """Parse ``column=eq.value``; a blank expression means no filter.

        Raises:
            ValueError: For any other operator or a malformed expression
        """
        if not expression:
            return None
        column, sep, rest = expression.partition("=")
        operator, dot, value = rest.partition(".")
        if not sep or not dot or not column or operator != "eq":
            raise ValueError(f"Unsupported filter: {expression}")
        return cls(column=column, value=value)

    def matches(self, event: ChangeEvent) -> bool:
        row = event.new if event.new is not None else event.old
        if row is None:
            return False
        return str(row.get(self.column)) == self.value


@dataclass(eq=False)
class Subscription:
    table: str
    row_filter: RowFilter | None
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)

    def wants(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        return self.row_filter is None or self.row_filter.matches(event)

    async def get(self) -> ChangeEvent:
        return await self.queue.get()


def _as_row(value: BaseModel | dict[str, Any] | None) -> dict[str, Any] | None:
    if value is None or isinstance(value, dict):
        return value
    return value.model_dump(mode="json")


class ChangeHub:
    def __init__(self) -> None:
        self._subscriptions: set[Subscription] = set()
        self._lock = threading.Lock()

    def subscribe(self, table: str, row_filter: RowFilter | None = None) -> Subscription:
        """Register a subscriber; must be called from the consuming event loop."""
        subscription = Subscription(
            table=table, row_filter=row_filter, loop=asyncio.get_running_loop()
        )
        with self._lock:
            self._subscriptions.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions.discard(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: ChangeEvent) -> int:
        """Queue ``event`` for every matching subscriber. Safe from any thread."""
        with self._lock:
            targets = [s for s in self._subscriptions if s.wants(event)]

        delivered = 0
        for subscription in targets:
            try:
                subscription.loop.call_soon_threadsafe(subscription.queue.put_nowait, event)
                delivered += 1
            except RuntimeError:
                logger.warning("Dropping subscriber on closed loop for {}", event.table)
                self.unsubscribe(subscription)
        return delivered

    def publish_change(
        self,
        table: str,
        change_type: ChangeType,
        new: BaseModel | dict[str, Any] | None = None,
        old: BaseModel | dict[str, Any] | None = None,
    ) -> int:
        return self.publish(
            ChangeEvent(table=table, type=change_type, new=_as_row(new), old=_as_row(old))
        )


def apply_notification_change(count: int, event: ChangeEvent) -> int:
    """Move an unread notification count in response to one change event."""
    new_read = (event.new or {}).get("is_read")
    old_read = (event.old or {}).get("is_read")

    if event.type == "INSERT":
        return count + (0 if new_read else 1)
    if event.type == "UPDATE":
        if old_read is False and new_read is True:
            return max(0, count - 1)
        if old_read is True and new_read is False:
            return count + 1
        return count
    if event.type == "DELETE" and old_read is False:
        return max(0, count - 1)
    return count


AUTH_CHANNEL = "auth"


def publish_auth_event(
    hub: ChangeHub, event: str, user_id: str, user: dict[str, Any] | None = None
) -> None:
    """Broadcast SIGNED_IN, SIGNED_OUT or USER_UPDATED for one user; never raises."""
    try:
        hub.publish_change(
            AUTH_CHANNEL, "INSERT", new={"event": event, "user_id": user_id, "user": user}
        )
    except Exception as e:
        logger.warning("Auth event {} not published: {}", event, e)
