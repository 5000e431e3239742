"""Fan-out of newly created matches to external subsystems (referrals, chat)."""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchCreated:
    match_id: str
    user1_id: str
    user2_id: str
    compatibility_score: Optional[int]
    created_at: datetime


MatchListener = Callable[[MatchCreated], Awaitable[None]]

_listeners: List[MatchListener] = []
_pending: Set[asyncio.Task] = set()


def register_listener(listener: MatchListener) -> MatchListener:
    """Usable as a decorator."""
    if listener not in _listeners:
        _listeners.append(listener)
    return listener


def unregister_listener(listener: MatchListener) -> None:
    if listener in _listeners:
        _listeners.remove(listener)


def clear_listeners() -> None:
    _listeners.clear()


async def _deliver(listener: MatchListener, event: MatchCreated) -> None:
    try:
        await listener(event)
    except Exception:  # noqa: BLE001
        logger.exception("Match listener %r failed for match %s", listener, event.match_id)


def publish(event: MatchCreated) -> None:
    """Schedules every listener in the background; the swipe response never waits for them."""
    for listener in list(_listeners):
        task = asyncio.create_task(_deliver(listener, event))
        _pending.add(task)
        task.add_done_callback(_pending.discard)


async def drain() -> None:
    """Waits for deliveries still in flight (shutdown and tests)."""
    if _pending:
        await asyncio.gather(*list(_pending))
