"""
Room Manager: every operation that reads or changes a room's counter

Responsibilities:
1. Increment (with the room-wide rate limit)
2. Delete a log entry
3. Button state for the UI
4. Push subscription registration
5. Export / import of the raw document

Rules:
- All file access goes through the StateStore
- Mutations run inside the room lock (load + persist as one unit)
- If persist raises, the mutation did not happen
"""
import logging
import time
from typing import Any, Dict, Optional

from pydantic import BaseModel

from models import RoomState
from core.locks import room_locked
from core.exceptions import InvalidState, LogEntryNotFound, RateLimited
from services import log_service, rate_limit_service
from services.document_service import to_room_state

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "Anonymous"
MAX_PUSH_SUBSCRIPTIONS = 50


def now_ms() -> int:
    return int(time.time() * 1000)


class ButtonState(BaseModel):
    enabled: bool
    remaining_seconds: int
    last_increment_time: int


class RoomManager:
    """Counter operations for a single room"""

    @staticmethod
    @room_locked
    def increment(
        store,
        room_key: str,
        actor: Optional[str] = None,
        now: Optional[int] = None,
        window_ms: int = rate_limit_service.RATE_LIMIT_MS,
        max_entries: int = log_service.MAX_LOG_ENTRIES,
        timestamp_format: str = log_service.DEFAULT_TIMESTAMP_FORMAT,
    ) -> RoomState:
        """
        Count one increment for the room

        Flow:
        1. Load the room
        2. Reject if the last increment is less than window_ms ago
        3. count += 1, prepend a log entry, truncate to max_entries
        4. Persist

        Args:
            store: StateStore
            room_key: partition key
            actor: display name for the log entry (default "Anonymous")
            now: epoch-millis, defaults to the current time

        Returns:
            The updated RoomState

        Raises:
            RateLimited: inside the window; nothing was written
            OSError / InvalidState: persist failed; nothing took effect
        """
        now = now_ms() if now is None else now
        state = store.load(room_key)

        if not rate_limit_service.is_enabled(state.last_increment_time, now, window_ms):
            raise RateLimited(
                rate_limit_service.remaining_seconds(state.last_increment_time, now, window_ms)
            )

        username = actor or DEFAULT_USERNAME
        state.count += 1
        state.last_increment_time = now
        entry = log_service.make_entry(now, state.count, username, timestamp_format)
        state.log = log_service.prepend_entry(state.log, entry, max_entries)

        store.persist(room_key, state)
        logger.info(f"Increment by {username} in room {room_key}: count={state.count}")
        return state

    @staticmethod
    @room_locked
    def delete_entry(store, room_key: str, entry_id: str) -> RoomState:
        """
        Remove one log entry and re-derive count and lastIncrementTime

        lastIncrementTime comes from the largest remaining id, not from
        log[0], since the deleted entry may have been the newest.

        Raises:
            LogEntryNotFound: no entry with this id; nothing was written
        """
        state = store.load(room_key)

        index = log_service.find_entry_index(state.log, entry_id)
        if index is None:
            raise LogEntryNotFound(entry_id)

        del state.log[index]
        state.count = len(state.log)
        state.last_increment_time = log_service.latest_increment_time(state.log)

        store.persist(room_key, state)
        logger.info(f"Deleted log entry {entry_id} in room {room_key}: count={state.count}")
        return state

    @staticmethod
    def button_state(
        store,
        room_key: str,
        now: Optional[int] = None,
        window_ms: int = rate_limit_service.RATE_LIMIT_MS,
    ) -> ButtonState:
        """Read-only view of whether the increment button is usable."""
        now = now_ms() if now is None else now
        state = store.load(room_key)
        return ButtonState(
            enabled=rate_limit_service.is_enabled(state.last_increment_time, now, window_ms),
            remaining_seconds=rate_limit_service.remaining_seconds(
                state.last_increment_time, now, window_ms
            ),
            last_increment_time=state.last_increment_time,
        )

    @staticmethod
    @room_locked
    def subscribe(
        store,
        room_key: str,
        subscription: Dict[str, Any],
        limit: int = MAX_PUSH_SUBSCRIPTIONS,
    ) -> RoomState:
        """
        Register a push subscription for the room

        A subscription with the same endpoint is replaced. Only the
        `limit` most recent subscriptions are kept.
        """
        state = store.load(room_key)
        endpoint = subscription.get("endpoint")
        subscriptions = [
            sub for sub in state.push_subscriptions if sub.get("endpoint") != endpoint
        ]
        subscriptions.append(subscription)
        state.push_subscriptions = subscriptions[-limit:]

        store.persist(room_key, state)
        logger.info(
            f"Push subscription added for room {room_key} "
            f"({len(state.push_subscriptions)} total)"
        )
        return state

    @staticmethod
    def export_data(store, room_key: str) -> RoomState:
        return store.load(room_key)

    @staticmethod
    @room_locked
    def import_data(store, room_key: str, payload: Any) -> RoomState:
        """
        Replace the room's document with an uploaded one

        The payload is repaired with the same field rules as load.

        Raises:
            InvalidState: payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise InvalidState(f"Import payload for room {room_key} is not an object")

        state = to_room_state(payload, room_key)
        store.persist(room_key, state)
        logger.info(
            f"Imported {state.count} snacks and {len(state.log)} log entries into room {room_key}"
        )
        return state
