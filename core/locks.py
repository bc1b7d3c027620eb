"""
Concurrency control

Provides per-room, in-process locking so a load -> mutate -> persist
sequence can't interleave with another request on the same room
(lost update: two increments both reading count N and both writing N+1).

Room locks are re-entrant: RoomManager holds the lock across an
operation and the StateStore takes it again for each load and persist.
A room's entry is dropped from the registry once nobody holds or waits
on it, so the registry stays bounded by the rooms currently in use.

Only covers threads of one process. Several workers sharing the same
data directory are not coordinated.
"""
import threading
from contextlib import contextmanager
from functools import wraps
from typing import Dict


class _RoomLock:
    """A re-entrant lock plus the number of callers holding or waiting on it"""

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


_registry_lock = threading.Lock()
_room_locks: Dict[str, _RoomLock] = {}


def _acquire_entry(lock_key: str) -> _RoomLock:
    with _registry_lock:
        entry = _room_locks.get(lock_key)
        if entry is None:
            entry = _RoomLock()
            _room_locks[lock_key] = entry
        entry.users += 1
        return entry


def _release_entry(lock_key: str, entry: _RoomLock) -> None:
    with _registry_lock:
        entry.users -= 1
        if entry.users == 0:
            del _room_locks[lock_key]


@contextmanager
def with_room_lock(store, room_key: str):
    """
    Hold a room's lock for the duration of the block

    Example:
        with with_room_lock(store, room_key):
            state = store.load(room_key)
            state.count += 1
            store.persist(room_key, state)

    Args:
        store: StateStore the room lives in
        room_key: partition key

    Note:
        The lock is keyed on the document path, so two stores pointing at
        different directories never contend.
    """
    lock_key = str(store.document_path(room_key))
    entry = _acquire_entry(lock_key)
    try:
        with entry.lock:
            yield
    finally:
        _release_entry(lock_key, entry)


def active_lock_count() -> int:
    """Number of rooms with a lock currently held or awaited."""
    with _registry_lock:
        return len(_room_locks)


def room_locked(func):
    """
    Decorator: run a RoomManager operation inside the room's lock

    Usage:
        @staticmethod
        @room_locked
        def increment(store, room_key, ...):
            ...

    The first two arguments must be (store, room_key), positionally or
    as keywords.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        store = args[0] if args else kwargs.get("store")
        room_key = args[1] if len(args) > 1 else kwargs.get("room_key")

        if store is None or room_key is None:
            raise ValueError(
                f"@room_locked requires (store, room_key) arguments, "
                f"but got args={args}, kwargs={kwargs}"
            )

        with with_room_lock(store, room_key):
            return func(*args, **kwargs)

    return wrapper
