"""
State Store: owns every room document on disk

Layout per room (inside data_dir):
- counter-data-<key>.json          canonical document
- counter-data-<key>.json.tmp      write staging
- counter-data-<key>.json.backup   last document before the latest write

Write sequence:
1. copy canonical -> backup (if canonical exists)
2. write new document -> tmp
3. os.replace(tmp, canonical)

A crash between 1 and 3 can leave the backup stale but never leaves the
canonical document half-written.

Nothing outside this class reads or writes room files. Every load and
persist runs under the room lock, so a first-access initialization can
never overwrite a concurrent mutation.
"""
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from models import RoomState
from core.exceptions import InvalidState, ParseFailure
from core.locks import with_room_lock
from services.document_service import to_room_state

logger = logging.getLogger(__name__)


class StateStore:
    """File-backed store of RoomState documents, one file per room"""

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)

    # ============ Paths ============

    def document_path(self, room_key: str) -> Path:
        return self.data_dir / f"counter-data-{room_key}.json"

    def temp_path(self, room_key: str) -> Path:
        path = self.document_path(room_key)
        return path.with_name(path.name + ".tmp")

    def backup_path(self, room_key: str) -> Path:
        path = self.document_path(room_key)
        return path.with_name(path.name + ".backup")

    def exists(self, room_key: str) -> bool:
        return self.document_path(room_key).exists()

    # ============ Read side ============

    @staticmethod
    def _read_document(path: Path):
        """
        Read and decode one JSON file

        Raises:
            ParseFailure: I/O error, bad encoding or malformed JSON
        """
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseFailure(path, e) from e

    def load(self, room_key: str) -> RoomState:
        """
        Load one room's state

        Flow:
        1. No document -> fresh state, persisted
        2. Read/parse failure -> recover from backup, else fresh state
        3. Not a JSON object -> fresh state, persisted
        4. Otherwise repair fields one by one and return

        ParseFailure never escapes this method.
        """
        with with_room_lock(self, room_key):
            return self._load_locked(room_key)

    def _load_locked(self, room_key: str) -> RoomState:
        path = self.document_path(room_key)
        if not path.exists():
            logger.info(f"Data file for {room_key} does not exist, initializing...")
            return self.initialize(room_key)

        try:
            raw = self._read_document(path)
        except ParseFailure as e:
            logger.warning(f"Error reading data file, attempting recovery: {e}")
            recovered = self.recover(room_key)
            if recovered is not None:
                logger.info(f"Restored room {room_key} from backup")
                return recovered
            logger.warning(f"No usable backup for room {room_key}, initializing fresh data")
            return self.initialize(room_key)

        if not isinstance(raw, dict):
            logger.error(f"Invalid data structure in {path}, reinitializing...")
            return self.initialize(room_key)

        return to_room_state(raw, room_key)

    def recover(self, room_key: str) -> Optional[RoomState]:
        """
        Read the backup document

        Returns:
            The (repaired) backup state, or None when the backup is
            missing, unreadable or not a JSON object
        """
        backup = self.backup_path(room_key)
        if not backup.exists():
            return None
        try:
            raw = self._read_document(backup)
        except ParseFailure as e:
            logger.error(f"Failed to restore from backup: {e}")
            return None
        if not isinstance(raw, dict):
            logger.error(f"Backup {backup} is not a JSON object")
            return None
        return to_room_state(raw, room_key)

    def initialize(self, room_key: str) -> RoomState:
        state = RoomState.fresh(room_key)
        self.persist(room_key, state)
        return state

    # ============ Write side ============

    def _backup_current(self, room_key: str) -> None:
        path = self.document_path(room_key)
        if not path.exists():
            return
        try:
            shutil.copyfile(path, self.backup_path(room_key))
        except OSError as e:
            # The new write still goes ahead; the backup is just stale
            logger.warning(f"Failed to back up {path} before write: {e}", exc_info=True)

    def persist(self, room_key: str, state: RoomState) -> None:
        """
        Atomically replace a room's document

        Raises:
            InvalidState: state is not a RoomState
            OSError: the write or rename failed; the canonical document
                is untouched and the temp file has been removed
        """
        with with_room_lock(self, room_key):
            self._persist_locked(room_key, state)

    def _persist_locked(self, room_key: str, state: RoomState) -> None:
        tmp = self.temp_path(room_key)
        try:
            if not isinstance(state, RoomState):
                raise InvalidState(f"Cannot persist {type(state).__name__} for room {room_key}")

            self.data_dir.mkdir(parents=True, exist_ok=True)
            self._backup_current(room_key)

            tmp.write_text(
                json.dumps(state.to_document(), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp, self.document_path(room_key))

            logger.info(
                f"Data saved for {room_key}: {state.count} snacks, {len(state.log)} log entries"
            )
        except Exception as e:
            logger.error(f"Error writing data file for {room_key}: {e}")
            if tmp.exists():
                try:
                    tmp.unlink()
                except OSError as cleanup_error:
                    logger.error(f"Failed to clean up temp file {tmp}: {cleanup_error}")
            raise
