"""
Counter API Endpoints

Responsibilities:
1. Read the room's counter and button state
2. Increment (429 while rate limited)
3. Delete a log entry (404 for unknown ids)
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from storage import Settings, get_settings, get_store
from core.state_store import StateStore
from core.room_manager import RoomManager
from core.exceptions import LogEntryNotFound, RateLimited
from schemas import ButtonStateResponse, ErrorResponse, RateLimitedResponse, UserInfoResponse
from api.deps import get_room_key, get_username

router = APIRouter(prefix="/api", tags=["counter"])
logger = logging.getLogger(__name__)


def _internal_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": "Internal error"})


@router.get("/counter")
def get_counter(
    room_key: str = Depends(get_room_key),
    store: StateStore = Depends(get_store),
):
    """Current RoomState of the caller's room."""
    try:
        return RoomManager.export_data(store, room_key).to_document()
    except Exception as e:
        logger.error(f"Failed to read counter for {room_key}: {e}", exc_info=True)
        return _internal_error()


@router.get("/button-state", response_model=ButtonStateResponse)
def get_button_state(
    room_key: str = Depends(get_room_key),
    store: StateStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    try:
        button = RoomManager.button_state(store, room_key, window_ms=settings.rate_limit_ms)
        return ButtonStateResponse(
            is_enabled=button.enabled,
            remaining_time=button.remaining_seconds,
            last_increment_time=button.last_increment_time,
        )
    except Exception as e:
        logger.error(f"Failed to get button state for {room_key}: {e}", exc_info=True)
        return _internal_error()


@router.post("/increment", responses={429: {"model": RateLimitedResponse}})
def increment(
    room_key: str = Depends(get_room_key),
    username: str = Depends(get_username),
    store: StateStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Count one snack for the room

    Returns:
        200 + RoomState on success
        429 + {error, remainingTime, message} inside the rate limit window
    """
    try:
        state = RoomManager.increment(
            store,
            room_key,
            actor=username,
            window_ms=settings.rate_limit_ms,
            max_entries=settings.max_log_entries,
            timestamp_format=settings.timestamp_format,
        )
        return state.to_document()

    except RateLimited as e:
        body = RateLimitedResponse(remaining_time=e.remaining_seconds, message=str(e))
        return JSONResponse(status_code=429, content=body.model_dump(by_alias=True))
    except Exception as e:
        logger.error(f"Failed to increment room {room_key}: {e}", exc_info=True)
        return _internal_error()


@router.delete("/log/{entry_id}", responses={404: {"model": ErrorResponse}})
def delete_log_entry(
    entry_id: str,
    room_key: str = Depends(get_room_key),
    store: StateStore = Depends(get_store),
):
    try:
        return RoomManager.delete_entry(store, room_key, entry_id).to_document()

    except LogEntryNotFound:
        return JSONResponse(status_code=404, content={"error": "Log entry not found"})
    except Exception as e:
        logger.error(f"Failed to delete log entry {entry_id}: {e}", exc_info=True)
        return _internal_error()


@router.get("/user-info", response_model=UserInfoResponse)
def get_user_info(username: str = Depends(get_username)):
    return UserInfoResponse(username=username)
