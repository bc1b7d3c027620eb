"""
Data API Endpoints: backup and restore of a room document
"""
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
import logging

from storage import get_store
from core.state_store import StateStore
from core.room_manager import RoomManager
from core.exceptions import InvalidState
from schemas import ImportResponse
from api.deps import get_room_key

router = APIRouter(prefix="/api", tags=["data"])
logger = logging.getLogger(__name__)


@router.get("/export-data")
def export_data(
    room_key: str = Depends(get_room_key),
    store: StateStore = Depends(get_store),
):
    """Download the raw room document."""
    try:
        state = RoomManager.export_data(store, room_key)
        return JSONResponse(
            content=state.to_document(),
            headers={"Content-Disposition": 'attachment; filename="snack-counter-data.json"'},
        )
    except Exception as e:
        logger.error(f"Export failed for {room_key}: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to export data"})


@router.post("/import-data", response_model=ImportResponse)
def import_data(
    payload: Any = Body(default=None),
    room_key: str = Depends(get_room_key),
    store: StateStore = Depends(get_store),
):
    """
    Replace the room document with an uploaded one

    Invalid field types are reset to defaults, the same way a damaged
    document on disk is repaired when it is loaded.
    """
    try:
        state = RoomManager.import_data(store, room_key, payload)
        return ImportResponse(
            success=True,
            message=f"Imported {state.count} snacks and {len(state.log)} log entries",
        )

    except InvalidState:
        return JSONResponse(status_code=400, content={"error": "Invalid data format"})
    except Exception as e:
        logger.error(f"Import error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to import data"})
