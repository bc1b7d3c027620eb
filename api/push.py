"""
Push API Endpoints

Only stores subscriptions per room; sending notifications is handled
elsewhere.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from storage import Settings, get_settings, get_store
from core.state_store import StateStore
from core.room_manager import RoomManager
from schemas import MessageResponse, PushSubscription, VapidKeyResponse
from api.deps import get_room_key

router = APIRouter(prefix="/api", tags=["push"])
logger = logging.getLogger(__name__)


@router.get("/vapid-public-key", response_model=VapidKeyResponse)
def get_vapid_public_key(settings: Settings = Depends(get_settings)):
    return VapidKeyResponse(public_key=settings.vapid_public_key)


@router.post("/subscribe", status_code=201, response_model=MessageResponse)
def subscribe(
    subscription: PushSubscription,
    room_key: str = Depends(get_room_key),
    store: StateStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    try:
        RoomManager.subscribe(
            store,
            room_key,
            subscription.model_dump(by_alias=True),
            limit=settings.max_push_subscriptions,
        )
        return MessageResponse(message="Subscription added successfully")
    except Exception as e:
        logger.error(f"Failed to add subscription for {room_key}: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})
