"""
Request dependencies shared by the API routers

The access code selects the room. It comes from the `access` query
parameter or the `accessCode` cookie set by the login page.
"""
import re
from typing import Optional

from fastapi import Cookie, HTTPException, Query

from services.room_resolver import is_valid_access_code, resolve_room_key
from storage import get_settings

_USERNAME_STRIP = re.compile(r"[<>\"'&]")


class AccessDenied(HTTPException):
    def __init__(self):
        super().__init__(status_code=401, detail="Access code required")


def get_room_key(
    access: Optional[str] = Query(default=None),
    access_code: Optional[str] = Cookie(default=None, alias="accessCode"),
) -> str:
    code = access or access_code
    if not is_valid_access_code(code):
        raise AccessDenied()
    return resolve_room_key(code)


def clean_username(username: Optional[str]) -> Optional[str]:
    """Trim, cap at 50 characters and strip HTML-sensitive characters."""
    if not username:
        return None
    cleaned = _USERNAME_STRIP.sub("", username.strip()[:50])
    return cleaned or None


def get_username(username: Optional[str] = Cookie(default=None)) -> str:
    return clean_username(username) or get_settings().default_username
