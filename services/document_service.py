"""
Document service: repair raw room documents field by field

A document with a bad field is not thrown away. Each required field
that is missing or has the wrong type is replaced with its default,
and every other key is carried through untouched.
"""
import logging
import math
from typing import Any, Dict, List

from pydantic import ValidationError

from models import LogEntry, RoomState

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid count or timestamp;
    # json.loads turns 1e400 into inf and NaN into nan
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _coerce_log(raw_log: List[Any], room_key: str) -> List[Dict[str, Any]]:
    entries = []
    for item in raw_log:
        try:
            entries.append(LogEntry.model_validate(item).model_dump())
        except ValidationError as e:
            logger.warning(f"Dropping malformed log entry in room {room_key}: {e.error_count()} error(s)")
    return entries


def coerce_document(raw: Dict[str, Any], room_key: str) -> Dict[str, Any]:
    """
    Replace invalid required fields with defaults

    Rules:
    - count: not a number -> 0
    - log: not a list -> []; entries that aren't valid log entries are dropped
    - lastIncrementTime: not a number -> 0
    - pushSubscriptions: not a list -> []
    - accessCode: not a string -> room_key

    Args:
        raw: decoded JSON object
        room_key: partition key the document belongs to

    Returns:
        A new dict; `raw` is not modified

    Example:
        coerce_document({"count": "5", "log": None, "theme": "dark"}, "abc")
        -> {"count": 0, "log": [], "lastIncrementTime": 0,
            "pushSubscriptions": [], "accessCode": "abc", "theme": "dark"}
    """
    doc = dict(raw)
    repaired = []

    if _is_number(doc.get("count")) and doc["count"] >= 0:
        doc["count"] = int(doc["count"])
    else:
        doc["count"] = 0
        repaired.append("count")

    if isinstance(doc.get("log"), list):
        doc["log"] = _coerce_log(doc["log"], room_key)
    else:
        doc["log"] = []
        repaired.append("log")

    if _is_number(doc.get("lastIncrementTime")):
        doc["lastIncrementTime"] = int(doc["lastIncrementTime"])
    else:
        doc["lastIncrementTime"] = 0
        repaired.append("lastIncrementTime")

    if isinstance(doc.get("pushSubscriptions"), list):
        doc["pushSubscriptions"] = [sub for sub in doc["pushSubscriptions"] if isinstance(sub, dict)]
    else:
        doc["pushSubscriptions"] = []
        repaired.append("pushSubscriptions")

    if not isinstance(doc.get("accessCode"), str):
        doc["accessCode"] = room_key
        repaired.append("accessCode")

    if repaired:
        logger.warning(f"Repaired fields {repaired} in room {room_key}")

    return doc


def to_room_state(raw: Dict[str, Any], room_key: str) -> RoomState:
    """Coerce a raw document and build the RoomState model from it."""
    return RoomState.model_validate(coerce_document(raw, room_key))
