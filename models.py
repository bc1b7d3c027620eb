"""
Room document models

A room document is the JSON file persisted per access code. Keys are
stored in camelCase; unknown keys are kept so a round trip through the
store never drops data.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LogEntry(BaseModel):
    """One recorded increment. `id` is the creation time in epoch-millis."""
    model_config = ConfigDict(extra="allow")

    id: str
    timestamp: str
    count: int
    username: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _numeric_id_to_str(cls, value):
        # Hand-edited or imported documents may carry the id as a JSON number
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return value


class RoomState(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    access_code: str
    count: int = 0
    log: List[LogEntry] = Field(default_factory=list)
    last_increment_time: int = 0
    push_subscriptions: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def fresh(cls, access_code: str) -> "RoomState":
        return cls(access_code=access_code)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=False)
