"""
HTTP request / response schemas

Field names follow the JSON the browser client already expects
(camelCase), so aliases are used throughout.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ButtonStateResponse(_CamelModel):
    is_enabled: bool
    remaining_time: int
    last_increment_time: int


class RateLimitedResponse(_CamelModel):
    error: str = "Rate limited"
    remaining_time: int
    message: str


class ErrorResponse(BaseModel):
    error: str


class UserInfoResponse(BaseModel):
    username: str


class ImportResponse(BaseModel):
    success: bool
    message: str


class VapidKeyResponse(_CamelModel):
    public_key: str


class PushSubscription(BaseModel):
    """Browser PushSubscription JSON; only `endpoint` is interpreted."""
    model_config = ConfigDict(extra="allow")

    endpoint: str
    expiration_time: Optional[Any] = Field(default=None, alias="expirationTime")
    keys: Dict[str, str] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    message: str
