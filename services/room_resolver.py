"""
Room resolver: map an access code to a partition key

Pure computation. The key is embedded in a filename, so only
filesystem-safe characters survive.
"""
import re

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_ACCESS_CODE = re.compile(r"^[A-Za-z0-9_-]+$")


def resolve_room_key(access_code: str) -> str:
    """
    Derive the canonical partition key for an access code

    Every character outside [A-Za-z0-9_-] is replaced with "_".
    Resolving an already-canonical key returns it unchanged.

    Examples:
        resolve_room_key("team-a")    -> "team-a"
        resolve_room_key("team a/b")  -> "team_a_b"
    """
    return _UNSAFE_CHARS.sub("_", access_code)


def is_valid_access_code(access_code) -> bool:
    """True when the code is non-empty and already canonical."""
    return isinstance(access_code, str) and bool(_ACCESS_CODE.match(access_code))
