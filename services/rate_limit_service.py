"""
Rate limit service: cooldown arithmetic for the increment action

The window is shared by the whole room; whoever increments last
blocks everyone until it elapses.
"""
import math

RATE_LIMIT_MS = 20000


def is_enabled(last_increment_time: int, now: int, window_ms: int = RATE_LIMIT_MS) -> bool:
    return (now - last_increment_time) >= window_ms


def remaining_seconds(last_increment_time: int, now: int, window_ms: int = RATE_LIMIT_MS) -> int:
    """
    Seconds left until the next increment is allowed

    Returns:
        0 when the window has elapsed, otherwise
        ceil((window_ms - elapsed) / 1000)

    Examples:
        remaining_seconds(0, 20000)          -> 0
        remaining_seconds(100000, 105000)    -> 15
        remaining_seconds(100000, 100001)    -> 20
    """
    elapsed = now - last_increment_time
    if elapsed >= window_ms:
        return 0
    return math.ceil((window_ms - elapsed) / 1000)
