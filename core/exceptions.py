"""
Custom exceptions

All business-logic errors live here so the API layer can map them
to HTTP responses in one place.
"""


class CounterException(Exception):
    """Base class for every counter service exception"""
    pass


# ============ Persistence ============

class InvalidState(CounterException):
    """A state handed to persist/import is not a document object"""
    pass


class ParseFailure(CounterException):
    """A room document could not be read or decoded"""
    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse {path}: {reason}")


# ============ Counter operations ============

class RateLimited(CounterException):
    """The room is still inside its rate limit window"""
    def __init__(self, remaining_seconds: int):
        self.remaining_seconds = remaining_seconds
        super().__init__(
            f"Please wait {remaining_seconds} seconds before the next snack!"
        )


class LogEntryNotFound(CounterException):
    """No log entry with the given id"""
    def __init__(self, entry_id):
        self.entry_id = entry_id
        super().__init__(f"Log entry {entry_id} not found")
