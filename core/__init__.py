"""
Core business logic

This package holds everything that touches room state:
- StateStore: load / repair / persist / recover one room document
- RoomManager: increment, delete, button state, import and export
- Locks: per-room concurrency control
- Exceptions: the error taxonomy shared with the API layer
"""
