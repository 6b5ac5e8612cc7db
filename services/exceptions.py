"""
Domain exceptions for the To-Do List API.

Hierarchy:
    ToDoListError (base)
    ├── InvalidInput      -> 400
    ├── Unauthorized      -> 401
    ├── NotFound          -> 404
    ├── Conflict          -> 409
    └── StorageFailure    -> 500

The HTTP layer (api/errors.py) maps each class to its status code; services
only raise them.
"""
from __future__ import annotations

from typing import Optional


class ToDoListError(Exception):
    """Base exception carrying a caller-safe message and optional details."""

    error = "ERROR"
    status = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {"error": self.error, "message": self.message, "status": self.status}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInput(ToDoListError):
    error = "BAD_REQUEST"
    status = 400


class Unauthorized(ToDoListError):
    error = "UNAUTHORIZED"
    status = 401


class NotFound(ToDoListError):
    error = "NOT_FOUND"
    status = 404


class Conflict(ToDoListError):
    error = "CONFLICT"
    status = 409


class StorageFailure(ToDoListError):
    """Raised when the database fails; the driver message is never exposed."""

    error = "INTERNAL_ERROR"
    status = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("A storage error occurred")
