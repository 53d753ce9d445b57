"""Error taxonomy shared by the policy layer and the HTTP surface.

Every failure carries a stable machine-readable ``kind`` and a human-readable
message. ``NotFound`` covers both "does not exist" and "outside
the caller's scope".
"""

from typing import Any


class NovaError(Exception):
    """Base class for errors that map onto an API response."""

    kind = "Error"
    status_code = 500

    def __init__(self, message: str, *, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict:
        payload = {"error": self.kind, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class NotFound(NovaError):
    kind = "NotFound"
    status_code = 404


class ValidationError(NovaError):
    """Malformed input; ``details`` is a list of ``{"field", "message"}`` entries."""

    kind = "ValidationError"
    status_code = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls("Validation error", details=[{"field": field, "message": message}])


class Conflict(NovaError):
    kind = "Conflict"
    status_code = 409


class CapacityExceeded(NovaError):
    kind = "CapacityExceeded"
    status_code = 400

    def __init__(self, limit: int):
        super().__init__(f"Cannot exceed {limit} active students", details={"limit": limit})
        self.limit = limit


class Unauthenticated(NovaError):
    kind = "Unauthenticated"
    status_code = 401


class StoreUnavailable(NovaError):
    kind = "StoreUnavailable"
    status_code = 503
