"""
Exceptions for the DevDost API.

Every error carries the HTTP status it maps to and a short machine code; the
handler in main.py renders them as ``{"error": code, "detail": message}``.
"""

from typing import Optional


class DevDostError(Exception):
    """Base exception for all DevDost errors."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class UnauthorizedError(DevDostError):
    """No resolvable identity behind the request."""

    status_code = 401
    code = "unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(DevDostError):
    """Identity is known but does not own the resource."""

    status_code = 403
    code = "forbidden"


class NotFoundError(DevDostError):
    """Referenced user, project or match does not exist (or is inactive)."""

    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class ValidationError(DevDostError):
    """Malformed input; ``field`` names the offending attribute when known."""

    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class LimitExceededError(ValidationError):
    """A per-user quota (e.g. active projects) would be exceeded."""

    code = "limit_exceeded"

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"You have reached the maximum limit of {limit} active projects")


class ConflictError(DevDostError):
    """A uniqueness race the store could not resolve."""

    status_code = 409
    code = "conflict"


class InternalError(DevDostError):
    """Storage unavailable or unexpected fault."""
