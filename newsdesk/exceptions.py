"""
Domain errors raised by the service layer.

Services raise these instead of ``HTTPException`` so they stay usable
outside a request; ``newsdesk.main`` maps each class onto the RPC error
envelope ``{"error": {"code": ..., "message": ...}}``.
"""


class NewsdeskError(Exception):
    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(NewsdeskError):
    """A referenced user, category, news article or comment does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class ConflictError(NewsdeskError):
    """A unique value (username, email or slug) is already taken."""

    code = "CONFLICT"
    status_code = 409


class InvalidInputError(NewsdeskError):
    """A value passed schema validation but is not acceptable to the operation."""

    code = "VALIDATION_ERROR"
    status_code = 422
