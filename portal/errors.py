"""
Domain errors raised by services and mapped to HTTP responses in portal.api.
"""


class PortalError(Exception):
    status_code = 500
    detail = "Internal Server Error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class NotFoundError(PortalError):
    status_code = 404
    detail = "Not found"


class UnauthorizedError(PortalError):
    status_code = 401
    detail = "Authentication required"


class ForbiddenError(PortalError):
    status_code = 403
    detail = "Not authorized"


class ConflictError(PortalError):
    status_code = 400
    detail = "Conflict"


class StoreFailure(PortalError):
    """A persistence or blob operation failed. Clients get a generic message; the cause is logged."""

    status_code = 500
    detail = "Operation failed"
