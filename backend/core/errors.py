"""Error kinds raised by the access-control core and the entity services.

Each error carries the HTTP status the API layer answers with, so services
stay free of response building and routes simply let these propagate.
"""


class AppError(Exception):
    status_code = 500
    default_message = 'Internal server error.'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    """No credential, or one that is invalid, expired, or points at a deleted user."""
    status_code = 401
    default_message = 'Not authenticated.'


class ForbiddenError(AppError):
    """Valid identity whose role may not use the entry point."""
    status_code = 403
    default_message = 'Forbidden.'


class NotFoundError(AppError):
    """Entity is absent, or present but outside the caller's scope."""
    status_code = 404
    default_message = 'Not found.'


class ConflictError(AppError):
    status_code = 409
    default_message = 'Conflict.'


class ValidationFailedError(AppError):
    status_code = 400
    default_message = 'Invalid request.'


class InternalError(AppError):
    status_code = 500
    default_message = 'Internal server error.'
