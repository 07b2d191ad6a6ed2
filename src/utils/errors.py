"""Application error taxonomy.

Services raise these; ``src.middleware.error_handler`` turns them into the
standard JSON error envelope, and the realtime hub maps the socket-relevant
ones onto close codes.
"""


class AppError(Exception):
    status_code = 500
    error_type = "internal_error"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(AppError):
    status_code = 401
    error_type = "authentication_error"
    default_message = "Invalid or expired token"


class AuthorizationError(AppError):
    status_code = 403
    error_type = "forbidden"
    default_message = "You are not allowed to perform this action"


class InvalidRequestError(AppError):
    status_code = 400
    error_type = "validation_error"
    default_message = "Invalid request"


class NotFoundError(AppError):
    status_code = 404
    error_type = "not_found"
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    error_type = "conflict"
    default_message = "Conflict"


class ProtocolViolation(AppError):
    """A socket client broke the messaging protocol (e.g. spoofed its sender id)."""

    status_code = 400
    error_type = "protocol_violation"
    default_message = "Protocol violation"
