"""Business-rule failures raised by the service layer.

Each subclass carries a stable ``code`` that the HTTP layer maps to a
status and echoes back in the error envelope.
"""


class ServiceError(Exception):
    """Base for all service errors."""
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(ServiceError):
    """A referenced user, TTR, invitation or roster entry does not exist."""
    code = "NOT_FOUND"


class PermissionDeniedError(ServiceError):
    """The caller lacks the role the operation requires."""
    code = "FORBIDDEN"


class InvalidArgumentError(ServiceError):
    code = "INVALID_ARGUMENT"


class AlreadyExistsError(ServiceError):
    code = "ALREADY_EXISTS"


class RosterFullError(ServiceError):
    """The TTR already has max_players players."""
    code = "TTR_FULL"


class InvalidOperationError(ServiceError):
    """The request is well-formed but not allowed in the current state."""
    code = "INVALID_OPERATION"


class AuthenticationError(ServiceError):
    """Bad credentials or an unusable token."""
    code = "UNAUTHORIZED"
