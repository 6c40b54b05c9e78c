"""Domain errors raised by services and translated to HTTP by endpoints."""


class AppError(Exception):
    """Base for all application errors."""


class ResourceNotFound(AppError):
    """Missing record, or one the caller does not own (reported the same way)."""


class InvalidPosition(AppError):
    """Reorder request below position 1."""


class InstanceNotFound(AppError):
    """Exercise instance id not present in the workout."""


class InvalidEmail(AppError):
    """Email fails the minimal address check."""


class AuthError(AppError):
    """Base for authentication failures. Callers show one generic message for all."""


class UserNotFound(AuthError):
    pass


class CredentialNotFound(AuthError):
    pass


class AuthenticationFailed(AuthError):
    """Challenge missing or the signed response did not verify."""
