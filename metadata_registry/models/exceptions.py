"""
Metadata registry exception hierarchy
Local precondition failures and remote failures are kept in separate branches
"""

from typing import Any, Optional


class MetadataRegistryError(Exception):
    """Root of every error raised by this package"""
    pass


class InvalidArgumentError(MetadataRegistryError, ValueError):
    """A required argument is missing or empty

    Raised before any request is sent. Never retried.
    """

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        self.message = message or f"'{argument}' must be a non-empty value"
        super().__init__(self.message)


class FieldTypeMismatchError(MetadataRegistryError, TypeError):
    """A value does not fit the declared field value type"""

    def __init__(self, field_type: Any, value: Any, message: Optional[str] = None):
        self.field_type = field_type
        self.value = value
        self.message = message or (
            f"value {value!r} ({type(value).__name__}) is not valid for a "
            f"'{getattr(field_type, 'value', field_type)}' field"
        )
        super().__init__(self.message)


class ConfigurationError(MetadataRegistryError):
    """Client settings are incomplete or inconsistent"""
    pass


class TransportError(MetadataRegistryError):
    """The request could not be exchanged with the server

    The underlying httpx exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, method: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.method = method
        self.url = url


class RemoteApiError(MetadataRegistryError):
    """The server answered with an error status

    ``message`` and ``payload`` are what the server sent, unmodified.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        payload: Any = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload
        self.method = method
        self.url = url


class BadRequestError(RemoteApiError):
    """Server-side validation rejected the request (400)"""
    pass


class AuthorizationError(RemoteApiError):
    """Credentials missing, invalid or not allowed (401/403)"""
    pass


class NotFoundError(RemoteApiError):
    """Unknown field or datasource entry (404)"""
    pass


class ConflictError(RemoteApiError):
    """Duplicate external id or concurrent modification (409)"""
    pass


class RateLimitedError(RemoteApiError):
    """Too many requests (420/429)"""
    pass


class ServerError(RemoteApiError):
    """Server-side failure (5xx)"""
    pass


_STATUS_ERRORS = {
    400: BadRequestError,
    401: AuthorizationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    420: RateLimitedError,
    429: RateLimitedError,
}


def error_for_status(status_code: int) -> type:
    """Pick the RemoteApiError subclass matching an HTTP status"""
    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code]
    if status_code >= 500:
        return ServerError
    return RemoteApiError
