"""Service exceptions.

These exceptions are raised by the service layer and by the API helpers.
main.py registers handlers that turn them into HTTP responses.
"""

from typing import Iterable


class ServiceError(Exception):
    """Base service exception."""

    status_code = 500


class StorageError(ServiceError):
    """Sequence store or record store unreachable, or a constraint was violated."""

    status_code = 500


class NotFoundError(ServiceError):
    """Record id is unknown or was deleted."""

    status_code = 404


class ValidationError(ServiceError):
    """Input rejected before anything was persisted.

    Carries the names of the offending fields so the form can highlight them.
    """

    status_code = 422

    def __init__(self, message: str, fields: Iterable[str] = ()):
        self.fields = list(fields)
        super().__init__(message)


class AssetLoadError(ServiceError):
    """Logo or footer image could not be loaded; the render is aborted."""

    status_code = 500

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image asset {path}: {reason}")


class ConfigurationError(ServiceError):
    """A setting the request depends on (e.g. the notification mailbox) is not set."""

    status_code = 400
