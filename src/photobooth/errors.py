"""Error taxonomy shared by services and the HTTP layer."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Tag for a failed operation, used in per-style outcomes."""

    VALIDATION = "VALIDATION_ERROR"
    AUTH = "AUTH_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM = "UPSTREAM_ERROR"
    STORAGE = "STORAGE_ERROR"
    TIMEOUT = "TIMEOUT_ERROR"
    INTERNAL = "INTERNAL_ERROR"


class PhotoboothError(Exception):
    """Base application error carrying an API code and HTTP status."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "statusCode": self.status_code,
        }


class ValidationError(PhotoboothError):
    """Missing or malformed input."""

    kind = ErrorKind.VALIDATION
    status_code = 400
    default_code = "VALIDATION_ERROR"


class AuthError(PhotoboothError):
    """Missing or invalid identity."""

    kind = ErrorKind.AUTH
    status_code = 401
    default_code = "UNAUTHORIZED"


class NotFoundError(PhotoboothError):
    """Entity absent or not owned by the caller."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_code = "NOT_FOUND"


class UpstreamError(PhotoboothError):
    """Generation service returned a non-2xx or malformed response."""

    kind = ErrorKind.UPSTREAM
    status_code = 502
    default_code = "UPSTREAM_ERROR"


class StorageError(PhotoboothError):
    """Object storage upload, download or signing failed."""

    kind = ErrorKind.STORAGE
    status_code = 500
    default_code = "STORAGE_ERROR"


class GenerationTimeoutError(PhotoboothError):
    """A generation job did not reach a terminal state in time."""

    kind = ErrorKind.TIMEOUT
    status_code = 504
    default_code = "GENERATION_TIMEOUT"
