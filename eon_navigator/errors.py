"""Exceptions raised by the Navigator client and HTTP status classification."""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus

# Longest body excerpt embedded in exception messages
BODY_EXCERPT_LENGTH = 200


def _excerpt(body: str | None) -> str:
    if not body:
        return ""
    if len(body) <= BODY_EXCERPT_LENGTH:
        return body
    return body[:BODY_EXCERPT_LENGTH] + "..."


class EonError(Exception):
    """Base exception for all Navigator client errors."""


class TransportError(EonError):
    """No response was received (network, DNS, TLS or timeout)."""


class AuthenticationError(EonError):
    """The client-credentials exchange failed or was rejected."""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class MalformedTimestampError(EonError):
    """A timestamp field matched none of the known formats."""

    def __init__(self, raw: str):
        super().__init__(f"malformed timestamp: {raw!r}")
        self.raw = raw


class DecodeError(EonError):
    """A response was received but its body could not be decoded."""


class ErrorKind(Enum):
    """Classified HTTP failure."""

    NO_CONTENT = "no_content"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    TOO_MANY_REQUESTS = "too_many_requests"
    SERVER_ERROR = "server_error"
    UNEXPECTED_STATUS = "unexpected_status"


class ApiError(EonError):
    """A resource request returned a status other than 200."""

    kind = ErrorKind.UNEXPECTED_STATUS
    description = "unexpected status code"

    def __init__(self, message: str, status: int, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class NoContentError(ApiError):
    kind = ErrorKind.NO_CONTENT
    description = "no content available"


class NoCostDataError(NoContentError):
    """The costs endpoint answered 204."""

    def __init__(self, installation_id: str):
        super().__init__(
            f"no cost data available for installation {installation_id}",
            HTTPStatus.NO_CONTENT,
        )
        self.installation_id = installation_id


class BadRequestError(ApiError):
    kind = ErrorKind.BAD_REQUEST
    description = "bad request - check parameters"


class UnauthorizedError(ApiError):
    kind = ErrorKind.UNAUTHORIZED
    description = "unauthorized - check client credentials"


class NotFoundError(ApiError):
    kind = ErrorKind.NOT_FOUND
    description = "resource not found"


class TooManyRequestsError(ApiError):
    kind = ErrorKind.TOO_MANY_REQUESTS
    description = "too many requests - rate limit exceeded"


class ServerError(ApiError):
    kind = ErrorKind.SERVER_ERROR
    description = "server error"


class UnexpectedStatusError(ApiError):
    kind = ErrorKind.UNEXPECTED_STATUS
    description = "unexpected status code"


_STATUS_KINDS: dict[int, ErrorKind] = {
    HTTPStatus.NO_CONTENT: ErrorKind.NO_CONTENT,
    HTTPStatus.BAD_REQUEST: ErrorKind.BAD_REQUEST,
    HTTPStatus.UNAUTHORIZED: ErrorKind.UNAUTHORIZED,
    HTTPStatus.NOT_FOUND: ErrorKind.NOT_FOUND,
    HTTPStatus.TOO_MANY_REQUESTS: ErrorKind.TOO_MANY_REQUESTS,
    HTTPStatus.INTERNAL_SERVER_ERROR: ErrorKind.SERVER_ERROR,
}

_KIND_ERRORS: dict[ErrorKind, type[ApiError]] = {
    ErrorKind.NO_CONTENT: NoContentError,
    ErrorKind.BAD_REQUEST: BadRequestError,
    ErrorKind.UNAUTHORIZED: UnauthorizedError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.TOO_MANY_REQUESTS: TooManyRequestsError,
    ErrorKind.SERVER_ERROR: ServerError,
    ErrorKind.UNEXPECTED_STATUS: UnexpectedStatusError,
}


def classify_status(status: int) -> ErrorKind | None:
    """Map an HTTP status code to an error kind, None for 200."""
    if status == HTTPStatus.OK:
        return None
    return _STATUS_KINDS.get(status, ErrorKind.UNEXPECTED_STATUS)


def api_error(status: int, body: str, action: str) -> ApiError | None:
    """Build the exception for a failed request, None for 200.

    Args:
        status: HTTP status of the response
        body: Raw response body
        action: What was being attempted, e.g. "get installations"
    """
    kind = classify_status(status)
    if kind is None:
        return None
    error_cls = _KIND_ERRORS[kind]
    message = f"failed to {action}: {error_cls.description} (status {status})"
    excerpt = _excerpt(body)
    if excerpt:
        message = f"{message}: {excerpt}"
    return error_cls(message, status, body)
