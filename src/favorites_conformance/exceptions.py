"""Custom exceptions for the favorites conformance suite.

This module defines the exception hierarchy used by the client and the
scenario runner to report why a scenario failed: the transport broke, the
session could not be acquired, the service answered with an unexpected
status, or the response body did not have the expected shape or values.

None of these errors is recovered locally. Every one of them carries the
raw response body (where there is one) so a failed scenario can be triaged
from the test report alone.

Examples:
    Reporting an unexpected status::

        from favorites_conformance.exceptions import UnexpectedStatusError

        if response.status_code != scenario.expected_status:
            raise UnexpectedStatusError(
                message=f"Expected {scenario.expected_status}, got {response.status_code}",
                expected=scenario.expected_status,
                observed=response.status_code,
                body=response.text,
            )

    Wrapping a transport failure::

        from favorites_conformance.exceptions import TransportFailure

        try:
            response = http.post(path, content=body)
        except httpx.TransportError as e:
            raise TransportFailure(message=f"POST {path} failed: {e}", cause=e) from e
"""

from typing import Any


class ConformanceError(Exception):
    """Base exception for all conformance-suite errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class TransportFailure(ConformanceError):
    """The HTTP exchange itself failed before a response was received.

    Raised for connection errors, DNS failures, timeouts and protocol
    errors. The request is never retried.

    Attributes:
        message: Human-readable error description.
        cause: The underlying transport exception.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize the transport failure.

        Args:
            message: Human-readable error description.
            cause: The underlying transport exception.
        """
        super().__init__(message)
        self.cause = cause


class SessionAcquisitionError(ConformanceError):
    """The token endpoint did not yield a session credential.

    Raised when the token endpoint answers with a non-2xx status, or
    answers successfully without setting a cookie.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status returned by the token endpoint.
        body: Raw response body.
    """

    def __init__(self, message: str, status_code: int, body: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UnexpectedStatusError(ConformanceError):
    """The service returned a status other than the one the scenario expects.

    Attributes:
        message: Human-readable error description.
        expected: Status code the scenario expects.
        observed: Status code the service returned.
        body: Raw response body.

    Examples:
        >>> error = UnexpectedStatusError("mismatch", expected=400, observed=200, body="{}")
        >>> error.observed
        200
    """

    def __init__(self, message: str, expected: int, observed: int, body: str) -> None:
        super().__init__(message)
        self.expected = expected
        self.observed = observed
        self.body = body


class ResponseShapeError(ConformanceError):
    """A success body could not be read as a favorite spot.

    Raised when the body is not JSON, lacks a required field, carries a
    field of the wrong type, or carries a ``created_at`` that is not in
    one of the two accepted timestamp layouts.

    Attributes:
        message: Human-readable error description.
        body: Raw response body.
        cause: The underlying parsing or validation exception.
    """

    def __init__(self, message: str, body: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.body = body
        self.cause = cause


class ExpectationError(ConformanceError):
    """A well-formed success body carried an unexpected field value.

    Attributes:
        message: Human-readable error description.
        field: Name of the mismatching field.
        expected: Value the scenario expects.
        observed: Value the service returned.
        body: Raw response body.
    """

    def __init__(
        self,
        message: str,
        field: str,
        expected: Any,
        observed: Any,
        body: str,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.expected = expected
        self.observed = observed
        self.body = body
