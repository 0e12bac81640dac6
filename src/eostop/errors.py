"""Pipeline errors and their classification into display messages."""

import asyncio

from eostop.config import ErrorCategory, ErrorMessages

ACCOUNT_NOT_FOUND_STATUS = 500  # Chain API answers 500 for an unknown account


class PipelineError(Exception):
    """Base class for every error carried on the error channel."""


class ValidationFailed(PipelineError):
    """Raised when the entered account name is not valid."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid account name: {text!r}")
        self.text = text


class LookupFailed(PipelineError):
    """
    Raised when the account lookup fails.

    Attributes:
        status_code: HTTP status code reported by the lookup, if any.
        is_network_failure: True when the lookup never reached the server.
        underlying: The original exception, if this one wraps another.
    """

    def __init__(
        self,
        message: str = "Account lookup failed",
        *,
        status_code: int | None = None,
        is_network_failure: bool = False,
        underlying: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_network_failure = is_network_failure
        self.underlying = underlying

    @classmethod
    def from_exception(cls, exc: BaseException) -> "LookupFailed":
        """
        Normalize any exception raised by a lookup into a LookupFailed.

        OSError subclasses (ConnectionError, TimeoutError, ...) and asyncio
        timeouts count as network failures. An integer ``status_code``
        attribute on the exception or on its ``response`` is carried over.
        """
        if isinstance(exc, LookupFailed):
            return exc
        return cls(
            str(exc) or type(exc).__name__,
            status_code=_status_code_of(exc),
            is_network_failure=isinstance(exc, (OSError, asyncio.TimeoutError)),
            underlying=exc,
        )


def _status_code_of(exc: BaseException) -> int | None:
    for holder in (exc, getattr(exc, "response", None)):
        code = getattr(holder, "status_code", None)
        if isinstance(code, int) and not isinstance(code, bool):
            return code
    return None


def classify_error(error: BaseException | None) -> ErrorCategory | None:
    """Map an error channel value to its display category (None clears)."""
    if error is None:
        return None
    if isinstance(error, ValidationFailed):
        return ErrorCategory.VALIDATION_FAILED
    if isinstance(error, LookupFailed):
        if error.status_code == ACCOUNT_NOT_FOUND_STATUS:
            return ErrorCategory.ACCOUNT_NOT_FOUND
        if error.is_network_failure:
            return ErrorCategory.CONNECTION_DOWN
    return ErrorCategory.GENERIC


def error_message(error: BaseException | None, messages: ErrorMessages) -> str | None:
    """Get the display message for an error channel value."""
    category = classify_error(error)
    if category is None:
        return None
    return messages.for_category(category)
