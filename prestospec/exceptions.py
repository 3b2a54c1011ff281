from typing import Any, Optional

__all__ = (
    "ArgumentCountMismatchError",
    "ImproperConfigurationError",
    "InterpolationError",
    "NotSupportedError",
    "PrestoSpecError",
    "QueryError",
    "QueryFailedError",
    "SerializationError",
    "TransportError",
    "UnsupportedValueTypeError",
)


class PrestoSpecError(Exception):
    """Base exception class from which all prestospec exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``PrestoSpecError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(PrestoSpecError):
    """Improper Configuration error.

    Raised when connection parameters are missing or out of range.
    """


class NotSupportedError(PrestoSpecError):
    """The operation is not supported by the Presto protocol."""


class SerializationError(PrestoSpecError):
    """Encoding or decoding of an object failed."""


# -- Interpolation Errors --
class InterpolationError(PrestoSpecError):
    """A statement cannot be turned into literal query text as given.

    Catching this class is enough to fall back to another execution strategy.
    No partial query text is ever attached.
    """

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ArgumentCountMismatchError(InterpolationError):
    """Number of arguments differs from the number of placeholder markers."""

    expected: int
    received: int

    def __init__(self, expected: int, received: int, sql: Optional[str] = None) -> None:
        super().__init__(f"Expected {expected} argument(s) for {expected} placeholder(s), got {received}", sql)
        self.expected = expected
        self.received = received


class UnsupportedValueTypeError(InterpolationError):
    """An argument value cannot be rendered as a literal."""

    value_type: type
    position: Optional[int]

    def __init__(
        self, value_type: type, position: Optional[int] = None, reason: Optional[str] = None, sql: Optional[str] = None
    ) -> None:
        message = f"Unsupported argument type {value_type.__name__!r}"
        if position is not None:
            message = f"{message} at position {position}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, sql)
        self.value_type = value_type
        self.position = position


# -- Query Errors --
class QueryError(PrestoSpecError):
    """Base class for errors raised while submitting or polling a query."""


class TransportError(QueryError):
    """The HTTP exchange with the coordinator failed."""


class QueryFailedError(QueryError):
    """The coordinator rejected the query or reported a failed state.

    The error payload is attached as-is; it is not interpreted.
    """

    error: Optional[Any]
    status_code: Optional[int]
    query_id: Optional[str]

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error: Optional[Any] = None,
        status_code: Optional[int] = None,
        query_id: Optional[str] = None,
    ) -> None:
        if message is None:
            message = getattr(error, "message", None) or "Query failed."
        super().__init__(detail=message)
        self.error = error
        self.status_code = status_code
        self.query_id = query_id
