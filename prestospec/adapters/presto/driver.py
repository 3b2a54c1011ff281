"""Presto driver.

Presto has no parameter binding channel, so every statement is interpolated
into literal text before it is POSTed to ``/v1/statement``. Results are then
retrieved by following ``nextUri`` continuations until none remain.
"""

import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Any, Optional

import httpx

from prestospec.adapters.presto._types import Column, StatementResponse, decode_statement_response
from prestospec.exceptions import NotSupportedError, QueryFailedError, TransportError
from prestospec.parameters.escaping import BINARY_ENCODING, BINARY_ERRORS
from prestospec.utils.logging import bind_query_id, get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from types import TracebackType

    from prestospec.adapters.presto.config import PrestoConfig
    from prestospec.parameters.template import QueryTemplate
    from prestospec.typing import ArgumentValue

__all__ = ("PrestoDriver", "PrestoResult", "PrestoStatement")

logger = get_logger("adapters.presto")

HTTP_OK = 200


class PrestoDriver:
    """Session against one coordinator, sharing an HTTP client."""

    __slots__ = ("config", "connection")

    def __init__(self, connection: httpx.Client, config: "PrestoConfig") -> None:
        self.connection = connection
        self.config = config

    def prepare(self, sql: str) -> "PrestoStatement":
        """Prepare ``sql`` for repeated execution with different arguments."""
        return PrestoStatement(self, self.config.template_cache.get(sql))

    def query(self, sql: str, *args: "ArgumentValue") -> "PrestoResult":
        """Interpolate ``args`` into ``sql``, submit it and return the result stream.

        Raises:
            ArgumentCountMismatchError: If the argument count is wrong.
            UnsupportedValueTypeError: If an argument cannot be rendered.
            QueryFailedError: If the coordinator rejects the query.
            TransportError: If the coordinator cannot be reached.
        """
        return self.prepare(sql).query(args)

    def execute(self, sql: str, *args: "ArgumentValue") -> Any:
        msg = "Presto statements can only be run with query()"
        raise NotSupportedError(msg)

    def begin(self) -> None:
        msg = "Presto does not support transactions"
        raise NotSupportedError(msg)

    def commit(self) -> None:
        msg = "Presto does not support transactions"
        raise NotSupportedError(msg)

    def rollback(self) -> None:
        msg = "Presto does not support transactions"
        raise NotSupportedError(msg)

    def submit(self, sql: str) -> StatementResponse:
        """POST literal query text and return the first protocol page.

        Raises:
            QueryFailedError: On a non-200 status or a FAILED state.
            TransportError: If the request cannot be sent.
            SerializationError: If the response body is not a statement response.
        """
        log_with_context(logger, logging.DEBUG, "Submitting Presto query", url=self.config.statement_url, sql=sql)
        body = sql.encode(BINARY_ENCODING, BINARY_ERRORS)
        return self._send("POST", self.config.statement_url, content=body, headers=self.config.headers)

    def fetch(self, uri: str) -> StatementResponse:
        """GET the page behind a continuation URI."""
        logger.debug("Polling %s", uri)
        return self._send("GET", uri)

    def cancel(self, uri: str) -> None:
        """DELETE a continuation URI, cancelling the query behind it."""
        logger.debug("Cancelling %s", uri)
        try:
            self.connection.request("DELETE", uri)
        except httpx.HTTPError as exc:
            msg = f"Failed to cancel query at {uri}: {exc}"
            raise TransportError(msg) from exc

    def _send(self, method: str, url: str, **kwargs: Any) -> StatementResponse:
        try:
            response = self.connection.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Presto request failed: %s %s", method, url)
            msg = f"{method} {url} failed: {exc}"
            raise TransportError(msg) from exc

        # Query errors come back as 200 with a FAILED state, other codes mean the request itself was refused.
        if response.status_code != HTTP_OK:
            msg = f"Presto responded with HTTP {response.status_code} to {method} {url}"
            raise QueryFailedError(msg, status_code=response.status_code)

        payload = decode_statement_response(response.content)
        if payload.failed:
            with bind_query_id(payload.id or None):
                logger.error("Presto query failed: %s", payload.error.message if payload.error else "no error payload")
            raise QueryFailedError(error=payload.error, status_code=response.status_code, query_id=payload.id or None)
        return payload


class PrestoStatement:
    """A prepared statement: a cached template bound to a driver."""

    __slots__ = ("driver", "template")

    def __init__(self, driver: PrestoDriver, template: "QueryTemplate") -> None:
        self.driver = driver
        self.template = template

    @property
    def sql(self) -> str:
        return self.template.sql

    @property
    def parameter_count(self) -> int:
        return self.template.parameter_count

    def query(self, args: "Sequence[ArgumentValue]" = ()) -> "PrestoResult":
        """Run the statement with one set of arguments.

        Interpolation errors are raised before anything is sent.
        """
        sql = self.template.interpolate(args)
        response = self.driver.submit(sql)
        time.sleep(self.driver.config.poll_interval)
        return PrestoResult(self.driver, response)

    def execute(self, args: "Sequence[ArgumentValue]" = ()) -> Any:
        msg = "Presto statements can only be run with query()"
        raise NotSupportedError(msg)

    def close(self) -> None:
        """Release the statement. Templates stay cached, so there is nothing to free."""

    def __repr__(self) -> str:
        return f"PrestoStatement(sql={self.sql!r}, parameter_count={self.parameter_count})"


class PrestoResult:
    """Rows of one query, fetched page by page as they are iterated.

    Rows are the JSON arrays sent by the coordinator, in column order.
    """

    __slots__ = ("_closed", "_columns", "_driver", "_next_uri", "_pending", "_query_id", "_state")

    def __init__(self, driver: PrestoDriver, response: StatementResponse) -> None:
        self._driver = driver
        self._query_id = response.id
        self._columns: Optional[list[Column]] = None
        self._next_uri: Optional[str] = None
        self._pending: deque[list[Any]] = deque()
        self._state = response.stats.state
        self._closed = False
        self._consume(response)

    @property
    def query_id(self) -> str:
        return self._query_id

    @property
    def state(self) -> str:
        """Last execution state reported by the coordinator."""
        return self._state

    @property
    def done(self) -> bool:
        """True once no continuation remains to be fetched."""
        return self._next_uri is None

    @property
    def columns(self) -> list[Column]:
        """Result columns, polling until the coordinator has reported them."""
        while self._columns is None and self._advance():
            pass
        return list(self._columns or ())

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def _consume(self, response: StatementResponse) -> None:
        self._state = response.stats.state
        self._next_uri = response.next_uri or None
        if self._columns is None and response.columns is not None:
            self._columns = response.columns
        if response.data:
            self._pending.extend(response.data)

    def _advance(self) -> bool:
        """Fetch the next page. Returns False when no continuation is left."""
        if self._next_uri is None:
            return False
        with bind_query_id(self._query_id or None):
            response = self._driver.fetch(self._next_uri)
        self._consume(response)
        if not response.data and self._next_uri is not None:
            time.sleep(self._driver.config.poll_interval)
        return True

    def __iter__(self) -> "Iterator[list[Any]]":
        while True:
            while self._pending:
                yield self._pending.popleft()
            if self._closed or not self._advance():
                return

    def fetchall(self) -> list[list[Any]]:
        """Fetch every remaining row."""
        return list(self)

    def close(self) -> None:
        """Stop fetching and cancel the query if it is still running."""
        if self._closed:
            return
        self._closed = True
        self._pending.clear()
        if self._next_uri is not None:
            uri, self._next_uri = self._next_uri, None
            with bind_query_id(self._query_id or None):
                self._driver.cancel(uri)

    def __enter__(self) -> "PrestoResult":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PrestoResult(query_id={self._query_id!r}, state={self._state!r}, done={self.done})"
