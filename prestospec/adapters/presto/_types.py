"""Presto statement protocol payloads."""

from enum import Enum
from typing import Any, Final, Optional

import msgspec

from prestospec.exceptions import SerializationError

__all__ = (
    "Column",
    "QueryErrorPayload",
    "QueryState",
    "StatementResponse",
    "StatementStats",
    "decode_statement_response",
)


class QueryState(str, Enum):
    """Execution states reported by the coordinator."""

    QUEUED = "QUEUED"
    PLANNING = "PLANNING"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    BLOCKED = "BLOCKED"
    FINISHING = "FINISHING"
    FINISHED = "FINISHED"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value

    @property
    def is_terminal(self) -> bool:
        return self in {QueryState.FINISHED, QueryState.FAILED}


class StatementStats(msgspec.Struct, rename="camel"):
    state: str = QueryState.QUEUED.value
    scheduled: bool = False
    nodes: int = 0
    total_splits: int = 0
    queued_splits: int = 0
    running_splits: int = 0
    completed_splits: int = 0
    cpu_time_millis: int = 0
    wall_time_millis: int = 0
    processed_rows: int = 0
    processed_bytes: int = 0


class QueryErrorPayload(msgspec.Struct, rename="camel"):
    """Error reported for a failed query. Carried through, never interpreted."""

    message: str = ""
    error_code: int = 0
    error_name: str = ""
    error_type: str = ""
    failure_info: Optional[dict[str, Any]] = None


class Column(msgspec.Struct):
    name: str
    type: str = ""


class StatementResponse(msgspec.Struct, rename="camel"):
    """One page of the statement protocol.

    ``next_uri`` is the continuation to poll; it is absent once the query
    reached a terminal state and every page has been delivered.
    """

    id: str = ""
    info_uri: str = ""
    next_uri: Optional[str] = None
    partial_cancel_uri: Optional[str] = None
    columns: Optional[list[Column]] = None
    data: Optional[list[list[Any]]] = None
    stats: StatementStats = msgspec.field(default_factory=StatementStats)
    error: Optional[QueryErrorPayload] = None

    @property
    def failed(self) -> bool:
        return self.stats.state == QueryState.FAILED.value


_decoder: Final = msgspec.json.Decoder(StatementResponse)


def decode_statement_response(content: bytes) -> StatementResponse:
    """Decode a statement protocol response body.

    Raises:
        SerializationError: If the body is not a valid statement response.
    """
    try:
        return _decoder.decode(content)
    except msgspec.DecodeError as exc:
        msg = f"Invalid statement response: {exc}"
        raise SerializationError(msg) from exc
