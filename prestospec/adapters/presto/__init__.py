from prestospec.adapters.presto._types import Column, QueryErrorPayload, QueryState, StatementResponse, StatementStats
from prestospec.adapters.presto.config import PrestoConfig, PrestoConnectionParams
from prestospec.adapters.presto.driver import PrestoDriver, PrestoResult, PrestoStatement

__all__ = (
    "Column",
    "PrestoConfig",
    "PrestoConnectionParams",
    "PrestoDriver",
    "PrestoResult",
    "PrestoStatement",
    "QueryErrorPayload",
    "QueryState",
    "StatementResponse",
    "StatementStats",
)
