"""prestospec: run parameterized SQL against Presto's single-string statement protocol."""

from prestospec import adapters, exceptions, parameters, typing, utils
from prestospec.__metadata__ import __version__
from prestospec.adapters.presto import PrestoConfig, PrestoDriver, PrestoResult, PrestoStatement
from prestospec.exceptions import (
    ArgumentCountMismatchError,
    InterpolationError,
    PrestoSpecError,
    QueryFailedError,
    UnsupportedValueTypeError,
)
from prestospec.parameters import QueryTemplate, encode_literal, interpolate, scan_placeholder_offsets
from prestospec.typing import NULL_BINARY, ArgumentValue

__all__ = (
    "NULL_BINARY",
    "ArgumentCountMismatchError",
    "ArgumentValue",
    "InterpolationError",
    "PrestoConfig",
    "PrestoDriver",
    "PrestoResult",
    "PrestoSpecError",
    "PrestoStatement",
    "QueryFailedError",
    "QueryTemplate",
    "UnsupportedValueTypeError",
    "__version__",
    "adapters",
    "encode_literal",
    "exceptions",
    "interpolate",
    "parameters",
    "scan_placeholder_offsets",
    "typing",
    "utils",
)
