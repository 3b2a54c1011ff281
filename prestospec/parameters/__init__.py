"""Query interpolation for services that take a single literal query string.

The pipeline is scan (placeholder offsets) -> encode (one literal per
argument) -> interpolate (splice literals into the original text).
"""

from prestospec.parameters.escaping import escape_bytes_backslash, escape_string_backslash
from prestospec.parameters.interpolation import interpolate
from prestospec.parameters.literals import LiteralEncoderRegistry, encode_literal
from prestospec.parameters.scanner import PLACEHOLDER_MARKER, scan_placeholder_offsets
from prestospec.parameters.template import CacheStats, QueryTemplate, TemplateCache, get_template, get_template_cache

__all__ = (
    "PLACEHOLDER_MARKER",
    "CacheStats",
    "LiteralEncoderRegistry",
    "QueryTemplate",
    "TemplateCache",
    "encode_literal",
    "escape_bytes_backslash",
    "escape_string_backslash",
    "get_template",
    "get_template_cache",
    "interpolate",
    "scan_placeholder_offsets",
)
