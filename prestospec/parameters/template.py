"""Query templates and the template cache.

Components:
- QueryTemplate: immutable query text plus its placeholder offsets
- CacheStats: hit/miss/eviction counters
- TemplateCache: thread-safe LRU of templates keyed by query text
"""

import threading
from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Final, Optional

from mypy_extensions import mypyc_attr

from prestospec.parameters.interpolation import interpolate
from prestospec.parameters.scanner import scan_placeholder_offsets
from prestospec.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prestospec.typing import ArgumentValue

__all__ = (
    "DEFAULT_TEMPLATE_CACHE_SIZE",
    "CacheStats",
    "QueryTemplate",
    "TemplateCache",
    "get_template",
    "get_template_cache",
)

logger = get_logger("parameters.template")

DEFAULT_TEMPLATE_CACHE_SIZE: Final = 1000


@mypyc_attr(allow_interpreted_subclasses=False)
class QueryTemplate:
    """Query text with its placeholder offsets.

    Offsets are computed once on construction and never change, so one
    template can be interpolated from any number of threads at once.

    Args:
        sql: Raw query text with ``?`` placeholders.
    """

    __slots__ = ("_offsets", "_sql")

    def __init__(self, sql: str) -> None:
        self._sql = sql
        self._offsets = scan_placeholder_offsets(sql)

    @property
    def sql(self) -> str:
        """Original query text."""
        return self._sql

    @property
    def offsets(self) -> "tuple[int, ...]":
        """Placeholder offsets in increasing order."""
        return self._offsets

    @property
    def parameter_count(self) -> int:
        """Number of placeholders, and so of arguments each execution needs."""
        return len(self._offsets)

    def interpolate(self, args: "Sequence[ArgumentValue]") -> str:
        """Assemble literal query text for one set of arguments.

        Args:
            args: One argument per placeholder.

        Raises:
            ArgumentCountMismatchError: If the argument count is wrong.
            UnsupportedValueTypeError: If an argument cannot be rendered.

        Returns:
            Fully literal query text.
        """
        return interpolate(self._sql, self._offsets, args)

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, name):
            msg = f"{type(self).__name__} is immutable"
            raise AttributeError(msg)
        object.__setattr__(self, name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryTemplate):
            return False
        return self._sql == other._sql

    def __hash__(self) -> int:
        return hash(self._sql)

    def __repr__(self) -> str:
        return f"QueryTemplate(sql={self._sql!r}, offsets={self._offsets!r})"


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheStats:
    """Template cache statistics."""

    __slots__ = ("evictions", "hits", "misses")

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @property
    def hit_rate(self) -> float:
        """Cache hit rate as percentage."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    def reset(self) -> None:
        """Reset all statistics."""
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def __repr__(self) -> str:
        return f"CacheStats(hit_rate={self.hit_rate:.1f}%, hits={self.hits}, misses={self.misses}, evictions={self.evictions})"


@mypyc_attr(allow_interpreted_subclasses=False)
class TemplateCache:
    """LRU cache of :class:`QueryTemplate` keyed by query text.

    Args:
        max_size: Maximum number of templates kept. Zero disables caching.
    """

    __slots__ = ("_lock", "_max_size", "_stats", "_templates")

    def __init__(self, max_size: int = DEFAULT_TEMPLATE_CACHE_SIZE) -> None:
        if max_size < 0:
            msg = "max_size must not be negative"
            raise ValueError(msg)
        self._templates: OrderedDict[str, QueryTemplate] = OrderedDict()
        self._lock = threading.Lock()
        self._max_size = max_size
        self._stats = CacheStats()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def get(self, sql: str) -> QueryTemplate:
        """Return the template for ``sql``, scanning it on first use.

        Args:
            sql: Raw query text.

        Returns:
            The cached template, or a new one.
        """
        with self._lock:
            template = self._templates.get(sql)
            if template is not None:
                self._templates.move_to_end(sql)
                self._stats.hits += 1
                return template
            self._stats.misses += 1

        template = QueryTemplate(sql)
        if self._max_size == 0:
            return template

        with self._lock:
            existing = self._templates.get(sql)
            if existing is not None:
                return existing
            self._templates[sql] = template
            if len(self._templates) > self._max_size:
                evicted, _ = self._templates.popitem(last=False)
                self._stats.evictions += 1
                logger.debug("Evicted query template from cache", extra={"extra_fields": {"sql": evicted}})
        return template

    def clear(self) -> None:
        """Drop every cached template and reset statistics."""
        with self._lock:
            self._templates.clear()
            self._stats.reset()

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    def __contains__(self, sql: object) -> bool:
        with self._lock:
            return sql in self._templates


_default_cache: Optional[TemplateCache] = None
_default_cache_lock = threading.Lock()


def get_template_cache() -> TemplateCache:
    """Get the process-wide template cache."""
    global _default_cache
    if _default_cache is None:
        with _default_cache_lock:
            if _default_cache is None:
                _default_cache = TemplateCache()
    return _default_cache


def get_template(sql: str) -> QueryTemplate:
    """Get the template for ``sql`` from the process-wide cache."""
    return get_template_cache().get(sql)
