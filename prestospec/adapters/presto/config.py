"""Presto connection configuration."""

from contextlib import contextmanager
from inspect import signature
from typing import TYPE_CHECKING, Any, ClassVar, Final, Optional, TypedDict, Union
from urllib.parse import parse_qsl, unquote, urlsplit

import httpx
from typing_extensions import NotRequired

from prestospec.adapters.presto.driver import PrestoDriver
from prestospec.exceptions import ImproperConfigurationError
from prestospec.parameters.template import DEFAULT_TEMPLATE_CACHE_SIZE, TemplateCache
from prestospec.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("PrestoConfig", "PrestoConnectionParams")

logger = get_logger("adapters.presto")

STATEMENT_PATH: Final = "/v1/statement"
DSN_SCHEMES: Final = {"presto": "http", "http": "http", "https": "https"}
_DEFAULTS: Final[dict[str, Any]] = {
    "host": "localhost",
    "port": 8080,
    "scheme": "http",
    "user": "prestospec",
    "catalog": "hive",
    "schema": "default",
    "timeout": 60.0,
    "poll_interval": 0.5,
}
_FLOAT_FIELDS: Final = ("timeout", "poll_interval")
_CLIENT_OPTIONS: Final = frozenset(signature(httpx.Client).parameters) - {"timeout"}


class PrestoConnectionParams(TypedDict, total=False):
    """Presto connection parameters.

    Keys in ``extra`` that are not listed here are forwarded to ``httpx.Client``.
    """

    host: NotRequired[str]
    port: NotRequired[int]
    scheme: NotRequired[str]
    user: NotRequired[str]
    catalog: NotRequired[str]
    schema: NotRequired[str]
    timeout: NotRequired[float]
    poll_interval: NotRequired[float]
    extra: NotRequired[dict[str, Any]]


class PrestoConfig:
    """Configuration for a Presto coordinator.

    The coordinator speaks plain HTTP, so there is no pool beyond the
    ``httpx.Client`` connection pool.

    Example:
        >>> config = PrestoConfig(
        ...     connection_config={"host": "presto.internal", "catalog": "hive", "schema": "web"}
        ... )
        >>> with config.provide_session() as driver:
        ...     rows = driver.query("SELECT * FROM visits WHERE day = ?", "2024-01-01").fetchall()
    """

    __slots__ = ("_connection_instance", "connection_config", "template_cache")

    driver_type: ClassVar[type[PrestoDriver]] = PrestoDriver
    connection_type: ClassVar[type[httpx.Client]] = httpx.Client

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[PrestoConnectionParams, dict[str, Any]]]" = None,
        connection_instance: "Optional[httpx.Client]" = None,
        template_cache_size: int = DEFAULT_TEMPLATE_CACHE_SIZE,
    ) -> None:
        """Initialize Presto configuration.

        Args:
            connection_config: Connection parameters, merged over the defaults
            connection_instance: Existing HTTP client to use instead of creating one
            template_cache_size: Number of query templates kept scanned
        """
        params: dict[str, Any] = dict(connection_config) if connection_config else {}
        if "extra" in params:
            extras = params.pop("extra")
            params.update(extras)
        self.connection_config: dict[str, Any] = {**_DEFAULTS, **params}
        self._connection_instance = connection_instance
        self.template_cache = TemplateCache(template_cache_size)
        self._validate()

    def _validate(self) -> None:
        for key in ("host", "user", "catalog", "schema"):
            if not self.connection_config.get(key):
                msg = f"Presto connection parameter {key!r} must not be empty"
                raise ImproperConfigurationError(msg)
        port = self.connection_config["port"]
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
            msg = f"Invalid Presto port: {port!r}"
            raise ImproperConfigurationError(msg)
        if self.connection_config["scheme"] not in {"http", "https"}:
            msg = f"Unsupported scheme: {self.connection_config['scheme']!r}"
            raise ImproperConfigurationError(msg)
        for key in _FLOAT_FIELDS:
            value = self.connection_config[key]
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
                msg = f"Presto connection parameter {key!r} must be a non-negative number, got {value!r}"
                raise ImproperConfigurationError(msg)
        unknown = sorted(key for key in self.client_options if key not in _CLIENT_OPTIONS)
        if unknown:
            msg = f"Unknown Presto connection parameters: {', '.join(unknown)}"
            raise ImproperConfigurationError(msg)

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "PrestoConfig":
        """Build a configuration from ``presto://user@host:port/catalog/schema``.

        Query string values override ``timeout`` and ``poll_interval``.

        Args:
            dsn: Connection string.
            **kwargs: Forwarded to the constructor.

        Raises:
            ImproperConfigurationError: If the DSN cannot be parsed.

        Returns:
            The configuration.
        """
        parts = urlsplit(dsn)
        if parts.scheme not in DSN_SCHEMES:
            msg = f"Unsupported DSN scheme: {parts.scheme!r}"
            raise ImproperConfigurationError(msg)
        params: dict[str, Any] = {"scheme": DSN_SCHEMES[parts.scheme]}
        try:
            port = parts.port
        except ValueError as exc:
            msg = f"Invalid port in DSN: {dsn!r}"
            raise ImproperConfigurationError(msg) from exc
        if parts.hostname:
            params["host"] = parts.hostname
        if port is not None:
            params["port"] = port
        if parts.username:
            params["user"] = unquote(parts.username)
        segments = [unquote(segment) for segment in parts.path.split("/") if segment]
        if len(segments) > 2:  # noqa: PLR2004
            msg = f"DSN path must be /catalog/schema, got {parts.path!r}"
            raise ImproperConfigurationError(msg)
        for key, segment in zip(("catalog", "schema"), segments):
            params[key] = segment
        for key, value in parse_qsl(parts.query):
            if key not in _FLOAT_FIELDS:
                msg = f"Unknown DSN option: {key!r}"
                raise ImproperConfigurationError(msg)
            try:
                params[key] = float(value)
            except ValueError as exc:
                msg = f"DSN option {key!r} must be a number, got {value!r}"
                raise ImproperConfigurationError(msg) from exc
        return cls(connection_config=params, **kwargs)

    @property
    def host(self) -> str:
        return str(self.connection_config["host"])

    @property
    def port(self) -> int:
        return int(self.connection_config["port"])

    @property
    def user(self) -> str:
        return str(self.connection_config["user"])

    @property
    def catalog(self) -> str:
        return str(self.connection_config["catalog"])

    @property
    def schema(self) -> str:
        return str(self.connection_config["schema"])

    @property
    def timeout(self) -> float:
        return float(self.connection_config["timeout"])

    @property
    def poll_interval(self) -> float:
        """Seconds to wait between continuation requests."""
        return float(self.connection_config["poll_interval"])

    @property
    def base_url(self) -> str:
        return f"{self.connection_config['scheme']}://{self.host}:{self.port}"

    @property
    def statement_url(self) -> str:
        return f"{self.base_url}{STATEMENT_PATH}"

    @property
    def headers(self) -> dict[str, str]:
        """Session headers sent with every statement submission."""
        return {"X-Presto-User": self.user, "X-Presto-Catalog": self.catalog, "X-Presto-Schema": self.schema}

    @property
    def client_options(self) -> dict[str, Any]:
        """Extra parameters forwarded to ``httpx.Client``."""
        return {key: value for key, value in self.connection_config.items() if key not in _DEFAULTS}

    def create_connection(self) -> httpx.Client:
        """Create a new HTTP client for the coordinator."""
        if self._connection_instance is not None:
            return self._connection_instance
        logger.debug("Creating Presto HTTP client for %s", self.base_url)
        return httpx.Client(timeout=self.timeout, **self.client_options)

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[httpx.Client, None, None]":
        """Provide an HTTP client, closing it afterwards unless it was supplied."""
        connection = self.create_connection()
        try:
            yield connection
        finally:
            if connection is not self._connection_instance:
                connection.close()

    @contextmanager
    def provide_session(self, *args: Any, **kwargs: Any) -> "Generator[PrestoDriver, None, None]":
        """Provide a driver session bound to this configuration."""
        with self.provide_connection(*args, **kwargs) as connection:
            yield self.driver_type(connection=connection, config=self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, user={self.user!r}, catalog={self.catalog!r}, schema={self.schema!r})"
