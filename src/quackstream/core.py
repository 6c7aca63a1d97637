"""
The core logic of quackstream: a DuckDB-backed session that turns source
descriptions into relations.
"""
import logging
from contextlib import contextmanager
from functools import wraps
from typing import Generator, List, Optional

import duckdb

from .config import ReadRequest, SourceFormat, StreamConfig, get_configs
from .exceptions import ConfigError
from .reader import DataStreamReader
from .relation import Relation
# Import all handlers
from .sources import csv, json, parquet, text

logger = logging.getLogger(__name__)

# The registry stores the handler CLASSES, keyed by lower-cased format name.
FORMAT_HANDLER_REGISTRY = {
    SourceFormat.CSV.value: csv.CSVHandler,
    SourceFormat.JSON.value: json.JSONHandler,
    SourceFormat.PARQUET.value: parquet.ParquetHandler,
    SourceFormat.TEXT.value: text.TextHandler,
}


class DuckDBSession:
    """
    Builds relations for streaming source descriptions on a DuckDB connection.

    DuckDB has no incremental file source, so a streaming request is read as a
    snapshot of the files present when the relation is built.
    """

    def __init__(self, connection: duckdb.DuckDBPyConnection, default_format: str = SourceFormat.PARQUET.value):
        self.connection = connection
        self.default_format = default_format
        self._loaded_plugins = set()

    @property
    def read_stream(self) -> DataStreamReader:
        """Returns a new reader bound to this session."""
        return DataStreamReader(self)

    def new_relation(self, request: ReadRequest) -> Relation:
        description = request.data_source
        source_format = (description.format or self.default_format).lower()

        HandlerClass = FORMAT_HANDLER_REGISTRY.get(source_format)
        if not HandlerClass:
            raise ConfigError(f"Unsupported source format '{source_format}'.")
        handler = HandlerClass(description)

        for plugin in handler.required_plugins:
            self._load_plugin(plugin)

        sql = handler.render_sql()
        if request.is_streaming:
            logger.info("Reading streaming %s source %s as a snapshot of its current files.",
                        source_format, description.paths)
        logger.debug("Rendered read SQL: %s", sql)
        return Relation(self.connection.sql(sql), request)

    def _load_plugin(self, plugin: str):
        if plugin in self._loaded_plugins:
            return
        logger.info("Loading DuckDB extension '%s'.", plugin)
        self.connection.install_extension(plugin)
        self.connection.load_extension(plugin)
        self._loaded_plugins.add(plugin)


def _register_streams(dsession: DuckDBSession, configs: List[StreamConfig]):
    """Loads each configured stream and registers it as a view named after the stream."""
    for cfg in configs:
        relation = DataStreamReader.from_config(dsession, cfg).load(cfg.path)
        relation.create_view(cfg.name)
        logger.debug("Registered stream '%s' as a view.", cfg.name)


@contextmanager
def session(
        config_path: Optional[str] = None,
        configs: Optional[List[StreamConfig]] = None,
        streams: Optional[List[str]] = None,
        default_format: str = SourceFormat.PARQUET.value,
) -> Generator[DuckDBSession, None, None]:
    """
    A context manager providing a DuckDB session with any configured streams registered.
    """
    all_configs = get_configs(config_path, configs)

    active_configs = all_configs
    if streams:
        active_configs = [c for c in all_configs if c.name in streams]

    con = duckdb.connect(database=':memory:')
    try:
        dsession = DuckDBSession(con, default_format=default_format)
        _register_streams(dsession, active_configs)
        yield dsession
    finally:
        con.close()


def with_session(**session_kwargs):
    """
    A decorator to inject a DuckDB session into a function.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with session(**session_kwargs) as dsession:
                return func(dsession, *args, **kwargs)

        return wrapper

    return decorator
