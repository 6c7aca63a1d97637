"""
Abstract Base Class for all Format Handlers.
"""
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Set

from ..config import SourceDescription
from ..exceptions import ConfigError
from ..schema import schema_columns

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("s3://", "s3a://", "gs://", "http://", "https://")

# Options that only steer incremental file discovery; a snapshot read ignores them.
STREAMING_OPTIONS = {
    "maxfilespertrigger",
    "maxbytespertrigger",
    "latestfirst",
    "filenameonly",
    "maxfileage",
    "cleansource",
    "sourcearchivedir",
}

_INTEGER_RE = re.compile(r"^-?\d+$")


def sql_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def render_value(value: str, as_string: bool = False) -> str:
    """Renders an option string as a SQL value: string parameters and non-numeric text quoted, booleans and integers bare."""
    if as_string:
        return sql_literal(value)
    if value.lower() in ("true", "false"):
        return value.upper()
    if _INTEGER_RE.match(value):
        return value
    return sql_literal(value)


class BaseFormatHandler(ABC):
    """
    Abstract base class for a format handler.

    Each handler is responsible for:
    1. Declaring the DuckDB plugins it requires.
    2. Translating source options into DuckDB table function parameters.
    3. Rendering the SELECT that reads the described source.
    """

    # Lower-cased option key -> DuckDB parameter name.
    param_map: Dict[str, str] = {}
    # DuckDB parameters that only accept strings; their values are always quoted.
    string_params: Set[str] = set()

    def __init__(self, description: SourceDescription):
        self.description = description
        self.options = {key.lower(): value for key, value in description.options.items()}

    @property
    @abstractmethod
    def source_format(self) -> str:
        """The format name this handler is registered under, e.g., 'csv'."""
        pass

    @property
    def required_plugins(self) -> List[str]:
        """List of DuckDB extensions needed, e.g., ['httpfs'] for remote paths."""
        if any(p.startswith(REMOTE_PREFIXES) for p in self.description.paths):
            return ["httpfs"]
        return []

    @abstractmethod
    def render_sql(self) -> str:
        """Renders the SELECT statement reading the described source."""
        pass

    def resolved_paths(self) -> List[str]:
        """Paths as DuckDB globs; a directory stands for every file in it."""
        if not self.description.paths:
            raise ConfigError(f"Format '{self.source_format}' requires a path to load from.")
        resolved = []
        for path in self.description.paths:
            if path.startswith(REMOTE_PREFIXES):
                resolved.append(path + "*" if path.endswith("/") else path)
            elif os.path.isdir(path):
                resolved.append(os.path.join(path, "*"))
            else:
                resolved.append(path)
        return resolved

    def render_paths(self) -> str:
        paths = self.resolved_paths()
        if len(paths) == 1:
            return sql_literal(paths[0])
        return "[" + ", ".join(sql_literal(p) for p in paths) + "]"

    def render_params(self, special: Iterable[str] = ()) -> List[str]:
        """
        Maps options onto `name = value` parameters.

        Args:
            special: Lower-cased option keys the subclass renders itself.

        Returns:
            Rendered parameters, in option order.
        """
        params = []
        for key, value in self.options.items():
            if key in STREAMING_OPTIONS:
                logger.debug("Ignoring streaming option '%s' for a snapshot read.", key)
                continue
            if key in special:
                continue
            duckdb_param = self.param_map.get(key)
            if duckdb_param is None:
                raise ConfigError(f"Unsupported option '{key}' for format '{self.source_format}'.")
            params.append(f"{duckdb_param} = {render_value(value, duckdb_param in self.string_params)}")
        return params

    def render_columns(self) -> str:
        columns = schema_columns(self.description.schema)
        return "columns = {" + ", ".join(
            f"{sql_literal(name)}: {sql_literal(duckdb_type)}" for name, duckdb_type in columns.items()
        ) + "}"

    def render_table_function(self, function: str, params: List[str]) -> str:
        args = ", ".join([self.render_paths()] + params)
        return f"SELECT * FROM {function}({args})"
