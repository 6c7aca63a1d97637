"""
The reader API for describing a streaming source and loading it through a session.
"""
import logging
from typing import Any, Mapping, Optional, Protocol, Self

from .config import ReadRequest, SourceDescription, SourceFormat, StreamConfig, to_option_string
from .relation import Relation, TypedSequence
from .schema import to_schema_string

logger = logging.getLogger(__name__)


class StreamSession(Protocol):
    """Anything that can turn a ReadRequest into a relation."""

    def new_relation(self, request: ReadRequest) -> Relation:
        ...


class DataStreamReader:
    """
    A fluent builder describing a streaming source.

    Every configuration method mutates the reader in place and returns it for
    chaining. Nothing is validated here; the bound session is the only judge of
    whether a description makes sense, and its errors reach the caller as-is.
    """

    def __init__(self, session: StreamSession):
        self._session = session
        self._source = SourceDescription()

    @classmethod
    def from_config(cls, session: StreamSession, config: StreamConfig) -> "DataStreamReader":
        """Creates a reader pre-populated with a StreamConfig's format, schema and options."""
        reader = cls(session)
        if config.format is not None:
            reader.format(config.format)
        return reader.schema(config.schema).options(config.options)

    def format(self, source: str) -> Self:
        """Specifies the input data source format."""
        self._source.format = source
        return self

    def schema(self, schema: Any) -> Self:
        """
        Specifies the input schema.

        Args:
            schema: A DDL string such as "id INT, name STRING", which is stored as-is,
                or a structured type (e.g. a StructType), which is converted to its
                JSON encoding. None leaves the current schema unchanged.

        Returns:
            The reader instance for chaining.
        """
        if schema is not None:
            self._source.schema = to_schema_string(schema)
        return self

    def option(self, key: str, value: Any) -> Self:
        """Adds an input option. Booleans and numbers are stored in their string form."""
        self._source.options[key] = to_option_string(value)
        return self

    def options(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Self:
        """Adds input options, overwriting existing keys and keeping unrelated ones."""
        for key, value in {**(options or {}), **kwargs}.items():
            self.option(key, value)
        return self

    def load(self, path: Optional[str] = None) -> Relation:
        """
        Loads the described stream as a relation.

        Args:
            path: Optional input path. When given it replaces any path set by an
                earlier load; without it the description is submitted as it stands.

        Returns:
            The relation handle produced by the session.
        """
        if path is not None:
            self._source.paths.clear()
            self._source.paths.append(path)

        request = ReadRequest(data_source=self._source.snapshot(), is_streaming=True)
        logger.debug("Submitting streaming source: format=%s, paths=%s, options=%s",
                     request.data_source.format, request.data_source.paths,
                     sorted(request.data_source.options))
        return self._session.new_relation(request)

    def json(self, path: str) -> Relation:
        """Loads a JSON Lines file stream."""
        return self.format(SourceFormat.JSON.value).load(path)

    def csv(self, path: str) -> Relation:
        """Loads a CSV file stream."""
        return self.format(SourceFormat.CSV.value).load(path)

    def orc(self, path: str) -> Relation:
        return self.format(SourceFormat.ORC.value).load(path)

    def parquet(self, path: str) -> Relation:
        return self.format(SourceFormat.PARQUET.value).load(path)

    def text(self, path: str) -> Relation:
        """Loads text files as a relation with one string column named "value"."""
        return self.format(SourceFormat.TEXT.value).load(path)

    def text_file(self, path: str) -> TypedSequence[str]:
        """Loads text files as a sequence of strings, one per line."""
        return self.text(path).select("value").decode(str)

    @property
    def description(self) -> SourceDescription:
        """A copy of the description as it currently stands."""
        return self._source.snapshot()

    def __repr__(self) -> str:
        return f"DataStreamReader({self._source!r})"

