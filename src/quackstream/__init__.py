"""
quackstream - A fluent reader for streaming data sources, backed by DuckDB.

This library lets callers describe a streaming source (format, schema,
options, path) with a chainable reader and hand that description to a
session, which returns a queryable relation.
"""

# Expose the primary user-facing functions and classes.
from .core import DuckDBSession, session, with_session
from .reader import DataStreamReader, StreamSession
from .relation import Relation, TypedSequence
from .config import ReadRequest, SourceDescription, SourceFormat, StreamConfig
from .schema import ArrayType, StructField, StructType
from .exceptions import QuackstreamError, ConfigError, DecodeError

__all__ = [
    # Core API
    "session",
    "with_session",
    "DuckDBSession",

    # Reader API
    "DataStreamReader",
    "StreamSession",
    "Relation",
    "TypedSequence",

    # Configuration Types
    "ReadRequest",
    "SourceDescription",
    "SourceFormat",
    "StreamConfig",

    # Schema Types
    "ArrayType",
    "StructField",
    "StructType",

    # Exceptions
    "QuackstreamError",
    "ConfigError",
    "DecodeError",
]
