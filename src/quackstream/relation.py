"""
Relation handles returned by a session for a loaded stream.
"""
from typing import Generic, Iterator, List, Type, TypeVar

import duckdb
import pandas as pd

from .config import ReadRequest
from .exceptions import DecodeError

T = TypeVar("T")


class TypedSequence(Generic[T]):
    """A sequence of scalar values decoded from a single-column relation."""

    def __init__(self, relation: "Relation", element_type: Type[T]):
        self._relation = relation
        self.element_type = element_type

    def __iter__(self) -> Iterator[T]:
        for (value,) in self._relation.fetchall():
            if value is None or isinstance(value, self.element_type):
                yield value
            else:
                yield self.element_type(value)

    def collect(self) -> List[T]:
        """Returns all values, in the relation's row order."""
        return list(self)


class Relation:
    """A queryable relation produced by a session from a ReadRequest."""

    def __init__(self, relation: duckdb.DuckDBPyRelation, request: ReadRequest):
        self._rel = relation
        self.request = request

    @property
    def is_streaming(self) -> bool:
        return self.request.is_streaming

    @property
    def columns(self) -> List[str]:
        return list(self._rel.columns)

    def select(self, *columns: str) -> "Relation":
        """Projects the relation onto the named columns."""
        projection = ", ".join('"' + c.replace('"', '""') + '"' for c in columns)
        return Relation(self._rel.project(projection), self.request)

    def decode(self, scalar_type: Type[T]) -> TypedSequence[T]:
        """Reinterprets each row of a single-column relation as a `scalar_type` value."""
        if len(self._rel.columns) != 1:
            raise DecodeError(
                f"Cannot decode a relation with columns {self.columns} as {scalar_type.__name__}; "
                "exactly one column is required."
            )
        return TypedSequence(self, scalar_type)

    def fetchall(self) -> List[tuple]:
        return self._rel.fetchall()

    def to_df(self) -> pd.DataFrame:
        """Returns the relation's current rows as a pandas DataFrame."""
        return self._rel.df()

    def create_view(self, name: str) -> "Relation":
        self._rel.create_view(name, replace=True)
        return self

    def __repr__(self) -> str:
        return f"Relation(columns={self.columns}, is_streaming={self.is_streaming})"
