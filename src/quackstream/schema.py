"""
Structured schema types and their conversion to strings and DuckDB column types.

The reader only needs `to_schema_string`; `schema_columns` is used on the
session side to turn whatever string was transmitted into DuckDB types.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

from .exceptions import ConfigError

# Type names accepted in schema strings, mapped to DuckDB types.
_SIMPLE_TYPES = {
    'string': 'VARCHAR',
    'varchar': 'VARCHAR',
    'char': 'VARCHAR',
    'integer': 'INTEGER',
    'int': 'INTEGER',
    'long': 'BIGINT',
    'bigint': 'BIGINT',
    'short': 'SMALLINT',
    'smallint': 'SMALLINT',
    'byte': 'TINYINT',
    'tinyint': 'TINYINT',
    'float': 'FLOAT',
    'real': 'FLOAT',
    'double': 'DOUBLE',
    'boolean': 'BOOLEAN',
    'bool': 'BOOLEAN',
    'binary': 'BLOB',
    'date': 'DATE',
    'timestamp': 'TIMESTAMP',
    'timestamp_ntz': 'TIMESTAMP',
}

_DECIMAL_RE = re.compile(r"^(?:decimal|numeric|dec)\s*(\(\s*\d+\s*(?:,\s*\d+\s*)?\))?$", re.IGNORECASE)
_DDL_FIELD_RE = re.compile(r"^(?:`([^`]+)`|([A-Za-z_]\w*))\s*:?\s+(.+)$", re.DOTALL)
_DDL_SUFFIX_RE = re.compile(r"\s+(?:NOT\s+NULL|COMMENT\s+'(?:[^']|'')*')\s*$", re.IGNORECASE)


@dataclass
class ArrayType:
    element_type: Union[str, "StructType", "ArrayType"]
    contains_null: bool = True

    def json_value(self) -> Dict[str, Any]:
        return {
            "type": "array",
            "elementType": _json_value(self.element_type),
            "containsNull": self.contains_null,
        }


@dataclass
class StructField:
    name: str
    data_type: Union[str, "StructType", ArrayType]
    nullable: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

    def json_value(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": _json_value(self.data_type),
            "nullable": self.nullable,
            "metadata": self.metadata,
        }


@dataclass
class StructType:
    """A structured schema: an ordered list of named, typed fields."""
    fields: List[StructField] = field(default_factory=list)

    def add(self, name: str, data_type, nullable: bool = True) -> "StructType":
        self.fields.append(StructField(name, data_type, nullable))
        return self

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    def json_value(self) -> Dict[str, Any]:
        return {"type": "struct", "fields": [f.json_value() for f in self.fields]}

    def json(self) -> str:
        """Returns the compact JSON encoding, which keeps nullability and metadata."""
        return json.dumps(self.json_value(), separators=(",", ":"))


def _json_value(data_type):
    if isinstance(data_type, str):
        return data_type
    return data_type.json_value()


def to_schema_string(schema: Any) -> str:
    """
    Converts a structured schema to its canonical string form.

    Objects exposing a `json()` method use it, mappings and lists are dumped as
    compact JSON, and strings are returned unchanged.
    """
    if isinstance(schema, str):
        return schema
    to_json = getattr(schema, 'json', None)
    if callable(to_json):
        return to_json()
    if isinstance(schema, (Mapping, list)):
        return json.dumps(schema, separators=(",", ":"))
    return str(schema)


# ==================== SESSION-SIDE PARSING ====================

def _quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _simple_type(name: str) -> str:
    name = name.strip()
    decimal = _DECIMAL_RE.match(name)
    if decimal:
        return "DECIMAL" + re.sub(r"\s+", "", decimal.group(1) or "")
    return _SIMPLE_TYPES.get(name.lower(), name.upper())


def _split_top_level(text: str) -> List[str]:
    """Splits on commas that are not nested inside (), <>, [] or a quoted COMMENT."""
    parts, current, depth, in_quote = [], [], 0, False
    for ch in text:
        if ch == "'":
            # An escaped '' toggles twice and leaves the state unchanged.
            in_quote = not in_quote
        elif in_quote:
            pass
        elif ch in "(<[":
            depth += 1
        elif ch in ")>]":
            depth -= 1
            if depth < 0:
                raise ConfigError(f"Unbalanced brackets in schema: '{text}'")
        if ch == "," and depth == 0 and not in_quote:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    if in_quote:
        raise ConfigError(f"Unterminated quote in schema: '{text}'")
    if depth != 0:
        raise ConfigError(f"Unbalanced brackets in schema: '{text}'")
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def _ddl_field(item: str):
    match = _DDL_FIELD_RE.match(item.strip())
    if not match:
        raise ConfigError(f"Malformed schema field: '{item}'")
    name = match.group(1) or match.group(2)
    type_text = match.group(3).strip()
    while True:
        stripped = _DDL_SUFFIX_RE.sub("", type_text)
        if stripped == type_text:
            break
        type_text = stripped
    return name, _ddl_type(type_text)


def _ddl_type(text: str) -> str:
    text = text.strip()
    upper = text.upper()
    if upper.startswith("ARRAY<") and upper.endswith(">"):
        return f"{_ddl_type(text[6:-1])}[]"
    if upper.startswith("MAP<") and upper.endswith(">"):
        parts = _split_top_level(text[4:-1])
        if len(parts) != 2:
            raise ConfigError(f"Malformed map type: '{text}'")
        return f"MAP({_ddl_type(parts[0])}, {_ddl_type(parts[1])})"
    if upper.startswith("STRUCT<") and upper.endswith(">"):
        fields = [_ddl_field(item) for item in _split_top_level(text[7:-1])]
        return "STRUCT(" + ", ".join(f"{_quote_ident(n)} {t}" for n, t in fields) + ")"
    return _simple_type(text)


def _json_type(data_type) -> str:
    if isinstance(data_type, str):
        return _simple_type(data_type)
    if not isinstance(data_type, dict):
        raise ConfigError(f"Unsupported schema type: {data_type!r}")
    kind = data_type.get('type')
    if kind == 'struct':
        columns = _json_fields(data_type.get('fields', []))
        return "STRUCT(" + ", ".join(f"{_quote_ident(n)} {t}" for n, t in columns.items()) + ")"
    if kind == 'array':
        return f"{_json_type(data_type.get('elementType'))}[]"
    if kind == 'map':
        return f"MAP({_json_type(data_type.get('keyType'))}, {_json_type(data_type.get('valueType'))})"
    raise ConfigError(f"Unsupported schema type: {data_type!r}")


def _json_fields(fields) -> Dict[str, str]:
    columns = {}
    for f in fields:
        if not isinstance(f, dict) or 'name' not in f or 'type' not in f:
            raise ConfigError(f"Malformed schema field: {f!r}")
        columns[f['name']] = _json_type(f['type'])
    return columns


def schema_columns(schema_string: str) -> Dict[str, str]:
    """
    Converts a schema string into an ordered mapping of column name to DuckDB type.

    Accepts either the canonical JSON encoding of a struct or a DDL string
    such as "id INT, name STRING".
    """
    text = schema_string.strip()
    if text.startswith("{"):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Malformed JSON schema: {e}") from e
        if not isinstance(parsed, dict) or parsed.get('type') != 'struct':
            raise ConfigError("A JSON schema must describe a struct.")
        columns = _json_fields(parsed.get('fields', []))
    else:
        columns = dict(_ddl_field(item) for item in _split_top_level(text))

    if not columns:
        raise ConfigError(f"Schema defines no columns: '{schema_string}'")
    return columns
