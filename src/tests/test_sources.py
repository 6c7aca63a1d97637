"""
tests/test_sources.py

Tests for the format handlers' SQL rendering. Paths here do not exist on
disk, so they are rendered verbatim.
"""
import pytest

from quackstream.config import SourceDescription
from quackstream.exceptions import ConfigError
from quackstream.sources.csv import CSVHandler
from quackstream.sources.json import JSONHandler
from quackstream.sources.parquet import ParquetHandler
from quackstream.sources.text import TextHandler


def describe(fmt, path="/data/in", schema=None, **options) -> SourceDescription:
    return SourceDescription(format=fmt, schema=schema, options=options, paths=[path] if path else [])


@pytest.mark.parametrize("handler_class, expected_format", [
    (CSVHandler, "csv"),
    (JSONHandler, "json"),
    (ParquetHandler, "parquet"),
    (TextHandler, "text"),
])
def test_handler_properties(handler_class, expected_format):
    handler = handler_class(describe(expected_format))

    assert handler.source_format == expected_format
    assert handler.required_plugins == []


@pytest.mark.parametrize("path", ["s3://bucket/events/", "https://example.com/data.csv"])
def test_remote_paths_require_httpfs(path):
    handler = CSVHandler(describe("csv", path=path))

    assert handler.required_plugins == ["httpfs"]


def test_remote_directory_becomes_glob():
    handler = CSVHandler(describe("csv", path="s3://bucket/events/"))

    assert handler.render_sql() == "SELECT * FROM read_csv('s3://bucket/events/*')"


@pytest.mark.parametrize(
    "test_id, description, expected_sql",
    [
        (
            "csv_plain",
            describe("csv"),
            "SELECT * FROM read_csv('/data/in')",
        ),
        (
            "csv_options_case_insensitive",
            describe("csv", header="true", SEP=";", nullValue="NA"),
            "SELECT * FROM read_csv('/data/in', header = TRUE, delim = ';', nullstr = 'NA')",
        ),
        (
            "csv_with_schema",
            describe("csv", schema="id INT, name STRING"),
            "SELECT * FROM read_csv('/data/in', columns = {'id': 'INTEGER', 'name': 'VARCHAR'})",
        ),
        (
            "csv_streaming_options_ignored",
            describe("csv", maxFilesPerTrigger="10", latestFirst="true"),
            "SELECT * FROM read_csv('/data/in')",
        ),
        (
            "json_auto_detect",
            describe("json"),
            "SELECT * FROM read_json('/data/in', auto_detect = TRUE)",
        ),
        (
            "json_multiline",
            describe("json", multiLine="true"),
            "SELECT * FROM read_json('/data/in', format = 'auto', auto_detect = TRUE)",
        ),
        (
            "json_lines_with_schema",
            describe("json", schema="id BIGINT", multiLine="false"),
            "SELECT * FROM read_json('/data/in', format = 'newline_delimited', columns = {'id': 'BIGINT'})",
        ),
        (
            "parquet_merge_schema",
            describe("parquet", mergeSchema="true"),
            "SELECT * FROM read_parquet('/data/in', union_by_name = TRUE)",
        ),
        (
            "parquet_ignores_schema",
            describe("parquet", schema="id INT"),
            "SELECT * FROM read_parquet('/data/in')",
        ),
        (
            "text_whole_files",
            describe("text", wholetext="true"),
            "SELECT content AS value FROM read_text('/data/in')",
        ),
        (
            "quotes_are_escaped",
            describe("csv", path="/data/o'brien.csv", quote="'"),
            "SELECT * FROM read_csv('/data/o''brien.csv', quote = '''')",
        ),
        (
            "csv_digit_strings_stay_quoted",
            describe("csv", nullValue="007", sep="1", comment="0"),
            "SELECT * FROM read_csv('/data/in', nullstr = '007', delim = '1', comment = '0')",
        ),
        (
            "json_digit_date_format_stays_quoted",
            describe("json", dateFormat="2024"),
            "SELECT * FROM read_json('/data/in', dateformat = '2024', auto_detect = TRUE)",
        ),
        (
            "csv_integer_like_header_is_bare",
            describe("csv", header="1"),
            "SELECT * FROM read_csv('/data/in', header = 1)",
        ),
    ]
)
def test_render_sql(test_id, description, expected_sql):
    handler_class = {
        "csv": CSVHandler,
        "json": JSONHandler,
        "parquet": ParquetHandler,
        "text": TextHandler,
    }[description.format]

    assert handler_class(description).render_sql() == expected_sql


def test_text_splits_lines():
    sql = TextHandler(describe("text")).render_sql()

    assert sql.startswith("SELECT unnest(string_split_regex(")
    assert r"'\r\n|\r|\n'" in sql
    assert "FROM read_text('/data/in') WHERE content <> ''" in sql


def test_text_custom_line_separator():
    sql = TextHandler(describe("text", lineSep="|")).render_sql()

    assert r"'\|'" in sql
    assert r"'(?:\|)$'" in sql


def test_unknown_option_is_rejected():
    handler = CSVHandler(describe("csv", bogus="1"))

    with pytest.raises(ConfigError, match="Unsupported option 'bogus' for format 'csv'"):
        handler.render_sql()


def test_missing_path_is_rejected():
    handler = ParquetHandler(describe("parquet", path=None))

    with pytest.raises(ConfigError, match="requires a path"):
        handler.render_sql()


def test_local_directory_becomes_glob(tmp_path):
    handler = CSVHandler(describe("csv", path=str(tmp_path)))

    assert handler.render_sql() == f"SELECT * FROM read_csv('{tmp_path / '*'}')"
