"""Format Handler for plain text files."""
import logging

from .base import BaseFormatHandler, sql_literal

logger = logging.getLogger(__name__)

DEFAULT_LINE_SEPARATOR = r"\r\n|\r|\n"


def _regex_literal(text: str) -> str:
    """Escapes a literal string for use in a DuckDB (RE2) regular expression."""
    escaped = []
    for ch in text:
        if ch.isalnum() or ch == "_":
            escaped.append(ch)
        elif " " < ch <= "~":
            escaped.append("\\" + ch)
        else:
            escaped.append("\\x{%x}" % ord(ch))
    return "".join(escaped)


class TextHandler(BaseFormatHandler):
    """
    Reads text files into a single string column named "value".

    Each line becomes a row unless `wholetext` is true, in which case each file
    becomes one row. `lineSep` replaces the default \\r, \\r\\n and \\n separators.
    A trailing separator does not produce an empty final row.
    """

    @property
    def source_format(self) -> str:
        return "text"

    def render_sql(self) -> str:
        self.render_params(special={'wholetext', 'linesep'})
        if self.description.schema:
            logger.debug("Ignoring user-specified schema for text source %s", self.description.paths)

        paths = self.render_paths()
        if self.options.get('wholetext', 'false').lower() == 'true':
            return f"SELECT content AS value FROM read_text({paths})"

        line_sep = self.options.get('linesep')
        pattern = _regex_literal(line_sep) if line_sep else DEFAULT_LINE_SEPARATOR
        trimmed = f"regexp_replace(content, {sql_literal(f'(?:{pattern})$')}, '')"
        return (
            f"SELECT unnest(string_split_regex({trimmed}, {sql_literal(pattern)})) AS value "
            f"FROM read_text({paths}) WHERE content <> ''"
        )
