"""Format Handler for CSV files."""
from typing import Dict, Set

from .base import BaseFormatHandler


class CSVHandler(BaseFormatHandler):
    """Reads CSV files through DuckDB's read_csv table function."""

    param_map: Dict[str, str] = {
        'header': 'header',
        'sep': 'delim',
        'delimiter': 'delim',
        'quote': 'quote',
        'escape': 'escape',
        'nullvalue': 'nullstr',
        'dateformat': 'dateformat',
        'timestampformat': 'timestampformat',
        'encoding': 'encoding',
        'comment': 'comment',
    }
    string_params: Set[str] = {
        'delim', 'quote', 'escape', 'nullstr', 'dateformat', 'timestampformat', 'encoding', 'comment',
    }

    @property
    def source_format(self) -> str:
        return "csv"

    def render_sql(self) -> str:
        params = self.render_params()
        if self.description.schema:
            params.append(self.render_columns())
        return self.render_table_function("read_csv", params)
