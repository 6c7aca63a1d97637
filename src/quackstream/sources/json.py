"""Format Handler for JSON Lines files."""
from typing import Dict, Set

from .base import BaseFormatHandler


class JSONHandler(BaseFormatHandler):
    """
    Reads JSON files through DuckDB's read_json table function.

    Without a schema the column types are auto-detected. `multiLine` switches
    between newline-delimited records and DuckDB's automatic layout detection,
    which also accepts records spanning several lines.
    """

    param_map: Dict[str, str] = {
        'dateformat': 'dateformat',
        'timestampformat': 'timestampformat',
        'compression': 'compression',
    }
    string_params: Set[str] = {'dateformat', 'timestampformat', 'compression'}

    @property
    def source_format(self) -> str:
        return "json"

    def render_sql(self) -> str:
        params = self.render_params(special={'multiline'})

        multiline = self.options.get('multiline')
        if multiline is not None:
            layout = 'auto' if multiline.lower() == 'true' else 'newline_delimited'
            params.append(f"format = '{layout}'")

        if self.description.schema:
            params.append(self.render_columns())
        else:
            params.append("auto_detect = TRUE")
        return self.render_table_function("read_json", params)
