"""Format Handler for Parquet files."""
import logging
from typing import Dict

from .base import BaseFormatHandler

logger = logging.getLogger(__name__)


class ParquetHandler(BaseFormatHandler):
    """Reads Parquet files through DuckDB's read_parquet table function."""

    param_map: Dict[str, str] = {
        'mergeschema': 'union_by_name',
        'binaryasstring': 'binary_as_string',
    }

    @property
    def source_format(self) -> str:
        return "parquet"

    def render_sql(self) -> str:
        if self.description.schema:
            # Parquet files carry their own schema.
            logger.debug("Ignoring user-specified schema for parquet source %s", self.description.paths)
        return self.render_table_function("read_parquet", self.render_params())
