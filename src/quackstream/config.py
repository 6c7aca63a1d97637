"""
Defines the configuration structures for quackstream.
"""
import copy
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigError


class SourceFormat(str, Enum):
    """Connector identifiers used by the reader's format shortcuts."""
    JSON = "json"
    CSV = "csv"
    ORC = "orc"
    PARQUET = "parquet"
    TEXT = "text"


@dataclass
class SourceDescription:
    """The in-progress description of a streaming source."""
    format: Optional[str] = None
    schema: Optional[str] = None
    options: Dict[str, str] = field(default_factory=dict)
    paths: List[str] = field(default_factory=list)

    def snapshot(self) -> "SourceDescription":
        """Returns an independent copy of the description's current state."""
        return copy.deepcopy(self)


@dataclass(frozen=True)
class ReadRequest:
    """A request for a session to build a relation from a source description."""
    data_source: SourceDescription
    is_streaming: bool = True


@dataclass
class StreamConfig:
    """A named stream as declared in a YAML configuration file."""
    name: str
    format: Optional[str] = None
    schema: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None


def to_option_string(value: Any) -> str:
    """
    Converts an option value to its canonical string form.

    Booleans become "true"/"false", integers their decimal digits and floats
    Python's repr (e.g. "1.5", "1e+20", "nan", "inf").
    """
    if isinstance(value, str):
        return value
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _parse_config_from_yaml(config_path: str) -> List[StreamConfig]:
    """Parses the `streams` section of a YAML file into StreamConfig objects."""
    if not os.path.exists(config_path):
        raise ConfigError(f"Configuration file not found: '{config_path}'")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f) or {}

    streams = raw_config.get('streams') or {}
    if not isinstance(streams, dict):
        raise ConfigError("The 'streams' section must be a mapping of stream names to settings.")

    configs = []
    for name, details in streams.items():
        if not isinstance(details, dict):
            raise ConfigError(f"Settings for stream '{name}' must be a mapping.")
        details = dict(details)
        options = details.pop('options', None) or {}
        if not isinstance(options, dict):
            raise ConfigError(f"Options for stream '{name}' must be a mapping.")
        configs.append(StreamConfig(
            name=name,
            format=details.pop('format', None),
            schema=details.pop('schema', None),
            options=options,
            path=details.pop('path', None),
        ))
    return configs


def get_configs(config_path: Optional[str] = None,
                configs: Optional[List[StreamConfig]] = None) -> List[StreamConfig]:
    """Returns stream configs from an explicit list or from a YAML file."""
    if configs is not None:
        return list(configs)
    if config_path:
        return _parse_config_from_yaml(config_path)
    return []
