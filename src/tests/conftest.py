import os
from unittest.mock import Mock

import duckdb
import pytest
import yaml

from quackstream import DuckDBSession
from quackstream.relation import Relation


@pytest.fixture
def mock_session():
    """A session double that records every ReadRequest it receives."""
    mock = Mock()
    mock.new_relation = Mock(return_value=Mock(spec=Relation))
    return mock


@pytest.fixture
def duckdb_session():
    """A real DuckDBSession over an in-memory connection."""
    con = duckdb.connect(database=':memory:')
    yield DuckDBSession(con)
    con.close()


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "people.csv"
    path.write_text("id,name\n1,alice\n2,bob\n")
    return str(path)


@pytest.fixture
def csv_dir(tmp_path):
    """A directory holding two CSV files with the same layout."""
    data_dir = tmp_path / "csv_in"
    data_dir.mkdir()
    (data_dir / "part-0.csv").write_text("id,name\n1,alice\n2,bob\n")
    (data_dir / "part-1.csv").write_text("id,name\n3,carol\n4,dave\n")
    return str(data_dir)


@pytest.fixture
def json_file(tmp_path):
    path = tmp_path / "events.json"
    path.write_text('{"id": 1, "name": "a"}\n{"id": 2, "name": "b"}\n')
    return str(path)


@pytest.fixture
def text_file(tmp_path):
    path = tmp_path / "lines.txt"
    path.write_text("a\nb\n")
    return str(path)


@pytest.fixture
def parquet_file(tmp_path):
    path = str(tmp_path / "items.parquet")
    con = duckdb.connect(database=':memory:')
    con.execute(f"COPY (SELECT 1 AS id, 'x' AS name UNION ALL SELECT 2, 'y') TO '{path}' (FORMAT PARQUET)")
    con.close()
    return path


@pytest.fixture
def sample_config_dict(csv_file, json_file):
    """Sample stream configuration referencing real files."""
    return {
        'streams': {
            'people': {
                'format': 'csv',
                'schema': 'id INT, name STRING',
                'options': {'header': True, 'maxFilesPerTrigger': 1},
                'path': csv_file,
            },
            'events': {
                'format': 'json',
                'path': json_file,
            },
        }
    }


@pytest.fixture
def sample_yaml_config(tmp_path, sample_config_dict):
    """Create a temporary YAML config file."""
    config_path = os.path.join(tmp_path, 'streams.yml')
    with open(config_path, 'w') as f:
        yaml.dump(sample_config_dict, f)
    return config_path
