"""Shared test fixtures."""

import json
import sqlite3
from pathlib import Path

import pytest
import yaml

from nimbus.config.schema import NimbusConfig
from nimbus.storage.database import connect, run_migrations
from nimbus.storage.location_store import LocationStore

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    """Create a migrated temporary SQLite database."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def store(db: sqlite3.Connection) -> LocationStore:
    return LocationStore(db)


@pytest.fixture
def default_config() -> NimbusConfig:
    return NimbusConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "search": {"debounce_ms": 100},
        "storage": {"db_path": str(tmp_path / "nimbus.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def paris_forecast() -> dict:
    with open(FIXTURE_DIR / "open_meteo_paris.json") as f:
        return json.load(f)


@pytest.fixture
def paris_geocoding() -> dict:
    with open(FIXTURE_DIR / "geocoding_paris.json") as f:
        return json.load(f)
