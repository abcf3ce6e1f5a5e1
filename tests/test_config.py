import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from studentdb.core import config as _config
from studentdb.core.config import MEMORY_DB, StoreConfig, get_data_directory, load_config


def test_defaults():
    cfg = StoreConfig()
    assert cfg.name == "student_db"
    assert cfg.version == 1
    assert cfg.pool_size == 2
    assert not cfg.in_memory


def test_env_overrides():
    cfg = load_config(
        {"STUDENTDB_NAME": "roster.db", "STUDENTDB_VERSION": "3", "STUDENTDB_POOL_SIZE": " 4 "}
    )
    assert cfg == StoreConfig(name="roster.db", version=3, pool_size=4)


def test_blank_env_values_fall_back_to_defaults():
    assert load_config({"STUDENTDB_NAME": "  ", "STUDENTDB_VERSION": ""}) == StoreConfig()


def test_non_integer_env_value_names_the_variable():
    with pytest.raises(ValueError, match="STUDENTDB_POOL_SIZE"):
        load_config({"STUDENTDB_POOL_SIZE": "two"})


@pytest.mark.parametrize("key", ["STUDENTDB_VERSION", "STUDENTDB_POOL_SIZE"])
def test_out_of_range_env_value_names_the_variable(key):
    with pytest.raises(ValueError, match=key):
        load_config({key: "0"})


@pytest.mark.parametrize("field", ["version", "pool_size"])
def test_counts_must_be_positive(field):
    with pytest.raises(ValidationError):
        StoreConfig(**{field: 0})


def test_process_environment_is_cached_until_reload(monkeypatch):
    monkeypatch.setenv("STUDENTDB_POOL_SIZE", "5")
    _config.reload()
    assert load_config().pool_size == 5
    monkeypatch.setenv("STUDENTDB_POOL_SIZE", "6")
    assert load_config().pool_size == 5
    _config.reload()
    assert load_config().pool_size == 6


def test_database_path_joins_location(tmp_path):
    cfg = StoreConfig(name="roster.db")
    assert cfg.database_path(tmp_path) == (tmp_path / "roster.db").as_posix()


def test_memory_name_ignores_location(tmp_path):
    cfg = StoreConfig(name=MEMORY_DB)
    assert cfg.in_memory
    assert cfg.database_path(tmp_path) == MEMORY_DB


def test_default_location_is_data_directory():
    cfg = StoreConfig()
    assert cfg.database_path() == (get_data_directory() / cfg.name).as_posix()


def test_data_directory_honours_xdg(monkeypatch, tmp_path):
    if sys.platform in ("win32", "darwin"):
        pytest.skip("XDG layout applies to Linux only")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert get_data_directory("Roster") == Path(tmp_path) / "Roster"
