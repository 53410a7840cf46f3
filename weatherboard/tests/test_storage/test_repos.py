"""Tests for the preferences / tracked-city repository."""

import sqlite3
from pathlib import Path

import pytest

from weatherboard.storage import city_repo
from weatherboard.storage.city_repo import CityStore
from weatherboard.storage.database import open_database


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    conn = open_database(tmp_path / "repo.db")
    yield conn
    conn.close()


class TestPreferences:
    def test_missing_key(self, db: sqlite3.Connection):
        assert city_repo.get_preference(db, "nope") is None

    def test_upsert(self, db: sqlite3.Connection):
        city_repo.set_preference(db, "k", "1")
        city_repo.set_preference(db, "k", "2")
        assert city_repo.get_preference(db, "k") == "2"
        count = db.execute("SELECT COUNT(*) FROM preferences").fetchone()[0]
        assert count == 1


class TestCities:
    def test_nothing_saved(self, db: sqlite3.Connection):
        assert city_repo.load_cities(db) is None

    def test_round_trip_keeps_order(self, db: sqlite3.Connection):
        city_repo.save_cities(db, ["Paris", "London", "São Paulo"])
        assert city_repo.load_cities(db) == ["Paris", "London", "São Paulo"]

    def test_stored_as_json_array(self, db: sqlite3.Connection):
        city_repo.save_cities(db, ["Paris"])
        assert city_repo.get_preference(db, "weatherCities") == '["Paris"]'

    def test_corrupt_value_ignored(self, db: sqlite3.Connection):
        city_repo.set_preference(db, "weatherCities", "{not json")
        assert city_repo.load_cities(db) is None

    def test_non_list_ignored(self, db: sqlite3.Connection):
        city_repo.set_preference(db, "weatherCities", '{"a": 1}')
        assert city_repo.load_cities(db) is None


class TestCityStore:
    def test_survives_reopen(self, tmp_path: Path):
        store = CityStore(tmp_path / "store.db")
        store.save(["Oslo"])
        store.close()

        reopened = CityStore(tmp_path / "store.db")
        assert reopened.load() == ["Oslo"]
        reopened.close()
