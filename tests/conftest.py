"""Shared pytest fixtures for Vorsorge-Pilot tests."""

import pytest

import vorsorge_pilot.core.config as configmod
import vorsorge_pilot.data.database as dbmod
from vorsorge_pilot.data.database import get_db, set_db_path


@pytest.fixture(autouse=True)
def isolated_db(tmp_path):
    """Each test gets a fresh temp DB. Resets the global singleton after."""
    db_path = tmp_path / "test.db"
    set_db_path(str(db_path))
    db = get_db()
    yield db
    db.conn.close()
    dbmod._db = None


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config.json and the CLI session file into the temp dir."""
    monkeypatch.setattr(configmod, "_config_path", lambda: tmp_path / "config.json")
    monkeypatch.setenv("VP_SESSION_FILE", str(tmp_path / ".vp_session"))
    configmod.reset_config_cache()
    yield
    configmod.reset_config_cache()
