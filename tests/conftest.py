from __future__ import annotations

import sys
from pathlib import Path

import pytest

# make the messagely package importable without installing it
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from messagely.core import config as core_config  # noqa: E402
from messagely.db import models  # noqa: E402
from messagely.db import session as db_session  # noqa: E402
from messagely.repositories.sql_repository import SQLRepository  # noqa: E402


def _reset_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point the app at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
    monkeypatch.setenv("PASSWORD_WORK_FACTOR", "1")
    monkeypatch.setenv("SESSION_TTL_SECONDS", "3600")
    _reset_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _reset_caches()


@pytest.fixture()
def repo(db_env) -> SQLRepository:
    return SQLRepository()
