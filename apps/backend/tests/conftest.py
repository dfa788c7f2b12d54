from __future__ import annotations

import os
import tempfile
from typing import Generator, Any

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from ledger.core.database import Base, get_db
from ledger.main import app
from ledger import models  # noqa: F401 - register tables on Base.metadata


@pytest.fixture(scope="session")
def test_db_url() -> Generator[str, Any, Any]:
    # 사용자 환경을 건드리지 않도록 임시 파일 SQLite 사용
    fd, path = tempfile.mkstemp(prefix="ledger_test_", suffix=".sqlite3")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(test_db_url: str):
    eng = create_engine(test_db_url, connect_args={"check_same_thread": False})

    @event.listens_for(eng, "connect")
    def _fk_on(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(eng)
    return eng


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Any, Any, Any]:
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # 테이블 데이터 정리 (SQLAlchemy 2.x 스타일)
        with engine.begin() as conn:
            conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
            for tbl in reversed(Base.metadata.sorted_tables):
                conn.execute(tbl.delete())
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    # FastAPI DI override
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_account(client):
    def _make(name: str, **extra) -> dict:
        r = client.post("/api/accounts", json={"name": name, **extra})
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture()
def category_id(client):
    """Look up (or create) a category id by its labels."""

    def _lookup(type: str, major: str, sub: str | None = None) -> int:
        rows = client.get("/api/categories", params={"type": type}).json()
        for row in rows:
            if row["major"] == major and row["sub"] == sub:
                return row["id"]
        r = client.post("/api/categories", json={"type": type, "major": major, "sub": sub})
        assert r.status_code == 201, r.text
        return r.json()["id"]

    return _lookup
