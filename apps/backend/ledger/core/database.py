"""
DB 세션과 트랜잭션 단위

- 테이블 이름은 클래스 이름을 소문자로 쓴 것 (Account -> account)
- 서비스는 atomic() 안에서 flush만 하고, commit/rollback은 atomic이 맡는다
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, declared_attr, sessionmaker

from .config import settings
from .errors import LedgerError


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        return cls.__name__.lower()


engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if settings.uses_sqlite else {},
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    # 이체 쌍의 FK(ON DELETE)를 SQLite에서도 강제하고, 읽기 중 쓰기를 허용
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


if settings.uses_sqlite:
    event.listen(engine, "connect", _enable_sqlite_pragmas)


def get_db() -> Iterator[Session]:
    """Request-scoped session for FastAPI ``Depends``."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a block of writes as one unit: commit on success, roll back on any error.

    Nothing written inside the block is visible to other sessions until the
    whole block succeeded.
    """
    try:
        yield db
        db.commit()
    except LedgerError as exc:
        db.rollback()
        logger.warning("ledger write rejected: %s", exc)
        raise
    except Exception:
        db.rollback()
        logger.exception("ledger write rolled back")
        raise
