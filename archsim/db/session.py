from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import Config

SessionLocal = sessionmaker(autoflush=False, autocommit=False, expire_on_commit=False)
engine: Engine | None = None


def configure(database_url: str | None = None) -> Engine:
    global engine
    url = database_url or Config.DATABASE_URL
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so every session sees the same in-memory database.
        engine = create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(url, pool_pre_ping=True)
    SessionLocal.configure(bind=engine)
    return engine


def init_db(database_url: str | None = None) -> Engine:
    from .models import Base

    bound = configure(database_url) if database_url or engine is None else engine
    Base.metadata.create_all(bind=bound)
    return bound


@contextmanager
def session_scope():
    if engine is None:
        configure()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
