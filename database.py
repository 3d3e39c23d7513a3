from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the database engine

    SQLite connections are shared across request threads, and in-memory
    SQLite keeps a single connection so every session sees the same data.
    """
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def create_db_and_tables(engine: Engine) -> None:
    """Create all tables in the database"""
    # Register table models with SQLModel metadata
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Generator[Session, None, None]:
    """Get database session - used as FastAPI dependency"""
    with Session(request.app.state.engine) as session:
        yield session
