"""
Database engine, session factory and idempotent schema management.

The ingestion pipeline runs unattended, so schema creation is
create-if-not-exists plus adding any column a model declares that an
existing table lacks.
"""

from __future__ import annotations

from typing import Iterator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.infra.logging_config import get_logger

logger = get_logger("db")

Base = declarative_base()


def _build_engine() -> Engine:
    settings = get_settings()
    url = settings.database_url_obj
    if url.get_backend_name() == "sqlite":
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args={"application_name": settings.app_name},
    )


engine = _build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_schema(bind: Engine | None = None) -> list[str]:
    """
    Create missing tables and add missing columns. Safe to run repeatedly.

    Returns the list of "table.column" entries that were added.
    """
    # Register every model on Base.metadata before create_all.
    import app.models  # noqa: F401

    bind = bind or engine
    Base.metadata.create_all(bind=bind, checkfirst=True)

    added: list[str] = []
    inspector = inspect(bind)
    for table in Base.metadata.sorted_tables:
        existing = {c["name"] for c in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in existing:
                continue
            column_type = column.type.compile(dialect=bind.dialect)
            with bind.begin() as conn:
                conn.execute(
                    text(
                        f'ALTER TABLE {table.name} ADD COLUMN "{column.name}" {column_type}'
                    )
                )
            added.append(f"{table.name}.{column.name}")
    if added:
        logger.info("Added missing columns: %s", ", ".join(added))
    return added
