# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

Engine y fábrica de sesiones async (SQLAlchemy 2.x).

Provee:
- build_engine(): asyncpg en producción, aiosqlite en desarrollo/tests
- get_engine() / get_session_factory(): singletons perezosos desde settings
- init_database() / dispose_database(): ciclo de vida (lifespan de FastAPI)
- Dependencia FastAPI: get_async_session
- create_schema() / check_database_health()

Notas:
- En SQLite se desactiva el BEGIN implícito de pysqlite y se emite
  BEGIN IMMEDIATE propio; sin esto los SAVEPOINT no se comportan
  correctamente y dos liquidaciones concurrentes chocan al escribir.
- La sesión se crea con expire_on_commit=False: los registros devueltos
  por los servicios siguen legibles después del commit.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.shared.config.settings_settlement import get_settlement_settings
from app.shared.database.base import Base

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _install_sqlite_transaction_hooks(engine: AsyncEngine) -> None:
    """Receta documentada de SQLAlchemy para SAVEPOINT con aiosqlite."""

    @event.listens_for(engine.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        # Desactiva el BEGIN automático del driver
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _do_begin(conn):
        # IMMEDIATE toma el lock de escritura al inicio: los escritores
        # concurrentes esperan el busy timeout en vez de fallar al promover
        # SHARED a RESERVED
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Crea un AsyncEngine para el DSN dado."""
    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"timeout": 15},
        )
        _install_sqlite_transaction_hooks(engine)
        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
        autoflush=False,
    )


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        settings = get_settlement_settings()
        _engine = build_engine(settings.database_url, echo=settings.db_echo_sql)
        log_level = logger.debug if settings.db_echo_sql else logger.info
        log_level("[DB] Engine creado (dialect=%s)", _engine.dialect.name)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


def init_database(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Registra un engine externo (tests o arranque explícito) como el global."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = build_session_factory(engine)
    return _session_factory


async def dispose_database() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def create_schema(engine: Optional[AsyncEngine] = None) -> None:
    """Crea todas las tablas registradas en Base.metadata (idempotente)."""
    # Registro de modelos en Base.metadata
    import app.modules.catalog.models  # noqa: F401
    import app.modules.payments.models  # noqa: F401
    import app.modules.enrollment.models  # noqa: F401
    import app.modules.revenue.models  # noqa: F401

    eng = engine or get_engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        try:
            yield session
        except SQLAlchemyError:
            # Libera cualquier transacción/lock antes de propagar
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with get_engine().connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] Health check falló: %s", e)
        return False


__all__ = [
    "build_engine",
    "build_session_factory",
    "get_engine",
    "get_session_factory",
    "init_database",
    "dispose_database",
    "create_schema",
    "get_async_session",
    "check_database_health",
]
# Fin del archivo backend/app/shared/database/database.py
