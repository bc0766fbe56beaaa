# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from .base import Base, NAMING_CONVENTION, BigIntPK, as_db_enum
from .database import (
    build_engine,
    build_session_factory,
    get_engine,
    get_session_factory,
    init_database,
    dispose_database,
    create_schema,
    get_async_session,
    check_database_health,
)
from .repository import BaseRepository

__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "BigIntPK",
    "as_db_enum",
    "BaseRepository",
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

# Fin del archivo backend/app/shared/database/__init__.py
