# -*- coding: utf-8 -*-
"""
backend/app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- BigIntPK: BIGINT en Postgres, INTEGER en SQLite (autoincrement real)
- as_db_enum: helper para mapear enums Python a columnas string validadas

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from enum import Enum
from typing import Type

from sqlalchemy import BigInteger, Enum as SAEnum, Integer, MetaData
from sqlalchemy.orm import DeclarativeBase

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# SQLite solo autoincrementa columnas INTEGER PRIMARY KEY
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")


# ===== HELPER GENÉRICO PARA ENUMS =====
def as_db_enum(
    enum_cls: Type[Enum],
    name: str | None = None,
    length: int = 32,
) -> SAEnum:
    """
    Devuelve un tipo Enum de SQLAlchemy almacenado como VARCHAR + CHECK.

    Uso típico:

        from app.shared.database.base import Base, as_db_enum
        from .enums import PaymentStatus

        class PaymentRecord(Base):
            status: Mapped[PaymentStatus] = mapped_column(
                as_db_enum(PaymentStatus),
                nullable=False,
            )

    - Se persisten los `value` del enum (no los nombres).
    - native_enum=False: mismo DDL en Postgres y SQLite (tests).
    """
    enum_name = name or getattr(enum_cls, "__db_enum_name__", enum_cls.__name__.lower())

    def _values(_: object) -> list[str]:
        return [e.value for e in enum_cls]  # type: ignore[arg-type]

    return SAEnum(
        enum_cls,
        name=enum_name,
        native_enum=False,
        create_constraint=True,
        length=length,
        values_callable=_values,
        validate_strings=True,
    )


__all__ = ["Base", "NAMING_CONVENTION", "BigIntPK", "as_db_enum"]

# Fin del archivo backend/app/shared/database/base.py
