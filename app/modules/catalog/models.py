# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/models.py

Modelos ORM mínimos de usuarios y cursos.

Solo se mapean las columnas que consume el ledger de liquidación.
enrolled_courses / enrolled_students se derivan de la tabla enrollments
(ver EnrollmentRepository); no existen arrays mutables en estos modelos.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppUser(Base):
    """Usuario (alumno o instructor) registrado en la plataforma."""

    __tablename__ = "app_users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<AppUser {self.id}>"


class Course(Base):
    """Curso publicado; price=0 indica curso gratuito."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # Precio en la unidad mínima de la moneda (centavos / paise)
    price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Precio del curso en unidad mínima de moneda.",
    )

    instructor_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        doc="Instructor que recibe los ingresos del curso.",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
    )

    @property
    def is_free(self) -> bool:
        return self.price == 0

    def __repr__(self) -> str:
        return f"<Course {self.id}>"


__all__ = ["AppUser", "Course"]
