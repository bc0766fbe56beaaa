# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/models.py

Modelo ORM de inscripciones (acceso de un usuario a un curso).

Invariante: existe fila para (user_id, course_id) si y solo si existe un
PaymentRecord verified con ese par, o el curso es gratuito
(source_payment_id NULL).

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EnrollmentRecord(Base):
    """Acceso concedido a un curso, derivado de un pago verificado."""

    __tablename__ = "enrollments"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    course_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    source_payment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("payment_records.id", ondelete="RESTRICT"),
        nullable=True,
        doc="PaymentRecord que originó la inscripción (NULL = curso gratuito).",
    )

    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "course_id",
            name="uq_enrollments_user_course",
        ),
    )

    def __repr__(self) -> str:
        return f"<EnrollmentRecord user={self.user_id} course={self.course_id}>"


__all__ = ["EnrollmentRecord"]
