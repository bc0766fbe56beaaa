# -*- coding: utf-8 -*-
"""
backend/app/modules/revenue/models.py

Modelos ORM de ingresos por curso.

- CourseRevenueTotal: total acumulado (entero, unidad mínima de moneda).
- RevenueCredit: conjunto de PaymentRecords ya acreditados; la unicidad
  de payment_record_id impide acreditar dos veces el mismo pago.

Invariante: total_revenue == sum(amount) de los PaymentRecords verified
del curso == sum(amount) de sus RevenueCredit.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CourseRevenueTotal(Base):
    """Total acumulado de ingresos de un curso."""

    __tablename__ = "course_revenue_totals"

    course_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    total_revenue: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        doc="Suma de montos verificados en unidad mínima de moneda.",
    )

    last_payment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("payment_records.id", ondelete="RESTRICT"),
        nullable=True,
        doc="Último PaymentRecord acreditado.",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        CheckConstraint("total_revenue >= 0", name="total_revenue_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<CourseRevenueTotal course={self.course_id} total={self.total_revenue}>"


class RevenueCredit(Base):
    """Acreditación de un PaymentRecord al total de su curso (una por pago)."""

    __tablename__ = "revenue_credits"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    payment_record_id: Mapped[int] = mapped_column(
        ForeignKey("payment_records.id", ondelete="RESTRICT"),
        nullable=False,
    )

    course_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)

    credited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint(
            "payment_record_id",
            name="uq_revenue_credits_payment_record_id",
        ),
        CheckConstraint("amount > 0", name="amount_positive"),
    )


__all__ = ["CourseRevenueTotal", "RevenueCredit"]
