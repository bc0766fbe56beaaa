# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/payment_models.py

Modelo ORM para la tabla payment_records.

Un PaymentRecord por external_payment_id, siempre: la unicidad de esa
columna es el único ancla de control de concurrencia de la liquidación.
Los registros nunca se borran ni se reinician.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String,
    BigInteger,
    DateTime,
    UniqueConstraint,
    CheckConstraint,
    Index,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK
from app.modules.payments.enums import PaymentStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentRecord(Base):
    """Confirmación de pago del gateway, liquidada exactamente una vez."""

    __tablename__ = "payment_records"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    external_order_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        doc="ID de la orden creada en el gateway.",
    )

    external_payment_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        doc="ID del pago en el gateway (clave de idempotencia).",
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )

    course_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )

    # Monto en unidad mínima de moneda; nunca float
    amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        doc="Monto cobrado en unidad mínima de moneda.",
    )

    status: Mapped[PaymentStatus] = mapped_column(
        PaymentStatus.as_db_enum(),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )

    signature: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Firma hex reportada por el gateway (tal cual llegó).",
    )

    failure_reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    failed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint(
            "external_payment_id",
            name="uq_payment_records_external_payment_id",
        ),
        CheckConstraint("amount > 0", name="amount_positive"),
        Index(
            "ix_payment_records_user_created",
            "user_id",
            "created_at",
        ),
        Index(
            "ix_payment_records_course_status",
            "course_id",
            "status",
        ),
    )

    @property
    def is_terminal(self) -> bool:
        return PaymentStatus(self.status).is_terminal

    def __repr__(self) -> str:
        return (
            f"<PaymentRecord id={self.id} payment={self.external_payment_id} "
            f"status={self.status}>"
        )


__all__ = ["PaymentRecord"]
