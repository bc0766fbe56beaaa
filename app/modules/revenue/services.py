# -*- coding: utf-8 -*-
"""
backend/app/modules/revenue/services.py

Acumulador de ingresos por curso.

Implementa la regla central:
- Cada PaymentRecord verified se acredita exactamente una vez al total
  de su curso (conjunto revenue_credits con unicidad por pago).
- Toda la aritmética es entera (unidad mínima de moneda); no hay float
  en la ruta del monto.

Los métodos operan dentro de la transacción del llamador: hacen flush,
nunca commit.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import CreditPreconditionError, InvalidAmount, is_valid_amount
from app.modules.payments.repositories import PaymentRepository
from .repositories import RevenueRepository

logger = logging.getLogger(__name__)


class RevenueAccumulator:
    """Total corriente por curso, derivado estrictamente de pagos verificados."""

    def __init__(
        self,
        revenue_repo: Optional[RevenueRepository] = None,
        payment_repo: Optional[PaymentRepository] = None,
    ):
        self.revenue_repo = revenue_repo or RevenueRepository()
        self.payment_repo = payment_repo or PaymentRepository()

    async def credit(
        self,
        session: AsyncSession,
        course_id: str,
        amount: int,
        payment_record_id: int,
    ) -> int:
        """
        Acredita el monto de un pago verificado al total del curso.

        Idempotente por payment_record_id: un reintento nunca incrementa
        dos veces el total.

        Returns:
            Total del curso después de la operación

        Raises:
            InvalidAmount: amount no es entero positivo
            CreditPreconditionError: el pago no existe, no está verified o
                no corresponde a (course_id, amount)
        """
        if not is_valid_amount(amount):
            raise InvalidAmount(amount)

        payment = await self.payment_repo.get(session, payment_record_id)
        if payment is None or payment.status != PaymentStatus.VERIFIED:
            raise CreditPreconditionError(
                f"PaymentRecord {payment_record_id} is not a verified payment"
            )
        if payment.course_id != course_id or payment.amount != amount:
            raise CreditPreconditionError(
                f"PaymentRecord {payment_record_id} does not match "
                f"course={course_id} amount={amount}"
            )

        # Fast-path: ya acreditado
        if await self.revenue_repo.get_credit(session, payment_record_id):
            logger.info(
                "Idempotent credit: payment_record_id=%s already credited to course=%s",
                payment_record_id, course_id,
            )
            return await self.get_revenue(session, course_id)

        inserted = await self.revenue_repo.add_credit(
            session,
            payment_record_id=payment_record_id,
            course_id=course_id,
            amount=amount,
        )
        if not inserted:
            return await self.get_revenue(session, course_id)

        total = await self.revenue_repo.get_or_create_total(session, course_id)
        await self.revenue_repo.increment_total(session, total, amount, payment_record_id)

        logger.info(
            "Revenue credited: course=%s amount=%d total=%d payment_record_id=%s",
            course_id, amount, total.total_revenue, payment_record_id,
        )
        return total.total_revenue

    async def get_revenue(self, session: AsyncSession, course_id: str) -> int:
        """Total acumulado del curso (0 si nunca recibió pagos)."""
        total = await self.revenue_repo.get_total(session, course_id)
        return total.total_revenue if total else 0


__all__ = ["RevenueAccumulator"]

# Fin del archivo backend/app/modules/revenue/services.py
