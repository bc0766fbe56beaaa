# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/payment_repository.py

Repositorio para la tabla payment_records.

Responsabilidades:
- Búsqueda por external_payment_id (idempotencia)
- Alta de registros pending tolerante a carreras (unique + SAVEPOINT)
- Historial por usuario y sumas de montos verificados por curso

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.models.payment_models import PaymentRecord

logger = logging.getLogger(__name__)


class PaymentRepository(BaseRepository[PaymentRecord]):
    def __init__(self) -> None:
        super().__init__(PaymentRecord)

    # -----------------------------------------------------------
    # Búsqueda clave para idempotencia
    # -----------------------------------------------------------
    async def get_by_external_payment_id(
        self,
        session: AsyncSession,
        external_payment_id: str,
    ) -> Optional[PaymentRecord]:
        """Obtiene el registro por el ID de pago del gateway."""
        stmt = select(PaymentRecord).where(
            PaymentRecord.external_payment_id == external_payment_id
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    # -----------------------------------------------------------
    # Alta pending (ganador único por external_payment_id)
    # -----------------------------------------------------------
    async def insert_pending(
        self,
        session: AsyncSession,
        *,
        external_order_id: str,
        external_payment_id: str,
        user_id: str,
        course_id: str,
        amount: int,
        signature: str,
    ) -> tuple[PaymentRecord, bool]:
        """
        Crea el registro en estado pending.

        Usa SAVEPOINT para que la violación de unicidad (otro request ganó
        la carrera) no invalide la transacción exterior.

        Returns:
            Tuple (record, created: bool). Si created=False, record es el
            registro del ganador.
        """
        integrity_error: Optional[IntegrityError] = None
        try:
            async with session.begin_nested():
                record = PaymentRecord(
                    external_order_id=external_order_id,
                    external_payment_id=external_payment_id,
                    user_id=user_id,
                    course_id=course_id,
                    amount=amount,
                    status=PaymentStatus.PENDING,
                    signature=signature,
                )
                session.add(record)
                await session.flush()
            return record, True
        except IntegrityError as exc:
            integrity_error = exc
            # El SAVEPOINT ya hizo rollback; la transacción exterior sigue viva
            logger.info(
                "payment_record_race_lost external_payment_id=%s (concurrent create)",
                external_payment_id,
            )

        winner = await self.get_by_external_payment_id(session, external_payment_id)
        if winner is None:
            # La restricción violada no fue la de unicidad del pago
            raise integrity_error
        return winner, False

    # -----------------------------------------------------------
    # Lecturas
    # -----------------------------------------------------------
    async def list_by_user(
        self,
        session: AsyncSession,
        user_id: str,
    ) -> Sequence[PaymentRecord]:
        """
        Historial de un usuario, más reciente primero.
        El id desempata registros creados en el mismo instante.
        """
        stmt = select(PaymentRecord).where(PaymentRecord.user_id == user_id)
        stmt = stmt.order_by(PaymentRecord.created_at.desc(), PaymentRecord.id.desc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def sum_verified_amount(self, session: AsyncSession, course_id: str) -> int:
        """Suma de amount sobre los registros verified del curso."""
        stmt = select(func.coalesce(func.sum(PaymentRecord.amount), 0)).where(
            PaymentRecord.course_id == course_id,
            PaymentRecord.status == PaymentStatus.VERIFIED,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())


__all__ = ["PaymentRepository"]

# Fin del archivo backend/app/modules/payments/repositories/payment_repository.py
