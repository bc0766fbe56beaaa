# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/recovery_service.py

Pase de recuperación y auditoría del ledger de liquidación.

- replay_incomplete(): completa, de forma idempotente, los PaymentRecords
  verified a los que les falta la inscripción o la acreditación de
  ingresos (filas escritas por herramientas externas, versiones previas
  o intervención manual). Cada pago se repara en su propia transacción.
- audit_course_revenue(): compara el total almacenado con la suma de
  montos verified del curso. Solo lectura.

Idempotente: ejecutar N veces no duplica inscripciones ni ingresos.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.enrollment.models import EnrollmentRecord
from app.modules.enrollment.services import EnrollmentLedger
from app.modules.revenue.models import RevenueCredit
from app.modules.revenue.repositories import RevenueRepository
from app.modules.revenue.services import RevenueAccumulator
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import SettlementError
from app.modules.payments.models import PaymentRecord
from app.modules.payments.repositories import PaymentRepository

logger = logging.getLogger(__name__)


@dataclass
class RecoveryResult:
    """Resultado de reparar un PaymentRecord verified incompleto."""
    payment_record_id: int
    external_payment_id: str
    enrollment_created: bool
    revenue_credited: bool
    error: Optional[str] = None


@dataclass
class RevenueAuditResult:
    """Comparación entre el total almacenado y los pagos verified."""
    course_id: str
    recorded_total: int
    expected_total: int
    credited_total: int

    @property
    def consistent(self) -> bool:
        return self.recorded_total == self.expected_total == self.credited_total


class SettlementRecoveryService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        payment_repo: Optional[PaymentRepository] = None,
        revenue_repo: Optional[RevenueRepository] = None,
        enrollment_ledger: Optional[EnrollmentLedger] = None,
        revenue_accumulator: Optional[RevenueAccumulator] = None,
    ) -> None:
        self._session_factory = session_factory
        self.payment_repo = payment_repo or PaymentRepository()
        self.revenue_repo = revenue_repo or RevenueRepository()
        self.enrollment_ledger = enrollment_ledger or EnrollmentLedger(payment_repo=self.payment_repo)
        self.revenue_accumulator = revenue_accumulator or RevenueAccumulator(
            revenue_repo=self.revenue_repo,
            payment_repo=self.payment_repo,
        )

    async def _find_incomplete(self, session: AsyncSession) -> list[tuple[int, bool, bool]]:
        """(payment_record_id, falta_inscripción, falta_acreditación) de pagos verified."""
        stmt = (
            select(
                PaymentRecord.id,
                EnrollmentRecord.id.is_(None),
                RevenueCredit.id.is_(None),
            )
            .outerjoin(
                EnrollmentRecord,
                and_(
                    EnrollmentRecord.user_id == PaymentRecord.user_id,
                    EnrollmentRecord.course_id == PaymentRecord.course_id,
                ),
            )
            .outerjoin(RevenueCredit, RevenueCredit.payment_record_id == PaymentRecord.id)
            .where(PaymentRecord.status == PaymentStatus.VERIFIED)
            .where(or_(EnrollmentRecord.id.is_(None), RevenueCredit.id.is_(None)))
            .order_by(PaymentRecord.id)
        )
        result = await session.execute(stmt)
        return [(row[0], bool(row[1]), bool(row[2])) for row in result.all()]

    async def replay_incomplete(self) -> list[RecoveryResult]:
        """
        Completa los efectos faltantes de pagos verified.

        Returns:
            Lista de RecoveryResult, uno por pago procesado
        """
        async with self._session_factory() as session:
            candidates = await self._find_incomplete(session)

        results: list[RecoveryResult] = []
        for record_id, missing_enrollment, missing_credit in candidates:
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        record = await self.payment_repo.get(session, record_id)
                        if missing_enrollment:
                            await self.enrollment_ledger.enroll(
                                session, record.user_id, record.course_id, record.id
                            )
                        if missing_credit:
                            await self.revenue_accumulator.credit(
                                session, record.course_id, record.amount, record.id
                            )
                results.append(
                    RecoveryResult(
                        payment_record_id=record_id,
                        external_payment_id=record.external_payment_id,
                        enrollment_created=missing_enrollment,
                        revenue_credited=missing_credit,
                    )
                )
            except (SettlementError, DBAPIError) as e:
                logger.error(
                    "replay_incomplete: failed for payment_record_id=%s: %s",
                    record_id, e,
                )
                results.append(
                    RecoveryResult(
                        payment_record_id=record_id,
                        external_payment_id="",
                        enrollment_created=False,
                        revenue_credited=False,
                        error=str(e),
                    )
                )

        logger.info(
            "replay_incomplete: processed %d payments, repaired=%d failed=%d",
            len(results),
            sum(1 for r in results if r.error is None),
            sum(1 for r in results if r.error is not None),
        )
        return results

    async def audit_course_revenue(self, course_id: str) -> RevenueAuditResult:
        """Verifica total == suma de pagos verified == suma de acreditaciones."""
        async with self._session_factory() as session:
            total = await self.revenue_repo.get_total(session, course_id)
            audit = RevenueAuditResult(
                course_id=course_id,
                recorded_total=total.total_revenue if total else 0,
                expected_total=await self.payment_repo.sum_verified_amount(session, course_id),
                credited_total=await self.revenue_repo.sum_credits(session, course_id),
            )

        if not audit.consistent:
            logger.error(
                "revenue_audit_mismatch course=%s recorded=%d expected=%d credited=%d",
                course_id, audit.recorded_total, audit.expected_total, audit.credited_total,
            )
        return audit


__all__ = [
    "RecoveryResult",
    "RevenueAuditResult",
    "SettlementRecoveryService",
]

# Fin del archivo backend/app/modules/payments/services/recovery_service.py
