# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/settlement_service.py

Registro idempotente de pagos (ledger de liquidación).

Pipeline de settle():
1. Si ya existe PaymentRecord para external_payment_id → se devuelve tal
   cual (sin re-verificar, re-inscribir ni re-acreditar).
2. Precondiciones: curso y usuario existen, amount entero > 0 e igual al
   precio del curso. Se rechaza ANTES de crear registro.
3. Alta pending con unicidad por external_payment_id; si otro request
   gana la carrera se devuelve el registro del ganador.
4. Verificación de firma:
   - inválida → failed, sin efectos; se señala PaymentVerificationFailed
   - válida   → verified + inscripción + acreditación de ingresos

Garantías:
- Atomicidad: pasos 3-4 ocurren en UNA transacción; ningún lector ve
  verified sin su inscripción y su acreditación, y una caída a mitad no
  deja nada durable.
- Idempotencia: N llamadas idénticas producen 1 PaymentRecord,
  1 EnrollmentRecord y 1 acreditación.
- Fallos de persistencia: se reintenta la unidad completa con backoff
  exponencial hasta max_attempts; luego PersistenceFailure.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.shared.config.settings_settlement import SettlementSettings, get_settlement_settings
from app.modules.catalog.repositories import CourseRepository, UserRepository
from app.modules.enrollment.services import EnrollmentLedger
from app.modules.revenue.services import RevenueAccumulator
from app.modules.payments.enums import PaymentStatus, SettlementOutcome
from app.modules.payments.errors import (
    InvalidAmount,
    InvalidStateTransition,
    PaymentVerificationFailed,
    PersistenceFailure,
    SettlementError,
    UnknownCourse,
    UnknownUser,
    is_valid_amount,
)
from app.modules.payments.metrics import (
    observe_revenue_credited,
    observe_settlement_outcome,
    observe_settlement_retry,
)
from app.modules.payments.metrics.exporters.prometheus_exporter import (
    SETTLEMENT_PROCESSING_SECONDS,
)
from app.modules.payments.models import PaymentRecord
from app.modules.payments.repositories import PaymentRepository
from app.modules.payments.services.signature_verification import verify_gateway_signature

logger = logging.getLogger(__name__)


def _is_non_empty_str(value: object) -> bool:
    return isinstance(value, str) and value != ""


def _transition(record: PaymentRecord, target: PaymentStatus) -> None:
    current = PaymentStatus(record.status)
    if not current.can_transition_to(target):
        raise InvalidStateTransition(current, target)
    record.status = target


class SettlementService:
    """
    Convierte un callback del gateway en un PaymentRecord durable,
    liquidado exactamente una vez.

    Cada intento abre su propia sesión/transacción desde session_factory;
    la fábrica debe crear sesiones con expire_on_commit=False.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        secret: str,
        enrollment_ledger: Optional[EnrollmentLedger] = None,
        revenue_accumulator: Optional[RevenueAccumulator] = None,
        payment_repo: Optional[PaymentRepository] = None,
        course_repo: Optional[CourseRepository] = None,
        user_repo: Optional[UserRepository] = None,
        max_attempts: int = 3,
        retry_backoff_seconds: float = 0.05,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._session_factory = session_factory
        self._secret = secret
        self.payment_repo = payment_repo or PaymentRepository()
        self.course_repo = course_repo or CourseRepository()
        self.user_repo = user_repo or UserRepository()
        self.enrollment_ledger = enrollment_ledger or EnrollmentLedger(payment_repo=self.payment_repo)
        self.revenue_accumulator = revenue_accumulator or RevenueAccumulator(payment_repo=self.payment_repo)
        self.max_attempts = max_attempts
        self.retry_backoff_seconds = retry_backoff_seconds

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Optional[SettlementSettings] = None,
    ) -> "SettlementService":
        settings = settings or get_settlement_settings()
        if not settings.gateway_secret_value():
            logger.warning(
                "GATEWAY_KEY_SECRET no configurado: toda liquidación fallará la verificación."
            )
        return cls(
            session_factory,
            secret=settings.gateway_secret_value(),
            max_attempts=settings.max_persistence_retries,
            retry_backoff_seconds=settings.persistence_retry_backoff_seconds,
        )

    # ------------------------------------------------------------------ #
    # Liquidación
    # ------------------------------------------------------------------ #
    async def settle(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
        user_id: str,
        course_id: str,
        amount: int,
    ) -> PaymentRecord:
        """
        Liquida un callback del gateway.

        Returns:
            PaymentRecord verified (nuevo) o el registro ya existente
            para payment_id (duplicado, en cualquier estado terminal)

        Raises:
            PaymentVerificationFailed: firma inválida (registro failed
                persistido y disponible en .record)
            UnknownCourse / UnknownUser / InvalidAmount: precondiciones
            PersistenceFailure: reintentos de persistencia agotados
        """
        start = time.perf_counter()
        try:
            record, outcome = await self._settle_with_retries(
                order_id, payment_id, signature, user_id, course_id, amount
            )
        except PaymentVerificationFailed:
            observe_settlement_outcome(SettlementOutcome.VERIFICATION_FAILED)
            raise
        except PersistenceFailure:
            observe_settlement_outcome(SettlementOutcome.PERSISTENCE_FAILURE)
            raise
        except SettlementError:
            observe_settlement_outcome(SettlementOutcome.REJECTED)
            raise
        finally:
            SETTLEMENT_PROCESSING_SECONDS.observe(time.perf_counter() - start)

        observe_settlement_outcome(outcome)

        if outcome is SettlementOutcome.VERIFICATION_FAILED:
            raise PaymentVerificationFailed(record, reason=record.failure_reason or "invalid signature")

        if outcome is SettlementOutcome.VERIFIED:
            observe_revenue_credited(record.amount)
            logger.info(
                "settlement_verified payment_id=%s record_id=%s user=%s course=%s amount=%d",
                payment_id, record.id, user_id, course_id, record.amount,
            )
        else:
            logger.info(
                "settlement_duplicate payment_id=%s record_id=%s status=%s",
                payment_id, record.id, record.status,
            )
        return record

    async def _settle_with_retries(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
        user_id: str,
        course_id: str,
        amount: int,
    ) -> tuple[PaymentRecord, SettlementOutcome]:
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        return await self._settle_once(
                            session, order_id, payment_id, signature, user_id, course_id, amount
                        )
            except DBAPIError as exc:
                # La transacción completa hizo rollback: nada parcial es visible
                last_error = exc
                logger.warning(
                    "settlement_persistence_error payment_id=%s attempt=%d/%d error=%s",
                    payment_id, attempt, self.max_attempts, exc.__class__.__name__,
                )
                if attempt < self.max_attempts:
                    observe_settlement_retry()
                    await asyncio.sleep(self.retry_backoff_seconds * (2 ** (attempt - 1)))

        logger.error(
            "settlement_persistence_exhausted payment_id=%s attempts=%d",
            payment_id, self.max_attempts,
        )
        raise PersistenceFailure(self.max_attempts, last_error) from last_error

    async def _settle_once(
        self,
        session: AsyncSession,
        order_id: str,
        payment_id: str,
        signature: str,
        user_id: str,
        course_id: str,
        amount: int,
    ) -> tuple[PaymentRecord, SettlementOutcome]:
        # Sin order_id/payment_id no hay clave para persistir el intento
        if not _is_non_empty_str(order_id) or not _is_non_empty_str(payment_id):
            logger.warning("Gateway callback rejected: malformed order_id/payment_id")
            raise PaymentVerificationFailed(None, reason="malformed callback")

        # 1) Idempotencia
        existing = await self.payment_repo.get_by_external_payment_id(session, payment_id)
        if existing is not None:
            return existing, SettlementOutcome.DUPLICATE

        # 2) Precondiciones (antes de crear cualquier registro)
        course = (
            await self.course_repo.get(session, course_id)
            if _is_non_empty_str(course_id) else None
        )
        if course is None:
            raise UnknownCourse(course_id)
        user = (
            await self.user_repo.get(session, user_id)
            if _is_non_empty_str(user_id) else None
        )
        if user is None:
            raise UnknownUser(user_id)
        if not is_valid_amount(amount) or amount != course.price:
            raise InvalidAmount(amount, expected=course.price)

        # 3) Alta pending; el perdedor de la carrera recibe el registro del ganador
        record, created = await self.payment_repo.insert_pending(
            session,
            external_order_id=order_id,
            external_payment_id=payment_id,
            user_id=user_id,
            course_id=course_id,
            amount=amount,
            signature=signature if isinstance(signature, str) else "",
        )
        if not created:
            return record, SettlementOutcome.DUPLICATE

        # 4) Verificación de firma
        now = datetime.now(timezone.utc)
        if not verify_gateway_signature(order_id, payment_id, signature, self._secret):
            _transition(record, PaymentStatus.FAILED)
            record.failed_at = now
            record.failure_reason = "invalid signature"
            await session.flush()
            return record, SettlementOutcome.VERIFICATION_FAILED

        _transition(record, PaymentStatus.VERIFIED)
        record.verified_at = now
        await session.flush()

        # Efectos indivisibles de la transición (misma transacción)
        await self.enrollment_ledger.enroll(session, user_id, course_id, record.id)
        await self.revenue_accumulator.credit(session, course_id, amount, record.id)

        return record, SettlementOutcome.VERIFIED

    # ------------------------------------------------------------------ #
    # Lecturas
    # ------------------------------------------------------------------ #
    async def get_payment_history(self, user_id: str) -> Sequence[PaymentRecord]:
        """Pagos del usuario, más reciente primero."""
        async with self._session_factory() as session:
            return await self.payment_repo.list_by_user(session, user_id)

    async def get_payment(self, payment_id: str) -> Optional[PaymentRecord]:
        async with self._session_factory() as session:
            return await self.payment_repo.get_by_external_payment_id(session, payment_id)


__all__ = ["SettlementService"]

# Fin del archivo backend/app/modules/payments/services/settlement_service.py
