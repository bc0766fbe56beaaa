# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/services.py

Ledger de inscripciones.

Provee:
- enroll: inscripción derivada de un PaymentRecord verified (idempotente)
- enroll_free: inscripción sin pago para cursos con precio 0
- is_enrolled: lectura pura (snapshot, sin bloqueos)
- list_enrolled_courses / list_enrolled_students: vistas derivadas

Los métodos operan dentro de la transacción del llamador: hacen flush,
nunca commit.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.catalog.repositories import CourseRepository, UserRepository
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import (
    EnrollmentPreconditionError,
    InvalidAmount,
    UnknownCourse,
    UnknownUser,
)
from app.modules.payments.repositories import PaymentRepository
from .models import EnrollmentRecord
from .repositories import EnrollmentRepository

logger = logging.getLogger(__name__)


class EnrollmentLedger:
    """Mapa (user, course) → acceso, derivado estrictamente de pagos verificados."""

    def __init__(
        self,
        enrollment_repo: Optional[EnrollmentRepository] = None,
        payment_repo: Optional[PaymentRepository] = None,
        course_repo: Optional[CourseRepository] = None,
        user_repo: Optional[UserRepository] = None,
    ):
        self.enrollment_repo = enrollment_repo or EnrollmentRepository()
        self.payment_repo = payment_repo or PaymentRepository()
        self.course_repo = course_repo or CourseRepository()
        self.user_repo = user_repo or UserRepository()

    async def enroll(
        self,
        session: AsyncSession,
        user_id: str,
        course_id: str,
        payment_record_id: int,
    ) -> EnrollmentRecord:
        """
        Inscribe al usuario a partir de un pago verificado.

        Si ya existe inscripción para (user, course) se devuelve sin cambios,
        sin importar qué pago disparó la llamada.

        Raises:
            EnrollmentPreconditionError: si el pago no existe, no está
                verified o su (user, course) no coincide
        """
        payment = await self.payment_repo.get(session, payment_record_id)
        if payment is None:
            raise EnrollmentPreconditionError(
                f"PaymentRecord {payment_record_id} not found"
            )
        if payment.status != PaymentStatus.VERIFIED:
            raise EnrollmentPreconditionError(
                f"PaymentRecord {payment_record_id} is {payment.status}, expected verified"
            )
        if payment.user_id != user_id or payment.course_id != course_id:
            raise EnrollmentPreconditionError(
                f"PaymentRecord {payment_record_id} belongs to "
                f"({payment.user_id}, {payment.course_id}), not ({user_id}, {course_id})"
            )

        enrollment, created = await self.enrollment_repo.get_or_create(
            session, user_id, course_id, source_payment_id=payment_record_id
        )
        if created:
            logger.info(
                "Enrollment created: user=%s course=%s payment_record_id=%s",
                user_id, course_id, payment_record_id,
            )
        else:
            logger.info(
                "Idempotent enroll: already enrolled user=%s course=%s",
                user_id, course_id,
            )
        return enrollment

    async def enroll_free(
        self,
        session: AsyncSession,
        user_id: str,
        course_id: str,
    ) -> EnrollmentRecord:
        """
        Inscribe sin pago en un curso gratuito (price == 0).

        Raises:
            UnknownCourse / UnknownUser: referencias inexistentes
            InvalidAmount: el curso no es gratuito
        """
        course = await self.course_repo.get(session, course_id)
        if course is None:
            raise UnknownCourse(course_id)
        if await self.user_repo.get(session, user_id) is None:
            raise UnknownUser(user_id)
        if not course.is_free:
            raise InvalidAmount(0, expected=course.price)

        enrollment, created = await self.enrollment_repo.get_or_create(
            session, user_id, course_id, source_payment_id=None
        )
        if created:
            logger.info("Free enrollment created: user=%s course=%s", user_id, course_id)
        return enrollment

    async def is_enrolled(
        self,
        session: AsyncSession,
        user_id: str,
        course_id: str,
    ) -> bool:
        enrollment = await self.enrollment_repo.get_by_pair(session, user_id, course_id)
        return enrollment is not None

    async def list_enrolled_courses(
        self,
        session: AsyncSession,
        user_id: str,
    ) -> Sequence[str]:
        return await self.enrollment_repo.list_course_ids_for_user(session, user_id)

    async def list_enrolled_students(
        self,
        session: AsyncSession,
        course_id: str,
    ) -> Sequence[str]:
        return await self.enrollment_repo.list_user_ids_for_course(session, course_id)


__all__ = ["EnrollmentLedger"]

# Fin del archivo backend/app/modules/enrollment/services.py
