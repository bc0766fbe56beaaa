# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/repositories.py

Repositorio de inscripciones.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from .models import EnrollmentRecord

logger = logging.getLogger(__name__)


class EnrollmentRepository(BaseRepository[EnrollmentRecord]):
    def __init__(self):
        super().__init__(EnrollmentRecord)

    async def get_by_pair(
        self,
        session: AsyncSession,
        user_id: str,
        course_id: str,
    ) -> Optional[EnrollmentRecord]:
        stmt = select(EnrollmentRecord).where(
            EnrollmentRecord.user_id == user_id,
            EnrollmentRecord.course_id == course_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(
        self,
        session: AsyncSession,
        user_id: str,
        course_id: str,
        source_payment_id: Optional[int],
    ) -> tuple[EnrollmentRecord, bool]:
        """
        Upsert idempotente por (user_id, course_id).

        Returns:
            Tuple (enrollment, created: bool)
        """
        existing = await self.get_by_pair(session, user_id, course_id)
        if existing:
            return existing, False

        integrity_error: Optional[IntegrityError] = None
        try:
            async with session.begin_nested():
                enrollment = EnrollmentRecord(
                    user_id=user_id,
                    course_id=course_id,
                    source_payment_id=source_payment_id,
                )
                session.add(enrollment)
                await session.flush()
            return enrollment, True
        except IntegrityError as exc:
            integrity_error = exc
            logger.debug(
                "Enrollment already exists for user=%s course=%s (concurrent create)",
                user_id, course_id,
            )

        existing = await self.get_by_pair(session, user_id, course_id)
        if existing is None:
            raise integrity_error
        return existing, False

    async def list_course_ids_for_user(
        self,
        session: AsyncSession,
        user_id: str,
    ) -> Sequence[str]:
        stmt = (
            select(EnrollmentRecord.course_id)
            .where(EnrollmentRecord.user_id == user_id)
            .order_by(EnrollmentRecord.enrolled_at, EnrollmentRecord.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_user_ids_for_course(
        self,
        session: AsyncSession,
        course_id: str,
    ) -> Sequence[str]:
        stmt = (
            select(EnrollmentRecord.user_id)
            .where(EnrollmentRecord.course_id == course_id)
            .order_by(EnrollmentRecord.enrolled_at, EnrollmentRecord.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


__all__ = ["EnrollmentRepository"]
