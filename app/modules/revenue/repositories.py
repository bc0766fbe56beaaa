# -*- coding: utf-8 -*-
"""
backend/app/modules/revenue/repositories.py

Repositorio de ingresos por curso.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import CourseRevenueTotal, RevenueCredit

logger = logging.getLogger(__name__)


class RevenueRepository:
    """Operaciones sobre course_revenue_totals y revenue_credits."""

    async def get_total(
        self,
        session: AsyncSession,
        course_id: str,
        *,
        for_update: bool = False,
    ) -> Optional[CourseRevenueTotal]:
        stmt = select(CourseRevenueTotal).where(CourseRevenueTotal.course_id == course_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_total(
        self,
        session: AsyncSession,
        course_id: str,
    ) -> CourseRevenueTotal:
        """
        Obtiene (con lock) o crea la fila de total del curso.

        Usa SAVEPOINT para manejar la creación concurrente sin invalidar
        la transacción principal.
        """
        total = await self.get_total(session, course_id, for_update=True)
        if total:
            return total

        try:
            async with session.begin_nested():
                total = CourseRevenueTotal(course_id=course_id, total_revenue=0)
                session.add(total)
                await session.flush()
            return total
        except IntegrityError:
            logger.debug("Revenue total already exists for course %s (concurrent create)", course_id)

        total = await self.get_total(session, course_id, for_update=True)
        if total is None:
            raise RuntimeError(f"Failed to get or create revenue total for course {course_id}")
        return total

    async def get_credit(
        self,
        session: AsyncSession,
        payment_record_id: int,
    ) -> Optional[RevenueCredit]:
        stmt = select(RevenueCredit).where(RevenueCredit.payment_record_id == payment_record_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_credit(
        self,
        session: AsyncSession,
        *,
        payment_record_id: int,
        course_id: str,
        amount: int,
    ) -> bool:
        """
        Registra el pago en el conjunto de acreditados.

        Returns:
            True si se insertó; False si el pago ya estaba acreditado.
        """
        try:
            async with session.begin_nested():
                session.add(
                    RevenueCredit(
                        payment_record_id=payment_record_id,
                        course_id=course_id,
                        amount=amount,
                    )
                )
                await session.flush()
            return True
        except IntegrityError:
            logger.info(
                "Revenue credit already exists for payment_record_id=%s (concurrent credit)",
                payment_record_id,
            )
            return False

    async def increment_total(
        self,
        session: AsyncSession,
        total: CourseRevenueTotal,
        amount: int,
        payment_record_id: int,
    ) -> CourseRevenueTotal:
        total.total_revenue += amount
        total.last_payment_id = payment_record_id
        total.updated_at = datetime.now(timezone.utc)
        await session.flush()
        return total

    async def sum_credits(self, session: AsyncSession, course_id: str) -> int:
        stmt = select(func.coalesce(func.sum(RevenueCredit.amount), 0)).where(
            RevenueCredit.course_id == course_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())


__all__ = ["RevenueRepository"]
