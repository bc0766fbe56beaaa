# -*- coding: utf-8 -*-
"""
backend/tests/shared/database/test_database.py

Tests del engine/session factory: SAVEPOINTs sobre aiosqlite y
restricciones de unicidad que sostienen la idempotencia.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.modules.enrollment.models import EnrollmentRecord
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.models import PaymentRecord
from app.modules.payments.repositories import PaymentRepository


@pytest.mark.asyncio
async def test_savepoint_rollback_keeps_outer_transaction(seeded):
    async with seeded() as session:
        async with session.begin():
            session.add(EnrollmentRecord(user_id="u1", course_id="c1"))
            await session.flush()
            with pytest.raises(IntegrityError):
                async with session.begin_nested():
                    session.add(EnrollmentRecord(user_id="u1", course_id="c1"))
                    await session.flush()
            session.add(EnrollmentRecord(user_id="u2", course_id="c1"))

    async with seeded() as session:
        count = await session.execute(select(func.count()).select_from(EnrollmentRecord))
        assert count.scalar_one() == 2


@pytest.mark.asyncio
async def test_insert_pending_returns_existing_on_conflict(seeded):
    repo = PaymentRepository()
    fields = dict(
        external_order_id="order_1",
        external_payment_id="pay_1",
        user_id="u1",
        course_id="c1",
        amount=5000,
        signature="sig",
    )

    async with seeded() as session:
        async with session.begin():
            first, created_first = await repo.insert_pending(session, **fields)
            second, created_second = await repo.insert_pending(session, **fields)

    assert created_first is True
    assert created_second is False
    assert second.id == first.id
    assert first.status == PaymentStatus.PENDING


@pytest.mark.asyncio
async def test_non_positive_amount_violates_check_constraint(seeded):
    async with seeded() as session:
        with pytest.raises(IntegrityError):
            async with session.begin():
                session.add(PaymentRecord(
                    external_order_id="o", external_payment_id="p", user_id="u1",
                    course_id="c1", amount=0, status=PaymentStatus.PENDING, signature="",
                ))
