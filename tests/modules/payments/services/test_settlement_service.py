# -*- coding: utf-8 -*-
"""
backend/tests/modules/payments/services/test_settlement_service.py

Tests de SettlementService contra sqlite+aiosqlite real.
Verifica:
- Liquidación válida: verified + inscripción + ingreso
- Idempotencia por payment_id (N reenvíos, carreras concurrentes)
- Firma inválida: failed, sin efectos
- Rechazos previos a crear registro (curso, usuario, monto)
- Atomicidad y reintentos ante fallos de persistencia
- Historial del usuario, más reciente primero

Autor: Academia Backend
Fecha: 2026-10-18
"""

import asyncio
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.modules.enrollment.models import EnrollmentRecord
from app.modules.enrollment.services import EnrollmentLedger
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.errors import (
    InvalidAmount,
    PaymentVerificationFailed,
    PersistenceFailure,
    UnknownCourse,
    UnknownUser,
)
from app.modules.payments.metrics.exporters.prometheus_exporter import registry
from app.modules.payments.models import PaymentRecord
from app.modules.payments.services import SettlementService
from app.modules.revenue.models import RevenueCredit
from app.modules.revenue.services import RevenueAccumulator

from tests.conftest import PAID_COURSE_ID, PAID_COURSE_PRICE, SECRET


async def _count(factory, model) -> int:
    async with factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return int(result.scalar_one())


async def _revenue(factory, course_id: str) -> int:
    async with factory() as session:
        return await RevenueAccumulator().get_revenue(session, course_id)


async def _is_enrolled(factory, user_id: str, course_id: str) -> bool:
    async with factory() as session:
        return await EnrollmentLedger().is_enrolled(session, user_id, course_id)


def _db_locked() -> OperationalError:
    return OperationalError("INSERT INTO payment_records", {}, Exception("database is locked"))


# ---------------------------------------------------------------------------
# Liquidación válida
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_valid_settlement_verifies_enrolls_and_credits(service, seeded, sign):
    record = await service.settle(
        "order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE
    )

    assert record.status == PaymentStatus.VERIFIED
    assert record.verified_at is not None
    assert record.failed_at is None
    assert record.external_payment_id == "pay_1"
    assert record.amount == PAID_COURSE_PRICE
    assert await _is_enrolled(seeded, "u1", PAID_COURSE_ID) is True
    assert await _revenue(seeded, PAID_COURSE_ID) == PAID_COURSE_PRICE
    assert await _count(seeded, RevenueCredit) == 1


@pytest.mark.asyncio
async def test_resubmission_returns_original_record_without_new_effects(service, seeded, sign):
    sig = sign("order_1", "pay_1")
    first = await service.settle("order_1", "pay_1", sig, "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)

    for _ in range(5):
        again = await service.settle("order_1", "pay_1", sig, "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)
        assert again.id == first.id
        assert again.status == PaymentStatus.VERIFIED

    assert await _count(seeded, PaymentRecord) == 1
    assert await _count(seeded, EnrollmentRecord) == 1
    assert await _count(seeded, RevenueCredit) == 1
    assert await _revenue(seeded, PAID_COURSE_ID) == PAID_COURSE_PRICE


@pytest.mark.asyncio
async def test_duplicate_is_returned_even_with_different_fields(service, seeded, sign):
    """La clave es payment_id: el reenvío no re-valida ni re-verifica."""
    first = await service.settle(
        "order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE
    )
    again = await service.settle("order_1", "pay_1", "garbage", "u2", "c2", 1)

    assert again.id == first.id
    assert again.user_id == "u1"
    assert await _is_enrolled(seeded, "u2", "c2") is False


@pytest.mark.asyncio
async def test_second_payment_same_pair_credits_revenue_keeps_single_enrollment(service, seeded, sign):
    await service.settle("order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)
    await service.settle("order_2", "pay_2", sign("order_2", "pay_2"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)

    assert await _count(seeded, PaymentRecord) == 2
    assert await _count(seeded, EnrollmentRecord) == 1
    assert await _revenue(seeded, PAID_COURSE_ID) == 2 * PAID_COURSE_PRICE


# ---------------------------------------------------------------------------
# Firma inválida
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_invalid_signature_records_failed_without_effects(service, seeded, sign):
    tampered = sign("order_1", "pay_1")[:-1] + "x"

    with pytest.raises(PaymentVerificationFailed) as exc_info:
        await service.settle("order_1", "pay_1", tampered, "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)

    record = exc_info.value.record
    assert record is not None
    assert record.status == PaymentStatus.FAILED
    assert record.failed_at is not None
    assert record.verified_at is None
    assert record.failure_reason == "invalid signature"

    assert await _count(seeded, PaymentRecord) == 1
    assert await _is_enrolled(seeded, "u1", PAID_COURSE_ID) is False
    assert await _revenue(seeded, PAID_COURSE_ID) == 0


@pytest.mark.asyncio
async def test_failed_payment_is_terminal_for_its_payment_id(service, seeded, sign):
    """Reenviar el mismo payment_id (incluso con firma válida) devuelve el registro failed."""
    with pytest.raises(PaymentVerificationFailed):
        await service.settle("order_1", "pay_1", "bad", "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)

    again = await service.settle(
        "order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE
    )

    assert again.status == PaymentStatus.FAILED
    assert await _is_enrolled(seeded, "u1", PAID_COURSE_ID) is False
    assert await _revenue(seeded, PAID_COURSE_ID) == 0


@pytest.mark.asyncio
async def test_wrong_secret_fails_verification(seeded, sign):
    other = SettlementService(seeded, secret="different", retry_backoff_seconds=0)
    with pytest.raises(PaymentVerificationFailed):
        await other.settle("order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)

    assert await _revenue(seeded, PAID_COURSE_ID) == 0
    assert await _is_enrolled(seeded, "u1", PAID_COURSE_ID) is False


@pytest.mark.asyncio
@pytest.mark.parametrize("order_id,payment_id", [("", "pay_1"), ("order_1", ""), (None, "pay_1")])
async def test_malformed_ids_fail_without_record(service, seeded, order_id, payment_id):
    with pytest.raises(PaymentVerificationFailed) as exc_info:
        await service.settle(order_id, payment_id, "abc", "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)

    assert exc_info.value.record is None
    assert await _count(seeded, PaymentRecord) == 0


# ---------------------------------------------------------------------------
# Rechazos previos a crear registro
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_unknown_course_rejected_without_record(service, seeded, sign):
    with pytest.raises(UnknownCourse):
        await service.settle("order_1", "pay_1", sign("order_1", "pay_1"), "u1", "nope", PAID_COURSE_PRICE)
    assert await _count(seeded, PaymentRecord) == 0


@pytest.mark.asyncio
async def test_unknown_user_rejected_without_record(service, seeded, sign):
    with pytest.raises(UnknownUser):
        await service.settle("order_1", "pay_1", sign("order_1", "pay_1"), "ghost", PAID_COURSE_ID, PAID_COURSE_PRICE)
    assert await _count(seeded, PaymentRecord) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -5000, PAID_COURSE_PRICE - 1, PAID_COURSE_PRICE + 1, 50.0, "5000", True])
async def test_invalid_amount_rejected_without_record(service, seeded, sign, amount):
    with pytest.raises(InvalidAmount):
        await service.settle("order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, amount)
    assert await _count(seeded, PaymentRecord) == 0
    assert await _revenue(seeded, PAID_COURSE_ID) == 0


# ---------------------------------------------------------------------------
# Concurrencia
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_concurrent_duplicates_settle_exactly_once(seeded, sign):
    service = SettlementService(seeded, secret=SECRET)
    sig = sign("order_1", "pay_1")

    records = await asyncio.gather(*[
        service.settle("order_1", "pay_1", sig, "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)
        for _ in range(10)
    ])

    assert len({r.id for r in records}) == 1
    assert all(r.status == PaymentStatus.VERIFIED for r in records)
    assert await _count(seeded, PaymentRecord) == 1
    assert await _count(seeded, EnrollmentRecord) == 1
    assert await _count(seeded, RevenueCredit) == 1
    assert await _revenue(seeded, PAID_COURSE_ID) == PAID_COURSE_PRICE


@pytest.mark.asyncio
async def test_concurrent_distinct_payments_all_settle_with_default_retries(seeded, sign):
    """Pagos distintos no se serializan entre sí hasta agotar reintentos."""
    service = SettlementService(seeded, secret=SECRET)
    purchases = [
        (user, course_id, price)
        for user in ("u1", "u2", "instructor")
        for course_id, price in ((PAID_COURSE_ID, PAID_COURSE_PRICE), ("c2", 12000))
    ]

    records = await asyncio.gather(*[
        service.settle(f"order_{i}", f"pay_{i}", sign(f"order_{i}", f"pay_{i}"), user, course_id, price)
        for i, (user, course_id, price) in enumerate(purchases)
    ])

    assert len(records) == 6
    assert all(r.status == PaymentStatus.VERIFIED for r in records)
    assert await _revenue(seeded, PAID_COURSE_ID) == 3 * PAID_COURSE_PRICE
    assert await _revenue(seeded, "c2") == 3 * 12000
    assert await _count(seeded, EnrollmentRecord) == 6
    assert await _count(seeded, RevenueCredit) == 6


# ---------------------------------------------------------------------------
# Persistencia
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_transient_persistence_error_is_retried(service, seeded, sign):
    real_insert = service.payment_repo.insert_pending
    calls = {"n": 0}

    async def flaky_insert(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            raise _db_locked()
        return await real_insert(*args, **kwargs)

    with patch.object(service.payment_repo, "insert_pending", side_effect=flaky_insert):
        record = await service.settle(
            "order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE
        )

    assert calls["n"] == 2
    assert record.status == PaymentStatus.VERIFIED
    assert await _count(seeded, PaymentRecord) == 1


@pytest.mark.asyncio
async def test_exhausted_retries_raise_persistence_failure(service, seeded, sign):
    with patch.object(service.payment_repo, "insert_pending", side_effect=_db_locked()):
        with pytest.raises(PersistenceFailure) as exc_info:
            await service.settle(
                "order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE
            )

    assert exc_info.value.attempts == 3
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert await _count(seeded, PaymentRecord) == 0


@pytest.mark.asyncio
async def test_crash_after_verify_leaves_nothing_durable(service, seeded, sign):
    """Un fallo al acreditar revierte también el verified y la inscripción."""
    with patch.object(service.revenue_accumulator, "credit", side_effect=_db_locked()):
        with pytest.raises(PersistenceFailure):
            await service.settle(
                "order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE
            )

    assert await _count(seeded, PaymentRecord) == 0
    assert await _count(seeded, EnrollmentRecord) == 0
    assert await _revenue(seeded, PAID_COURSE_ID) == 0

    # El reenvío posterior completa la liquidación exactamente una vez
    record = await service.settle(
        "order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE
    )
    assert record.status == PaymentStatus.VERIFIED
    assert await _revenue(seeded, PAID_COURSE_ID) == PAID_COURSE_PRICE


def test_max_attempts_must_be_positive(seeded):
    with pytest.raises(ValueError):
        SettlementService(seeded, secret=SECRET, max_attempts=0)


# ---------------------------------------------------------------------------
# Lecturas y métricas
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_payment_history_most_recent_first(service, seeded, sign):
    await service.settle("order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)
    await service.settle("order_2", "pay_2", sign("order_2", "pay_2"), "u1", "c2", 12000)
    with pytest.raises(PaymentVerificationFailed):
        await service.settle("order_3", "pay_3", "bad", "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)
    await service.settle("order_4", "pay_4", sign("order_4", "pay_4"), "u2", PAID_COURSE_ID, PAID_COURSE_PRICE)

    history = await service.get_payment_history("u1")

    assert [r.external_payment_id for r in history] == ["pay_3", "pay_2", "pay_1"]
    assert [r.status for r in history] == [PaymentStatus.FAILED, PaymentStatus.VERIFIED, PaymentStatus.VERIFIED]
    assert await service.get_payment_history("nobody") == []


@pytest.mark.asyncio
async def test_get_payment_by_gateway_id(service, seeded, sign):
    await service.settle("order_1", "pay_1", sign("order_1", "pay_1"), "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)

    found = await service.get_payment("pay_1")
    assert found is not None and found.external_order_id == "order_1"
    assert await service.get_payment("missing") is None


@pytest.mark.asyncio
async def test_outcome_metrics_are_counted(service, seeded, sign):
    def sample(outcome):
        return registry.get_sample_value("settlement_requests_total", {"outcome": outcome}) or 0.0

    verified_before = sample("verified")
    duplicate_before = sample("duplicate")
    rejected_before = sample("rejected")

    sig = sign("order_1", "pay_1")
    await service.settle("order_1", "pay_1", sig, "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)
    await service.settle("order_1", "pay_1", sig, "u1", PAID_COURSE_ID, PAID_COURSE_PRICE)
    with pytest.raises(UnknownCourse):
        await service.settle("order_9", "pay_9", sig, "u1", "nope", PAID_COURSE_PRICE)

    assert sample("verified") == verified_before + 1
    assert sample("duplicate") == duplicate_before + 1
    assert sample("rejected") == rejected_before + 1
