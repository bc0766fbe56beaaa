# backend/tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests del ledger de liquidación.

- Defaults de entorno para que SettlementSettings no dependa de un .env local
- Engine sqlite+aiosqlite en archivo por test (tmp_path): las conexiones
  concurrentes comparten la misma base, cosa que :memory: no permite
- Catálogo sembrado: usuarios u1/u2, curso de pago c1 (5000) y curso gratuito
"""

import os

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

# -----------------------------------------------------------------------------
# 0) Defaults útiles para la suite
# -----------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("GATEWAY_KEY_SECRET", "test-gateway-secret")
os.environ.setdefault("PERSISTENCE_RETRY_BACKOFF_SECONDS", "0")
os.environ.setdefault("CREATE_SCHEMA_ON_STARTUP", "false")

from app.shared.config import reset_settlement_settings
from app.shared.database import build_engine, build_session_factory, create_schema
from app.modules.catalog.models import AppUser, Course
from app.modules.payments.services import SettlementService, compute_gateway_signature

SECRET = "test-gateway-secret"
PAID_COURSE_ID = "c1"
PAID_COURSE_PRICE = 5000
FREE_COURSE_ID = "c-free"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Cada test construye settings desde el entorno actual."""
    reset_settlement_settings()
    yield
    reset_settlement_settings()


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await create_schema(eng)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def seeded(session_factory):
    """Usuarios y cursos base."""
    async with session_factory() as session:
        async with session.begin():
            session.add_all([
                AppUser(id="u1", email="u1@example.com"),
                AppUser(id="u2", email="u2@example.com"),
                AppUser(id="instructor", email="instructor@example.com"),
                Course(id=PAID_COURSE_ID, title="Álgebra", price=PAID_COURSE_PRICE, instructor_id="instructor"),
                Course(id="c2", title="Cálculo", price=12000, instructor_id="instructor"),
                Course(id=FREE_COURSE_ID, title="Introducción", price=0, instructor_id="instructor"),
            ])
    return session_factory


@pytest.fixture
def service(seeded) -> SettlementService:
    return SettlementService(seeded, secret=SECRET, max_attempts=3, retry_backoff_seconds=0)


@pytest.fixture
def sign():
    """Firma válida del gateway para (order_id, payment_id)."""
    def _sign(order_id: str, payment_id: str, secret: str = SECRET) -> str:
        return compute_gateway_signature(order_id, payment_id, secret)
    return _sign


@pytest.fixture
def make_payment(seeded):
    """
    Inserta un PaymentRecord directamente (sin pasar por SettlementService),
    p. ej. para simular filas escritas por otras herramientas.
    """
    from datetime import datetime, timezone

    from app.modules.payments.enums import PaymentStatus
    from app.modules.payments.models import PaymentRecord

    async def _make(
        payment_id: str,
        user_id: str = "u1",
        course_id: str = PAID_COURSE_ID,
        amount: int = PAID_COURSE_PRICE,
        status: PaymentStatus = PaymentStatus.VERIFIED,
    ) -> PaymentRecord:
        async with seeded() as session:
            async with session.begin():
                record = PaymentRecord(
                    external_order_id=f"order_{payment_id}",
                    external_payment_id=payment_id,
                    user_id=user_id,
                    course_id=course_id,
                    amount=amount,
                    status=status,
                    signature="",
                    verified_at=datetime.now(timezone.utc) if status == PaymentStatus.VERIFIED else None,
                )
                session.add(record)
        return record

    return _make
