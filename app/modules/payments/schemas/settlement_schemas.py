# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/settlement_schemas.py

Schemas del endpoint de liquidación y del historial de pagos.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SettlementRequest(BaseModel):
    """
    Callback del gateway reenviado por el checkout.

    La validación de negocio (curso, usuario, monto, firma) ocurre en
    SettlementService; aquí solo se fija la forma del payload.
    """

    order_id: str = Field(..., description="Identificador de orden emitido por el gateway.")
    payment_id: str = Field(..., description="Identificador de pago del gateway (clave de idempotencia).")
    signature: str = Field(..., description="HMAC-SHA256 hex de 'order_id|payment_id'.")
    user_id: str = Field(..., description="Usuario que compra el curso.")
    course_id: str = Field(..., description="Curso comprado.")
    amount: int = Field(..., strict=True, description="Monto entero en la unidad mínima de la moneda.")


class PaymentRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    external_order_id: str
    external_payment_id: str
    user_id: str
    course_id: str
    amount: int
    status: str
    failure_reason: Optional[str] = None
    created_at: datetime
    verified_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None


class PaymentHistoryResponse(BaseModel):
    user_id: str
    payments: list[PaymentRecordOut]


class SettlementErrorResponse(BaseModel):
    detail: str
    error_code: str
    payment: Optional[PaymentRecordOut] = None


__all__ = [
    "SettlementRequest",
    "PaymentRecordOut",
    "PaymentHistoryResponse",
    "SettlementErrorResponse",
]

# Fin del archivo backend/app/modules/payments/schemas/settlement_schemas.py
