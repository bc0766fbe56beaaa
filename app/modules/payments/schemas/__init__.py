# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/__init__.py

Schemas Pydantic del módulo Payments.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from .settlement_schemas import (
    PaymentHistoryResponse,
    PaymentRecordOut,
    SettlementErrorResponse,
    SettlementRequest,
)

__all__ = [
    "SettlementRequest",
    "PaymentRecordOut",
    "PaymentHistoryResponse",
    "SettlementErrorResponse",
]

# Fin del archivo backend/app/modules/payments/schemas/__init__.py
