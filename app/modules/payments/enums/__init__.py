# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/__init__.py

Superficie de exportación de enums del módulo Payments.

Incluye:
- PaymentStatus
- SettlementOutcome

Autor: Academia Backend
Fecha: 2026-10-18
"""

from .payment_status_enum import PaymentStatus
from .settlement_outcome_enum import SettlementOutcome

__all__ = [
    "PaymentStatus",
    "SettlementOutcome",
]

# Fin del archivo backend/app/modules/payments/enums/__init__.py
