# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/__init__.py

Superficie de exportación de servicios del módulo Payments.

Incluye:
- SettlementService
- SettlementRecoveryService
- compute_gateway_signature / verify_gateway_signature

Autor: Academia Backend
Fecha: 2026-10-18
"""

from .signature_verification import compute_gateway_signature, verify_gateway_signature
from .settlement_service import SettlementService
from .recovery_service import (
    RecoveryResult,
    RevenueAuditResult,
    SettlementRecoveryService,
)

__all__ = [
    "SettlementService",
    "SettlementRecoveryService",
    "RecoveryResult",
    "RevenueAuditResult",
    "compute_gateway_signature",
    "verify_gateway_signature",
]

# Fin del archivo backend/app/modules/payments/services/__init__.py
