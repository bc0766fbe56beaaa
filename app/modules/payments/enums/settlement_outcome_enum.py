# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/settlement_outcome_enum.py

Resultado de negocio de una llamada a settle(), usado en logs y métricas.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from enum import StrEnum


class SettlementOutcome(StrEnum):
    VERIFIED = "verified"
    DUPLICATE = "duplicate"
    VERIFICATION_FAILED = "verification_failed"
    REJECTED = "rejected"
    PERSISTENCE_FAILURE = "persistence_failure"


__all__ = ["SettlementOutcome"]
