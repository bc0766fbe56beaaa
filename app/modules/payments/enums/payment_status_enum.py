# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/payment_status_enum.py

Enum de estados de un PaymentRecord.

Máquina de estados:
    pending → verified  (firma válida)   [terminal]
    pending → failed    (firma inválida) [terminal]

Autor: Academia Backend
Fecha: 2026-10-18
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class PaymentStatus(StrEnum):
    """Estado del registro de pago dentro de la liquidación."""

    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING

    def can_transition_to(self, target: "PaymentStatus") -> bool:
        """Solo pending tiene aristas de salida; los terminales son inmutables."""
        return self is PaymentStatus.PENDING and target.is_terminal

    @classmethod
    def as_db_enum(cls, name: str = "payment_status_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["PaymentStatus"]

# Fin del archivo backend/app/modules/payments/enums/payment_status_enum.py
