# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/errors.py

Excepciones de dominio de la liquidación de pagos.

Jerarquía:
    SettlementError
    ├── PaymentVerificationFailed   (firma inválida; el registro queda failed)
    ├── UnknownCourse / UnknownUser (rechazo antes de crear registro)
    ├── InvalidAmount               (monto <= 0 o distinto del precio)
    ├── EnrollmentPreconditionError (enroll sin pago verificado coincidente)
    ├── CreditPreconditionError     (credit sin pago verificado coincidente)
    ├── InvalidStateTransition      (salida desde un estado terminal)
    └── PersistenceFailure          (reintentos de persistencia agotados)

Una liquidación duplicada NO es error: se devuelve el registro existente.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.modules.payments.models import PaymentRecord


class SettlementError(Exception):
    """Base de los fallos tipados de la liquidación."""

    error_code = "settlement_error"


class PaymentVerificationFailed(SettlementError):
    """La firma del callback no verificó; el registro quedó en failed."""

    error_code = "invalid_signature"

    def __init__(self, record: Optional["PaymentRecord"], reason: str = "invalid signature"):
        # record es None solo si el callback no trae un payment_id persistible
        self.record = record
        self.reason = reason
        payment_id = record.external_payment_id if record is not None else None
        super().__init__(f"Verificación fallida para el pago {payment_id}: {reason}")


class UnknownCourse(SettlementError):
    """El curso referenciado no existe."""

    error_code = "unknown_course"

    def __init__(self, course_id):
        self.course_id = course_id
        super().__init__(f"Curso no encontrado: {course_id}")


class UnknownUser(SettlementError):
    """El usuario referenciado no existe."""

    error_code = "unknown_user"

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"Usuario no encontrado: {user_id}")


class InvalidAmount(SettlementError):
    """Monto no entero, no positivo o distinto del precio del curso."""

    error_code = "invalid_amount"

    def __init__(self, amount, expected: Optional[int] = None):
        self.amount = amount
        self.expected = expected
        if expected is None:
            message = f"Monto inválido: {amount!r}"
        else:
            message = f"Monto inválido: {amount!r} (precio del curso: {expected})"
        super().__init__(message)


class EnrollmentPreconditionError(SettlementError):
    """Se intentó inscribir sin un pago verificado para el mismo (user, course)."""

    error_code = "enrollment_precondition"

    def __init__(self, message: str):
        super().__init__(message)


class CreditPreconditionError(SettlementError):
    """Se intentó acreditar ingresos sin un pago verificado coincidente."""

    error_code = "credit_precondition"

    def __init__(self, message: str):
        super().__init__(message)


class InvalidStateTransition(SettlementError):
    """Se intentó una transición fuera de la máquina de estados del pago."""

    error_code = "invalid_state_transition"

    def __init__(self, from_state, to_state):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Transición inválida: {from_state} → {to_state}")


class PersistenceFailure(SettlementError):
    """La unidad de trabajo falló en todos los intentos permitidos."""

    error_code = "persistence_failure"

    def __init__(self, attempts: int, cause: Optional[BaseException] = None):
        self.attempts = attempts
        self.cause = cause
        super().__init__(
            f"Persistencia fallida tras {attempts} intento(s): {cause!r}"
        )


def is_valid_amount(amount: object) -> bool:
    """Monto entero positivo en la unidad mínima de la moneda."""
    # bool es subclase de int; se excluye explícitamente
    return isinstance(amount, int) and not isinstance(amount, bool) and amount > 0


__all__ = [
    "SettlementError",
    "PaymentVerificationFailed",
    "UnknownCourse",
    "UnknownUser",
    "InvalidAmount",
    "EnrollmentPreconditionError",
    "CreditPreconditionError",
    "InvalidStateTransition",
    "PersistenceFailure",
    "is_valid_amount",
]

# Fin del archivo backend/app/modules/payments/errors.py
