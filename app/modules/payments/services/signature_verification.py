# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/signature_verification.py

Verificación de firmas de callbacks del gateway.

Esquema:
- HMAC-SHA256 hex sobre el string canónico "<order_id>|<payment_id>"
  con el secreto compartido entre este subsistema y el gateway.
- Comparación en tiempo constante (hmac.compare_digest) y exacta:
  no se normalizan mayúsculas ni espacios.

IMPORTANTE:
- Función pura: sin estado ni efectos secundarios (salvo logging).
- Entradas mal formadas (vacías, no str) se rechazan ANTES de calcular
  el digest y se reportan como firma inválida, nunca como excepción.
- No existe bypass en ningún entorno.

Autor: Academia Backend
Fecha: 2026-10-18
"""
from __future__ import annotations

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_SEPARATOR = "|"


def _is_non_empty_str(value: object) -> bool:
    return isinstance(value, str) and value != ""


def build_signed_payload(order_id: str, payment_id: str) -> bytes:
    """String canónico firmado por el gateway."""
    return f"{order_id}{SIGNATURE_SEPARATOR}{payment_id}".encode("utf-8")


def compute_gateway_signature(order_id: str, payment_id: str, secret: str) -> str:
    """
    Calcula la firma esperada (hex en minúsculas).

    Útil para tests y para herramientas que simulan el gateway.
    """
    return hmac.new(
        secret.encode("utf-8"),
        msg=build_signed_payload(order_id, payment_id),
        digestmod=hashlib.sha256,
    ).hexdigest()


def verify_gateway_signature(
    order_id: str,
    payment_id: str,
    signature: str,
    secret: str,
) -> bool:
    """
    Verifica la firma de un callback del gateway.

    Args:
        order_id: ID de la orden en el gateway
        payment_id: ID del pago en el gateway
        signature: Firma hex recibida en el callback
        secret: Secreto compartido con el gateway

    Returns:
        True si la firma es válida
    """
    if not all(_is_non_empty_str(v) for v in (order_id, payment_id, signature, secret)):
        logger.warning(
            "Gateway signature rejected: malformed input (payment_id=%r)",
            payment_id if isinstance(payment_id, str) else type(payment_id).__name__,
        )
        return False

    expected = compute_gateway_signature(order_id, payment_id, secret)

    # Ambos lados como bytes ASCII: compare_digest no acepta str con no-ASCII
    try:
        provided = signature.encode("ascii")
    except UnicodeEncodeError:
        logger.warning("Gateway signature rejected: non-ASCII signature (payment_id=%s)", payment_id)
        return False

    if not hmac.compare_digest(expected.encode("ascii"), provided):
        logger.warning("Gateway signature mismatch (payment_id=%s)", payment_id)
        return False

    return True


__all__ = [
    "SIGNATURE_SEPARATOR",
    "build_signed_payload",
    "compute_gateway_signature",
    "verify_gateway_signature",
]
