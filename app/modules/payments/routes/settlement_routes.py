# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/settlement_routes.py

Endpoints de liquidación.

Endpoints:
- POST /payments/settlements          → liquida un callback del gateway
- GET  /payments/history/{user_id}    → historial de pagos (reciente primero)

Los fallos tipados se devuelven como {"detail", "error_code"}:
- firma inválida          → 402
- curso/usuario inexistente → 404
- monto inválido          → 422
- persistencia agotada    → 503

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.shared.database import get_session_factory
from app.modules.payments.errors import (
    InvalidAmount,
    PaymentVerificationFailed,
    PersistenceFailure,
    SettlementError,
    UnknownCourse,
    UnknownUser,
)
from app.modules.payments.schemas import (
    PaymentHistoryResponse,
    PaymentRecordOut,
    SettlementErrorResponse,
    SettlementRequest,
)
from app.modules.payments.services import SettlementService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments:settlements"])

_STATUS_BY_ERROR = {
    PaymentVerificationFailed: status.HTTP_402_PAYMENT_REQUIRED,
    UnknownCourse: status.HTTP_404_NOT_FOUND,
    UnknownUser: status.HTTP_404_NOT_FOUND,
    InvalidAmount: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PersistenceFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_settlement_service() -> SettlementService:
    return SettlementService.from_settings(get_session_factory())


def settlement_error_response(exc: SettlementError) -> JSONResponse:
    """Traduce un SettlementError a la respuesta HTTP pública."""
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_409_CONFLICT)
    payment = None
    if isinstance(exc, PaymentVerificationFailed) and exc.record is not None:
        payment = PaymentRecordOut.model_validate(exc.record)
    body = SettlementErrorResponse(
        detail=str(exc),
        error_code=exc.error_code,
        payment=payment,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


@router.post(
    "/settlements",
    response_model=PaymentRecordOut,
    status_code=status.HTTP_200_OK,
    responses={
        402: {"model": SettlementErrorResponse},
        404: {"model": SettlementErrorResponse},
        422: {"model": SettlementErrorResponse},
        503: {"model": SettlementErrorResponse},
    },
)
async def settle_payment(
    payload: SettlementRequest,
    service: SettlementService = Depends(get_settlement_service),
):
    """
    Liquida un callback del gateway.

    Idempotente por payment_id: un reenvío devuelve el registro original
    (200) sin volver a inscribir ni acreditar.
    """
    try:
        record = await service.settle(
            order_id=payload.order_id,
            payment_id=payload.payment_id,
            signature=payload.signature,
            user_id=payload.user_id,
            course_id=payload.course_id,
            amount=payload.amount,
        )
    except SettlementError as exc:
        logger.info(
            "settlement_rejected payment_id=%s error_code=%s",
            payload.payment_id, exc.error_code,
        )
        return settlement_error_response(exc)

    return PaymentRecordOut.model_validate(record)


@router.get("/history/{user_id}", response_model=PaymentHistoryResponse)
async def payment_history(
    user_id: str,
    service: SettlementService = Depends(get_settlement_service),
) -> PaymentHistoryResponse:
    records = await service.get_payment_history(user_id)
    return PaymentHistoryResponse(
        user_id=user_id,
        payments=[PaymentRecordOut.model_validate(r) for r in records],
    )


__all__ = ["router", "get_settlement_service", "settlement_error_response"]

# Fin del archivo backend/app/modules/payments/routes/settlement_routes.py
