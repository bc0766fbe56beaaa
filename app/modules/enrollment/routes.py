# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/routes.py

Endpoints de inscripciones y control de acceso.

Endpoints:
- GET  /enrollments/{user_id}              → cursos inscritos del usuario
- GET  /enrollments/{user_id}/{course_id}  → {"enrolled": bool}
- POST /enrollments/free                   → inscripción en curso gratuito
- GET  /access/{user_id}/{course_id}       → {"decision": "grant"|"deny"}

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database import get_async_session
from app.modules.payments.errors import SettlementError
from app.modules.payments.routes.settlement_routes import settlement_error_response
from .access_gate import AccessControlGate
from .schemas import (
    AccessDecisionResponse,
    EnrolledCoursesResponse,
    EnrollmentStatusResponse,
    FreeEnrollmentRequest,
)
from .services import EnrollmentLedger

router = APIRouter(tags=["enrollment"])


@router.get("/enrollments/{user_id}", response_model=EnrolledCoursesResponse)
async def enrolled_courses(
    user_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> EnrolledCoursesResponse:
    course_ids = await EnrollmentLedger().list_enrolled_courses(session, user_id)
    return EnrolledCoursesResponse(user_id=user_id, course_ids=list(course_ids))


@router.get("/enrollments/{user_id}/{course_id}", response_model=EnrollmentStatusResponse)
async def enrollment_status(
    user_id: str,
    course_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> EnrollmentStatusResponse:
    enrolled = await EnrollmentLedger().is_enrolled(session, user_id, course_id)
    return EnrollmentStatusResponse(user_id=user_id, course_id=course_id, enrolled=enrolled)


@router.post(
    "/enrollments/free",
    response_model=EnrollmentStatusResponse,
    status_code=status.HTTP_200_OK,
)
async def enroll_free(
    payload: FreeEnrollmentRequest,
    session: AsyncSession = Depends(get_async_session),
):
    try:
        async with session.begin():
            await EnrollmentLedger().enroll_free(session, payload.user_id, payload.course_id)
    except SettlementError as exc:
        return settlement_error_response(exc)
    return EnrollmentStatusResponse(
        user_id=payload.user_id,
        course_id=payload.course_id,
        enrolled=True,
    )


@router.get("/access/{user_id}/{course_id}", response_model=AccessDecisionResponse)
async def access_decision(
    user_id: str,
    course_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> AccessDecisionResponse:
    decision = await AccessControlGate().authorize(session, user_id, course_id)
    return AccessDecisionResponse(user_id=user_id, course_id=course_id, decision=decision)


__all__ = ["router"]

# Fin del archivo backend/app/modules/enrollment/routes.py
