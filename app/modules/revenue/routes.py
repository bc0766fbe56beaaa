# -*- coding: utf-8 -*-
"""
backend/app/modules/revenue/routes.py

Endpoint de ingresos acumulados por curso.

Endpoints:
- GET /revenue/{course_id} → {"course_id", "total_revenue"}

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database import get_async_session
from .services import RevenueAccumulator

router = APIRouter(prefix="/revenue", tags=["revenue"])


class CourseRevenueResponse(BaseModel):
    course_id: str
    total_revenue: int


@router.get("/{course_id}", response_model=CourseRevenueResponse)
async def course_revenue(
    course_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> CourseRevenueResponse:
    """Total acumulado; 0 si el curso aún no tiene pagos verificados."""
    total = await RevenueAccumulator().get_revenue(session, course_id)
    return CourseRevenueResponse(course_id=course_id, total_revenue=total)


__all__ = ["router"]

# Fin del archivo backend/app/modules/revenue/routes.py
