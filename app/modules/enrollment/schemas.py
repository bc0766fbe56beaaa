# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/schemas.py

Schemas de inscripciones y decisiones de acceso.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .enums import AccessDecision


class EnrollmentStatusResponse(BaseModel):
    user_id: str
    course_id: str
    enrolled: bool


class EnrolledCoursesResponse(BaseModel):
    user_id: str
    course_ids: list[str] = Field(default_factory=list)


class FreeEnrollmentRequest(BaseModel):
    user_id: str
    course_id: str


class AccessDecisionResponse(BaseModel):
    user_id: str
    course_id: str
    decision: AccessDecision


__all__ = [
    "EnrollmentStatusResponse",
    "EnrolledCoursesResponse",
    "FreeEnrollmentRequest",
    "AccessDecisionResponse",
]

# Fin del archivo backend/app/modules/enrollment/schemas.py
