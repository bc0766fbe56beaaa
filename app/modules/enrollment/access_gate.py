# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/access_gate.py

Gate de control de acceso a contenido protegido.

El código que sirve contenido debe llamar authorize() antes de liberar
cualquier recurso protegido. El gate no guarda estado propio: consulta
el ledger de inscripciones en cada llamada.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .enums import AccessDecision
from .services import EnrollmentLedger

logger = logging.getLogger(__name__)


class AccessControlGate:
    def __init__(self, ledger: Optional[EnrollmentLedger] = None):
        self.ledger = ledger or EnrollmentLedger()

    async def authorize(
        self,
        session: AsyncSession,
        user_id: str,
        course_id: str,
    ) -> AccessDecision:
        if await self.ledger.is_enrolled(session, user_id, course_id):
            return AccessDecision.GRANT
        logger.debug("Access denied: user=%s course=%s (not enrolled)", user_id, course_id)
        return AccessDecision.DENY


__all__ = ["AccessControlGate"]
