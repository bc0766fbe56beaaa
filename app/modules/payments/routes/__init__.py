# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/__init__.py

Ensamblador de rutas REST del módulo Payments.

Incluye:
- /payments/settlements
- /payments/history/{user_id}

Autor: Academia Backend
Fecha: 2026-10-18
"""

from fastapi import APIRouter

from .settlement_routes import router as settlement_router

router = APIRouter()

# Prefijo común /payments para todas las rutas del módulo
router.include_router(settlement_router, prefix="/payments")

__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/__init__.py
