# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

Health check del backend de liquidación.

Reporta lo que impide liquidar pagos: base de datos inalcanzable o
secreto del gateway ausente (toda firma fallaría la verificación).

Autor: Academia Backend
Fecha: 2026-10-18
"""

from fastapi import APIRouter

from app.shared.config import get_settlement_settings
from app.shared.database import check_database_health

router = APIRouter()


@router.get(
    "/health",
    summary="Health check de liquidación",
    description="Conectividad a la base de datos y disponibilidad del secreto del gateway.",
)
async def health_check() -> dict:
    settings = get_settlement_settings()

    db_ok = await check_database_health(timeout_s=2.0)
    gateway_ok = bool(settings.gateway_secret_value())

    return {
        "status": "ok" if db_ok and gateway_ok else "degraded",
        "database": {"reachable": db_ok},
        "settlement": {
            "gateway_configured": gateway_ok,
            "metrics_enabled": settings.metrics_enabled,
        },
    }

# Fin del archivo backend/app/routes/health_routes.py
