# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend de liquidación de pagos.

Ajustes clave:
- .env cargado antes de construir la configuración
- Logging según SettlementSettings (plain / json)
- Creación de esquema en el arranque fuera de producción
- Routers: /payments, /enrollments, /access, /revenue, /health, /metrics
- Cierre ordenado del engine en shutdown

Autor: Academia Backend
Fecha: 2026-10-18
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de construir settings
# En DEV: override=True para que .env mande sobre variables del entorno
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_ENVIRONMENT = os.getenv("ENVIRONMENT", "development").strip().strip('"').strip("'").lower()
_override_env = _ENVIRONMENT != "production"
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

from fastapi import FastAPI

from app.shared.config import get_settlement_settings, setup_logging
from app.shared.database import create_schema, dispose_database
from app.routes import health_router, metrics_router
from app.modules.payments.routes import router as payments_router
from app.modules.enrollment.routes import router as enrollment_router
from app.modules.revenue.routes import router as revenue_router

_settings = get_settlement_settings()
setup_logging(_settings.log_level, _settings.log_format)
logger = logging.getLogger(__name__)

logger.info(f"[dotenv] Loaded {_ENV_PATH} (override={_override_env}, ENVIRONMENT={_ENVIRONMENT})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    settings = get_settlement_settings()
    if settings.should_create_schema:
        await create_schema()
        logger.info("🗄️ Esquema verificado/creado")
    if not settings.gateway_secret_value():
        logger.warning("⚠️ GATEWAY_KEY_SECRET no configurado: toda liquidación fallará la verificación")

    logger.info("🟢 Backend de liquidación iniciado.")
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        await dispose_database()
        logger.info("🔴 Backend de liquidación apagado.")


openapi_tags = [
    {"name": "payments:settlements", "description": "Liquidación de callbacks e historial de pagos"},
    {"name": "enrollment", "description": "Inscripciones y control de acceso"},
    {"name": "revenue", "description": "Ingresos acumulados por curso"},
]


def create_app() -> FastAPI:
    app = FastAPI(
        title="Academia Settlement API",
        description="Ledger de liquidación de pagos e inscripciones",
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(payments_router)
    app.include_router(enrollment_router)
    app.include_router(revenue_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=_ENVIRONMENT != "production",
    )

# Fin del archivo backend/app/main.py
