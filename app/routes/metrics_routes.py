# -*- coding: utf-8 -*-
"""
backend/app/routes/metrics_routes.py

Endpoint /metrics compatible con Prometheus (pull model).

Autor: Academia Backend
Fecha: 2026-10-18
"""

from fastapi import APIRouter, HTTPException, status
from starlette.responses import Response

from app.shared.config import get_settlement_settings
from app.modules.payments.metrics import CONTENT_TYPE_LATEST, render_prometheus_metrics

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    if not get_settlement_settings().metrics_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="metrics disabled")
    return Response(render_prometheus_metrics(), media_type=CONTENT_TYPE_LATEST)

# Fin del archivo backend/app/routes/metrics_routes.py
