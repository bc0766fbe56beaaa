# -*- coding: utf-8 -*-
"""
backend/app/routes/__init__.py

Rutas transversales del backend (health y métricas).

Autor: Academia Backend
Fecha: 2026-10-18
"""

from .health_routes import router as health_router
from .metrics_routes import router as metrics_router

__all__ = ["health_router", "metrics_router"]
