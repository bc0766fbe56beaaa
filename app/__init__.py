# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Paquete principal del backend de liquidación de pagos de cursos.

Contenido:
- shared: configuración, base de datos y logging comunes.
- modules: dominios (catalog, payments, enrollment, revenue).

En Windows se fuerza un event loop compatible con drivers async de Postgres.

Autor: Academia Backend
Fecha: 2026-10-18
"""
import sys
import asyncio

if sys.platform.startswith("win"):
    try:
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    except RuntimeError:
        # Ya hay un loop activo; la política actual se conserva
        pass

# Fin del archivo backend/app/__init__.py
