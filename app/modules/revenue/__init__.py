# -*- coding: utf-8 -*-
"""
backend/app/modules/revenue/__init__.py

Acumulador de ingresos por curso.

Estructura:
- models: CourseRevenueTotal (total acumulado) y RevenueCredit (conjunto
  de pagos ya acreditados)
- repositories: RevenueRepository
- services: RevenueAccumulator
- routes: lectura HTTP del total

Autor: Academia Backend
Fecha: 2026-10-18
"""
