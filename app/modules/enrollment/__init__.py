# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/__init__.py

Módulo de inscripciones: ledger (user, course) → acceso y gate de acceso.

Estructura:
- models: EnrollmentRecord
- repositories: EnrollmentRepository
- services: EnrollmentLedger
- access_gate: AccessControlGate
- routes: lecturas HTTP (is_enrolled / authorize)

Autor: Academia Backend
Fecha: 2026-10-18
"""
