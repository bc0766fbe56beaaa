# -*- coding: utf-8 -*-
"""
backend/app/modules/enrollment/enums.py

Enums del módulo de inscripciones.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from enum import StrEnum


class AccessDecision(StrEnum):
    """Resultado de política del gate de acceso; deny no es una falla."""
    GRANT = "grant"
    DENY = "deny"


__all__ = ["AccessDecision"]
