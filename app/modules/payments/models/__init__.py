# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/__init__.py

Punto de entrada de modelos ORM del módulo Payments.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from .payment_models import PaymentRecord

__all__ = ["PaymentRecord"]
