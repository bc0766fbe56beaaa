# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/__init__.py

Punto de entrada de repositorios del módulo Payments.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from .payment_repository import PaymentRepository

__all__ = ["PaymentRepository"]
