# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/__init__.py

Módulo de liquidación de pagos.

Este módulo gestiona:
- Registro idempotente de callbacks del gateway (PaymentRecord)
- Verificación de firma HMAC del gateway
- Pase de recuperación y auditoría de ingresos

Estructura:
- enums: PaymentStatus, SettlementOutcome
- models: Modelos ORM (PaymentRecord)
- repositories: Acceso a datos
- services: SettlementService, SettlementRecoveryService, verificación de firma
- schemas / routes: superficie HTTP
- metrics: contadores Prometheus

Los submódulos se importan explícitamente para evitar ciclos con
enrollment y revenue.

Autor: Academia Backend
Fecha: 2026-10-18
"""

# Fin del archivo backend/app/modules/payments/__init__.py
