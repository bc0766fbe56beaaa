# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/__init__.py

Métricas Prometheus de la liquidación de pagos.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from .exporters.prometheus_exporter import (
    CONTENT_TYPE_LATEST,
    observe_revenue_credited,
    observe_settlement_outcome,
    observe_settlement_retry,
    render_prometheus_metrics,
)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "observe_revenue_credited",
    "observe_settlement_outcome",
    "observe_settlement_retry",
    "render_prometheus_metrics",
]
