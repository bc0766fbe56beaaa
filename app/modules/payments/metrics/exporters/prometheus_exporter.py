# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/exporters/prometheus_exporter.py

Exporter Prometheus para la liquidación de pagos.
Expone métricas en formato Prometheus sobre un registro propio.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
import logging

from app.modules.payments.enums import SettlementOutcome

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
# Registro global de Prometheus
# --------------------------------------------------------------------------
registry = CollectorRegistry()

# --------------------------------------------------------------------------
# Definición de métricas
# --------------------------------------------------------------------------

SETTLEMENT_REQUESTS_TOTAL = Counter(
    "settlement_requests_total",
    "Total de liquidaciones por outcome de negocio",
    ["outcome"],  # verified/duplicate/verification_failed/rejected/persistence_failure
    registry=registry,
)

SETTLEMENT_PROCESSING_SECONDS = Histogram(
    "settlement_processing_seconds",
    "Tiempo de procesamiento de una liquidación (segundos)",
    registry=registry,
)

SETTLEMENT_RETRIES_TOTAL = Counter(
    "settlement_retries_total",
    "Reintentos de la unidad de trabajo por fallos de persistencia",
    registry=registry,
)

REVENUE_CREDITED_TOTAL = Counter(
    "revenue_credited_total",
    "Ingresos acreditados (unidad mínima de moneda)",
    registry=registry,
)

# --------------------------------------------------------------------------
# Funciones auxiliares
# --------------------------------------------------------------------------
def observe_settlement_outcome(outcome: SettlementOutcome) -> None:
    SETTLEMENT_REQUESTS_TOTAL.labels(outcome=outcome.value).inc()


def observe_settlement_retry() -> None:
    SETTLEMENT_RETRIES_TOTAL.inc()


def observe_revenue_credited(amount: int) -> None:
    REVENUE_CREDITED_TOTAL.inc(amount)


def render_prometheus_metrics() -> bytes:
    """
    Genera la salida actual de las métricas en formato Prometheus.
    """
    return generate_latest(registry)


__all__ = [
    "registry",
    "CONTENT_TYPE_LATEST",
    "SETTLEMENT_REQUESTS_TOTAL",
    "SETTLEMENT_PROCESSING_SECONDS",
    "SETTLEMENT_RETRIES_TOTAL",
    "REVENUE_CREDITED_TOTAL",
    "observe_settlement_outcome",
    "observe_settlement_retry",
    "observe_revenue_credited",
    "render_prometheus_metrics",
]
