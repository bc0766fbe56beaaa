# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_settlement.py

Configuración del ledger de liquidación de pagos.

Descripción:
    Centraliza conexión a base de datos, secreto compartido con el gateway,
    política de reintentos de persistencia, logging y métricas.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettlementSettings(BaseSettings):
    """Configuración del sistema de liquidación."""

    # =========================================================================
    # ENTORNO
    # =========================================================================

    environment: str = Field(
        default="development",
        description="Entorno de ejecución (development, test, production)",
    )

    # =========================================================================
    # BASE DE DATOS
    # =========================================================================

    database_url: str = Field(
        default="sqlite+aiosqlite:///./settlement.db",
        description="DSN async de SQLAlchemy (postgresql+asyncpg://... en producción)",
    )

    db_echo_sql: bool = Field(
        default=False,
        description="Emite el SQL generado en los logs",
    )

    create_schema_on_startup: Optional[bool] = Field(
        default=None,
        description="Crea tablas al arrancar (None = solo fuera de producción)",
    )

    # =========================================================================
    # GATEWAY
    # =========================================================================

    gateway_key_secret: Optional[SecretStr] = Field(
        default=None,
        description="Secreto compartido con el gateway para firmar callbacks (HMAC-SHA256)",
    )

    # =========================================================================
    # REINTENTOS DE PERSISTENCIA
    # =========================================================================

    max_persistence_retries: int = Field(
        default=3,
        description="Máximo de intentos por liquidación ante fallos de persistencia",
    )

    persistence_retry_backoff_seconds: float = Field(
        default=0.05,
        description="Backoff base (segundos); se duplica en cada intento",
    )

    # =========================================================================
    # OBSERVABILIDAD
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Nivel de logging raíz",
    )

    log_format: Literal["plain", "pretty", "json"] = Field(
        default="plain",
        description="Formato de salida de logs",
    )

    metrics_enabled: bool = Field(
        default=True,
        description="Expone /metrics en formato Prometheus",
    )

    @field_validator("max_persistence_retries")
    @classmethod
    def _validate_retries(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_persistence_retries must be >= 1")
        return v

    @field_validator("persistence_retry_backoff_seconds")
    @classmethod
    def _validate_backoff(cls, v: float) -> float:
        if v < 0:
            raise ValueError("persistence_retry_backoff_seconds must be >= 0")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def should_create_schema(self) -> bool:
        if self.create_schema_on_startup is not None:
            return self.create_schema_on_startup
        return not self.is_production

    def gateway_secret_value(self) -> str:
        """Devuelve el secreto en claro o "" si no está configurado."""
        if self.gateway_key_secret is None:
            return ""
        return self.gateway_key_secret.get_secret_value()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_settlement_settings: Optional[SettlementSettings] = None


def get_settlement_settings() -> SettlementSettings:
    """
    Obtiene la instancia global de configuración de liquidación.

    Returns:
        SettlementSettings: Configuración cargada desde entorno / .env
    """
    global _settlement_settings
    if _settlement_settings is None:
        _settlement_settings = SettlementSettings()
    return _settlement_settings


def reset_settlement_settings() -> None:
    """Descarta el singleton (útil para tests que cambian variables de entorno)."""
    global _settlement_settings
    _settlement_settings = None


__all__ = [
    "SettlementSettings",
    "get_settlement_settings",
    "reset_settlement_settings",
]
# Fin del archivo backend/app/shared/config/settings_settlement.py
