# app/shared/config/__init__.py
"""
Entry-point ligero para configuración.

Expone imports estables:
    from app.shared.config import get_settlement_settings, setup_logging

No inicializa settings en import-time para evitar efectos colaterales
durante la recolección de tests.
"""

from app.shared.config.logging_config import setup_logging
from app.shared.config.settings_settlement import (
    SettlementSettings,
    get_settlement_settings,
    reset_settlement_settings,
)

__all__ = [
    "SettlementSettings",
    "get_settlement_settings",
    "reset_settlement_settings",
    "setup_logging",
]
# fin del archivo
