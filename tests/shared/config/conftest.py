# -*- coding: utf-8 -*-
import logging

import pytest


@pytest.fixture(autouse=True)
def _isolate_env_and_logging(monkeypatch, tmp_path):
    """
    Aísla variables de entorno de liquidación y restaura el logger raíz
    (setup_logging reemplaza sus handlers).
    """
    for k in (
        "ENVIRONMENT",
        "DATABASE_URL",
        "DB_ECHO_SQL",
        "CREATE_SCHEMA_ON_STARTUP",
        "GATEWAY_KEY_SECRET",
        "MAX_PERSISTENCE_RETRIES",
        "PERSISTENCE_RETRY_BACKOFF_SECONDS",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "METRICS_ENABLED",
    ):
        monkeypatch.delenv(k, raising=False)
    # Sin .env del desarrollador
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
# Fin del archivo backend/tests/shared/config/conftest.py
