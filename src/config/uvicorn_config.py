# -*- coding: utf-8 -*-
"""
Конфигурация для Uvicorn с логами через loguru.
"""

import logging

from src.config.logger import InterceptHandler
from src.config.settings import settings

_ROUTED_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
)


def setup_uvicorn_logging():
    """Настраивает перехват логов uvicorn и SQLAlchemy."""

    for logger_name in _ROUTED_LOGGERS:
        logger_obj = logging.getLogger(logger_name)
        logger_obj.handlers = [InterceptHandler()]
        logger_obj.propagate = False

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    # Скрываем access логи, запросы логирует middleware приложения
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def get_uvicorn_config() -> dict:
    """Возвращает конфигурацию для uvicorn."""
    return {
        "app": "src.main:app",
        "host": settings.app_host,
        "port": settings.app_port,
        "reload": False,
        "log_config": None,  # Отключаем стандартную конфигурацию логов
        "access_log": True,
        "use_colors": True,
    }
