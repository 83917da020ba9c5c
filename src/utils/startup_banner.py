# -*- coding: utf-8 -*-
"""
Баннер и сводка окружения при запуске приложения.
"""

import platform
import sys
from datetime import datetime

from src.config.logger import get_system_logger
from src.config.settings import settings

system_logger = get_system_logger()

APP_TITLE = "🎓 EduGroupManager API"


def _database_label() -> str:
    # В URL может быть пароль, показываем только драйвер и хост
    if settings.database_url:
        driver, _, rest = settings.database_url.partition("://")
        return f"{driver}://{rest.rpartition('@')[2]}"
    return f"{settings.postgres_db}@{settings.postgres_host}:{settings.postgres_port}"


def get_startup_info() -> list[str]:
    """Строки со сведениями о системе и конфигурации."""
    if settings.app_domain:
        api_external = f"http://{settings.app_domain}/api/v1"
    else:
        api_external = f"http://localhost:{settings.app_port}/api/v1"

    return [
        f"🕒 Запуск: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"🖥️  Система: {platform.system()} {platform.release()} ({platform.machine()})",
        f"🐍 Python: {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        f"🌐 API: {api_external}",
        f"📊 База данных: {_database_label()}",
        f"🧠 Redis кэш: {'включен' if settings.redis_enabled else 'выключен'}",
        f"⚙️  Конфиг: {settings.get_config_source()}",
    ]


def print_startup_banner() -> None:
    """Выводит баннер через системный логгер."""
    system_logger.info("=" * 60)
    system_logger.info(APP_TITLE)
    for line in get_startup_info():
        system_logger.info(line)
    system_logger.info("=" * 60)
