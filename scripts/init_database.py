#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скрипт инициализации базы данных.

Выполняет:
1. Проверку подключения к базе данных
2. Создание недостающих таблиц
3. Создание администратора системы
"""

import asyncio
import sys
from pathlib import Path

# Добавляем путь к src в sys.path
sys.path.append(str(Path(__file__).parent.parent))

from src.clients.database_client import (async_engine, check_db_connection,
                                         init_db)
from src.config.logger import configure_logger
from src.utils.admin_check import ensure_admin_exists

logger = configure_logger()


async def init_database():
    """Инициализация базы данных и создание админа."""
    try:
        print("🚀 Начинаем инициализацию базы данных...")
        await check_db_connection()

        print("🔄 Создание таблиц...")
        await init_db()

        print("👤 Проверка администратора...")
        await ensure_admin_exists()

        print("🎉 Инициализация базы данных завершена успешно!")
    except Exception as e:
        logger.exception(f"❌ Ошибка при инициализации базы данных: {e}")
        sys.exit(1)
    finally:
        await async_engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_database())
