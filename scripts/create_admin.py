#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скрипт для создания администратора системы.

Учетные данные берутся из настроек (ADMIN_USERNAME, ADMIN_EMAIL,
ADMIN_PASSWORD). Используется в Docker контейнере для инициализации системы.
"""

import asyncio
import sys
from pathlib import Path

# Добавляем путь к src в sys.path
sys.path.append(str(Path(__file__).parent.parent))

from src.clients.database_client import async_engine
from src.config.settings import settings
from src.utils.admin_check import check_admin_exists, create_default_admin


async def create_admin_user():
    try:
        if await check_admin_exists():
            print("✅ Администратор уже существует.")
            return

        if not await create_default_admin():
            print("❌ Не удалось создать администратора: логин или email заняты")
            sys.exit(1)

        print("✅ Администратор успешно создан:")
        print(f"   Username: {settings.admin_username}")
        print(f"   Email: {settings.admin_email}")
        print("   Role: ADMIN")
    except Exception as e:
        print(f"❌ Ошибка при создании администратора: {e}")
        sys.exit(1)
    finally:
        await async_engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_admin_user())
