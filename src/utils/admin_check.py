# -*- coding: utf-8 -*-
"""
Утилиты для проверки и создания администратора системы.
"""

from sqlalchemy import or_, select

from src.clients.database_client import AsyncSessionLocal
from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.enums import Role
from src.domain.models import User
from src.security.security import hash_password

logger = configure_logger()


async def check_admin_exists() -> bool:
    """
    Проверяет, существует ли активный пользователь с ролью ADMIN.

    Returns:
        bool: True если админ существует, False в противном случае
    """
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(User.id).where(User.role == Role.ADMIN, User.is_active.is_(True))
        )
        return result.first() is not None


async def create_default_admin() -> bool:
    """
    Создает администратора из настроек (ADMIN_USERNAME, ADMIN_EMAIL, ADMIN_PASSWORD).

    Returns:
        bool: True если администратор создан, False если логин или email заняты
    """
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(User).where(
                or_(
                    User.username == settings.admin_username,
                    User.email == settings.admin_email,
                )
            )
        )
        if result.scalars().first() is not None:
            logger.warning(
                f"⚠️ Логин {settings.admin_username} или email {settings.admin_email} уже заняты"
            )
            return False

        session.add(
            User(
                username=settings.admin_username,
                email=settings.admin_email,
                first_name="Platform",
                last_name="Administrator",
                password=hash_password(settings.admin_password),
                role=Role.ADMIN,
                is_active=True,
            )
        )
        await session.commit()

    logger.info(f"✅ Администратор создан ({settings.admin_username})")
    return True


async def ensure_admin_exists() -> None:
    """
    Проверяет существование админа и создает его при необходимости.
    """
    if await check_admin_exists():
        return

    if not await create_default_admin():
        logger.error("❌ Не удалось создать администратора")
        raise RuntimeError("Не удалось создать администратора")
