# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/repository/users.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Репозиторные функции для работы с пользователями.
"""

from typing import Iterable, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import LEARNER_ROLES, Role
from src.domain.models import User


async def get_user_by_identifier(
    session: AsyncSession, identifier: str
) -> Optional[User]:
    """
    Получить пользователя по имени пользователя или email.

    Email сравнивается без учета регистра.
    """
    result = await session.execute(
        select(User).where(
            or_(
                User.username == identifier,
                func.lower(User.email) == identifier.lower(),
            )
        )
    )
    return result.scalars().first()


async def is_username_or_email_taken(
    session: AsyncSession, username: str, email: str
) -> bool:
    result = await session.execute(
        select(func.count(User.id)).where(
            or_(User.username == username, func.lower(User.email) == email.lower())
        )
    )
    return (result.scalar() or 0) > 0


async def list_users(
    session: AsyncSession,
    role: Optional[Role] = None,
    roles: Optional[Iterable[Role]] = None,
    search: Optional[str] = None,
) -> List[User]:
    """
    Получить список пользователей с фильтрацией.

    Args:
        session: Сессия базы данных
        role: Фильтр по одной роли
        roles: Фильтр по набору ролей
        search: Поиск по имени, фамилии, логину и email

    Returns:
        Список пользователей, новые первыми
    """
    stmt = select(User)
    if role is not None:
        stmt = stmt.where(User.role == role)
    if roles is not None:
        stmt = stmt.where(User.role.in_(list(roles)))
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                User.username.ilike(pattern),
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
            )
        )
    stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_students(session: AsyncSession) -> List[User]:
    """Студенты и координаторы, по имени и фамилии."""
    result = await session.execute(
        select(User)
        .where(User.role.in_(list(LEARNER_ROLES)), User.is_active.is_(True))
        .order_by(User.first_name, User.last_name)
    )
    return list(result.scalars().all())
