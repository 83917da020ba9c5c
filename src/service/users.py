# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/service/users.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Сервисный слой для операций с пользователями: регистрация, вход, выборки.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import LEARNER_ROLES, Role
from src.domain.models import User, utcnow
from src.repository.base import create_item, get_item, update_item
from src.repository.users import (get_user_by_identifier,
                                  is_username_or_email_taken, list_students,
                                  list_users)
from src.security.security import (create_access_token, create_refresh_token,
                                   hash_password, verify_password,
                                   verify_token)
from src.security.visibility import UserScope
from src.utils.exceptions import ConflictError, PermissionDeniedError

# Роли, доступные при самостоятельной регистрации
SELF_REGISTRATION_ROLES = frozenset({Role.TEACHER, Role.STUDENT, Role.COORDINATOR})


class AuthenticationError(Exception):
    """Неверные учётные данные или токен."""


class InactiveUserError(Exception):
    """Пользователь деактивирован."""


def _issue_tokens(user: User) -> dict:
    claims = {"sub": str(user.id), "role": user.role}
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
        "token_type": "bearer",
    }


async def register_user_service(
    session: AsyncSession,
    username: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Role,
) -> tuple[User, dict]:
    """
    Зарегистрировать пользователя и выдать ему токены.

    Args:
        session: Сессия базы данных
        username: Имя пользователя
        email: Email
        password: Пароль в открытом виде
        first_name: Имя
        last_name: Фамилия
        role: Роль (admin недоступен)

    Returns:
        Кортеж (пользователь, словарь токенов)

    Raises:
        ValueError: Если роль недоступна для регистрации
        ConflictError: Если логин или email заняты
    """
    if role not in SELF_REGISTRATION_ROLES:
        raise ValueError(f"Регистрация с ролью {role.value} недоступна")

    username = username.strip()
    email = email.strip()
    if await is_username_or_email_taken(session, username, email):
        raise ConflictError("Пользователь с таким логином или email уже существует")

    user = await create_item(
        session,
        User,
        username=username,
        email=email,
        password=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        role=role,
        is_active=True,
    )
    tokens = _issue_tokens(user)
    user = await update_item(
        session,
        User,
        user.id,
        refresh_token=tokens["refresh_token"],
        last_login=utcnow(),
    )
    logger.info(f"Зарегистрирован пользователь {user.username} (ID: {user.id}, роль: {role.value})")
    return user, tokens


async def authenticate_service(
    session: AsyncSession, identifier: str, password: str
) -> dict:
    """
    Проверить учётные данные и выдать токены.

    Raises:
        AuthenticationError: Пользователь не найден или пароль неверен
        InactiveUserError: Пользователь деактивирован
    """
    user = await get_user_by_identifier(session, identifier.strip())
    if user is None or not verify_password(password, user.password):
        raise AuthenticationError("Недействительные учётные данные")
    if not user.is_active:
        raise InactiveUserError("Пользователь неактивен")

    tokens = _issue_tokens(user)
    await update_item(
        session,
        User,
        user.id,
        refresh_token=tokens["refresh_token"],
        last_login=utcnow(),
    )
    logger.info(
        f"Пользователь {user.username} (ID: {user.id}, роль: {user.role.value}) успешно авторизовался"
    )
    return tokens


async def refresh_tokens_service(session: AsyncSession, refresh_token: str) -> dict:
    """
    Выдать новый access токен по refresh токену.

    Refresh токен должен совпадать с последним выданным пользователю.
    """
    payload = verify_token(refresh_token, "refresh")
    user = await session.get(User, int(payload["sub"]))
    if user is None or user.refresh_token != refresh_token:
        raise AuthenticationError("Недействительный refresh токен")
    if not user.is_active:
        raise InactiveUserError("Пользователь неактивен")

    await update_item(session, User, user.id, last_login=utcnow())
    return {
        "access_token": create_access_token({"sub": str(user.id), "role": user.role}),
        "refresh_token": refresh_token,
        "token_type": "bearer",
    }


async def get_user_service(session: AsyncSession, user_id: int) -> User:
    return await get_item(session, User, user_id)


async def list_users_service(
    session: AsyncSession,
    scope: UserScope,
    role: Optional[Role] = None,
    search: Optional[str] = None,
) -> List[User]:
    """Список пользователей доступен только преподавателям и администраторам."""
    if scope.is_learner:
        raise PermissionDeniedError("Список пользователей доступен только преподавателям")
    return await list_users(session, role=role, search=search)


async def list_students_service(session: AsyncSession) -> List[User]:
    students = await list_students(session)
    logger.debug(f"Найдено студентов: {len(students)}")
    return students


def is_learner(user: User) -> bool:
    return user.role in LEARNER_ROLES
