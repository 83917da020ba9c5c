# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/users/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Маршруты для просмотра пользователей.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.domain.enums import Role
from src.security.access_control import get_current_scope
from src.security.security import admin_or_teacher
from src.security.visibility import UserScope
from src.service.users import (get_user_service, list_students_service,
                               list_users_service)

from .schemas import UserReadSchema

router = APIRouter()


@router.get("/", response_model=List[UserReadSchema])
async def list_users_endpoint(
    role: Optional[Role] = Query(None, description="Фильтр по роли"),
    search: Optional[str] = Query(None, description="Поиск по имени, логину, email"),
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
    _: dict = Depends(admin_or_teacher),
) -> List[UserReadSchema]:
    """Получить список пользователей (преподаватели и администраторы)."""
    try:
        logger.info(f"Запрос списка пользователей: role={role}, search={search}")
        users = await list_users_service(session, scope, role=role, search=search)
        logger.info(f"Найдено пользователей: {len(users)}")
        return users
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения списка пользователей: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения списка пользователей",
        )


@router.get("/students", response_model=List[UserReadSchema])
async def list_students_endpoint(
    session: AsyncSession = Depends(get_db),
    _: UserScope = Depends(get_current_scope),
) -> List[UserReadSchema]:
    """Получить активных студентов и координаторов."""
    try:
        logger.info("Запрос списка студентов")
        students = await list_students_service(session)
        return students
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения списка студентов: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения списка студентов",
        )


@router.get("/{user_id}", response_model=UserReadSchema)
async def get_user_endpoint(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    _: UserScope = Depends(get_current_scope),
) -> UserReadSchema:
    """Получить пользователя по ID."""
    try:
        logger.info(f"Запрос пользователя по ID: {user_id}")
        return await get_user_service(session, user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения пользователя {user_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения пользователя",
        )
