# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/dashboard/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Счетчики главной страницы.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.security.access_control import get_current_scope
from src.security.visibility import UserScope
from src.service.dashboard import get_dashboard_service

router = APIRouter()


class DashboardSchema(BaseModel):
    modules: int
    groups: int
    active_projects: int
    pending_tasks: int
    pending_submissions: int
    unread_messages: int


@router.get("/", response_model=DashboardSchema)
async def dashboard_endpoint(
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> DashboardSchema:
    """Счетчики с учетом роли текущего пользователя."""
    try:
        logger.info(f"Запрос дашборда пользователем {scope.user_id} ({scope.role.value})")
        return await get_dashboard_service(session, scope)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения дашборда: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения дашборда",
        )
