# -*- coding: utf-8 -*-

"""
EduGroupManager/Backend/src/security/access_control.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Загрузка области видимости пользователя и SQL-фильтры для списков.

Область видимости (`UserScope`) собирается из модулей, которые пользователь
ведет, модулей, куда он зачислен, и групп, где он состоит. Результат кэшируется
в Redis и сбрасывается при изменении зачислений и членства.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import false, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.domain.enums import Role
from src.domain.models import (Group, GroupMembers, Module, ModuleStudents,
                               Project, Submission, Task, User)
from src.security.security import authenticated
from src.security.visibility import UserScope
from src.service.cache_service import get_or_set_access

logger = configure_logger()


async def load_user_scope(session: AsyncSession, user_id: int, role: Role) -> UserScope:
    """
    Собирает область видимости пользователя.

    Args:
        session: Сессия базы данных
        user_id: ID пользователя
        role: Роль пользователя

    Returns:
        UserScope с идентификаторами модулей и групп
    """
    if role == Role.ADMIN:
        return UserScope(user_id=user_id, role=role)

    async def _load() -> dict:
        taught = await session.execute(
            select(Module.id).where(Module.teacher_id == user_id)
        )
        enrolled = await session.execute(
            select(ModuleStudents.module_id).where(ModuleStudents.student_id == user_id)
        )
        groups = await session.execute(
            select(GroupMembers.group_id).where(GroupMembers.user_id == user_id)
        )
        scope = UserScope(
            user_id=user_id,
            role=role,
            taught_module_ids=frozenset(taught.scalars().all()),
            enrolled_module_ids=frozenset(enrolled.scalars().all()),
            group_ids=frozenset(groups.scalars().all()),
        )
        logger.debug(
            f"Область видимости пользователя {user_id}: модули {sorted(scope.module_ids)}, группы {sorted(scope.group_ids)}"
        )
        return scope.to_cache()

    data = await get_or_set_access(("scope", user_id), _load)
    return UserScope.from_cache(user_id, role, data)


async def get_current_scope(
    claims: dict = Depends(authenticated),
    session: AsyncSession = Depends(get_db),
) -> UserScope:
    """Зависимость FastAPI: область видимости текущего пользователя."""
    user_id = int(claims["sub"])
    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        logger.warning(f"Токен пользователя {user_id}, который не найден или неактивен")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Пользователь не найден или неактивен",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await load_user_scope(session, user_id, user.role)


# ---------------------------------------------------------------------------
# SQL-фильтры для списков. None означает "без ограничений" (admin).
# ---------------------------------------------------------------------------


def _in(column, ids: frozenset[int]) -> ColumnElement[bool]:
    return column.in_(sorted(ids)) if ids else false()


def module_filter(scope: UserScope) -> Optional[ColumnElement[bool]]:
    if scope.is_admin:
        return None
    return _in(Module.id, scope.module_ids)


def group_filter(scope: UserScope) -> Optional[ColumnElement[bool]]:
    if scope.is_admin:
        return None
    if scope.is_teacher:
        return _in(Group.module_id, scope.taught_module_ids)
    return _in(Group.id, scope.group_ids)


def project_filter(scope: UserScope) -> Optional[ColumnElement[bool]]:
    if scope.is_admin:
        return None
    if scope.is_teacher:
        return _in(Project.module_id, scope.taught_module_ids)
    return or_(
        _in(Project.module_id, scope.enrolled_module_ids),
        _in(Project.group_id, scope.group_ids),
    )


def task_filter(scope: UserScope) -> Optional[ColumnElement[bool]]:
    if scope.is_admin:
        return None
    visible_project = Task.project.has(project_filter(scope))
    if scope.is_teacher:
        return or_(
            Task.assigned_by_id == scope.user_id,
            _in(Task.module_id, scope.taught_module_ids),
            visible_project,
        )
    return or_(_in(Task.module_id, scope.enrolled_module_ids), visible_project)


def submission_filter(scope: UserScope) -> Optional[ColumnElement[bool]]:
    if scope.is_admin:
        return None
    if scope.is_teacher:
        return Submission.task.has(task_filter(scope))
    return or_(
        Submission.submitted_by_id == scope.user_id,
        _in(Submission.submitted_by_group_id, scope.group_ids),
    )
