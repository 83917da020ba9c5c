# -*- coding: utf-8 -*-
"""
Счетчики для главной страницы с учетом роли пользователя.
"""

from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import ProjectStatus, SubmissionStatus, TaskStatus
from src.domain.models import Group, Module
from src.repository.messages import count_unread
from src.repository.projects import count_projects
from src.repository.submissions import count_submissions
from src.repository.tasks import count_tasks
from src.security.access_control import (group_filter, module_filter,
                                         project_filter, submission_filter,
                                         task_filter)
from src.security.visibility import UserScope
from src.service.tasks import refresh_overdue_tasks


async def _count(session: AsyncSession, model, condition) -> int:
    stmt = select(func.count(model.id))
    if condition is not None:
        stmt = stmt.where(condition)
    result = await session.execute(stmt)
    return result.scalar() or 0


async def get_dashboard_service(session: AsyncSession, scope: UserScope) -> Dict[str, int]:
    """
    Собрать счетчики главной страницы.

    Returns:
        Словарь с количеством модулей, групп, активных проектов, открытых
        задач, работ на проверке и непрочитанных сообщений
    """
    await refresh_overdue_tasks(session)
    return {
        "modules": await _count(session, Module, module_filter(scope)),
        "groups": await _count(session, Group, group_filter(scope)),
        "active_projects": await count_projects(
            session, project_filter(scope), ProjectStatus.ACTIVE
        ),
        "pending_tasks": await count_tasks(
            session,
            task_filter(scope),
            [TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.OVERDUE],
        ),
        "pending_submissions": await count_submissions(
            session, submission_filter(scope), SubmissionStatus.PENDING
        ),
        "unread_messages": await count_unread(session, scope.user_id),
    }
