# -*- coding: utf-8 -*-
"""
Репозиторий задач.
"""

from datetime import datetime
from typing import List, Optional

from loguru import logger
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from src.domain.enums import TaskStatus
from src.domain.models import Task


async def get_task_by_id(session: AsyncSession, task_id: int) -> Optional[Task]:
    """
    Получить задачу по ID вместе со сданными работами.

    Args:
        session: Сессия базы данных
        task_id: ID задачи

    Returns:
        Задача или None если не найдена
    """
    result = await session.execute(
        select(Task)
        .options(selectinload(Task.submissions))
        .where(Task.id == task_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_tasks(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    status: Optional[TaskStatus] = None,
    search: Optional[str] = None,
    project_id: Optional[int] = None,
) -> List[Task]:
    """
    Получить список задач.

    Args:
        session: Сессия базы данных
        visibility: Фильтр видимости по роли (None для admin)
        status: Фильтр по статусу
        search: Поиск по заголовку и описанию
        project_id: Фильтр по проекту

    Returns:
        Задачи, отсортированные по сроку сдачи (без срока в конце)
    """
    stmt = select(Task)
    if visibility is not None:
        stmt = stmt.where(visibility)
    if status is not None:
        stmt = stmt.where(Task.status == status)
    if project_id is not None:
        stmt = stmt.where(Task.project_id == project_id)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Task.title.ilike(pattern), Task.description.ilike(pattern)))
    stmt = stmt.order_by(Task.due_date.is_(None), Task.due_date, Task.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def mark_overdue_tasks(session: AsyncSession, now: datetime) -> int:
    """
    Перевести просроченные незавершенные задачи в статус overdue.

    Returns:
        Количество обновленных задач
    """
    result = await session.execute(
        update(Task)
        .where(
            Task.due_date.is_not(None),
            Task.due_date < now,
            Task.status.in_([TaskStatus.PENDING, TaskStatus.IN_PROGRESS]),
        )
        .values(status=TaskStatus.OVERDUE)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    if result.rowcount:
        logger.info(f"Задач помечено как просроченные: {result.rowcount}")
    return result.rowcount or 0


async def count_tasks(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    statuses: Optional[List[TaskStatus]] = None,
) -> int:
    stmt = select(func.count(Task.id))
    if visibility is not None:
        stmt = stmt.where(visibility)
    if statuses:
        stmt = stmt.where(Task.status.in_(statuses))
    result = await session.execute(stmt)
    return result.scalar() or 0

