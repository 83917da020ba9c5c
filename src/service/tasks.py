# -*- coding: utf-8 -*-
"""
Сервис задач.

Перед каждым чтением задачи с истекшим сроком, которые еще не завершены,
переводятся в статус overdue.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import TaskStatus
from src.domain.models import Submission, Task, utcnow
from src.repository.base import create_item, delete_item, update_item
from src.repository.modules import get_module_by_id
from src.repository.projects import get_project_by_id
from src.repository.tasks import get_task_by_id, list_tasks, mark_overdue_tasks
from src.security.access_control import task_filter
from src.security.visibility import UserScope
from src.utils.exceptions import NotFoundError, PermissionDeniedError


async def refresh_overdue_tasks(session: AsyncSession) -> int:
    return await mark_overdue_tasks(session, utcnow())


async def _load_task(session: AsyncSession, task_id: int) -> Task:
    task = await get_task_by_id(session, task_id)
    if task is None:
        raise NotFoundError(resource_type="Задача", resource_id=task_id)
    return task


async def get_visible_task(
    session: AsyncSession, scope: UserScope, task_id: int
) -> Task:
    task = await _load_task(session, task_id)
    if not scope.can_view_task(task):
        raise PermissionDeniedError("Нет доступа к задаче")
    return task


async def _get_managed_task(
    session: AsyncSession, scope: UserScope, task_id: int
) -> Task:
    task = await _load_task(session, task_id)
    if not scope.can_manage_task(task):
        raise PermissionDeniedError("Изменять задачу может только её автор")
    return task


async def _resolve_scope_links(
    session: AsyncSession,
    scope: UserScope,
    module_id: Optional[int],
    project_id: Optional[int],
) -> Optional[int]:
    """
    Проверить модуль и проект задачи и вернуть итоговый module_id.

    Для задачи проекта модуль берется из проекта.
    """
    if project_id is not None:
        project = await get_project_by_id(session, project_id)
        if project is None:
            raise NotFoundError(resource_type="Проект", resource_id=project_id)
        if module_id is not None and module_id != project.module_id:
            raise ValueError("Модуль задачи не совпадает с модулем проекта")
        module_id = project.module_id

    if module_id is not None:
        module = await get_module_by_id(session, module_id)
        if module is None:
            raise NotFoundError(resource_type="Модуль", resource_id=module_id)
        if not scope.can_manage_module(module):
            raise PermissionDeniedError("Задачу можно назначить только в своем модуле")
    return module_id


async def list_tasks_service(
    session: AsyncSession,
    scope: UserScope,
    status: Optional[TaskStatus] = None,
    search: Optional[str] = None,
    project_id: Optional[int] = None,
) -> List[Task]:
    await refresh_overdue_tasks(session)
    return await list_tasks(
        session,
        visibility=task_filter(scope),
        status=status,
        search=search,
        project_id=project_id,
    )


async def get_task_service(
    session: AsyncSession, scope: UserScope, task_id: int
) -> Tuple[Task, List[Submission]]:
    """
    Получить задачу и видимые пользователю работы по ней.

    Returns:
        Кортеж (задача, список работ)
    """
    await refresh_overdue_tasks(session)
    task = await get_visible_task(session, scope, task_id)
    submissions = [s for s in task.submissions if scope.can_view_submission(s)]
    return task, submissions


async def create_task_service(
    session: AsyncSession,
    scope: UserScope,
    title: str,
    description: str = "",
    due_date: Optional[datetime] = None,
    status: TaskStatus = TaskStatus.PENDING,
    module_id: Optional[int] = None,
    project_id: Optional[int] = None,
) -> Task:
    """
    Создать задачу.

    Raises:
        ValueError: Если заголовок пустой или модуль не совпадает с проектом
        PermissionDeniedError: Если модуль не принадлежит преподавателю
    """
    if not title or len(title.strip()) < 2:
        raise ValueError("Заголовок задачи должен содержать минимум 2 символа")

    module_id = await _resolve_scope_links(session, scope, module_id, project_id)
    task = await create_item(
        session,
        Task,
        title=title.strip(),
        description=(description or "").strip(),
        due_date=due_date,
        status=status,
        module_id=module_id,
        project_id=project_id,
        assigned_by_id=scope.user_id,
    )
    logger.info(f"Задача '{task.title}' (ID: {task.id}) создана пользователем {scope.user_id}")
    return await _load_task(session, task.id)


async def update_task_service(
    session: AsyncSession, scope: UserScope, task_id: int, fields: Dict[str, Any]
) -> Task:
    """
    Обновить задачу.

    Args:
        fields: Изменяемые поля (только переданные клиентом)
    """
    task = await _get_managed_task(session, scope, task_id)
    # Обязательные поля не сбрасываются в null
    fields = {
        key: value
        for key, value in fields.items()
        if value is not None or key not in ("title", "description", "status")
    }

    if "title" in fields:
        if not fields["title"] or len(fields["title"].strip()) < 2:
            raise ValueError("Заголовок задачи должен содержать минимум 2 символа")
        fields["title"] = fields["title"].strip()

    if "module_id" in fields or "project_id" in fields:
        project_id = fields.get("project_id", task.project_id)
        module_id = fields.get("module_id", task.module_id)
        if "project_id" in fields and "module_id" not in fields:
            module_id = None
        fields["module_id"] = await _resolve_scope_links(
            session, scope, module_id, project_id
        )

    if fields:
        await update_item(session, Task, task_id, **fields)
    return await _load_task(session, task_id)


async def delete_task_service(
    session: AsyncSession, scope: UserScope, task_id: int
) -> None:
    await _get_managed_task(session, scope, task_id)
    await delete_item(session, Task, task_id)
