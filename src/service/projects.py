# -*- coding: utf-8 -*-
"""
Сервис проектов и их этапов.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import ProjectStatus
from src.domain.models import Project, User
from src.repository.base import delete_item, get_item
from src.repository.groups import get_group_by_id
from src.repository.modules import get_module_by_id
from src.repository.projects import (create_project_repo, get_project_by_id,
                                     get_project_step, list_projects,
                                     update_project_repo)
from src.security.access_control import project_filter
from src.security.visibility import UserScope
from src.service.users import is_learner
from src.utils.exceptions import NotFoundError, PermissionDeniedError


async def _load_project(session: AsyncSession, project_id: int) -> Project:
    project = await get_project_by_id(session, project_id)
    if project is None:
        raise NotFoundError(resource_type="Проект", resource_id=project_id)
    return project


async def get_visible_project(
    session: AsyncSession, scope: UserScope, project_id: int
) -> Project:
    project = await _load_project(session, project_id)
    if not scope.can_view_project(project):
        raise PermissionDeniedError("Нет доступа к проекту")
    return project


async def _get_managed_project(
    session: AsyncSession, scope: UserScope, project_id: int
) -> Project:
    project = await _load_project(session, project_id)
    if not scope.can_manage_project(project):
        raise PermissionDeniedError("Изменять проект может только преподаватель модуля")
    return project


async def _validate_links(
    session: AsyncSession,
    module_id: int,
    group_id: Optional[int],
    project_manager_id: Optional[int],
) -> None:
    """
    Проверить группу и руководителя проекта.

    Группа должна принадлежать модулю проекта, руководитель должен быть
    студентом и, если группа указана, её участником.
    """
    group = None
    if group_id is not None:
        group = await get_group_by_id(session, group_id)
        if group is None:
            raise NotFoundError(resource_type="Группа", resource_id=group_id)
        if group.module_id != module_id:
            raise ValueError("Группа проекта должна относиться к тому же модулю")

    if project_manager_id is not None:
        manager = await get_item(session, User, project_manager_id)
        if not is_learner(manager):
            raise ValueError("Руководителем проекта может быть только студент")
        if group is not None and project_manager_id not in group.member_ids:
            raise ValueError("Руководитель проекта должен быть участником группы")


async def list_projects_service(
    session: AsyncSession,
    scope: UserScope,
    status: Optional[ProjectStatus] = None,
    module_id: Optional[int] = None,
) -> List[Project]:
    return await list_projects(
        session, visibility=project_filter(scope), status=status, module_id=module_id
    )


async def create_project_service(
    session: AsyncSession,
    scope: UserScope,
    name: str,
    module_id: int,
    description: str = "",
    group_id: Optional[int] = None,
    project_manager_id: Optional[int] = None,
    due_date: Optional[datetime] = None,
    status: ProjectStatus = ProjectStatus.ACTIVE,
    steps: Sequence[Dict[str, Any]] = (),
) -> Project:
    """
    Создать проект с этапами.

    Args:
        session: Сессия базы данных
        scope: Область видимости текущего пользователя
        name: Название проекта
        module_id: ID модуля
        description: Описание
        group_id: ID группы, выполняющей проект
        project_manager_id: ID руководителя проекта
        due_date: Срок сдачи
        status: Начальный статус
        steps: Этапы в порядке выполнения

    Returns:
        Созданный проект

    Raises:
        ValueError: Если данные невалидны
        PermissionDeniedError: Если модуль не принадлежит преподавателю
    """
    if not name or len(name.strip()) < 2:
        raise ValueError("Название проекта должно содержать минимум 2 символа")

    module = await get_module_by_id(session, module_id)
    if module is None:
        raise NotFoundError(resource_type="Модуль", resource_id=module_id)
    if not scope.can_manage_module(module):
        raise PermissionDeniedError("Проект можно создать только в своем модуле")

    await _validate_links(session, module_id, group_id, project_manager_id)

    project = await create_project_repo(
        session,
        steps=steps,
        name=name.strip(),
        description=(description or "").strip(),
        module_id=module_id,
        group_id=group_id,
        project_manager_id=project_manager_id,
        due_date=due_date,
        status=status,
    )
    logger.info(
        f"Проект '{project.name}' (ID: {project.id}) создан в модуле {module_id}, этапов: {len(project.steps)}"
    )
    return project


async def update_project_service(
    session: AsyncSession,
    scope: UserScope,
    project_id: int,
    fields: Dict[str, Any],
    steps: Optional[Sequence[Dict[str, Any]]] = None,
) -> Project:
    """
    Обновить проект.

    Args:
        fields: Изменяемые поля (только переданные клиентом)
        steps: Новый список этапов, заменяет существующий
    """
    project = await _get_managed_project(session, scope, project_id)
    # Обязательные поля не сбрасываются в null
    fields = {
        key: value
        for key, value in fields.items()
        if value is not None or key not in ("name", "description", "status")
    }

    if "name" in fields:
        if not fields["name"] or len(fields["name"].strip()) < 2:
            raise ValueError("Название проекта должно содержать минимум 2 символа")
        fields["name"] = fields["name"].strip()

    if "group_id" in fields or "project_manager_id" in fields:
        await _validate_links(
            session,
            project.module_id,
            fields.get("group_id", project.group_id),
            fields.get("project_manager_id", project.project_manager_id),
        )

    return await update_project_repo(session, project, steps=steps, **fields)


async def delete_project_service(
    session: AsyncSession, scope: UserScope, project_id: int
) -> None:
    await _get_managed_project(session, scope, project_id)
    await delete_item(session, Project, project_id)


async def toggle_step_service(
    session: AsyncSession, scope: UserScope, project_id: int, step_id: int
) -> Project:
    """
    Переключить отметку выполнения этапа.

    Returns:
        Проект с пересчитанным прогрессом
    """
    project = await _load_project(session, project_id)
    if not scope.can_view_project(project) or not scope.can_toggle_step(project):
        raise PermissionDeniedError("Нет прав отмечать этапы проекта")

    step = await get_project_step(session, project_id, step_id)
    if step is None:
        raise NotFoundError(resource_type="Этап", resource_id=step_id)

    completed = not step.is_completed
    step.is_completed = completed
    await session.commit()
    logger.info(
        f"Этап {step_id} проекта {project_id} отмечен как {'выполненный' if completed else 'невыполненный'}"
    )
    return await _load_project(session, project_id)
