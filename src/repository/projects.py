# -*- coding: utf-8 -*-
"""
Репозиторий проектов и их этапов.
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.domain.enums import ProjectStatus
from src.domain.models import Project, ProjectStep


async def get_project_by_id(
    session: AsyncSession, project_id: int
) -> Optional[Project]:
    result = await session.execute(
        select(Project)
        .where(Project.id == project_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_projects(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    status: Optional[ProjectStatus] = None,
    module_id: Optional[int] = None,
) -> List[Project]:
    """
    Получить список проектов.

    Args:
        session: Сессия базы данных
        visibility: Фильтр видимости по роли (None для admin)
        status: Фильтр по статусу
        module_id: Фильтр по модулю

    Returns:
        Проекты, отсортированные по сроку сдачи (без срока в конце)
    """
    stmt = select(Project)
    if visibility is not None:
        stmt = stmt.where(visibility)
    if status is not None:
        stmt = stmt.where(Project.status == status)
    if module_id is not None:
        stmt = stmt.where(Project.module_id == module_id)
    stmt = stmt.order_by(
        Project.due_date.is_(None), Project.due_date, Project.id.desc()
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


def _build_steps(steps: Sequence[Dict[str, Any]]) -> List[ProjectStep]:
    return [
        ProjectStep(
            title=step["title"],
            description=step.get("description") or "",
            step_order=index,
            is_completed=bool(step.get("is_completed", False)),
        )
        for index, step in enumerate(steps, start=1)
    ]


async def create_project_repo(
    session: AsyncSession,
    steps: Sequence[Dict[str, Any]] = (),
    **fields: Any,
) -> Project:
    """
    Создать проект вместе с этапами.

    Порядок этапов задается порядком в списке (нумерация с 1).
    """
    project = Project(**fields)
    project.steps = _build_steps(steps)
    session.add(project)
    await session.commit()
    return await get_project_by_id(session, project.id)


async def update_project_repo(
    session: AsyncSession,
    project: Project,
    steps: Optional[Sequence[Dict[str, Any]]] = None,
    **fields: Any,
) -> Project:
    """
    Обновить проект. Если передан steps, этапы заменяются целиком.
    """
    for key, value in fields.items():
        setattr(project, key, value)
    if steps is not None:
        project.steps.clear()
        # Старые этапы удаляются до вставки новых из-за уникальности step_order
        await session.flush()
        project.steps.extend(_build_steps(steps))
    await session.commit()
    return await get_project_by_id(session, project.id)


async def get_project_step(
    session: AsyncSession, project_id: int, step_id: int
) -> Optional[ProjectStep]:
    result = await session.execute(
        select(ProjectStep).where(
            ProjectStep.id == step_id, ProjectStep.project_id == project_id
        )
    )
    return result.scalar_one_or_none()


async def count_projects(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    status: Optional[ProjectStatus] = None,
) -> int:
    stmt = select(func.count(Project.id))
    if visibility is not None:
        stmt = stmt.where(visibility)
    if status is not None:
        stmt = stmt.where(Project.status == status)
    result = await session.execute(stmt)
    return result.scalar() or 0


async def clear_project_manager(
    session: AsyncSession, module_id: int, user_id: int
) -> None:
    """Снять пользователя с руководства проектами модуля."""
    await session.execute(
        update(Project)
        .where(
            and_(Project.module_id == module_id, Project.project_manager_id == user_id)
        )
        .values(project_manager_id=None)
    )
    await session.commit()
