# -*- coding: utf-8 -*-
"""
Репозиторий модулей (учебных курсов) и зачислений студентов.
"""

from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from src.domain.models import Module, ModuleStudents, Project


async def get_module_by_id(session: AsyncSession, module_id: int) -> Optional[Module]:
    """
    Получить модуль по ID вместе со списком студентов.

    Args:
        session: Сессия базы данных
        module_id: ID модуля

    Returns:
        Модуль или None если не найден
    """
    result = await session.execute(
        select(Module)
        .options(selectinload(Module.students))
        .where(Module.id == module_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_modules(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    search: Optional[str] = None,
) -> List[Tuple[Module, int, int]]:
    """
    Получить модули с количеством студентов и проектов.

    Args:
        session: Сессия базы данных
        visibility: Фильтр видимости по роли (None для admin)
        search: Поиск по названию и описанию

    Returns:
        Список кортежей (модуль, число студентов, число проектов)
    """
    student_count = (
        select(func.count(ModuleStudents.student_id))
        .where(ModuleStudents.module_id == Module.id)
        .correlate(Module)
        .scalar_subquery()
    )
    project_count = (
        select(func.count(Project.id))
        .where(Project.module_id == Module.id)
        .correlate(Module)
        .scalar_subquery()
    )
    stmt = select(Module, student_count, project_count)
    if visibility is not None:
        stmt = stmt.where(visibility)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(Module.name.ilike(pattern) | Module.description.ilike(pattern))
    stmt = stmt.order_by(Module.created_at.desc(), Module.id.desc())

    result = await session.execute(stmt)
    return [(module, students or 0, projects or 0) for module, students, projects in result.all()]


async def is_student_enrolled(
    session: AsyncSession, module_id: int, student_id: int
) -> bool:
    result = await session.execute(
        select(ModuleStudents).where(
            ModuleStudents.module_id == module_id,
            ModuleStudents.student_id == student_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def enroll_student_repo(
    session: AsyncSession, module_id: int, student_id: int
) -> bool:
    """
    Зачислить студента в модуль.

    Returns:
        True если студент зачислен, False если он уже был в модуле
    """
    if await is_student_enrolled(session, module_id, student_id):
        return False
    session.add(ModuleStudents(module_id=module_id, student_id=student_id))
    await session.commit()
    return True


async def unenroll_student_repo(
    session: AsyncSession, module_id: int, student_id: int
) -> bool:
    """Отчислить студента из модуля. False, если он не был зачислен."""
    result = await session.execute(
        delete(ModuleStudents).where(
            ModuleStudents.module_id == module_id,
            ModuleStudents.student_id == student_id,
        )
    )
    await session.commit()
    return result.rowcount > 0


async def get_module_student_ids(session: AsyncSession, module_id: int) -> List[int]:
    result = await session.execute(
        select(ModuleStudents.student_id).where(ModuleStudents.module_id == module_id)
    )
    return list(result.scalars().all())
