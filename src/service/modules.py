# -*- coding: utf-8 -*-
"""
Сервис модулей: создание, изменение и зачисление студентов.
"""

from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import Role
from src.domain.models import Module, User
from src.repository.base import create_item, delete_item, get_item, update_item
from src.repository.groups import (get_group_member_ids, list_groups,
                                   remove_from_module_groups)
from src.repository.modules import (enroll_student_repo, get_module_by_id,
                                    get_module_student_ids, list_modules,
                                    unenroll_student_repo)
from src.repository.projects import clear_project_manager
from src.security.access_control import module_filter
from src.security.visibility import UserScope
from src.service.cache_service import cache_service
from src.service.users import is_learner
from src.utils.exceptions import (ConflictError, NotFoundError,
                                  PermissionDeniedError)


async def _load_module(session: AsyncSession, module_id: int) -> Module:
    module = await get_module_by_id(session, module_id)
    if module is None:
        raise NotFoundError(resource_type="Модуль", resource_id=module_id)
    return module


async def get_visible_module(
    session: AsyncSession, scope: UserScope, module_id: int
) -> Module:
    """
    Получить модуль с проверкой видимости.

    Raises:
        NotFoundError: Модуль не найден
        PermissionDeniedError: Модуль не виден пользователю
    """
    module = await _load_module(session, module_id)
    if not scope.can_view_module(module):
        raise PermissionDeniedError("Нет доступа к модулю")
    return module


async def get_managed_module(
    session: AsyncSession, scope: UserScope, module_id: int
) -> Module:
    """Модуль, которым пользователь может управлять (его преподаватель или admin)."""
    module = await _load_module(session, module_id)
    if not scope.can_manage_module(module):
        raise PermissionDeniedError("Управлять модулем может только его преподаватель")
    return module


async def list_modules_service(
    session: AsyncSession, scope: UserScope, search: Optional[str] = None
) -> List[Tuple[Module, int, int]]:
    return await list_modules(session, visibility=module_filter(scope), search=search)


async def create_module_service(
    session: AsyncSession,
    scope: UserScope,
    name: str,
    description: str = "",
    teacher_id: Optional[int] = None,
) -> Module:
    """
    Создать модуль.

    Преподаватель всегда создает модуль на себя; admin может указать
    преподавателя явно.

    Raises:
        ValueError: Если название короче 2 символов или teacher_id не преподаватель
    """
    if not name or len(name.strip()) < 2:
        raise ValueError("Название модуля должно содержать минимум 2 символа")

    if scope.is_teacher or teacher_id is None:
        teacher_id = scope.user_id
    else:
        teacher = await get_item(session, User, teacher_id)
        if teacher.role not in (Role.TEACHER, Role.ADMIN):
            raise ValueError("Ведущим модуля может быть только преподаватель")

    module = await create_item(
        session,
        Module,
        name=name.strip(),
        description=(description or "").strip(),
        teacher_id=teacher_id,
    )
    await cache_service.invalidate_user_access(teacher_id)
    logger.info(f"Создан модуль '{module.name}' (ID: {module.id}), преподаватель {teacher_id}")
    return await _load_module(session, module.id)


async def update_module_service(
    session: AsyncSession,
    scope: UserScope,
    module_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Module:
    await get_managed_module(session, scope, module_id)

    fields = {}
    if name is not None:
        if len(name.strip()) < 2:
            raise ValueError("Название модуля должно содержать минимум 2 символа")
        fields["name"] = name.strip()
    if description is not None:
        fields["description"] = description.strip()

    if fields:
        await update_item(session, Module, module_id, **fields)
    return await _load_module(session, module_id)


async def delete_module_service(
    session: AsyncSession, scope: UserScope, module_id: int
) -> None:
    """Удалить модуль вместе с его группами, проектами и задачами."""
    module = await get_managed_module(session, scope, module_id)

    # Сбрасываем кэш всех, чья область видимости включала модуль
    affected = {module.teacher_id, *await get_module_student_ids(session, module_id)}
    for group in await list_groups(session, module_id=module_id):
        affected.update(await get_group_member_ids(session, group.id))

    await delete_item(session, Module, module_id)
    await cache_service.invalidate_user_access(*affected)


async def enroll_student_service(
    session: AsyncSession, scope: UserScope, module_id: int, student_id: int
) -> Module:
    """
    Зачислить студента в модуль.

    Raises:
        ValueError: Пользователь не студент/координатор или неактивен
        ConflictError: Студент уже зачислен
    """
    await get_managed_module(session, scope, module_id)
    student = await get_item(session, User, student_id)
    if not is_learner(student) or not student.is_active:
        raise ValueError("Зачислить можно только активного студента")

    if not await enroll_student_repo(session, module_id, student_id):
        raise ConflictError("Студент уже зачислен в модуль")

    await cache_service.invalidate_user_access(student_id)
    logger.info(f"Студент {student_id} зачислен в модуль {module_id}")
    return await _load_module(session, module_id)


async def unenroll_student_service(
    session: AsyncSession, scope: UserScope, module_id: int, student_id: int
) -> Module:
    """
    Отчислить студента из модуля.

    Студент также исключается из групп модуля и снимается с роли координатора
    и руководителя проектов модуля.

    Raises:
        NotFoundError: Студент не зачислен в модуль
    """
    await get_managed_module(session, scope, module_id)
    if not await unenroll_student_repo(session, module_id, student_id):
        raise NotFoundError(
            resource_type="Студент", resource_id=student_id, details="не зачислен в модуль"
        )
    await remove_from_module_groups(session, module_id, student_id)
    await clear_project_manager(session, module_id, student_id)
    await cache_service.invalidate_user_access(student_id)
    logger.info(f"Студент {student_id} отчислен из модуля {module_id}")
    return await _load_module(session, module_id)
