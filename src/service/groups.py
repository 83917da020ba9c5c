# -*- coding: utf-8 -*-
"""
Сервис для работы с группами.

Этот модуль содержит бизнес-логику групп: создание преподавателем или
студентом, изменение, управление участниками и сброс кэша прав доступа при
изменении членства.
"""

from typing import Iterable, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import MembershipAction
from src.domain.models import Group, User
from src.repository.base import delete_item, get_item, update_item
from src.repository.groups import (add_member_repo, create_group_repo,
                                   get_group_by_id, get_group_member_ids,
                                   is_group_member, list_groups,
                                   remove_member_repo)
from src.repository.modules import get_module_by_id, is_student_enrolled
from src.security.access_control import group_filter
from src.security.visibility import UserScope
from src.service.cache_service import cache_service
from src.service.users import is_learner
from src.utils.exceptions import (ConflictError, NotFoundError,
                                  PermissionDeniedError)


async def _load_group(session: AsyncSession, group_id: int) -> Group:
    group = await get_group_by_id(session, group_id)
    if group is None:
        raise NotFoundError(resource_type="Группа", resource_id=group_id)
    return group


async def get_visible_group(
    session: AsyncSession, scope: UserScope, group_id: int
) -> Group:
    group = await _load_group(session, group_id)
    if not scope.can_view_group(group):
        raise PermissionDeniedError("Нет доступа к группе")
    return group


async def get_managed_group(
    session: AsyncSession, scope: UserScope, group_id: int
) -> Group:
    group = await _load_group(session, group_id)
    if not scope.can_manage_group(group):
        raise PermissionDeniedError(
            "Управлять группой может преподаватель модуля или координатор"
        )
    return group


async def _validate_member(
    session: AsyncSession, user_id: int, module_id: Optional[int]
) -> User:
    """
    Проверить, что пользователь может состоять в группе.

    Raises:
        NotFoundError: Пользователь не найден
        ValueError: Пользователь не студент или не зачислен в модуль группы
    """
    user = await get_item(session, User, user_id)
    if not is_learner(user) or not user.is_active:
        raise ValueError(f"Пользователь {user_id} не является активным студентом")
    if module_id is not None and not await is_student_enrolled(
        session, module_id, user_id
    ):
        raise ValueError(f"Пользователь {user_id} не зачислен в модуль группы")
    return user


async def list_groups_service(
    session: AsyncSession, scope: UserScope, module_id: Optional[int] = None
) -> List[Group]:
    return await list_groups(session, visibility=group_filter(scope), module_id=module_id)


async def create_group_service(
    session: AsyncSession,
    scope: UserScope,
    name: str,
    description: str = "",
    module_id: Optional[int] = None,
    coordinator_id: Optional[int] = None,
    member_ids: Iterable[int] = (),
) -> Group:
    """
    Создать группу.

    Студент может создать группу только в модуле, куда зачислен, и
    становится её координатором. Преподаватель создает группы в своих
    модулях, admin в любых.

    Args:
        session: Сессия базы данных
        scope: Область видимости текущего пользователя
        name: Название группы
        description: Описание группы
        module_id: ID модуля
        coordinator_id: ID координатора (игнорируется для студентов)
        member_ids: ID участников

    Returns:
        Созданная группа с участниками

    Raises:
        ValueError: Если данные невалидны
        PermissionDeniedError: Если модуль недоступен пользователю
    """
    if not name or len(name.strip()) < 2:
        raise ValueError("Название группы должно содержать минимум 2 символа")

    if module_id is not None:
        module = await get_module_by_id(session, module_id)
        if module is None:
            raise NotFoundError(resource_type="Модуль", resource_id=module_id)

    if scope.is_learner:
        if module_id is None:
            raise ValueError("Для группы студента необходимо указать модуль")
        if module_id not in scope.enrolled_module_ids:
            raise PermissionDeniedError("Вы не зачислены в этот модуль")
        coordinator_id = scope.user_id
    elif scope.is_teacher:
        if module_id is None or module_id not in scope.taught_module_ids:
            raise PermissionDeniedError("Группу можно создать только в своем модуле")

    members = set(member_ids)
    if coordinator_id is not None:
        members.add(coordinator_id)
    for user_id in sorted(members):
        await _validate_member(session, user_id, module_id)

    group = await create_group_repo(
        session,
        name=name.strip(),
        description=(description or "").strip(),
        module_id=module_id,
        coordinator_id=coordinator_id,
        member_ids=members,
    )
    await cache_service.invalidate_user_access(*members)
    logger.info(
        f"Группа '{group.name}' (ID: {group.id}) создана пользователем {scope.user_id}"
    )
    return group


async def update_group_service(
    session: AsyncSession,
    scope: UserScope,
    group_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None,
    coordinator_id: Optional[int] = None,
) -> Group:
    """
    Обновить группу.

    Raises:
        ValueError: Если новое название короче 2 символов или координатор не участник
    """
    group = await get_managed_group(session, scope, group_id)

    fields = {}
    if name is not None:
        if len(name.strip()) < 2:
            raise ValueError("Название группы должно содержать минимум 2 символа")
        fields["name"] = name.strip()
    if description is not None:
        fields["description"] = description.strip()
    if coordinator_id is not None and coordinator_id != group.coordinator_id:
        if coordinator_id not in group.member_ids:
            raise ValueError("Координатор должен быть участником группы")
        fields["coordinator_id"] = coordinator_id

    if fields:
        await update_item(session, Group, group_id, **fields)
    return await _load_group(session, group_id)


async def delete_group_service(
    session: AsyncSession, scope: UserScope, group_id: int
) -> None:
    await get_managed_group(session, scope, group_id)
    member_ids = await get_group_member_ids(session, group_id)
    await delete_item(session, Group, group_id)
    await cache_service.invalidate_user_access(*member_ids)


async def change_membership_service(
    session: AsyncSession,
    scope: UserScope,
    group_id: int,
    user_id: int,
    action: MembershipAction,
) -> Group:
    """
    Добавить участника в группу или удалить его.

    Удаление координатора сбрасывает координатора группы.

    Raises:
        ConflictError: Пользователь уже в группе (add)
        NotFoundError: Пользователь не состоит в группе (remove)
    """
    group = await get_managed_group(session, scope, group_id)

    if action == MembershipAction.ADD:
        await _validate_member(session, user_id, group.module_id)
        if not await add_member_repo(session, group_id, user_id):
            raise ConflictError("Пользователь уже состоит в группе")
        logger.info(f"Пользователь {user_id} добавлен в группу {group_id}")
    else:
        if not await is_group_member(session, group_id, user_id):
            raise NotFoundError(
                resource_type="Участник", resource_id=user_id, details="не состоит в группе"
            )
        await remove_member_repo(session, group_id, user_id)
        logger.info(f"Пользователь {user_id} удален из группы {group_id}")

    await cache_service.invalidate_user_access(user_id)
    return await _load_group(session, group_id)
