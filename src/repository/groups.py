# -*- coding: utf-8 -*-
"""
Репозиторий групп и членства в них.
"""

from typing import Iterable, List, Optional

from loguru import logger
from sqlalchemy import and_, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.domain.models import Group, GroupMembers

# Схемы не импортируем в repository - работаем только с моделями


async def get_group_by_id(session: AsyncSession, group_id: int) -> Optional[Group]:
    """
    Получить группу по ID вместе с участниками.

    Args:
        session: Сессия базы данных
        group_id: ID группы

    Returns:
        Группа или None если не найдена
    """
    result = await session.execute(
        select(Group)
        .where(Group.id == group_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_groups(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    module_id: Optional[int] = None,
) -> List[Group]:
    """
    Получить список групп.

    Args:
        session: Сессия базы данных
        visibility: Фильтр видимости по роли (None для admin)
        module_id: Фильтр по модулю

    Returns:
        Список групп, новые первыми
    """
    stmt = select(Group)
    if visibility is not None:
        stmt = stmt.where(visibility)
    if module_id is not None:
        stmt = stmt.where(Group.module_id == module_id)
    stmt = stmt.order_by(Group.created_at.desc(), Group.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_group_repo(
    session: AsyncSession,
    name: str,
    description: str,
    module_id: Optional[int],
    coordinator_id: Optional[int],
    member_ids: Iterable[int] = (),
) -> Group:
    """
    Создать группу и сразу добавить в неё участников.

    Координатор всегда становится участником группы.
    """
    group = Group(
        name=name,
        description=description,
        module_id=module_id,
        coordinator_id=coordinator_id,
    )
    session.add(group)
    await session.flush()

    members = set(member_ids)
    if coordinator_id is not None:
        members.add(coordinator_id)
    for user_id in sorted(members):
        session.add(GroupMembers(group_id=group.id, user_id=user_id))

    await session.commit()
    logger.debug(f"Создана группа {group.id} с участниками {sorted(members)}")
    return await get_group_by_id(session, group.id)


async def is_group_member(session: AsyncSession, group_id: int, user_id: int) -> bool:
    result = await session.execute(
        select(GroupMembers).where(
            and_(GroupMembers.group_id == group_id, GroupMembers.user_id == user_id)
        )
    )
    return result.scalar_one_or_none() is not None


async def add_member_repo(session: AsyncSession, group_id: int, user_id: int) -> bool:
    """
    Добавить пользователя в группу.

    Returns:
        True если пользователь добавлен, False если уже состоял в группе
    """
    if await is_group_member(session, group_id, user_id):
        return False
    session.add(GroupMembers(group_id=group_id, user_id=user_id))
    try:
        await session.commit()
    except IntegrityError:
        # Параллельный запрос успел добавить ту же пару
        await session.rollback()
        logger.warning(f"Пользователь {user_id} уже добавлен в группу {group_id}")
        return False
    return True


async def remove_member_repo(
    session: AsyncSession, group_id: int, user_id: int
) -> bool:
    """
    Удалить пользователя из группы.

    Если удаляемый был координатором, координатор сбрасывается.

    Returns:
        True если пользователь был удален, False если он не состоял в группе
    """
    result = await session.execute(
        delete(GroupMembers).where(
            and_(GroupMembers.group_id == group_id, GroupMembers.user_id == user_id)
        )
    )
    if result.rowcount == 0:
        await session.rollback()
        return False

    group = await session.get(Group, group_id)
    if group is not None and group.coordinator_id == user_id:
        group.coordinator_id = None
        logger.info(f"Координатор группы {group_id} сброшен")
    await session.commit()
    return True


async def get_group_member_ids(session: AsyncSession, group_id: int) -> List[int]:
    result = await session.execute(
        select(GroupMembers.user_id).where(GroupMembers.group_id == group_id)
    )
    return list(result.scalars().all())



async def remove_from_module_groups(
    session: AsyncSession, module_id: int, user_id: int
) -> List[int]:
    """
    Исключить пользователя из всех групп модуля.

    Координаторство в этих группах снимается.

    Returns:
        ID групп, из которых пользователь был исключен
    """
    module_groups = select(Group.id).where(Group.module_id == module_id)
    result = await session.execute(
        select(GroupMembers.group_id).where(
            and_(
                GroupMembers.user_id == user_id,
                GroupMembers.group_id.in_(module_groups),
            )
        )
    )
    group_ids = list(result.scalars().all())
    if not group_ids:
        return []

    await session.execute(
        delete(GroupMembers).where(
            and_(
                GroupMembers.user_id == user_id,
                GroupMembers.group_id.in_(group_ids),
            )
        )
    )
    await session.execute(
        update(Group)
        .where(and_(Group.id.in_(group_ids), Group.coordinator_id == user_id))
        .values(coordinator_id=None)
    )
    await session.commit()
    logger.info(f"Пользователь {user_id} исключен из групп {group_ids} модуля {module_id}")
    return group_ids
