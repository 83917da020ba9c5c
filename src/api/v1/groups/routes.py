# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/groups/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Маршруты групп и управления участниками.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.v1.users.schemas import UserBriefSchema
from src.clients.database_client import get_db
from src.security.access_control import get_current_scope
from src.security.visibility import UserScope
from src.service.groups import (change_membership_service,
                                create_group_service, delete_group_service,
                                get_visible_group, list_groups_service,
                                update_group_service)

from .schemas import (GroupCreateSchema, GroupReadSchema, GroupUpdateSchema,
                      MembershipSchema)

router = APIRouter()


@router.get("/", response_model=List[GroupReadSchema])
async def list_groups_endpoint(
    module_id: Optional[int] = Query(None, description="Фильтр по модулю"),
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[GroupReadSchema]:
    """Получить группы, видимые текущему пользователю."""
    try:
        logger.info(f"Запрос списка групп пользователем {scope.user_id}")
        groups = await list_groups_service(session, scope, module_id=module_id)
        logger.info(f"Найдено групп: {len(groups)}")
        return groups
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения списка групп: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения списка групп",
        )


@router.post("/", response_model=GroupReadSchema, status_code=status.HTTP_201_CREATED)
async def create_group_endpoint(
    group_data: GroupCreateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> GroupReadSchema:
    """Создать новую группу."""
    try:
        logger.info(f"Создание группы: {group_data.name}")
        group = await create_group_service(
            session,
            scope,
            name=group_data.name,
            description=group_data.description,
            module_id=group_data.module_id,
            coordinator_id=group_data.coordinator_id,
            member_ids=group_data.member_ids,
        )
        logger.info(f"Группа {group_data.name} успешно создана с ID {group.id}")
        return group
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(
            f"Ошибка валидации при создании группы {group_data.name}: {str(e)}"
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка создания группы {group_data.name}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка создания группы",
        )


@router.get("/{group_id}", response_model=GroupReadSchema)
async def get_group_endpoint(
    group_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> GroupReadSchema:
    """Получить группу по ID с участниками."""
    try:
        logger.info(f"Запрос группы по ID: {group_id}")
        return await get_visible_group(session, scope, group_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения группы {group_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения группы",
        )


@router.put("/{group_id}", response_model=GroupReadSchema)
async def update_group_endpoint(
    group_id: int,
    group_data: GroupUpdateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> GroupReadSchema:
    """Обновить группу."""
    try:
        logger.info(f"Обновление группы {group_id}")
        group = await update_group_service(
            session,
            scope,
            group_id,
            name=group_data.name,
            description=group_data.description,
            coordinator_id=group_data.coordinator_id,
        )
        logger.info(f"Группа {group_id} успешно обновлена")
        return group
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при обновлении группы {group_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка обновления группы {group_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка обновления группы",
        )


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group_endpoint(
    group_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> None:
    """Удалить группу."""
    try:
        logger.info(f"Удаление группы {group_id}")
        await delete_group_service(session, scope, group_id)
        logger.info(f"Группа {group_id} удалена")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка удаления группы {group_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка удаления группы",
        )


@router.get("/{group_id}/members", response_model=List[UserBriefSchema])
async def get_group_members_endpoint(
    group_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[UserBriefSchema]:
    """Получить участников группы."""
    try:
        logger.info(f"Запрос участников группы ID: {group_id}")
        group = await get_visible_group(session, scope, group_id)
        logger.info(f"Найдено участников в группе {group_id}: {len(group.members)}")
        return group.members
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения участников группы {group_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения участников группы",
        )


@router.post("/{group_id}/membership", response_model=GroupReadSchema)
async def change_membership_endpoint(
    group_id: int,
    data: MembershipSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> GroupReadSchema:
    """Добавить участника в группу или удалить его."""
    try:
        logger.info(
            f"Изменение членства в группе {group_id}: {data.action.value} пользователя {data.user_id}"
        )
        return await change_membership_service(
            session, scope, group_id, data.user_id, data.action
        )
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Отклонено изменение членства в группе {group_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка изменения членства в группе {group_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка изменения состава группы",
        )
