# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/tasks/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Маршруты задач.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.v1.submissions.schemas import SubmissionReadSchema
from src.clients.database_client import get_db
from src.domain.enums import TaskStatus
from src.security.access_control import get_current_scope
from src.security.security import admin_or_teacher
from src.security.visibility import UserScope
from src.service.tasks import (create_task_service, delete_task_service,
                               get_task_service, list_tasks_service,
                               update_task_service)

from .schemas import (TaskCreateSchema, TaskDetailSchema, TaskReadSchema,
                      TaskUpdateSchema)

router = APIRouter()


@router.get("/", response_model=List[TaskReadSchema])
async def list_tasks_endpoint(
    task_status: Optional[TaskStatus] = Query(
        None, alias="status", description="Фильтр по статусу"
    ),
    search: Optional[str] = Query(None, description="Поиск по заголовку и описанию"),
    project_id: Optional[int] = Query(None, description="Фильтр по проекту"),
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[TaskReadSchema]:
    """Получить задачи, видимые текущему пользователю."""
    try:
        logger.info(
            f"Запрос списка задач пользователем {scope.user_id}: status={task_status}, search={search}"
        )
        tasks = await list_tasks_service(
            session, scope, status=task_status, search=search, project_id=project_id
        )
        logger.info(f"Найдено задач: {len(tasks)}")
        return tasks
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения списка задач: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения списка задач",
        )


@router.post("/", response_model=TaskReadSchema, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    task_data: TaskCreateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
    _: dict = Depends(admin_or_teacher),
) -> TaskReadSchema:
    """Создать задачу."""
    try:
        logger.info(f"Создание задачи: {task_data.title}")
        return await create_task_service(session, scope, **task_data.model_dump())
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при создании задачи {task_data.title}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка создания задачи {task_data.title}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка создания задачи",
        )


@router.get("/{task_id}", response_model=TaskDetailSchema)
async def get_task_endpoint(
    task_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> TaskDetailSchema:
    """Получить задачу вместе с работами, видимыми пользователю."""
    try:
        logger.info(f"Запрос задачи по ID: {task_id}")
        task, submissions = await get_task_service(session, scope, task_id)
        return TaskDetailSchema.model_validate(task).model_copy(
            update={
                "submissions": [
                    SubmissionReadSchema.model_validate(item) for item in submissions
                ]
            }
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения задачи {task_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения задачи",
        )


@router.put("/{task_id}", response_model=TaskReadSchema)
async def update_task_endpoint(
    task_id: int,
    task_data: TaskUpdateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> TaskReadSchema:
    """Обновить задачу."""
    try:
        logger.info(f"Обновление задачи {task_id}")
        task = await update_task_service(
            session, scope, task_id, task_data.model_dump(exclude_unset=True)
        )
        logger.info(f"Задача {task_id} успешно обновлена")
        return task
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при обновлении задачи {task_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка обновления задачи {task_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка обновления задачи",
        )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_endpoint(
    task_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> None:
    """Удалить задачу вместе со сданными работами."""
    try:
        logger.info(f"Удаление задачи {task_id}")
        await delete_task_service(session, scope, task_id)
        logger.info(f"Задача {task_id} удалена")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка удаления задачи {task_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка удаления задачи",
        )
