# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/projects/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Маршруты проектов и отметки выполнения этапов.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.domain.enums import ProjectStatus
from src.security.access_control import get_current_scope
from src.security.security import admin_or_teacher
from src.security.visibility import UserScope
from src.service.projects import (create_project_service,
                                  delete_project_service, get_visible_project,
                                  list_projects_service, toggle_step_service,
                                  update_project_service)

from .schemas import ProjectCreateSchema, ProjectReadSchema, ProjectUpdateSchema

router = APIRouter()


@router.get("/", response_model=List[ProjectReadSchema])
async def list_projects_endpoint(
    project_status: Optional[ProjectStatus] = Query(
        None, alias="status", description="Фильтр по статусу"
    ),
    module_id: Optional[int] = Query(None, description="Фильтр по модулю"),
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[ProjectReadSchema]:
    """Получить проекты, видимые текущему пользователю."""
    try:
        logger.info(
            f"Запрос списка проектов пользователем {scope.user_id}: status={project_status}"
        )
        projects = await list_projects_service(
            session, scope, status=project_status, module_id=module_id
        )
        logger.info(f"Найдено проектов: {len(projects)}")
        return projects
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения списка проектов: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения списка проектов",
        )


@router.post("/", response_model=ProjectReadSchema, status_code=status.HTTP_201_CREATED)
async def create_project_endpoint(
    project_data: ProjectCreateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
    _: dict = Depends(admin_or_teacher),
) -> ProjectReadSchema:
    """Создать проект с этапами."""
    try:
        logger.info(f"Создание проекта: {project_data.name}")
        project = await create_project_service(
            session,
            scope,
            name=project_data.name,
            module_id=project_data.module_id,
            description=project_data.description,
            group_id=project_data.group_id,
            project_manager_id=project_data.project_manager_id,
            due_date=project_data.due_date,
            status=project_data.status,
            steps=[step.model_dump() for step in project_data.steps],
        )
        return project
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(
            f"Ошибка валидации при создании проекта {project_data.name}: {str(e)}"
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка создания проекта {project_data.name}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка создания проекта",
        )


@router.get("/{project_id}", response_model=ProjectReadSchema)
async def get_project_endpoint(
    project_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> ProjectReadSchema:
    """Получить проект по ID."""
    try:
        logger.info(f"Запрос проекта по ID: {project_id}")
        return await get_visible_project(session, scope, project_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения проекта {project_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения проекта",
        )


@router.put("/{project_id}", response_model=ProjectReadSchema)
async def update_project_endpoint(
    project_id: int,
    project_data: ProjectUpdateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> ProjectReadSchema:
    """Обновить проект."""
    try:
        logger.info(f"Обновление проекта {project_id}")
        fields = project_data.model_dump(exclude_unset=True, exclude={"steps"})
        steps = (
            [step.model_dump() for step in project_data.steps]
            if project_data.steps is not None
            else None
        )
        project = await update_project_service(
            session, scope, project_id, fields, steps=steps
        )
        logger.info(f"Проект {project_id} успешно обновлен")
        return project
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при обновлении проекта {project_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка обновления проекта {project_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка обновления проекта",
        )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_endpoint(
    project_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> None:
    """Удалить проект."""
    try:
        logger.info(f"Удаление проекта {project_id}")
        await delete_project_service(session, scope, project_id)
        logger.info(f"Проект {project_id} удален")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка удаления проекта {project_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка удаления проекта",
        )


@router.patch("/{project_id}/steps/{step_id}", response_model=ProjectReadSchema)
async def toggle_step_endpoint(
    project_id: int,
    step_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> ProjectReadSchema:
    """Переключить отметку выполнения этапа проекта."""
    try:
        logger.info(f"Переключение этапа {step_id} проекта {project_id}")
        return await toggle_step_service(session, scope, project_id, step_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка изменения этапа {step_id} проекта {project_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка изменения этапа проекта",
        )
