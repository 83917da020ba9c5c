# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/modules/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Маршруты модулей и зачисления студентов.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.security.access_control import get_current_scope
from src.security.security import admin_or_teacher
from src.security.visibility import UserScope
from src.service.modules import (create_module_service, delete_module_service,
                                 enroll_student_service, get_visible_module,
                                 list_modules_service,
                                 unenroll_student_service,
                                 update_module_service)

from .schemas import (EnrollStudentSchema, ModuleCreateSchema,
                      ModuleDetailSchema, ModuleListItemSchema,
                      ModuleUpdateSchema)

router = APIRouter()


@router.get("/", response_model=List[ModuleListItemSchema])
async def list_modules_endpoint(
    search: Optional[str] = Query(None, description="Поиск по названию и описанию"),
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[ModuleListItemSchema]:
    """Получить модули, видимые текущему пользователю."""
    try:
        logger.info(f"Запрос списка модулей пользователем {scope.user_id}")
        rows = await list_modules_service(session, scope, search=search)
        logger.info(f"Найдено модулей: {len(rows)}")
        return [
            ModuleListItemSchema.model_validate(module).model_copy(
                update={"student_count": students, "project_count": projects}
            )
            for module, students, projects in rows
        ]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения списка модулей: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения списка модулей",
        )


@router.post("/", response_model=ModuleDetailSchema, status_code=status.HTTP_201_CREATED)
async def create_module_endpoint(
    module_data: ModuleCreateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
    _: dict = Depends(admin_or_teacher),
) -> ModuleDetailSchema:
    """Создать модуль."""
    try:
        logger.info(f"Создание модуля: {module_data.name}")
        module = await create_module_service(
            session,
            scope,
            name=module_data.name,
            description=module_data.description,
            teacher_id=module_data.teacher_id,
        )
        return module
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при создании модуля {module_data.name}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка создания модуля {module_data.name}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка создания модуля",
        )


@router.get("/{module_id}", response_model=ModuleDetailSchema)
async def get_module_endpoint(
    module_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> ModuleDetailSchema:
    """Получить модуль со списком студентов."""
    try:
        logger.info(f"Запрос модуля по ID: {module_id}")
        return await get_visible_module(session, scope, module_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения модуля {module_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения модуля",
        )


@router.put("/{module_id}", response_model=ModuleDetailSchema)
async def update_module_endpoint(
    module_id: int,
    module_data: ModuleUpdateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> ModuleDetailSchema:
    """Обновить модуль."""
    try:
        logger.info(f"Обновление модуля {module_id}")
        module = await update_module_service(
            session,
            scope,
            module_id,
            name=module_data.name,
            description=module_data.description,
        )
        logger.info(f"Модуль {module_id} успешно обновлен")
        return module
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при обновлении модуля {module_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка обновления модуля {module_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка обновления модуля",
        )


@router.delete("/{module_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_module_endpoint(
    module_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> None:
    """Удалить модуль вместе с группами, проектами и задачами."""
    try:
        logger.info(f"Удаление модуля {module_id}")
        await delete_module_service(session, scope, module_id)
        logger.info(f"Модуль {module_id} удален")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка удаления модуля {module_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка удаления модуля",
        )


@router.post("/{module_id}/students", response_model=ModuleDetailSchema)
async def enroll_student_endpoint(
    module_id: int,
    data: EnrollStudentSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> ModuleDetailSchema:
    """Зачислить студента в модуль."""
    try:
        logger.info(f"Зачисление студента {data.student_id} в модуль {module_id}")
        return await enroll_student_service(session, scope, module_id, data.student_id)
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Отклонено зачисление в модуль {module_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка зачисления в модуль {module_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка зачисления студента",
        )


@router.delete("/{module_id}/students/{student_id}", response_model=ModuleDetailSchema)
async def unenroll_student_endpoint(
    module_id: int,
    student_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> ModuleDetailSchema:
    """Отчислить студента из модуля."""
    try:
        logger.info(f"Отчисление студента {student_id} из модуля {module_id}")
        return await unenroll_student_service(session, scope, module_id, student_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка отчисления из модуля {module_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка отчисления студента",
        )
