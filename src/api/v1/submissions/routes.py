# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/submissions/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Маршруты сданных работ, оценивания и комментариев.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.domain.enums import SubmissionStatus
from src.security.access_control import get_current_scope
from src.security.security import learners_only
from src.security.visibility import UserScope
from src.service.submissions import (add_comment_service,
                                     create_submission_service,
                                     delete_submission_service,
                                     get_visible_submission,
                                     list_comments_service,
                                     list_submissions_service,
                                     update_submission_service)

from .schemas import (CommentCreateSchema, CommentReadSchema,
                      SubmissionCreateSchema, SubmissionReadSchema,
                      SubmissionUpdateSchema)

router = APIRouter()


@router.get("/", response_model=List[SubmissionReadSchema])
async def list_submissions_endpoint(
    task_id: Optional[int] = Query(None, description="Фильтр по задаче"),
    submission_status: Optional[SubmissionStatus] = Query(
        None, alias="status", description="Фильтр по статусу"
    ),
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[SubmissionReadSchema]:
    """Получить работы, видимые текущему пользователю."""
    try:
        logger.info(
            f"Запрос списка работ пользователем {scope.user_id}: task_id={task_id}"
        )
        submissions = await list_submissions_service(
            session, scope, task_id=task_id, status=submission_status
        )
        logger.info(f"Найдено работ: {len(submissions)}")
        return submissions
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения списка работ: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения списка работ",
        )


@router.post(
    "/", response_model=SubmissionReadSchema, status_code=status.HTTP_201_CREATED
)
async def create_submission_endpoint(
    data: SubmissionCreateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
    _: dict = Depends(learners_only),
) -> SubmissionReadSchema:
    """Сдать работу по задаче."""
    try:
        logger.info(f"Сдача работы по задаче {data.task_id} пользователем {scope.user_id}")
        return await create_submission_service(session, scope, **data.model_dump())
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при сдаче работы: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка сдачи работы по задаче {data.task_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка сдачи работы",
        )


@router.get("/{submission_id}", response_model=SubmissionReadSchema)
async def get_submission_endpoint(
    submission_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> SubmissionReadSchema:
    """Получить работу по ID."""
    try:
        logger.info(f"Запрос работы по ID: {submission_id}")
        return await get_visible_submission(session, scope, submission_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения работы {submission_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения работы",
        )


@router.put("/{submission_id}", response_model=SubmissionReadSchema)
async def update_submission_endpoint(
    submission_id: int,
    data: SubmissionUpdateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> SubmissionReadSchema:
    """Изменить работу или выставить оценку."""
    try:
        logger.info(f"Обновление работы {submission_id} пользователем {scope.user_id}")
        return await update_submission_service(
            session, scope, submission_id, data.model_dump(exclude_unset=True)
        )
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Ошибка валидации при обновлении работы {submission_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка обновления работы {submission_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка обновления работы",
        )


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_submission_endpoint(
    submission_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> None:
    """Удалить работу."""
    try:
        logger.info(f"Удаление работы {submission_id}")
        await delete_submission_service(session, scope, submission_id)
        logger.info(f"Работа {submission_id} удалена")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка удаления работы {submission_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка удаления работы",
        )


@router.get("/{submission_id}/comments", response_model=List[CommentReadSchema])
async def list_comments_endpoint(
    submission_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[CommentReadSchema]:
    """Получить комментарии к работе в хронологическом порядке."""
    try:
        logger.info(f"Запрос комментариев к работе {submission_id}")
        return await list_comments_service(session, scope, submission_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения комментариев к работе {submission_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения комментариев",
        )


@router.post(
    "/{submission_id}/comments",
    response_model=CommentReadSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment_endpoint(
    submission_id: int,
    data: CommentCreateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> CommentReadSchema:
    """Добавить комментарий к работе."""
    try:
        logger.info(f"Комментарий к работе {submission_id} от пользователя {scope.user_id}")
        return await add_comment_service(session, scope, submission_id, data.content)
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Отклонен комментарий к работе {submission_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка добавления комментария к работе {submission_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка добавления комментария",
        )
