# -*- coding: utf-8 -*-
"""
Сервис сданных работ: сдача, редактирование, оценивание и комментарии.
"""

from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.domain.enums import SubmissionStatus
from src.domain.models import Submission, SubmissionComment
from src.repository.base import create_item, delete_item, update_item
from src.repository.submissions import (add_comment_repo, get_submission_by_id,
                                        list_comments, list_submissions)
from src.security.access_control import submission_filter
from src.security.visibility import UserScope
from src.service.tasks import get_visible_task
from src.utils.exceptions import NotFoundError, PermissionDeniedError

CONTENT_FIELDS = frozenset({"title", "description", "file_url"})
GRADING_FIELDS = frozenset({"status", "grade", "feedback"})


def validate_grade(grade: Optional[float]) -> None:
    """Оценка должна быть в диапазоне от 0 до settings.max_grade."""
    if grade is not None and not 0 <= grade <= settings.max_grade:
        raise ValueError(f"Оценка должна быть от 0 до {settings.max_grade:g}")


async def _load_submission(session: AsyncSession, submission_id: int) -> Submission:
    submission = await get_submission_by_id(session, submission_id)
    if submission is None:
        raise NotFoundError(resource_type="Работа", resource_id=submission_id)
    return submission


async def get_visible_submission(
    session: AsyncSession, scope: UserScope, submission_id: int
) -> Submission:
    submission = await _load_submission(session, submission_id)
    if not scope.can_view_submission(submission):
        raise PermissionDeniedError("Нет доступа к работе")
    return submission


async def list_submissions_service(
    session: AsyncSession,
    scope: UserScope,
    task_id: Optional[int] = None,
    status: Optional[SubmissionStatus] = None,
) -> List[Submission]:
    return await list_submissions(
        session, visibility=submission_filter(scope), task_id=task_id, status=status
    )


async def create_submission_service(
    session: AsyncSession,
    scope: UserScope,
    task_id: int,
    title: str,
    description: str = "",
    file_url: Optional[str] = None,
    submitted_by_group_id: Optional[int] = None,
) -> Submission:
    """
    Сдать работу по задаче.

    Args:
        session: Сессия базы данных
        scope: Область видимости текущего пользователя
        task_id: ID задачи
        title: Заголовок работы
        description: Описание
        file_url: Ссылка на файл работы
        submitted_by_group_id: ID группы, от имени которой сдается работа

    Returns:
        Созданная работа в статусе pending

    Raises:
        ValueError: Если заголовок короче 2 символов
        PermissionDeniedError: Задача не видна или пользователь не в группе
    """
    if not title or len(title.strip()) < 2:
        raise ValueError("Заголовок работы должен содержать минимум 2 символа")

    await get_visible_task(session, scope, task_id)
    if (
        submitted_by_group_id is not None
        and submitted_by_group_id not in scope.group_ids
    ):
        raise PermissionDeniedError("Вы не состоите в этой группе")

    submission = await create_item(
        session,
        Submission,
        task_id=task_id,
        title=title.strip(),
        description=(description or "").strip(),
        file_url=file_url,
        submitted_by_id=scope.user_id,
        submitted_by_group_id=submitted_by_group_id,
        status=SubmissionStatus.PENDING,
    )
    logger.info(
        f"Работа '{submission.title}' (ID: {submission.id}) сдана по задаче {task_id} пользователем {scope.user_id}"
    )
    return await _load_submission(session, submission.id)


async def update_submission_service(
    session: AsyncSession,
    scope: UserScope,
    submission_id: int,
    fields: Dict[str, Any],
) -> Submission:
    """
    Обновить работу.

    Автор правит содержимое, пока работа не оценена. Преподаватель или
    admin выставляет статус, оценку и отзыв; выставление оценки без явного
    статуса переводит работу в graded.

    Args:
        fields: Изменяемые поля (только переданные клиентом)
    """
    submission = await get_visible_submission(session, scope, submission_id)
    # Обязательные поля не сбрасываются в null
    fields = {
        key: value
        for key, value in fields.items()
        if value is not None or key not in ("title", "description", "status")
    }

    if CONTENT_FIELDS & fields.keys() and not scope.can_edit_submission(submission):
        raise PermissionDeniedError("Изменять работу может только автор до оценивания")

    if GRADING_FIELDS & fields.keys():
        if not scope.can_grade_submission(submission):
            raise PermissionDeniedError("Оценивать работы может только преподаватель")
        validate_grade(fields.get("grade"))
        if fields.get("grade") is not None and fields.get("status") is None:
            fields["status"] = SubmissionStatus.GRADED

    if "title" in fields:
        if not fields["title"] or len(fields["title"].strip()) < 2:
            raise ValueError("Заголовок работы должен содержать минимум 2 символа")
        fields["title"] = fields["title"].strip()

    if fields:
        await update_item(session, Submission, submission_id, **fields)
        if "grade" in fields or "status" in fields:
            logger.info(
                f"Работа {submission_id} оценена пользователем {scope.user_id}: статус {fields.get('status')}, оценка {fields.get('grade')}"
            )
    return await _load_submission(session, submission_id)


async def delete_submission_service(
    session: AsyncSession, scope: UserScope, submission_id: int
) -> None:
    submission = await get_visible_submission(session, scope, submission_id)
    if not (scope.is_admin or scope.can_edit_submission(submission)):
        raise PermissionDeniedError("Удалить работу может только автор до оценивания")
    await delete_item(session, Submission, submission_id)


async def list_comments_service(
    session: AsyncSession, scope: UserScope, submission_id: int
) -> List[SubmissionComment]:
    await get_visible_submission(session, scope, submission_id)
    return await list_comments(session, submission_id)


async def add_comment_service(
    session: AsyncSession, scope: UserScope, submission_id: int, content: str
) -> SubmissionComment:
    if not content or not content.strip():
        raise ValueError("Комментарий не может быть пустым")
    await get_visible_submission(session, scope, submission_id)
    comment = await add_comment_repo(session, submission_id, scope.user_id, content.strip())
    logger.info(f"Комментарий {comment.id} к работе {submission_id} от пользователя {scope.user_id}")
    return comment
