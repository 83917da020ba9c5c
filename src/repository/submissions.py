# -*- coding: utf-8 -*-
"""
Репозиторий сданных работ и комментариев к ним.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from src.domain.enums import SubmissionStatus
from src.domain.models import Submission, SubmissionComment


async def get_submission_by_id(
    session: AsyncSession, submission_id: int
) -> Optional[Submission]:
    result = await session.execute(
        select(Submission)
        .options(selectinload(Submission.comments))
        .where(Submission.id == submission_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_submissions(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    task_id: Optional[int] = None,
    status: Optional[SubmissionStatus] = None,
) -> List[Submission]:
    """
    Получить список работ.

    Args:
        session: Сессия базы данных
        visibility: Фильтр видимости по роли (None для admin)
        task_id: Фильтр по задаче
        status: Фильтр по статусу

    Returns:
        Работы, последние сданные первыми
    """
    stmt = select(Submission)
    if visibility is not None:
        stmt = stmt.where(visibility)
    if task_id is not None:
        stmt = stmt.where(Submission.task_id == task_id)
    if status is not None:
        stmt = stmt.where(Submission.status == status)
    stmt = stmt.order_by(Submission.submitted_at.desc(), Submission.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_submissions(
    session: AsyncSession,
    visibility: Optional[ColumnElement[bool]] = None,
    status: Optional[SubmissionStatus] = None,
) -> int:
    stmt = select(func.count(Submission.id))
    if visibility is not None:
        stmt = stmt.where(visibility)
    if status is not None:
        stmt = stmt.where(Submission.status == status)
    result = await session.execute(stmt)
    return result.scalar() or 0


async def list_comments(
    session: AsyncSession, submission_id: int
) -> List[SubmissionComment]:
    result = await session.execute(
        select(SubmissionComment)
        .where(SubmissionComment.submission_id == submission_id)
        .order_by(SubmissionComment.created_at, SubmissionComment.id)
    )
    return list(result.scalars().all())


async def add_comment_repo(
    session: AsyncSession, submission_id: int, author_id: int, content: str
) -> SubmissionComment:
    comment = SubmissionComment(
        submission_id=submission_id, author_id=author_id, content=content
    )
    session.add(comment)
    await session.commit()
    await session.refresh(comment)
    return comment
