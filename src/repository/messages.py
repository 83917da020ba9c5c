# -*- coding: utf-8 -*-
"""
Репозиторий личных сообщений.
"""

from typing import List

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models import Message


async def list_received(session: AsyncSession, user_id: int) -> List[Message]:
    result = await session.execute(
        select(Message)
        .where(Message.recipient_id == user_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
    )
    return list(result.scalars().all())


async def list_sent(session: AsyncSession, user_id: int) -> List[Message]:
    result = await session.execute(
        select(Message)
        .where(Message.sender_id == user_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
    )
    return list(result.scalars().all())


async def list_conversation(
    session: AsyncSession, user_id: int, peer_id: int
) -> List[Message]:
    """
    Получить переписку двух пользователей в хронологическом порядке.

    Args:
        session: Сессия базы данных
        user_id: ID текущего пользователя
        peer_id: ID собеседника

    Returns:
        Сообщения в обе стороны, старые первыми
    """
    result = await session.execute(
        select(Message)
        .where(
            or_(
                and_(Message.sender_id == user_id, Message.recipient_id == peer_id),
                and_(Message.sender_id == peer_id, Message.recipient_id == user_id),
            )
        )
        .order_by(Message.created_at, Message.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def mark_conversation_read(
    session: AsyncSession, user_id: int, peer_id: int
) -> int:
    """
    Пометить прочитанными входящие сообщения от собеседника.

    Returns:
        Количество помеченных сообщений
    """
    result = await session.execute(
        update(Message)
        .where(
            Message.sender_id == peer_id,
            Message.recipient_id == user_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return result.rowcount or 0


async def create_message_repo(
    session: AsyncSession, sender_id: int, recipient_id: int, content: str
) -> Message:
    message = Message(sender_id=sender_id, recipient_id=recipient_id, content=content)
    session.add(message)
    await session.commit()
    await session.refresh(message)
    return message


async def count_unread(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count(Message.id)).where(
            Message.recipient_id == user_id, Message.is_read.is_(False)
        )
    )
    return result.scalar() or 0
