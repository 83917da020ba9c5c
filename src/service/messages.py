# -*- coding: utf-8 -*-
"""
Сервис личных сообщений.

Доставка работает через опрос: клиент периодически запрашивает входящие и
сводку переписок.
"""

from typing import List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models import Message, User
from src.repository.messages import (create_message_repo, list_conversation,
                                     list_received, list_sent,
                                     mark_conversation_read)
from src.service.conversations import (ConversationSummary,
                                       aggregate_conversations)
from src.utils.exceptions import NotFoundError, PermissionDeniedError


async def send_message_service(
    session: AsyncSession, sender_id: int, recipient_id: int, content: str
) -> Message:
    """
    Отправить сообщение.

    Raises:
        ValueError: Сообщение самому себе или пустое сообщение
        NotFoundError: Получатель не найден
    """
    if recipient_id == sender_id:
        raise ValueError("Нельзя отправить сообщение самому себе")
    if not content or not content.strip():
        raise ValueError("Сообщение не может быть пустым")

    recipient = await session.get(User, recipient_id)
    if recipient is None:
        raise NotFoundError(resource_type="Получатель", resource_id=recipient_id)

    message = await create_message_repo(session, sender_id, recipient_id, content.strip())
    logger.info(f"Сообщение {message.id} от {sender_id} к {recipient_id}")
    return message


async def get_received_service(session: AsyncSession, user_id: int) -> List[Message]:
    return await list_received(session, user_id)


async def get_sent_service(session: AsyncSession, user_id: int) -> List[Message]:
    return await list_sent(session, user_id)


async def get_conversations_service(
    session: AsyncSession, user_id: int
) -> List[ConversationSummary]:
    received = await list_received(session, user_id)
    sent = await list_sent(session, user_id)
    return aggregate_conversations(received, sent, user_id)


async def get_conversation_service(
    session: AsyncSession, user_id: int, peer_id: int
) -> List[Message]:
    """
    Получить переписку с собеседником и пометить его сообщения прочитанными.

    Возвращаемые сообщения отражают состояние до пометки.
    """
    peer = await session.get(User, peer_id)
    if peer is None:
        raise NotFoundError(resource_type="Пользователь", resource_id=peer_id)

    messages = await list_conversation(session, user_id, peer_id)
    marked = await mark_conversation_read(session, user_id, peer_id)
    if marked:
        logger.debug(f"Пользователь {user_id} прочитал {marked} сообщений от {peer_id}")
    return messages


async def mark_read_service(
    session: AsyncSession, user_id: int, message_id: int
) -> Message:
    """Пометить сообщение прочитанным. Доступно только получателю."""
    message = await session.get(Message, message_id)
    if message is None:
        raise NotFoundError(resource_type="Сообщение", resource_id=message_id)
    if message.recipient_id != user_id:
        raise PermissionDeniedError("Отметить прочитанным может только получатель")

    message.is_read = True
    await session.commit()
    return message
