# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/api/v1/messages/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Маршруты личных сообщений. Клиент получает новые сообщения опросом.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.security.access_control import get_current_scope
from src.security.visibility import UserScope
from src.service.messages import (get_conversation_service,
                                  get_conversations_service,
                                  get_received_service, get_sent_service,
                                  mark_read_service, send_message_service)

from .schemas import ConversationSchema, MessageCreateSchema, MessageReadSchema

router = APIRouter()


@router.get("/received", response_model=List[MessageReadSchema])
async def received_messages_endpoint(
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[MessageReadSchema]:
    """Входящие сообщения, новые первыми."""
    try:
        logger.info(f"Запрос входящих сообщений пользователя {scope.user_id}")
        return await get_received_service(session, scope.user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения входящих сообщений: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения сообщений",
        )


@router.get("/sent", response_model=List[MessageReadSchema])
async def sent_messages_endpoint(
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[MessageReadSchema]:
    """Исходящие сообщения, новые первыми."""
    try:
        logger.info(f"Запрос исходящих сообщений пользователя {scope.user_id}")
        return await get_sent_service(session, scope.user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения исходящих сообщений: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения сообщений",
        )


@router.get("/conversations", response_model=List[ConversationSchema])
async def conversations_endpoint(
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[ConversationSchema]:
    """Сводка переписок: по одной записи на собеседника."""
    try:
        logger.info(f"Запрос сводки переписок пользователя {scope.user_id}")
        conversations = await get_conversations_service(session, scope.user_id)
        logger.info(f"Найдено переписок: {len(conversations)}")
        return conversations
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения переписок: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения переписок",
        )


@router.get("/conversation/{user_id}", response_model=List[MessageReadSchema])
async def conversation_endpoint(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> List[MessageReadSchema]:
    """Переписка с пользователем. Его сообщения помечаются прочитанными."""
    try:
        logger.info(f"Запрос переписки {scope.user_id} с {user_id}")
        return await get_conversation_service(session, scope.user_id, user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка получения переписки с {user_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка получения переписки",
        )


@router.post("/", response_model=MessageReadSchema, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    data: MessageCreateSchema,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> MessageReadSchema:
    """Отправить сообщение."""
    try:
        logger.info(f"Отправка сообщения от {scope.user_id} к {data.recipient_id}")
        return await send_message_service(
            session, scope.user_id, data.recipient_id, data.content
        )
    except HTTPException:
        raise
    except ValueError as e:
        logger.warning(f"Сообщение отклонено: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Ошибка отправки сообщения: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка отправки сообщения",
        )


@router.put("/{message_id}/read", response_model=MessageReadSchema)
async def mark_read_endpoint(
    message_id: int,
    session: AsyncSession = Depends(get_db),
    scope: UserScope = Depends(get_current_scope),
) -> MessageReadSchema:
    """Пометить сообщение прочитанным."""
    try:
        logger.info(f"Отметка о прочтении сообщения {message_id}")
        return await mark_read_service(session, scope.user_id, message_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Ошибка отметки сообщения {message_id}: {str(e)}")
        logger.exception("Детали ошибки:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ошибка отметки сообщения",
        )
