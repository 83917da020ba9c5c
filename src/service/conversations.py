# -*- coding: utf-8 -*-
"""
Сводка переписок пользователя.

Плоский список входящих и исходящих сообщений сворачивается в одну запись на
собеседника: последнее сообщение, его время и число непрочитанных входящих.
Функция чистая и не обращается к БД, сообщения передаются уже загруженными
(ORM-объекты `Message` или любые объекты с теми же атрибутами).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List


@dataclass
class ConversationSummary:
    peer_id: int
    name: str
    last_message: str
    timestamp: datetime
    unread_count: int = 0


def _peer_of(message: Any, current_user_id: int):
    """Собеседник по сообщению: получатель для исходящих, отправитель для входящих."""
    if message.sender_id == current_user_id:
        return message.recipient_id, message.recipient
    return message.sender_id, message.sender


def aggregate_conversations(
    received: Iterable[Any], sent: Iterable[Any], current_user_id: int
) -> List[ConversationSummary]:
    """
    Сгруппировать сообщения по собеседникам.

    Args:
        received: Входящие сообщения текущего пользователя
        sent: Исходящие сообщения текущего пользователя
        current_user_id: ID текущего пользователя

    Returns:
        Сводки переписок, самые свежие первыми
    """
    received = list(received)
    # sorted устойчива: при равном created_at остается первое встреченное
    merged = sorted(
        [*received, *sent], key=lambda message: message.created_at, reverse=True
    )

    summaries: Dict[int, ConversationSummary] = {}
    for message in merged:
        peer_id, peer = _peer_of(message, current_user_id)
        if peer is None:
            continue
        if peer_id in summaries:
            continue
        summaries[peer_id] = ConversationSummary(
            peer_id=peer_id,
            name=f"{peer.first_name} {peer.last_name}",
            last_message=message.content,
            timestamp=message.created_at,
        )

    for message in received:
        if message.is_read:
            continue
        summary = summaries.get(message.sender_id)
        if summary is not None:
            summary.unread_count += 1

    return sorted(summaries.values(), key=lambda item: item.timestamp, reverse=True)
