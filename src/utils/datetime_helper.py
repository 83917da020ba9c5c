# -*- coding: utf-8 -*-
"""
Приведение дат к формату хранения.

Колонки DateTime хранят наивное время в UTC, как и utcnow() в моделях.
"""

from datetime import datetime, timezone
from typing import Optional


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Перевести дату со смещением в наивное UTC-время.

    Даты без смещения считаются уже заданными в UTC и не меняются.

    Args:
        value: Дата из запроса или None

    Returns:
        Наивная дата в UTC или None
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
