# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/repository/base.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Base repository operations for generic CRUD functionality.

This module provides reusable asynchronous CRUD helpers using SQLAlchemy 2.0
async ORM, with logging and basic validation. It is designed to be stateless
for unit testing simplicity.
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.models import Base
from src.utils.exceptions import NotFoundError

T = TypeVar("T", bound=Base)

logger = configure_logger()

# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


async def get_item(session: AsyncSession, model: Type[T], item_id: int) -> T:
    """Retrieve a single item by ID or raise NotFoundError."""
    # populate_existing: связи могли измениться через таблицы-связки
    item = await session.get(model, item_id, populate_existing=True)
    if item is None:
        raise NotFoundError(resource_type=model.__name__, resource_id=item_id)
    return item


async def create_item(session: AsyncSession, model: Type[T], **kwargs: Any) -> T:
    """Create a new item in the database."""
    instance = model(**kwargs)
    session.add(instance)
    await session.commit()
    await session.refresh(instance)
    logger.debug(f"Создан {model.__name__} с ID {getattr(instance, 'id', None)}")
    return instance


async def update_item(
    session: AsyncSession, model: Type[T], item_id: int, **kwargs: Any
) -> T:
    """Update an existing item in the database."""
    instance = await get_item(session, model, item_id)
    for key, value in kwargs.items():
        setattr(instance, key, value)
    await session.commit()
    await session.refresh(instance)
    return instance


async def delete_item(session: AsyncSession, model: Type[T], item_id: int) -> None:
    """Delete an item from the database."""
    instance = await get_item(session, model, item_id)
    await session.delete(instance)
    await session.commit()
    logger.info(f"Удален {model.__name__} с ID {item_id}")
