# -*- coding: utf-8 -*-
"""
Клиент для работы с базой данных PostgreSQL.
"""
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)

from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.models import Base

logger = configure_logger()


def _engine_kwargs(url: str) -> dict:
    # SQLite (тесты, локальная разработка) не поддерживает настройки пула
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 3600}


async_engine = create_async_engine(
    settings.database_url,
    echo=False,
    **_engine_kwargs(settings.database_url),
)

if settings.database_url.startswith("sqlite"):

    @event.listens_for(async_engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # Без этого SQLite игнорирует ON DELETE CASCADE
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Создаем фабрику асинхронных сессий
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Предоставляет асинхронную сессию базы данных для внедрения зависимостей в FastAPI.

    Yields:
        AsyncSession: Активная сессия базы данных
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Создает все таблицы, описанные в моделях, если их еще нет.

    Raises:
        SQLAlchemyError: Ошибки при создании таблиц
    """
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    Base.registry.configure()


async def check_db_connection() -> None:
    """Проверяет подключение к базе данных (SELECT 1)."""
    async with async_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
