"""
Сервис кэширования для интеграции с Redis.

Этот модуль предоставляет высокоуровневый интерфейс для операций кэширования
с автоматической сериализацией/десериализацией и управлением TTL. Если Redis
выключен в настройках или недоступен, операции тихо деградируют до вычисления
без кэша.
"""

import json
import time
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis
from loguru import logger
from redis.asyncio import Redis

from src.config.redis_settings import (get_redis_connection_params,
                                       redis_settings)
from src.config.settings import settings


class CacheService:
    """Высокоуровневый сервис кэширования для операций с Redis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._redis: Optional[Redis] = None
        self._connection_params = get_redis_connection_params()
        self._retry_after = 0.0

    @property
    def available(self) -> bool:
        """Кэш включен и не ждет паузы после ошибки подключения."""
        return self.enabled and time.monotonic() >= self._retry_after

    async def get_redis(self) -> Redis:
        """
        Получить подключение к Redis (ленивая инициализация).

        Returns:
            Экземпляр подключения к Redis
        """
        if self._redis is None:
            self._redis = redis.Redis(**self._connection_params)
            await self._redis.ping()
            logger.info("Подключение к Redis установлено успешно")
        return self._redis

    async def _drop_connection(self) -> None:
        """Закрыть сбойное подключение и отложить повторную попытку."""
        client, self._redis = self._redis, None
        self._retry_after = time.monotonic() + redis_settings.redis_retry_delay
        if client is None:
            return
        try:
            await client.aclose()
        except Exception as e:
            logger.debug(f"Ошибка закрытия подключения к Redis: {e}")

    async def close(self):
        """Закрыть подключение к Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Подключение к Redis закрыто")

    @staticmethod
    def build_key(prefix: str, *parts: Any) -> str:
        return f"{prefix}:{':'.join(str(part) for part in parts)}"

    async def get(self, key: str) -> Optional[Any]:
        """
        Получить значение из кэша.

        Returns:
            Кэшированное значение или None если не найдено
        """
        if not self.available:
            return None
        try:
            redis_client = await self.get_redis()
            data = await redis_client.get(key)
        except Exception as e:
            logger.warning(f"Ошибка получения ключа кэша '{key}': {e}")
            await self._drop_connection()
            return None
        if data is None:
            return None
        return json.loads(data)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Установить значение в кэш.

        Returns:
            True если успешно, False в противном случае
        """
        if not self.available:
            return False
        try:
            redis_client = await self.get_redis()
            serialized = json.dumps(value, default=str, ensure_ascii=False)
            if ttl:
                await redis_client.setex(key, ttl, serialized)
            else:
                await redis_client.set(key, serialized)
            return True
        except Exception as e:
            logger.warning(f"Ошибка записи ключа кэша '{key}': {e}")
            await self._drop_connection()
            return False

    async def delete(self, key: str) -> bool:
        if not self.available:
            return False
        try:
            redis_client = await self.get_redis()
            return bool(await redis_client.delete(key))
        except Exception as e:
            logger.warning(f"Ошибка удаления ключа кэша '{key}': {e}")
            await self._drop_connection()
            return False

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """
        Получить значение из кэша или вычислить и сохранить его.

        Args:
            key: Ключ кэша
            factory: Асинхронная функция, вычисляющая значение
            ttl: Время жизни в секундах

        Returns:
            Кэшированное или свежевычисленное значение
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug(f"Попадание в кэш: {key}")
            return cached

        value = await factory()
        await self.set(key, value, ttl)
        return value

    async def invalidate_user_access(self, *user_ids: int) -> None:
        """Сбросить кэш прав доступа для перечисленных пользователей."""
        for user_id in set(user_ids):
            await self.delete(
                self.build_key(redis_settings.cache_prefix_access, "scope", user_id)
            )


cache_service = CacheService(enabled=settings.redis_enabled)


async def get_or_set_access(
    key_parts: tuple, factory: Callable[[], Awaitable[Any]]
) -> Any:
    """Кэширует результат проверки прав доступа."""
    key = cache_service.build_key(redis_settings.cache_prefix_access, *key_parts)
    return await cache_service.get_or_set(key, factory, redis_settings.cache_ttl_access)
