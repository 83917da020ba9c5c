"""
Настройки конфигурации Redis для EduGroupManager.

Этот модуль предоставляет настройки подключения к Redis и конфигурации TTL кэша.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Настройки конфигурации Redis."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Настройки подключения
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    # Настройки пула подключений
    redis_max_connections: int = 10
    redis_retry_on_timeout: bool = True
    redis_socket_timeout: float = Field(default=2.0)
    # Пауза перед повторным подключением после ошибки (в секундах)
    redis_retry_delay: float = 30.0

    # Настройки TTL кэша (в секундах)
    cache_ttl_access: int = 600  # 10 минут

    # Префиксы ключей кэша
    cache_prefix_access: str = "access"


# Глобальный экземпляр настроек Redis
redis_settings = RedisSettings()


def get_redis_connection_params() -> dict:
    """
    Получить параметры подключения к Redis для redis-py.

    Returns:
        Словарь с параметрами подключения
    """
    params = {
        "host": redis_settings.redis_host,
        "port": redis_settings.redis_port,
        "db": redis_settings.redis_db,
        "max_connections": redis_settings.redis_max_connections,
        "retry_on_timeout": redis_settings.redis_retry_on_timeout,
        "socket_timeout": redis_settings.redis_socket_timeout,
        "decode_responses": True,
    }

    if redis_settings.redis_password:
        params["password"] = redis_settings.redis_password

    return params
