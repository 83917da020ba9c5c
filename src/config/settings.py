# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Конфигурация настроек приложения с использованием Pydantic.

Этот модуль загружает конфигурацию из .env файла, предоставляя централизованную
систему управления настройками для всех окружений.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

"""Загрузка .env производится ТОЛЬКО если файл существует.
В контейнере используем переменные окружения, переданные Docker/Compose.
"""
# Базовая директория бэкенда
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Возможные пути к .env файлам
ROOT_ENV_PATH = (BASE_DIR.parent / ".env").resolve()
BACKEND_ENV_PATH = (BASE_DIR / ".env").resolve()


class Settings(BaseSettings):
    """Настройки приложения, загружаемые из .env файла."""

    # Приоритетный .env файл: 1) корневой, 2) бэкенда, 3) только окружение
    _env_file = None
    if ROOT_ENV_PATH.exists():
        _env_file = ROOT_ENV_PATH
    elif BACKEND_ENV_PATH.exists():
        _env_file = BACKEND_ENV_PATH

    model_config = SettingsConfigDict(
        env_file=_env_file,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Конфигурация базы данных
    database_url: str | None = None
    postgres_db: str = "edugroupmanager"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # Конфигурация JWT
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440
    refresh_token_expire_days: int = 7

    # Конфигурация администратора
    admin_username: str = "admin"
    admin_email: str = "admin@edugroupmanager.local"
    admin_password: str

    # Конфигурация приложения
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_domain: str | None = None
    frontend_port: int | None = None

    # Конфигурация логирования
    log_level: str = "INFO"

    # Конфигурация Redis
    redis_enabled: bool = True

    # Конфигурация CORS
    cors_allow_origins: str = ""
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allow_headers: str = "Authorization,Content-Type"

    # Шкала оценок за работы
    max_grade: float = 20.0

    def get_allowed_origins(self) -> list[str]:
        """Формирует список разрешённых origins для CORS.
        Приоритет: явные cors_allow_origins -> из домена/порта -> dev-сервер Vite.
        """
        if self.cors_allow_origins:
            return [
                origin.strip()
                for origin in self.cors_allow_origins.split(",")
                if origin.strip()
            ]

        allowed: list[str] = []

        if self.app_domain:
            allowed.append(f"https://{self.app_domain}")
            allowed.append(f"http://{self.app_domain}")

        port = self.frontend_port or 5173
        allowed.extend(
            [
                f"http://localhost:{port}",
                f"http://127.0.0.1:{port}",
            ]
        )
        return allowed

    def get_cors_methods(self) -> list[str]:
        """Возвращает список разрешённых HTTP методов для CORS."""
        if self.cors_allow_methods == "*":
            return ["*"]
        return [
            method.strip()
            for method in self.cors_allow_methods.split(",")
            if method.strip()
        ]

    def get_cors_headers(self) -> list[str]:
        """Возвращает список разрешённых заголовков для CORS."""
        if self.cors_allow_headers == "*":
            return ["*"]
        return [
            header.strip()
            for header in self.cors_allow_headers.split(",")
            if header.strip()
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.database_url:
            self.database_url = self._build_database_url()

    def _build_database_url(self) -> str:
        """Собирает URL базы данных из отдельных компонентов."""
        driver = "postgresql+asyncpg"
        return f"{driver}://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    def get_config_source(self) -> str:
        """Возвращает информацию об источнике конфигурации для отладки."""
        if ROOT_ENV_PATH.exists():
            return f"root: {ROOT_ENV_PATH}"
        elif BACKEND_ENV_PATH.exists():
            return f"backend: {BACKEND_ENV_PATH}"
        else:
            return "environment variables only"


settings = Settings()
