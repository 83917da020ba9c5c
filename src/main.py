# -*- coding: utf-8 -*-
"""
Точка входа FastAPI-приложения EduGroupManager.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.v1.auth.routes import router as auth_router
from src.api.v1.dashboard.routes import router as dashboard_router
from src.api.v1.groups.routes import router as groups_router
from src.api.v1.messages.routes import router as messages_router
from src.api.v1.modules.routes import router as modules_router
from src.api.v1.projects.routes import router as projects_router
from src.api.v1.submissions.routes import router as submissions_router
from src.api.v1.tasks.routes import router as tasks_router
from src.api.v1.users.routes import router as users_router
from src.clients.database_client import check_db_connection, init_db
from src.config.logger import configure_logger, get_system_logger
from src.config.settings import settings
from src.config.uvicorn_config import get_uvicorn_config, setup_uvicorn_logging
from src.service.cache_service import cache_service
from src.utils.admin_check import ensure_admin_exists
from src.utils.exceptions import APIException, api_exception_handler
from src.utils.startup_banner import print_startup_banner

logger = configure_logger()
system_logger = get_system_logger()

app = FastAPI(
    title="EduGroupManager API",
    description="API для управления учебными модулями, группами и проектами",
    version="0.1.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    openapi_tags=[
        {
            "name": "🔐 Аутентификация",
            "description": "Регистрация, вход и обновление токенов",
        },
        {"name": "👤 Пользователи", "description": "Просмотр пользователей"},
        {
            "name": "📚 Модули",
            "description": "Учебные модули и зачисление студентов",
        },
        {"name": "👥 Группы", "description": "Группы студентов и их участники"},
        {"name": "🗂️ Проекты", "description": "Проекты и отметка выполнения этапов"},
        {"name": "📝 Задачи", "description": "Задачи модулей и проектов"},
        {"name": "📤 Работы", "description": "Сдача, оценивание и комментарии"},
        {"name": "✉️ Сообщения", "description": "Личные сообщения и переписки"},
        {"name": "📊 Дашборд", "description": "Счетчики главной страницы"},
    ],
)

# Настройка CORS из настроек
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.get_cors_methods(),
    allow_headers=settings.get_cors_headers(),
)

app.add_exception_handler(APIException, api_exception_handler)


# Middleware для логирования всех запросов
@app.middleware("http")
async def log_all_requests(request, call_next):
    if request.url.path.startswith("/api/"):
        logger.info(f"🌐 API запрос: {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception:
        if request.url.path.startswith("/api/"):
            logger.exception(
                f"💥 Критическая ошибка API: {request.method} {request.url.path}"
            )
        raise

    if request.url.path.startswith("/api/"):
        if response.status_code >= 400:
            logger.warning(
                f"❌ API ошибка: {request.method} {request.url.path} → {response.status_code}"
            )
        else:
            logger.info(
                f"✅ API ответ: {request.method} {request.url.path} → {response.status_code}"
            )
    return response


# Настраиваем схему безопасности для OpenAPI
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=app.openapi_tags,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "Bearer": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Введите ваш JWT токен в формате: Bearer <token>",
        }
    }
    openapi_schema["security"] = [{"Bearer": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# Подключаем роутеры с системными emoji тегами
app.include_router(auth_router, prefix="/api/v1/auth", tags=["🔐 Аутентификация"])
app.include_router(users_router, prefix="/api/v1/users", tags=["👤 Пользователи"])
app.include_router(modules_router, prefix="/api/v1/modules", tags=["📚 Модули"])
app.include_router(groups_router, prefix="/api/v1/groups", tags=["👥 Группы"])
app.include_router(projects_router, prefix="/api/v1/projects", tags=["🗂️ Проекты"])
app.include_router(tasks_router, prefix="/api/v1/tasks", tags=["📝 Задачи"])
app.include_router(
    submissions_router, prefix="/api/v1/submissions", tags=["📤 Работы"]
)
app.include_router(messages_router, prefix="/api/v1/messages", tags=["✉️ Сообщения"])
app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["📊 Дашборд"])


@app.on_event("startup")
async def startup_event():
    setup_uvicorn_logging()
    print_startup_banner()

    system_logger.info("🔧 Инициализация сервисов...")

    try:
        await check_db_connection()
        system_logger.info("✅ База данных подключена")
    except Exception as e:
        logger.error(f"❌ Ошибка базы данных: {e}")
        raise

    if settings.redis_enabled:
        try:
            await cache_service.get_redis()
            system_logger.info("✅ Redis подключен и готов")
        except Exception as e:
            # Redis не критичен, права доступа будут вычисляться без кэша
            logger.warning(f"⚠️ Redis недоступен, продолжаем без кэширования: {e}")
    else:
        system_logger.info("ℹ️ Redis кэширование выключено")

    await init_db()
    await ensure_admin_exists()
    system_logger.info("🎉 Все сервисы готовы к работе!")


@app.on_event("shutdown")
async def shutdown_event():
    """Обработчик завершения приложения"""
    system_logger.info("🛑 Завершение работы EduGroupManager API")
    await cache_service.close()


@app.get("/api/v1")
async def api_root():
    """Корневой эндпоинт API."""
    return {"message": "EduGroupManager API работает", "version": app.version}


@app.get("/api/v1/health")
async def api_health():
    """Проверка живости приложения."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(**get_uvicorn_config())
