# EduGroupManager/Backend/src/api/v1/auth/routes.py
# -*- coding: utf-8 -*-
"""
Маршруты FastAPI для аутентификации.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.security.security import authenticated, extract_bearer_token
from src.service.users import (AuthenticationError, InactiveUserError,
                               authenticate_service, get_user_service,
                               refresh_tokens_service, register_user_service)

from ..users.schemas import UserReadSchema
from .schemas import (LoginSchema, RegisterResponseSchema, RegisterSchema,
                      TokenSchema)

router = APIRouter()
logger = configure_logger()


@router.post(
    "/register",
    response_model=RegisterResponseSchema,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    data: RegisterSchema,
    session: AsyncSession = Depends(get_db),
):
    """
    Регистрирует пользователя и сразу выдает токены.

    Исключения:
        * 400 ― роль недоступна для регистрации.
        * 409 ― логин или email заняты.
    """
    logger.info(f"Регистрация пользователя {data.username} с ролью {data.role.value}")
    try:
        user, tokens = await register_user_service(
            session,
            username=data.username,
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role,
        )
    except ValueError as e:
        logger.warning(f"Отклонена регистрация {data.username}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {**tokens, "user": user}


@router.post("/login", response_model=TokenSchema, status_code=status.HTTP_200_OK)
async def login(
    credentials: LoginSchema,
    session: AsyncSession = Depends(get_db),
):
    """
    Аутентифицирует пользователя и возвращает JWT-токены.

    Исключения:
        * 401 ― неверные учётные данные.
        * 403 ― пользователь неактивен.
    """
    try:
        return await authenticate_service(
            session, credentials.identifier, credentials.password
        )
    except AuthenticationError:
        logger.warning(f"Неудачная попытка входа: {credentials.identifier}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Недействительные учётные данные",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InactiveUserError:
        logger.warning(
            f"Неудачная попытка входа: пользователь {credentials.identifier} неактивен"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Пользователь неактивен",
        )


@router.post("/refresh", response_model=TokenSchema, status_code=status.HTTP_200_OK)
async def refresh_token(
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    """
    Обновляет Access Token на основе Refresh Token из заголовка Authorization.

    Исключения:
        * 401 ― недействительный или истёкший Refresh Token.
    """
    token = extract_bearer_token(request)
    try:
        tokens = await refresh_tokens_service(session, token)
    except (AuthenticationError, InactiveUserError) as exc:
        logger.warning(f"Отклонен refresh токен: {str(exc)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Недействительный refresh токен",
        )
    logger.info("Access токен обновлен")
    return tokens


@router.get("/me", response_model=UserReadSchema)
async def read_current_user(
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(authenticated),
):
    """
    Возвращает данные текущего пользователя.
    """
    user = await get_user_service(session, int(claims["sub"]))
    logger.info(
        f"Запрос данных пользователя: {user.username} (ID: {user.id}, роль: {user.role.value})"
    )
    return user
