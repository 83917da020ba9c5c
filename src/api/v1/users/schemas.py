# EduGroupManager/Backend/src/api/v1/users/schemas.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.domain.enums import Role


class UserBriefSchema(BaseModel):
    """Краткие данные пользователя для вложения в другие ответы."""

    id: int
    first_name: str
    last_name: str
    role: Role

    class Config:
        from_attributes = True


class UserReadSchema(BaseModel):
    """Схема для чтения данных пользователя."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: Role
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True
