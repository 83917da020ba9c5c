# EduGroupManager/Backend/src/api/v1/auth/schemas.py
from pydantic import BaseModel, Field

from src.api.v1.users.schemas import UserReadSchema
from src.domain.enums import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginSchema(BaseModel):
    """Вход по имени пользователя или email."""

    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {"identifier": "student1", "password": "securepassword123"}
        }


class RegisterSchema(BaseModel):
    username: str = Field(..., min_length=3, max_length=64)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.STUDENT

    class Config:
        json_schema_extra = {
            "example": {
                "username": "student1",
                "email": "student1@example.com",
                "password": "securepassword123",
                "first_name": "Anna",
                "last_name": "Petrova",
                "role": "student",
            }
        }


class TokenSchema(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RegisterResponseSchema(TokenSchema):
    user: UserReadSchema
