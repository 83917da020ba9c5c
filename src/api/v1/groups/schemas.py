# EduGroupManager/Backend/src/api/v1/groups/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.api.v1.users.schemas import UserBriefSchema
from src.domain.enums import MembershipAction


class GroupCreateSchema(BaseModel):
    """Схема для создания группы."""

    name: str = Field(..., min_length=2, max_length=255)
    description: str = ""
    module_id: Optional[int] = None
    coordinator_id: Optional[int] = Field(
        None, description="Координатор (для студента им становится создатель)"
    )
    member_ids: List[int] = []

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Команда А",
                "description": "Группа для проекта интернет-магазина",
                "module_id": 1,
                "member_ids": [5, 6, 7],
            }
        }


class GroupUpdateSchema(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    coordinator_id: Optional[int] = None


class ModuleBriefSchema(BaseModel):
    id: int
    name: str
    teacher_id: int

    class Config:
        from_attributes = True


class GroupReadSchema(BaseModel):
    """Схема для чтения группы вместе с участниками."""

    id: int
    name: str
    description: str
    module_id: Optional[int] = None
    module: Optional[ModuleBriefSchema] = None
    coordinator_id: Optional[int] = None
    coordinator: Optional[UserBriefSchema] = None
    members: List[UserBriefSchema] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MembershipSchema(BaseModel):
    user_id: int
    action: MembershipAction

    class Config:
        json_schema_extra = {"example": {"user_id": 5, "action": "add"}}
