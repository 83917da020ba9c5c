# EduGroupManager/Backend/src/api/v1/projects/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from src.api.v1.groups.schemas import ModuleBriefSchema
from src.api.v1.users.schemas import UserBriefSchema
from src.domain.enums import ProjectStatus
from src.utils.datetime_helper import to_naive_utc


class ProjectStepInputSchema(BaseModel):
    """Этап проекта. Порядок задается позицией в списке."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    is_completed: bool = False


class ProjectStepReadSchema(BaseModel):
    id: int
    title: str
    description: str
    step_order: int
    is_completed: bool

    class Config:
        from_attributes = True


class ProjectCreateSchema(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: str = ""
    module_id: int
    group_id: Optional[int] = None
    project_manager_id: Optional[int] = None
    due_date: Optional[datetime] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    steps: List[ProjectStepInputSchema] = []

    @field_validator("due_date")
    @classmethod
    def due_date_to_utc(cls, v):
        """Дата со смещением приводится к наивному UTC."""
        return to_naive_utc(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Интернет-магазин",
                "module_id": 1,
                "group_id": 2,
                "due_date": "2026-12-20T18:00:00",
                "steps": [
                    {"title": "Техническое задание"},
                    {"title": "Прототип"},
                    {"title": "Защита"},
                ],
            }
        }


class ProjectUpdateSchema(BaseModel):
    """Передаются только изменяемые поля. steps заменяет список этапов целиком."""

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    group_id: Optional[int] = None
    project_manager_id: Optional[int] = None
    due_date: Optional[datetime] = None
    status: Optional[ProjectStatus] = None
    steps: Optional[List[ProjectStepInputSchema]] = None

    @field_validator("due_date")
    @classmethod
    def due_date_to_utc(cls, v):
        return to_naive_utc(v)


class GroupBriefSchema(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProjectReadSchema(BaseModel):
    id: int
    name: str
    description: str
    module_id: int
    module: ModuleBriefSchema
    group_id: Optional[int] = None
    group: Optional[GroupBriefSchema] = None
    project_manager_id: Optional[int] = None
    project_manager: Optional[UserBriefSchema] = None
    due_date: Optional[datetime] = None
    status: ProjectStatus
    steps: List[ProjectStepReadSchema] = []
    progress: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
