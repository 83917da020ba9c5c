# EduGroupManager/Backend/src/api/v1/modules/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.api.v1.users.schemas import UserBriefSchema


class ModuleCreateSchema(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: str = ""
    teacher_id: Optional[int] = Field(
        None, description="Преподаватель модуля (только для администратора)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Веб-разработка",
                "description": "Командные проекты по разработке веб-приложений",
            }
        }


class ModuleUpdateSchema(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None


class ModuleReadSchema(BaseModel):
    id: int
    name: str
    description: str
    teacher_id: int
    teacher: UserBriefSchema
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ModuleListItemSchema(ModuleReadSchema):
    student_count: int = 0
    project_count: int = 0


class ModuleDetailSchema(ModuleReadSchema):
    students: List[UserBriefSchema] = []


class EnrollStudentSchema(BaseModel):
    student_id: int
