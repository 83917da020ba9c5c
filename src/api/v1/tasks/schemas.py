# EduGroupManager/Backend/src/api/v1/tasks/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from src.api.v1.submissions.schemas import SubmissionReadSchema
from src.api.v1.users.schemas import UserBriefSchema
from src.domain.enums import TaskStatus
from src.utils.datetime_helper import to_naive_utc


class TaskCreateSchema(BaseModel):
    title: str = Field(..., min_length=2, max_length=255)
    description: str = ""
    due_date: Optional[datetime] = None
    status: TaskStatus = TaskStatus.PENDING
    module_id: Optional[int] = None
    project_id: Optional[int] = None

    @field_validator("due_date")
    @classmethod
    def due_date_to_utc(cls, v):
        """Дата со смещением приводится к наивному UTC."""
        return to_naive_utc(v)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Подготовить макет главной страницы",
                "due_date": "2026-11-30T23:59:00",
                "project_id": 3,
            }
        }


class TaskUpdateSchema(BaseModel):
    title: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    module_id: Optional[int] = None
    project_id: Optional[int] = None

    @field_validator("due_date")
    @classmethod
    def due_date_to_utc(cls, v):
        return to_naive_utc(v)


class TaskReadSchema(BaseModel):
    id: int
    title: str
    description: str
    due_date: Optional[datetime] = None
    status: TaskStatus
    module_id: Optional[int] = None
    project_id: Optional[int] = None
    assigned_by_id: int
    assigned_by: UserBriefSchema
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskDetailSchema(TaskReadSchema):
    submissions: List[SubmissionReadSchema] = []
