# EduGroupManager/Backend/src/api/v1/submissions/schemas.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.api.v1.users.schemas import UserBriefSchema
from src.domain.enums import SubmissionStatus


class SubmissionCreateSchema(BaseModel):
    task_id: int
    title: str = Field(..., min_length=2, max_length=255)
    description: str = ""
    file_url: Optional[str] = Field(None, max_length=1024)
    submitted_by_group_id: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "task_id": 4,
                "title": "Макет главной страницы",
                "file_url": "https://example.com/files/mockup.pdf",
                "submitted_by_group_id": 2,
            }
        }


class SubmissionUpdateSchema(BaseModel):
    """Содержимое правит автор, статус, оценку и отзыв выставляет преподаватель."""

    title: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=1024)
    status: Optional[SubmissionStatus] = None
    grade: Optional[float] = None
    feedback: Optional[str] = None


class SubmissionReadSchema(BaseModel):
    id: int
    title: str
    description: str
    file_url: Optional[str] = None
    task_id: int
    submitted_by_id: int
    submitted_by: UserBriefSchema
    submitted_by_group_id: Optional[int] = None
    status: SubmissionStatus
    grade: Optional[float] = None
    feedback: Optional[str] = None
    submitted_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CommentCreateSchema(BaseModel):
    content: str = Field(..., min_length=1)


class CommentReadSchema(BaseModel):
    id: int
    submission_id: int
    author_id: int
    author: UserBriefSchema
    content: str
    created_at: datetime

    class Config:
        from_attributes = True
