# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/domain/models.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
ORM модели SQLAlchemy 2.0 для домена EduGroupManager.

Связи "многие-ко-многим" (зачисление в модуль, членство в группе) вынесены в
отдельные модели, коллекции на сущностях только для чтения.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (Boolean, DateTime, Enum, Float, ForeignKey, Integer,
                        String, Text, UniqueConstraint)
from sqlalchemy.orm import (DeclarativeBase, Mapped, mapped_column,
                            relationship)

from src.domain.enums import (ProjectStatus, Role, SubmissionStatus,
                              TaskStatus)


def utcnow() -> datetime:
    """Текущее время UTC без tzinfo (так хранятся все даты в БД)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum(enum_cls):
    # Храним значения перечислений ("teacher"), а не имена ("TEACHER")
    return Enum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=32,
    )


class Base(DeclarativeBase):
    """Базовый класс для всех моделей."""


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


# ---------------------------------------------------------------------------
# Пользователи
# ---------------------------------------------------------------------------


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(_enum(Role), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role}>"


# ---------------------------------------------------------------------------
# Модули
# ---------------------------------------------------------------------------


class ModuleStudents(Base):
    """Зачисление студента в модуль."""

    __tablename__ = "module_students"

    module_id: Mapped[int] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), primary_key=True
    )
    student_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )


class Module(TimestampMixin, Base):
    __tablename__ = "modules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    teacher_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    teacher: Mapped[User] = relationship(lazy="selectin")
    students: Mapped[List[User]] = relationship(
        secondary="module_students",
        viewonly=True,
        order_by=[User.first_name, User.last_name],
    )


# ---------------------------------------------------------------------------
# Группы
# ---------------------------------------------------------------------------


class GroupMembers(Base):
    """Членство пользователя в группе."""

    __tablename__ = "group_members"

    group_id: Mapped[int] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )


class Group(TimestampMixin, Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    module_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), nullable=True
    )
    coordinator_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    module: Mapped[Optional[Module]] = relationship(lazy="selectin")
    coordinator: Mapped[Optional[User]] = relationship(lazy="selectin")
    members: Mapped[List[User]] = relationship(
        secondary="group_members",
        viewonly=True,
        lazy="selectin",
        order_by=[User.first_name, User.last_name],
    )

    @property
    def member_ids(self) -> set[int]:
        return {member.id for member in self.members}


# ---------------------------------------------------------------------------
# Проекты
# ---------------------------------------------------------------------------


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    module_id: Mapped[int] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), nullable=False
    )
    group_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    project_manager_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        _enum(ProjectStatus), default=ProjectStatus.ACTIVE, nullable=False
    )

    module: Mapped[Module] = relationship(lazy="selectin")
    group: Mapped[Optional[Group]] = relationship(lazy="selectin")
    project_manager: Mapped[Optional[User]] = relationship(lazy="selectin")
    steps: Mapped[List["ProjectStep"]] = relationship(
        back_populates="project",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ProjectStep.step_order",
    )

    @property
    def progress(self) -> float:
        """Процент выполненных этапов (0, если этапов нет)."""
        if not self.steps:
            return 0.0
        completed = sum(1 for step in self.steps if step.is_completed)
        return round(completed / len(self.steps) * 100, 1)


class ProjectStep(Base):
    __tablename__ = "project_steps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    step_order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    project: Mapped[Project] = relationship(back_populates="steps")

    __table_args__ = (UniqueConstraint("project_id", "step_order"),)


# ---------------------------------------------------------------------------
# Задачи и сданные работы
# ---------------------------------------------------------------------------


class Task(TimestampMixin, Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        _enum(TaskStatus), default=TaskStatus.PENDING, nullable=False
    )
    module_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), nullable=True
    )
    project_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=True
    )
    assigned_by_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    module: Mapped[Optional[Module]] = relationship(lazy="selectin")
    project: Mapped[Optional[Project]] = relationship(lazy="selectin")
    assigned_by: Mapped[User] = relationship(lazy="selectin")
    submissions: Mapped[List["Submission"]] = relationship(
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="Submission.submitted_at.desc()",
    )


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    file_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    task_id: Mapped[int] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False
    )
    submitted_by_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    submitted_by_group_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[SubmissionStatus] = mapped_column(
        _enum(SubmissionStatus), default=SubmissionStatus.PENDING, nullable=False
    )
    grade: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    task: Mapped[Task] = relationship(back_populates="submissions", lazy="selectin")
    submitted_by: Mapped[User] = relationship(lazy="selectin")
    submitted_by_group: Mapped[Optional[Group]] = relationship(lazy="selectin")
    comments: Mapped[List["SubmissionComment"]] = relationship(
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionComment.created_at",
    )


class SubmissionComment(Base):
    __tablename__ = "submission_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    submission: Mapped[Submission] = relationship(back_populates="comments")
    author: Mapped[User] = relationship(lazy="selectin")


# ---------------------------------------------------------------------------
# Сообщения
# ---------------------------------------------------------------------------


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    recipient_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )

    sender: Mapped[Optional[User]] = relationship(
        foreign_keys=[sender_id], lazy="selectin"
    )
    recipient: Mapped[Optional[User]] = relationship(
        foreign_keys=[recipient_id], lazy="selectin"
    )
