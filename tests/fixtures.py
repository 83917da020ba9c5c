# -*- coding: utf-8 -*-
"""
Фабрики тестовых данных
"""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import Role, SubmissionStatus, TaskStatus
from src.domain.models import (Group, GroupMembers, Message, Module,
                               ModuleStudents, Project, ProjectStep,
                               Submission, Task, User)
from src.repository.base import create_item
from src.security.security import create_access_token, hash_password

# bcrypt медленный, хеш одного пароля переиспользуется
_password_hashes: dict = {}


def _hashed(password: str) -> str:
    if password not in _password_hashes:
        _password_hashes[password] = hash_password(password)
    return _password_hashes[password]


async def create_test_user(
    session: AsyncSession,
    username: str,
    role: Role = Role.STUDENT,
    first_name: Optional[str] = None,
    last_name: str = "Test",
    password: str = "password",
    is_active: bool = True,
) -> User:
    """Создать тестового пользователя"""
    return await create_item(
        session,
        User,
        username=username,
        email=f"{username}@example.com",
        first_name=first_name or username.capitalize(),
        last_name=last_name,
        password=_hashed(password),
        role=role,
        is_active=is_active,
    )


def auth_headers(user: User) -> dict:
    """Заголовок Authorization с access токеном пользователя"""
    token = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


async def create_test_module(
    session: AsyncSession,
    teacher: User,
    name: str = "Test Module",
    students: Iterable[User] = (),
) -> Module:
    """Создать модуль и зачислить студентов"""
    module = await create_item(
        session, Module, name=name, description="Test module", teacher_id=teacher.id
    )
    for student in students:
        await create_item(
            session, ModuleStudents, module_id=module.id, student_id=student.id
        )
    return module


async def create_test_group(
    session: AsyncSession,
    module: Optional[Module],
    members: Iterable[User] = (),
    coordinator: Optional[User] = None,
    name: str = "Test Group",
) -> Group:
    """Создать группу с участниками"""
    group = await create_item(
        session,
        Group,
        name=name,
        description="",
        module_id=module.id if module else None,
        coordinator_id=coordinator.id if coordinator else None,
    )
    member_ids = {member.id for member in members}
    if coordinator is not None:
        member_ids.add(coordinator.id)
    for user_id in sorted(member_ids):
        await create_item(session, GroupMembers, group_id=group.id, user_id=user_id)
    return group


async def create_test_project(
    session: AsyncSession,
    module: Module,
    group: Optional[Group] = None,
    name: str = "Test Project",
    steps: Iterable[str] = (),
) -> Project:
    """Создать проект с этапами"""
    project = await create_item(
        session,
        Project,
        name=name,
        description="",
        module_id=module.id,
        group_id=group.id if group else None,
    )
    for order, title in enumerate(steps, start=1):
        await create_item(
            session, ProjectStep, project_id=project.id, title=title, step_order=order
        )
    await session.refresh(project)
    return project


async def create_test_task(
    session: AsyncSession,
    assigned_by: User,
    module: Optional[Module] = None,
    project: Optional[Project] = None,
    title: str = "Test Task",
    due_date: Optional[datetime] = None,
    status: TaskStatus = TaskStatus.PENDING,
) -> Task:
    """Создать задачу"""
    return await create_item(
        session,
        Task,
        title=title,
        description="",
        due_date=due_date,
        status=status,
        module_id=module.id if module else (project.module_id if project else None),
        project_id=project.id if project else None,
        assigned_by_id=assigned_by.id,
    )


async def create_test_submission(
    session: AsyncSession,
    task: Task,
    author: User,
    group: Optional[Group] = None,
    title: str = "Test Submission",
    status: SubmissionStatus = SubmissionStatus.PENDING,
) -> Submission:
    """Создать сданную работу"""
    return await create_item(
        session,
        Submission,
        title=title,
        description="",
        task_id=task.id,
        submitted_by_id=author.id,
        submitted_by_group_id=group.id if group else None,
        status=status,
    )


async def create_test_message(
    session: AsyncSession,
    sender: User,
    recipient: User,
    content: str = "Привет",
    created_at: Optional[datetime] = None,
    is_read: bool = False,
) -> Message:
    """Создать сообщение"""
    fields = dict(
        sender_id=sender.id,
        recipient_id=recipient.id,
        content=content,
        is_read=is_read,
    )
    if created_at is not None:
        fields["created_at"] = created_at
    return await create_item(session, Message, **fields)
