# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Определение классов перечислений для домена EduGroupManager.

Этот модуль содержит все перечисления приложения: роли пользователей и
статусы проектов, задач и работ.
"""

import enum


class Role(str, enum.Enum):
    """Роли, доступные в системе."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    COORDINATOR = "coordinator"  # Студент, координирующий группу


# Роли учащихся: видят только то, куда они зачислены
LEARNER_ROLES = frozenset({Role.STUDENT, Role.COORDINATOR})


class ProjectStatus(str, enum.Enum):
    """Состояния жизненного цикла проекта."""

    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class TaskStatus(str, enum.Enum):
    """Статусы задачи."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class SubmissionStatus(str, enum.Enum):
    """Статусы сданной работы."""

    PENDING = "pending"
    GRADED = "graded"
    RETURNED_FOR_REVISION = "returned_for_revision"


class MembershipAction(str, enum.Enum):
    """Действия над членством в группе."""

    ADD = "add"
    REMOVE = "remove"
