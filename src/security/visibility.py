# -*- coding: utf-8 -*-
"""
EduGroupManager/Backend/src/security/visibility.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Правила видимости и управления сущностями в зависимости от роли.

Все проверки здесь чистые: они работают с уже загруженными объектами и с
`UserScope`, набором идентификаторов модулей и групп пользователя. Загрузка
scope из БД (с кэшированием) находится в `access_control`.

Правила:

* admin видит и может менять всё;
* teacher видит модули, которые ведет, и всё, что к ним привязано, а также
  задачи, которые назначил сам;
* student / coordinator видят модули, куда зачислены, свои группы, проекты и
  задачи этих модулей и групп, свои работы и работы своих групп.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.enums import LEARNER_ROLES, Role, SubmissionStatus


@dataclass(frozen=True)
class UserScope:
    user_id: int
    role: Role
    taught_module_ids: frozenset[int] = field(default_factory=frozenset)
    enrolled_module_ids: frozenset[int] = field(default_factory=frozenset)
    group_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    @property
    def is_learner(self) -> bool:
        return self.role in LEARNER_ROLES

    @property
    def module_ids(self) -> frozenset[int]:
        """Модули, видимые пользователю (для admin не используется)."""
        if self.is_teacher:
            return self.taught_module_ids
        if self.is_learner:
            return self.enrolled_module_ids
        return frozenset()

    def to_cache(self) -> dict:
        return {
            "taught_module_ids": sorted(self.taught_module_ids),
            "enrolled_module_ids": sorted(self.enrolled_module_ids),
            "group_ids": sorted(self.group_ids),
        }

    @classmethod
    def from_cache(cls, user_id: int, role: Role, data: dict) -> "UserScope":
        return cls(
            user_id=user_id,
            role=role,
            taught_module_ids=frozenset(data.get("taught_module_ids", [])),
            enrolled_module_ids=frozenset(data.get("enrolled_module_ids", [])),
            group_ids=frozenset(data.get("group_ids", [])),
        )

    # ------------------------------------------------------------------
    # Модули
    # ------------------------------------------------------------------

    def can_view_module(self, module: Any) -> bool:
        return self.is_admin or module.id in self.module_ids

    def can_manage_module(self, module: Any) -> bool:
        return self.is_admin or (self.is_teacher and module.teacher_id == self.user_id)

    # ------------------------------------------------------------------
    # Группы
    # ------------------------------------------------------------------

    def can_view_group(self, group: Any) -> bool:
        if self.is_admin:
            return True
        if self.is_teacher:
            return group.module_id in self.taught_module_ids
        return group.id in self.group_ids

    def can_manage_group(self, group: Any) -> bool:
        """Учитель модуля, admin или координатор группы."""
        if self.is_admin:
            return True
        if self.is_teacher:
            return group.module_id in self.taught_module_ids
        return group.coordinator_id == self.user_id

    # ------------------------------------------------------------------
    # Проекты
    # ------------------------------------------------------------------

    def can_view_project(self, project: Any) -> bool:
        if self.is_admin:
            return True
        if self.is_teacher:
            return project.module_id in self.taught_module_ids
        return (
            project.module_id in self.enrolled_module_ids
            or (project.group_id is not None and project.group_id in self.group_ids)
        )

    def can_manage_project(self, project: Any) -> bool:
        return self.is_admin or (
            self.is_teacher and project.module_id in self.taught_module_ids
        )

    def can_toggle_step(self, project: Any) -> bool:
        """Отмечать этапы может руководитель проекта или координатор его группы."""
        if self.can_manage_project(project):
            return True
        if project.project_manager_id == self.user_id:
            return True
        return project.group is not None and project.group.coordinator_id == self.user_id

    # ------------------------------------------------------------------
    # Задачи
    # ------------------------------------------------------------------

    def can_view_task(self, task: Any) -> bool:
        if self.is_admin:
            return True
        if self.is_teacher:
            if task.assigned_by_id == self.user_id:
                return True
            if task.module_id is not None and task.module_id in self.taught_module_ids:
                return True
            return task.project is not None and self.can_view_project(task.project)
        if task.module_id is not None and task.module_id in self.enrolled_module_ids:
            return True
        return task.project is not None and self.can_view_project(task.project)

    def can_manage_task(self, task: Any) -> bool:
        if self.is_admin:
            return True
        if not self.is_teacher:
            return False
        return task.assigned_by_id == self.user_id or (
            task.module_id is not None and task.module_id in self.taught_module_ids
        )

    # ------------------------------------------------------------------
    # Сданные работы
    # ------------------------------------------------------------------

    def can_view_submission(self, submission: Any) -> bool:
        if self.is_admin:
            return True
        if self.is_teacher:
            return self.can_view_task(submission.task)
        return submission.submitted_by_id == self.user_id or (
            submission.submitted_by_group_id is not None
            and submission.submitted_by_group_id in self.group_ids
        )

    def can_grade_submission(self, submission: Any) -> bool:
        return self.is_admin or (self.is_teacher and self.can_view_task(submission.task))

    def can_edit_submission(self, submission: Any) -> bool:
        """Автор может править свою работу, пока она не оценена."""
        return (
            submission.submitted_by_id == self.user_id
            and submission.status != SubmissionStatus.GRADED
        )
