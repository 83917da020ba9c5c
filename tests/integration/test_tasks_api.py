# -*- coding: utf-8 -*-
"""
Integration тесты для API задач
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from src.domain.enums import Role, TaskStatus
from src.domain.models import utcnow
from tests.fixtures import (auth_headers, create_test_group,
                            create_test_module, create_test_project,
                            create_test_submission, create_test_task,
                            create_test_user)


class TestTasksAPI:
    """Integration тесты API задач"""

    @pytest.mark.asyncio
    async def test_create_task_in_project_takes_module(
        self, client: AsyncClient, test_session
    ):
        """Задача проекта наследует модуль проекта"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        project = await create_test_project(test_session, module)

        # Act
        response = await client.post(
            "/api/v1/tasks/",
            json={"title": "Прототип", "project_id": project.id},
            headers=auth_headers(teacher),
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["module_id"] == module.id
        assert data["assigned_by"]["id"] == teacher.id
        assert data["status"] == "pending"

    @pytest.mark.asyncio
    async def test_module_mismatch_rejected(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher, name="A")
        other = await create_test_module(test_session, teacher, name="B")
        project = await create_test_project(test_session, module)

        response = await client.post(
            "/api/v1/tasks/",
            json={"title": "Задача", "project_id": project.id, "module_id": other.id},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_foreign_module_forbidden(self, client: AsyncClient, test_session):
        owner = await create_test_user(test_session, "owner", role=Role.TEACHER)
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, owner)

        response = await client.post(
            "/api/v1/tasks/",
            json={"title": "Задача", "module_id": module.id},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_student_cannot_create(self, client: AsyncClient, test_session):
        student = await create_test_user(test_session, "student")

        response = await client.post(
            "/api/v1/tasks/", json={"title": "Задача"}, headers=auth_headers(student)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_overdue_refreshed_on_list(self, client: AsyncClient, test_session):
        """Незавершенные задачи с прошедшим сроком становятся overdue"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        past = utcnow() - timedelta(days=1)
        late = await create_test_task(
            test_session, teacher, module=module, title="Просрочена", due_date=past
        )
        done = await create_test_task(
            test_session,
            teacher,
            module=module,
            title="Сдана",
            due_date=past,
            status=TaskStatus.COMPLETED,
        )
        future = await create_test_task(
            test_session,
            teacher,
            module=module,
            title="Впереди",
            due_date=utcnow() + timedelta(days=3),
        )

        # Act
        response = await client.get("/api/v1/tasks/", headers=auth_headers(teacher))

        # Assert
        assert response.status_code == 200
        statuses = {t["id"]: t["status"] for t in response.json()}
        assert statuses[late.id] == "overdue"
        assert statuses[done.id] == "completed"
        assert statuses[future.id] == "pending"

    @pytest.mark.asyncio
    async def test_list_filters(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        report = await create_test_task(test_session, teacher, module=module, title="Отчет")
        await create_test_task(
            test_session,
            teacher,
            module=module,
            title="Код",
            status=TaskStatus.IN_PROGRESS,
        )

        by_search = await client.get(
            "/api/v1/tasks/", params={"search": "Отч"}, headers=auth_headers(teacher)
        )
        by_status = await client.get(
            "/api/v1/tasks/",
            params={"status": "in_progress"},
            headers=auth_headers(teacher),
        )

        assert [t["id"] for t in by_search.json()] == [report.id]
        assert [t["title"] for t in by_status.json()] == ["Код"]

    @pytest.mark.asyncio
    async def test_student_visibility(self, client: AsyncClient, test_session):
        """Студент видит задачи своих модулей и проектов своих групп"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher, students=[student])
        other_module = await create_test_module(test_session, teacher, name="Другой")
        group = await create_test_group(test_session, None, members=[student])
        group_project = await create_test_project(
            test_session, other_module, group=group
        )
        own = await create_test_task(test_session, teacher, module=module, title="Модуль")
        via_group = await create_test_task(
            test_session, teacher, project=group_project, title="Группа"
        )
        hidden = await create_test_task(
            test_session, teacher, module=other_module, title="Чужая"
        )

        # Act
        listed = await client.get("/api/v1/tasks/", headers=auth_headers(student))
        forbidden = await client.get(
            f"/api/v1/tasks/{hidden.id}", headers=auth_headers(student)
        )

        # Assert
        assert {t["id"] for t in listed.json()} == {own.id, via_group.id}
        assert forbidden.status_code == 403

    @pytest.mark.asyncio
    async def test_detail_shows_only_visible_submissions(
        self, client: AsyncClient, test_session
    ):
        """Студент видит в задаче только свои работы"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        other = await create_test_user(test_session, "other")
        module = await create_test_module(test_session, teacher, students=[student, other])
        task = await create_test_task(test_session, teacher, module=module)
        mine = await create_test_submission(test_session, task, student)
        await create_test_submission(test_session, task, other)

        # Act
        as_student = await client.get(
            f"/api/v1/tasks/{task.id}", headers=auth_headers(student)
        )
        as_teacher = await client.get(
            f"/api/v1/tasks/{task.id}", headers=auth_headers(teacher)
        )

        # Assert
        assert [s["id"] for s in as_student.json()["submissions"]] == [mine.id]
        assert len(as_teacher.json()["submissions"]) == 2

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        task = await create_test_task(test_session, teacher, module=module)

        updated = await client.put(
            f"/api/v1/tasks/{task.id}",
            json={"status": "completed", "title": None},
            headers=auth_headers(teacher),
        )
        deleted = await client.delete(
            f"/api/v1/tasks/{task.id}", headers=auth_headers(teacher)
        )
        missing = await client.get(
            f"/api/v1/tasks/{task.id}", headers=auth_headers(teacher)
        )

        assert updated.status_code == 200
        assert updated.json()["status"] == "completed"
        assert updated.json()["title"] == "Test Task"
        assert deleted.status_code == 204
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_due_date_with_offset_stored_in_utc(
        self, client: AsyncClient, test_session
    ):
        """Срок со смещением сохраняется как UTC"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)

        # Act
        created = await client.post(
            "/api/v1/tasks/",
            json={
                "title": "Отчет",
                "module_id": module.id,
                "due_date": "2030-01-01T01:00:00+05:00",
            },
            headers=auth_headers(teacher),
        )
        updated = await client.put(
            f"/api/v1/tasks/{created.json()['id']}",
            json={"due_date": "2030-02-01T00:00:00Z"},
            headers=auth_headers(teacher),
        )

        # Assert
        assert created.status_code == 201
        assert created.json()["due_date"] == "2029-12-31T20:00:00"
        assert updated.status_code == 200
        assert updated.json()["due_date"] == "2030-02-01T00:00:00"

    @pytest.mark.asyncio
    async def test_past_due_with_offset_becomes_overdue(
        self, client: AsyncClient, test_session
    ):
        """Прошедший срок, заданный со смещением, помечается overdue"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        local_due = (utcnow() - timedelta(hours=1) + timedelta(hours=5)).replace(
            microsecond=0
        )
        created = await client.post(
            "/api/v1/tasks/",
            json={
                "title": "Просроченная",
                "module_id": module.id,
                "due_date": local_due.isoformat() + "+05:00",
            },
            headers=auth_headers(teacher),
        )

        # Act
        response = await client.get(
            f"/api/v1/tasks/{created.json()['id']}", headers=auth_headers(teacher)
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == "overdue"
