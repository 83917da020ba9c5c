# -*- coding: utf-8 -*-
"""
Integration тесты для API проектов
"""

import pytest
from httpx import AsyncClient

from src.domain.enums import Role
from tests.fixtures import (auth_headers, create_test_group,
                            create_test_module, create_test_project,
                            create_test_user)


class TestProjectsAPI:
    """Integration тесты API проектов и этапов"""

    @pytest.mark.asyncio
    async def test_create_project_with_steps(self, client: AsyncClient, test_session):
        """Этапы нумеруются по порядку, прогресс считается от выполненных"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher, students=[student])
        group = await create_test_group(test_session, module, members=[student])

        # Act
        response = await client.post(
            "/api/v1/projects/",
            json={
                "name": "Интернет-магазин",
                "module_id": module.id,
                "group_id": group.id,
                "project_manager_id": student.id,
                "steps": [
                    {"title": "ТЗ", "is_completed": True},
                    {"title": "Прототип"},
                    {"title": "Защита"},
                    {"title": "Отчет"},
                ],
            },
            headers=auth_headers(teacher),
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert [s["step_order"] for s in data["steps"]] == [1, 2, 3, 4]
        assert data["progress"] == 25.0
        assert data["group"]["id"] == group.id
        assert data["project_manager"]["id"] == student.id
        assert data["status"] == "active"

    @pytest.mark.asyncio
    async def test_group_from_other_module_rejected(
        self, client: AsyncClient, test_session
    ):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher, name="A")
        other_module = await create_test_module(test_session, teacher, name="B")
        group = await create_test_group(test_session, other_module)

        response = await client.post(
            "/api/v1/projects/",
            json={"name": "Проект", "module_id": module.id, "group_id": group.id},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_manager_must_be_group_member(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher, students=[student])
        group = await create_test_group(test_session, module)

        response = await client.post(
            "/api/v1/projects/",
            json={
                "name": "Проект",
                "module_id": module.id,
                "group_id": group.id,
                "project_manager_id": student.id,
            },
            headers=auth_headers(teacher),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_foreign_teacher_cannot_create(self, client: AsyncClient, test_session):
        owner = await create_test_user(test_session, "owner", role=Role.TEACHER)
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, owner)

        response = await client.post(
            "/api/v1/projects/",
            json={"name": "Проект", "module_id": module.id},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_list_by_status_and_visibility(self, client: AsyncClient, test_session):
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher, students=[student])
        other_module = await create_test_module(test_session, teacher, name="Другой")
        visible = await create_test_project(test_session, module, name="Видимый")
        await create_test_project(test_session, other_module, name="Скрытый")

        # Act
        as_student = await client.get("/api/v1/projects/", headers=auth_headers(student))
        drafts = await client.get(
            "/api/v1/projects/",
            params={"status": "draft"},
            headers=auth_headers(teacher),
        )

        # Assert
        assert [p["id"] for p in as_student.json()] == [visible.id]
        assert drafts.json() == []

    @pytest.mark.asyncio
    async def test_update_replaces_steps(self, client: AsyncClient, test_session):
        """Переданный список этапов заменяет старый целиком"""
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        project = await create_test_project(
            test_session, module, steps=["Старый 1", "Старый 2"]
        )

        response = await client.put(
            f"/api/v1/projects/{project.id}",
            json={"status": "completed", "steps": [{"title": "Новый"}]},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert [s["title"] for s in data["steps"]] == ["Новый"]
        assert data["steps"][0]["step_order"] == 1
        assert data["name"] == "Test Project"

    @pytest.mark.asyncio
    async def test_student_cannot_update(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher, students=[student])
        project = await create_test_project(test_session, module)

        response = await client.put(
            f"/api/v1/projects/{project.id}",
            json={"name": "Захват"},
            headers=auth_headers(student),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_coordinator_toggles_step(self, client: AsyncClient, test_session):
        """Координатор группы отмечает этап, повторное нажатие снимает отметку"""
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        coord = await create_test_user(test_session, "coord", role=Role.COORDINATOR)
        module = await create_test_module(test_session, teacher, students=[coord])
        group = await create_test_group(test_session, module, coordinator=coord)
        project = await create_test_project(
            test_session, module, group=group, steps=["Первый", "Второй"]
        )
        step_id = project.steps[0].id

        # Act
        done = await client.patch(
            f"/api/v1/projects/{project.id}/steps/{step_id}",
            headers=auth_headers(coord),
        )
        undone = await client.patch(
            f"/api/v1/projects/{project.id}/steps/{step_id}",
            headers=auth_headers(coord),
        )

        # Assert
        assert done.status_code == 200
        assert done.json()["steps"][0]["is_completed"] is True
        assert done.json()["progress"] == 50.0
        assert undone.json()["progress"] == 0.0

    @pytest.mark.asyncio
    async def test_regular_student_cannot_toggle(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher, students=[student])
        project = await create_test_project(test_session, module, steps=["Этап"])

        response = await client.patch(
            f"/api/v1/projects/{project.id}/steps/{project.steps[0].id}",
            headers=auth_headers(student),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_toggle_missing_step(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        project = await create_test_project(test_session, module)

        response = await client.patch(
            f"/api/v1/projects/{project.id}/steps/999", headers=auth_headers(teacher)
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_project(self, client: AsyncClient, test_session):
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)
        project = await create_test_project(test_session, module, steps=["Этап"])

        deleted = await client.delete(
            f"/api/v1/projects/{project.id}", headers=auth_headers(teacher)
        )
        missing = await client.get(
            f"/api/v1/projects/{project.id}", headers=auth_headers(teacher)
        )

        assert deleted.status_code == 204
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_due_date_with_offset_stored_in_utc(
        self, client: AsyncClient, test_session
    ):
        """Срок проекта в формате toISOString сохраняется как UTC"""
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        module = await create_test_module(test_session, teacher)

        created = await client.post(
            "/api/v1/projects/",
            json={
                "name": "Сайт",
                "module_id": module.id,
                "due_date": "2030-06-01T10:30:00.000Z",
            },
            headers=auth_headers(teacher),
        )
        updated = await client.put(
            f"/api/v1/projects/{created.json()['id']}",
            json={"due_date": "2030-06-02T03:00:00-02:00"},
            headers=auth_headers(teacher),
        )

        assert created.status_code == 201
        assert created.json()["due_date"] == "2030-06-01T10:30:00"
        assert updated.status_code == 200
        assert updated.json()["due_date"] == "2030-06-02T05:00:00"
