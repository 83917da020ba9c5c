# -*- coding: utf-8 -*-
"""
Integration тесты для API сданных работ
"""

import pytest
from httpx import AsyncClient

from src.domain.enums import Role, SubmissionStatus
from tests.fixtures import (auth_headers, create_test_group,
                            create_test_module, create_test_submission,
                            create_test_task, create_test_user)


async def _setup(session):
    teacher = await create_test_user(session, "teacher", role=Role.TEACHER)
    student = await create_test_user(session, "student")
    module = await create_test_module(session, teacher, students=[student])
    task = await create_test_task(session, teacher, module=module)
    return teacher, student, module, task


class TestSubmissionsAPI:
    """Integration тесты API работ, оценивания и комментариев"""

    @pytest.mark.asyncio
    async def test_student_submits(self, client: AsyncClient, test_session):
        """Студент сдает работу от себя и от своей группы"""
        # Arrange
        teacher, student, module, task = await _setup(test_session)
        group = await create_test_group(test_session, module, members=[student])

        # Act
        response = await client.post(
            "/api/v1/submissions/",
            json={
                "task_id": task.id,
                "title": "Отчет",
                "file_url": "https://example.com/report.pdf",
                "submitted_by_group_id": group.id,
            },
            headers=auth_headers(student),
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["submitted_by"]["id"] == student.id
        assert data["submitted_by_group_id"] == group.id
        assert data["grade"] is None

    @pytest.mark.asyncio
    async def test_submit_for_foreign_group_forbidden(
        self, client: AsyncClient, test_session
    ):
        teacher, student, module, task = await _setup(test_session)
        group = await create_test_group(test_session, module)

        response = await client.post(
            "/api/v1/submissions/",
            json={"task_id": task.id, "title": "Отчет", "submitted_by_group_id": group.id},
            headers=auth_headers(student),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_submit_invisible_task_forbidden(
        self, client: AsyncClient, test_session
    ):
        teacher, _, _, task = await _setup(test_session)
        outsider = await create_test_user(test_session, "outsider")

        response = await client.post(
            "/api/v1/submissions/",
            json={"task_id": task.id, "title": "Отчет"},
            headers=auth_headers(outsider),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_teacher_cannot_submit(self, client: AsyncClient, test_session):
        teacher, _, _, task = await _setup(test_session)

        response = await client.post(
            "/api/v1/submissions/",
            json={"task_id": task.id, "title": "Отчет"},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_grade_sets_graded_status(self, client: AsyncClient, test_session):
        """Оценка без статуса переводит работу в graded"""
        # Arrange
        teacher, student, _, task = await _setup(test_session)
        submission = await create_test_submission(test_session, task, student)

        # Act
        response = await client.put(
            f"/api/v1/submissions/{submission.id}",
            json={"grade": 17.5, "feedback": "Хорошо"},
            headers=auth_headers(teacher),
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "graded"
        assert data["grade"] == 17.5
        assert data["feedback"] == "Хорошо"

    @pytest.mark.asyncio
    async def test_return_for_revision(self, client: AsyncClient, test_session):
        teacher, student, _, task = await _setup(test_session)
        submission = await create_test_submission(test_session, task, student)

        response = await client.put(
            f"/api/v1/submissions/{submission.id}",
            json={"status": "returned_for_revision", "feedback": "Доработать"},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "returned_for_revision"
        assert response.json()["grade"] is None

    @pytest.mark.asyncio
    async def test_grade_out_of_range(self, client: AsyncClient, test_session):
        teacher, student, _, task = await _setup(test_session)
        submission = await create_test_submission(test_session, task, student)

        response = await client.put(
            f"/api/v1/submissions/{submission.id}",
            json={"grade": 25},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_student_cannot_grade(self, client: AsyncClient, test_session):
        _, student, _, task = await _setup(test_session)
        submission = await create_test_submission(test_session, task, student)

        response = await client.put(
            f"/api/v1/submissions/{submission.id}",
            json={"grade": 20},
            headers=auth_headers(student),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_author_edits_until_graded(self, client: AsyncClient, test_session):
        """Автор правит работу, пока она не оценена"""
        # Arrange
        _, student, _, task = await _setup(test_session)
        pending = await create_test_submission(test_session, task, student, title="A")
        graded = await create_test_submission(
            test_session, task, student, title="B", status=SubmissionStatus.GRADED
        )

        # Act
        edited = await client.put(
            f"/api/v1/submissions/{pending.id}",
            json={"title": "Исправлено"},
            headers=auth_headers(student),
        )
        locked = await client.put(
            f"/api/v1/submissions/{graded.id}",
            json={"title": "Поздно"},
            headers=auth_headers(student),
        )
        delete_locked = await client.delete(
            f"/api/v1/submissions/{graded.id}", headers=auth_headers(student)
        )
        delete_pending = await client.delete(
            f"/api/v1/submissions/{pending.id}", headers=auth_headers(student)
        )

        # Assert
        assert edited.status_code == 200
        assert edited.json()["title"] == "Исправлено"
        assert locked.status_code == 403
        assert delete_locked.status_code == 403
        assert delete_pending.status_code == 204

    @pytest.mark.asyncio
    async def test_list_visibility(self, client: AsyncClient, test_session):
        """Студент видит свои работы и работы своей группы"""
        # Arrange
        teacher, student, module, task = await _setup(test_session)
        mate = await create_test_user(test_session, "mate")
        stranger = await create_test_user(test_session, "stranger")
        group = await create_test_group(test_session, module, members=[student, mate])
        own = await create_test_submission(test_session, task, student)
        team = await create_test_submission(test_session, task, mate, group=group)
        await create_test_submission(test_session, task, stranger)

        # Act
        as_student = await client.get(
            "/api/v1/submissions/", headers=auth_headers(student)
        )
        as_teacher = await client.get(
            "/api/v1/submissions/",
            params={"task_id": task.id},
            headers=auth_headers(teacher),
        )

        # Assert
        assert {s["id"] for s in as_student.json()} == {own.id, team.id}
        assert len(as_teacher.json()) == 3

    @pytest.mark.asyncio
    async def test_comments(self, client: AsyncClient, test_session):
        """Преподаватель и автор обсуждают работу в комментариях"""
        # Arrange
        teacher, student, _, task = await _setup(test_session)
        submission = await create_test_submission(test_session, task, student)

        # Act
        first = await client.post(
            f"/api/v1/submissions/{submission.id}/comments",
            json={"content": "Уточните вывод"},
            headers=auth_headers(teacher),
        )
        second = await client.post(
            f"/api/v1/submissions/{submission.id}/comments",
            json={"content": "Готово"},
            headers=auth_headers(student),
        )
        blank = await client.post(
            f"/api/v1/submissions/{submission.id}/comments",
            json={"content": "   "},
            headers=auth_headers(student),
        )
        listed = await client.get(
            f"/api/v1/submissions/{submission.id}/comments",
            headers=auth_headers(student),
        )

        # Assert
        assert first.status_code == 201
        assert first.json()["author"]["id"] == teacher.id
        assert second.status_code == 201
        assert blank.status_code == 400
        assert [c["content"] for c in listed.json()] == ["Уточните вывод", "Готово"]

    @pytest.mark.asyncio
    async def test_outsider_cannot_comment(self, client: AsyncClient, test_session):
        _, student, _, task = await _setup(test_session)
        outsider = await create_test_user(test_session, "outsider")
        submission = await create_test_submission(test_session, task, student)

        response = await client.post(
            f"/api/v1/submissions/{submission.id}/comments",
            json={"content": "Привет"},
            headers=auth_headers(outsider),
        )

        assert response.status_code == 403
