# -*- coding: utf-8 -*-
"""
Integration тесты для API аутентификации
"""

import pytest
from httpx import AsyncClient

from src.domain.enums import Role
from src.security.security import create_refresh_token
from tests.fixtures import auth_headers, create_test_user


class TestAuthAPI:
    """Integration тесты регистрации, входа и обновления токенов"""

    @pytest.mark.asyncio
    async def test_register_returns_tokens(self, client: AsyncClient):
        """Регистрация студента сразу выдает токены"""
        # Act
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "username": "anna",
                "email": "anna@example.com",
                "password": "secret123",
                "first_name": "Анна",
                "last_name": "Петрова",
            },
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "anna"
        assert data["user"]["role"] == "student"

    @pytest.mark.asyncio
    async def test_register_admin_rejected(self, client: AsyncClient):
        """Роль admin недоступна для самостоятельной регистрации"""
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "username": "root",
                "email": "root@example.com",
                "password": "secret123",
                "first_name": "Root",
                "last_name": "Admin",
                "role": "admin",
            },
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_register_duplicate_conflict(self, client: AsyncClient, test_session):
        """Занятый логин или email дает 409"""
        # Arrange
        await create_test_user(test_session, "anna")

        # Act
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "username": "other",
                "email": "ANNA@example.com",
                "password": "secret123",
                "first_name": "Anna",
                "last_name": "Other",
            },
        )

        # Assert
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "username": "anna",
                "email": "not-an-email",
                "password": "secret123",
                "first_name": "Anna",
                "last_name": "Petrova",
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_login_by_username_and_email(self, client: AsyncClient, test_session):
        """Вход возможен по логину и по email"""
        # Arrange
        await create_test_user(test_session, "boris", password="secret123")

        # Act
        by_name = await client.post(
            "/api/v1/auth/login",
            json={"identifier": "boris", "password": "secret123"},
        )
        by_email = await client.post(
            "/api/v1/auth/login",
            json={"identifier": "Boris@Example.com", "password": "secret123"},
        )

        # Assert
        assert by_name.status_code == 200
        assert by_email.status_code == 200
        assert by_name.json()["access_token"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_session):
        await create_test_user(test_session, "boris", password="secret123")

        response = await client.post(
            "/api/v1/auth/login",
            json={"identifier": "boris", "password": "wrong"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_inactive_user(self, client: AsyncClient, test_session):
        """Неактивный пользователь получает 403"""
        await create_test_user(
            test_session, "boris", password="secret123", is_active=False
        )

        response = await client.post(
            "/api/v1/auth/login",
            json={"identifier": "boris", "password": "secret123"},
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_refresh(self, client: AsyncClient, test_session):
        """Refresh токен обменивается на новую пару"""
        # Arrange
        await create_test_user(test_session, "boris", password="secret123")
        login = await client.post(
            "/api/v1/auth/login",
            json={"identifier": "boris", "password": "secret123"},
        )
        refresh = login.json()["refresh_token"]

        # Act
        response = await client.post(
            "/api/v1/auth/refresh", headers={"Authorization": f"Bearer {refresh}"}
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["access_token"]

    @pytest.mark.asyncio
    async def test_refresh_unknown_token(self, client: AsyncClient, test_session):
        """Refresh токен, не выданный при входе, отклоняется"""
        user = await create_test_user(test_session, "boris")
        refresh = create_refresh_token({"sub": user.id, "role": user.role})

        response = await client.post(
            "/api/v1/auth/refresh", headers={"Authorization": f"Bearer {refresh}"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_rejects_access_token(self, client: AsyncClient, test_session):
        user = await create_test_user(test_session, "boris")

        response = await client.post(
            "/api/v1/auth/refresh", headers=auth_headers(user)
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, test_session):
        user = await create_test_user(test_session, "teacher", role=Role.TEACHER)

        response = await client.get("/api/v1/auth/me", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["id"] == user.id
        assert response.json()["role"] == "teacher"

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
