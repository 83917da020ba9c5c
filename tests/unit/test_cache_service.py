# -*- coding: utf-8 -*-
"""
Unit тесты кэша прав доступа на подмененном Redis
"""

import pytest
from httpx import AsyncClient

from src.config.redis_settings import redis_settings
from src.domain.enums import Role
from src.service.cache_service import cache_service
from tests.fixtures import (auth_headers, create_test_group,
                            create_test_module, create_test_user)


class InMemoryRedis:
    """Асинхронный Redis в памяти с набором команд, которые использует кэш"""

    def __init__(self):
        self.store = {}
        self.closed = False

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value):
        self.store[key] = value

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self):
        self.closed = True


class BrokenRedis(InMemoryRedis):
    """Redis, каждая команда которого падает с ошибкой соединения"""

    def __init__(self):
        super().__init__()
        self.calls = 0

    async def get(self, key):
        self.calls += 1
        raise ConnectionError("Connection refused")

    async def setex(self, key, ttl, value):
        self.calls += 1
        raise ConnectionError("Connection refused")

    async def delete(self, key):
        self.calls += 1
        raise ConnectionError("Connection refused")


def _use_redis(monkeypatch, client):
    monkeypatch.setattr(cache_service, "enabled", True)
    monkeypatch.setattr(cache_service, "_redis", client)
    monkeypatch.setattr(cache_service, "_retry_after", 0.0)


def _scope_key(user_id):
    return cache_service.build_key(redis_settings.cache_prefix_access, "scope", user_id)


@pytest.fixture
def fake_redis(monkeypatch):
    redis_client = InMemoryRedis()
    _use_redis(monkeypatch, redis_client)
    return redis_client


class TestCacheService:
    """Unit тесты CacheService"""

    @pytest.mark.asyncio
    async def test_get_or_set_computes_once(self, fake_redis):
        calls = []

        async def factory():
            calls.append(1)
            return {"group_ids": [1, 2]}

        first = await cache_service.get_or_set("access:test", factory, ttl=60)
        second = await cache_service.get_or_set("access:test", factory, ttl=60)

        assert first == second == {"group_ids": [1, 2]}
        assert len(calls) == 1
        assert "access:test" in fake_redis.store

    @pytest.mark.asyncio
    async def test_redis_error_falls_back_to_factory(self, monkeypatch):
        """При сбое Redis значение вычисляется без кэша"""
        broken = BrokenRedis()
        _use_redis(monkeypatch, broken)

        async def factory():
            return {"group_ids": [3]}

        first = await cache_service.get_or_set("access:test", factory, ttl=60)
        second = await cache_service.get_or_set("access:test", factory, ttl=60)

        assert first == second == {"group_ids": [3]}
        assert broken.closed
        assert cache_service._redis is None
        # После ошибки сервис ждет паузу и не обращается к Redis
        assert broken.calls == 1
        assert not cache_service.available

    @pytest.mark.asyncio
    async def test_reconnects_when_pause_expires(self, monkeypatch):
        _use_redis(monkeypatch, BrokenRedis())
        assert await cache_service.delete("access:test") is False

        healthy = InMemoryRedis()
        healthy.store["access:test"] = "1"
        _use_redis(monkeypatch, healthy)

        assert await cache_service.delete("access:test") is True

    @pytest.mark.asyncio
    async def test_disabled_cache_skips_redis(self, monkeypatch):
        broken = BrokenRedis()
        _use_redis(monkeypatch, broken)
        monkeypatch.setattr(cache_service, "enabled", False)

        assert await cache_service.get("access:test") is None
        assert await cache_service.set("access:test", 1) is False
        assert broken.calls == 0


class TestAccessInvalidation:
    """Изменения зачислений и групп сбрасывают кэш области видимости"""

    @pytest.mark.asyncio
    async def test_enroll_drops_cached_scope(
        self, client: AsyncClient, test_session, fake_redis
    ):
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher)
        hidden = await client.get(
            f"/api/v1/modules/{module.id}", headers=auth_headers(student)
        )
        assert _scope_key(student.id) in fake_redis.store

        # Act
        enrolled = await client.post(
            f"/api/v1/modules/{module.id}/students",
            json={"student_id": student.id},
            headers=auth_headers(teacher),
        )
        dropped = _scope_key(student.id) not in fake_redis.store
        visible = await client.get(
            f"/api/v1/modules/{module.id}", headers=auth_headers(student)
        )

        # Assert
        assert hidden.status_code == 403
        assert enrolled.status_code == 200
        assert dropped
        assert visible.status_code == 200

    @pytest.mark.asyncio
    async def test_membership_change_drops_cached_scope(
        self, client: AsyncClient, test_session, fake_redis
    ):
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        module = await create_test_module(test_session, teacher, students=[student])
        group = await create_test_group(test_session, module)
        await client.get("/api/v1/groups/", headers=auth_headers(student))
        assert _scope_key(student.id) in fake_redis.store

        # Act
        added = await client.post(
            f"/api/v1/groups/{group.id}/membership",
            json={"user_id": student.id, "action": "add"},
            headers=auth_headers(teacher),
        )
        dropped_on_add = _scope_key(student.id) not in fake_redis.store
        listed = await client.get("/api/v1/groups/", headers=auth_headers(student))
        removed = await client.post(
            f"/api/v1/groups/{group.id}/membership",
            json={"user_id": student.id, "action": "remove"},
            headers=auth_headers(teacher),
        )
        dropped_on_remove = _scope_key(student.id) not in fake_redis.store

        # Assert
        assert added.status_code == 200
        assert dropped_on_add
        assert [g["id"] for g in listed.json()] == [group.id]
        assert removed.status_code == 200
        assert dropped_on_remove

    @pytest.mark.asyncio
    async def test_module_delete_drops_cached_scopes(
        self, client: AsyncClient, test_session, fake_redis
    ):
        # Arrange
        teacher = await create_test_user(test_session, "teacher", role=Role.TEACHER)
        student = await create_test_user(test_session, "student")
        member = await create_test_user(test_session, "member")
        module = await create_test_module(
            test_session, teacher, students=[student, member]
        )
        await create_test_group(test_session, module, members=[member])
        for user in (teacher, student, member):
            await client.get("/api/v1/modules/", headers=auth_headers(user))
        assert all(
            _scope_key(user.id) in fake_redis.store for user in (teacher, student, member)
        )

        # Act
        response = await client.delete(
            f"/api/v1/modules/{module.id}", headers=auth_headers(teacher)
        )

        # Assert
        assert response.status_code == 204
        assert all(
            _scope_key(user.id) not in fake_redis.store
            for user in (teacher, student, member)
        )
