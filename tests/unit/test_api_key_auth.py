"""Unit tests for services.api_key_auth — validator and permission gate."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from errors import StorageError
from schemas.models.api_key import Permission
from services.api_key_auth import ApiKeyAuthenticator, required_permission_for_method
from services.api_key_service import ApiKeyService

OWNER = "11111111-1111-4111-8111-111111111111"


async def _issue(service: ApiKeyService, permissions=("read",)):
    return await service.issue(OWNER, "test key", list(permissions))


# ── required_permission_for_method ────────────────────────────────────────────


@pytest.mark.parametrize(
    "method, expected",
    [
        ("GET", Permission.READ),
        ("get", Permission.READ),
        ("HEAD", Permission.READ),
        ("POST", Permission.WRITE),
        ("PUT", Permission.WRITE),
        ("PATCH", Permission.WRITE),
        ("DELETE", Permission.DELETE),
        ("TRACE", Permission.READ),
    ],
    ids=["get", "get_lower", "head", "post", "put", "patch", "delete", "unknown"],
)
def test_required_permission_for_method(method, expected):
    assert required_permission_for_method(method) is expected


# ── validate ──────────────────────────────────────────────────────────────────


class TestValidate:
    async def test_issued_pair_validates(self, service, authenticator):
        issued = await _issue(service)
        assert await authenticator.validate(issued.consumer_key, issued.consumer_secret) is True

    async def test_wrong_secret_rejected(self, service, authenticator, repo):
        issued = await _issue(service)
        wrong = "cs_" + "0" * 32
        assert await authenticator.validate(issued.consumer_key, wrong) is False
        assert repo.touches == []

    async def test_unknown_key_rejected(self, authenticator, repo):
        assert await authenticator.validate("ck_" + "f" * 32, "cs_" + "f" * 32) is False
        assert repo.touches == []

    @pytest.mark.parametrize("key, secret", [("", "cs_x"), ("ck_x", ""), (None, None)])
    async def test_empty_values_rejected(self, authenticator, key, secret):
        assert await authenticator.validate(key, secret) is False

    async def test_success_touches_last_used(self, service, repo):
        issued = await _issue(service)
        fixed = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        auth = ApiKeyAuthenticator(repo, clock=lambda: fixed)
        assert await auth.validate(issued.consumer_key, issued.consumer_secret) is True
        listed = await service.list_keys(OWNER)
        assert listed[0].last_used == fixed

    async def test_last_used_never_moves_backwards(self, service, repo):
        issued = await _issue(service)
        later = datetime(2025, 6, 2, tzinfo=timezone.utc)
        earlier = later - timedelta(hours=1)
        await ApiKeyAuthenticator(repo, clock=lambda: later).validate(
            issued.consumer_key, issued.consumer_secret
        )
        await ApiKeyAuthenticator(repo, clock=lambda: earlier).validate(
            issued.consumer_key, issued.consumer_secret
        )
        listed = await service.list_keys(OWNER)
        assert listed[0].last_used == later

    async def test_revoked_key_rejected_then_reactivated(self, service, authenticator):
        issued = await _issue(service)
        await service.revoke(issued.id, OWNER)
        assert await authenticator.validate(issued.consumer_key, issued.consumer_secret) is False
        await service.activate(issued.id, OWNER)
        assert await authenticator.validate(issued.consumer_key, issued.consumer_secret) is True

    async def test_storage_error_propagates(self, service, authenticator, repo):
        issued = await _issue(service)
        repo.fail = True
        with pytest.raises(StorageError):
            await authenticator.validate(issued.consumer_key, issued.consumer_secret)


# ── check_permission ──────────────────────────────────────────────────────────


class TestCheckPermission:
    async def test_granted_and_missing(self, service, authenticator):
        issued = await _issue(service, ["read"])
        assert await authenticator.check_permission(issued.consumer_key, "read") is True
        assert await authenticator.check_permission(issued.consumer_key, Permission.WRITE) is False

    async def test_revoked_key_fails_every_permission(self, service, authenticator):
        issued = await _issue(service, ["read", "write", "delete"])
        await service.revoke(issued.id, OWNER)
        for permission in Permission:
            assert await authenticator.check_permission(issued.consumer_key, permission) is False

    async def test_empty_permission_set_grants_nothing(self, service, authenticator):
        issued = await _issue(service, [])
        for permission in Permission:
            assert await authenticator.check_permission(issued.consumer_key, permission) is False

    async def test_unknown_key(self, authenticator):
        assert await authenticator.check_permission("ck_" + "0" * 32, "read") is False

    async def test_unknown_permission_tag(self, service, authenticator):
        issued = await _issue(service, ["read", "write", "delete"])
        assert await authenticator.check_permission(issued.consumer_key, "admin") is False

    async def test_storage_error_propagates(self, authenticator, repo):
        repo.fail = True
        with pytest.raises(StorageError):
            await authenticator.check_permission("ck_" + "0" * 32, "read")


async def test_end_to_end_permission_update(service, authenticator):
    issued = await _issue(service, ["read"])
    assert await authenticator.validate(issued.consumer_key, issued.consumer_secret) is True
    assert await authenticator.check_permission(issued.consumer_key, "write") is False
    assert await authenticator.check_permission(issued.consumer_key, "read") is True

    await service.update_permissions(issued.id, OWNER, ["read", "write"])

    assert await authenticator.check_permission(issued.consumer_key, "write") is True


async def test_stored_legacy_permission_tag_is_ignored(service, authenticator, repo):
    issued = await _issue(service, ["read"])
    for doc in repo.docs.values():
        doc["permissions"] = ["read", "admin"]

    assert await authenticator.validate(issued.consumer_key, issued.consumer_secret) is True
    assert await authenticator.check_permission(issued.consumer_key, "read") is True
    assert await authenticator.check_permission(issued.consumer_key, "admin") is False
    (listed,) = await service.list_keys(OWNER)
    assert listed.permissions == ["read"]
