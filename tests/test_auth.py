"""Tests for bearer-token caller resolution and role guards."""

from types import SimpleNamespace

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from src.config import settings
from src.exceptions import ForbiddenException, UnauthorizedException
from src.modules.identity.auth import (
    CallerIdentity,
    get_current_caller,
    require_admin,
    require_customer,
)


def _token(claims: dict, secret: str | None = None) -> HTTPAuthorizationCredentials:
    token = jwt.encode(
        claims, secret or settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _request():
    return SimpleNamespace(state=SimpleNamespace())


class TestGetCurrentCaller:
    @pytest.mark.asyncio
    async def test_customer_token(self):
        request = _request()

        caller = await get_current_caller(
            request, _token({"sub": "cust1", "role": "customer", "email": "c@example.com"})
        )

        assert caller == CallerIdentity(id="cust1", role="customer", email="c@example.com")
        assert caller.is_admin is False
        assert request.state.caller is caller

    @pytest.mark.asyncio
    async def test_user_id_claim_and_role_case(self):
        caller = await get_current_caller(_request(), _token({"userId": 42, "role": "SuperAdmin"}))

        assert caller.id == "42"
        assert caller.role == "superadmin"
        assert caller.is_admin is True

    @pytest.mark.asyncio
    async def test_missing_role_defaults_to_customer(self):
        caller = await get_current_caller(_request(), _token({"sub": "cust1"}))
        assert caller.role == "customer"

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(UnauthorizedException, match="Authentication required"):
            await get_current_caller(_request(), None)

    @pytest.mark.asyncio
    async def test_wrong_signature(self):
        with pytest.raises(UnauthorizedException, match="Invalid or expired token"):
            await get_current_caller(_request(), _token({"sub": "cust1"}, secret="not-the-secret"))

    @pytest.mark.asyncio
    async def test_missing_subject(self):
        with pytest.raises(UnauthorizedException, match="missing required claims"):
            await get_current_caller(_request(), _token({"role": "admin"}))


class TestRoleGuards:
    @pytest.mark.asyncio
    async def test_require_customer(self):
        customer = CallerIdentity(id="cust1")
        assert await require_customer(customer) is customer

        with pytest.raises(ForbiddenException, match="Customer only"):
            await require_customer(CallerIdentity(id="admin1", role="admin"))

    @pytest.mark.asyncio
    async def test_require_admin(self):
        admin = CallerIdentity(id="admin1", role="admin")
        assert await require_admin(admin) is admin

        with pytest.raises(ForbiddenException, match="Admin only"):
            await require_admin(CallerIdentity(id="cust1"))
