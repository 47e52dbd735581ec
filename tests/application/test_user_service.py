"""
Test suite for UserService.
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.application.services.user_service import UserService
from tuning_backend.boundary.db.models.user_model import UserRole
from tuning_backend.core.exceptions import ValidationError


@pytest.fixture
def user_service(test_async_db: AsyncSession) -> UserService:
    return UserService(db=test_async_db)


class TestGetActor:
    @pytest.mark.asyncio
    async def test_get_actor_should_load_role_and_display_name(self, user_service, requester) -> None:
        actor = await user_service.get_actor(requester.id)

        assert actor.id == requester.id
        assert actor.role is UserRole.REQUESTER
        assert actor.display_name == "Alice"

    @pytest.mark.asyncio
    async def test_get_actor_should_fall_back_to_email(self, user_service, make_user) -> None:
        user = await make_user(email="nameless@example.com")

        actor = await user_service.get_actor(user.id)

        assert actor.display_name == "nameless@example.com"

    @pytest.mark.asyncio
    async def test_unknown_or_missing_id_should_be_unauthenticated(self, user_service) -> None:
        assert await user_service.get_actor(uuid.uuid4()) is None
        assert await user_service.get_actor(None) is None


class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_register_should_normalize_email(self, user_service) -> None:
        user = await user_service.register_user("  Carol@Example.com ")

        assert user.email == "carol@example.com"
        assert user.role is UserRole.REQUESTER

    @pytest.mark.asyncio
    async def test_register_should_reject_duplicate_email(self, user_service, requester) -> None:
        with pytest.raises(ValidationError):
            await user_service.register_user("alice@example.com")

    @pytest.mark.asyncio
    async def test_register_should_require_email(self, user_service) -> None:
        with pytest.raises(ValidationError):
            await user_service.register_user("   ")


class TestEnsureDefaultOperator:
    @pytest.mark.asyncio
    async def test_should_create_operator_when_missing(self, user_service) -> None:
        operator = await user_service.ensure_default_operator("ops@example.com")

        assert operator.role is UserRole.OPERATOR
        assert operator.email == "ops@example.com"

    @pytest.mark.asyncio
    async def test_should_keep_existing_operator(self, user_service, operator) -> None:
        existing = await user_service.ensure_default_operator("other@example.com")

        assert existing.id == operator.id

    @pytest.mark.asyncio
    async def test_should_not_promote_requester_holding_the_email(self, user_service, requester) -> None:
        result = await user_service.ensure_default_operator("Alice@example.com")

        assert result is None
        reloaded = await user_service.get_actor(requester.id)
        assert reloaded.role is UserRole.REQUESTER
