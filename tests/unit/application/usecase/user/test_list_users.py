"""Unit tests for ListUsersUseCase."""

from dishka import AsyncContainer
import pytest

from splitbill.application.usecase.user import ListUsersUseCase
from splitbill.domain.repository import UserRepository
from tests.conftest import make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestListUsersUseCase:
    """Tests for ListUsersUseCase."""

    @pytest.mark.asyncio
    async def test_lists_users_without_secrets(self, unit_env: AsyncContainer):
        """Every listed user is sanitized."""
        users = [
            make_user(email="a@x.com", password_hash="$argon2id$secret-hash"),
            make_user(email="b@x.com", external_id="g1"),
        ]
        await (await unit_env.get(UserRepository)).save_all(users)
        use_case = await unit_env.get(ListUsersUseCase)

        response = await use_case.execute()

        assert [u.email for u in response.users] == ["a@x.com", "b@x.com"]
        body = response.model_dump_json(by_alias=True)
        assert "secret-hash" not in body
        assert "passwordHash" not in body
        assert [u.has_local_password for u in response.users] == [True, False]
