"""Unit tests for RegisterUseCase."""

from dishka import AsyncContainer
import pytest

from splitbill.application.usecase.auth import RegisterUseCase
from splitbill.application.usecase.auth.register import RegisterRequest
from splitbill.domain.error import ConflictError, ValidationError
from splitbill.domain.repository import UserRepository
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestRegisterUseCase:
    """Tests for RegisterUseCase."""

    @pytest.mark.asyncio
    async def test_register_returns_sanitized_user(self, unit_env: AsyncContainer):
        """The response never carries the password or its hash."""
        use_case = await unit_env.get(RegisterUseCase)

        response = await use_case.execute(
            RegisterRequest.model_validate(
                {
                    "name": "Ann",
                    "email": "ann@x.com",
                    "password": "longenough1",
                    "confirm": "longenough1",
                    "agreeToTerms": True,
                }
            )
        )

        body = response.model_dump_json(by_alias=True)
        assert response.user.display_name == "Ann"
        assert response.user.has_local_password is True
        assert "longenough1" not in body
        assert "passwordHash" not in body
        assert "$argon2" not in body

    @pytest.mark.asyncio
    async def test_username_client_uses_username_as_name(
        self, unit_env: AsyncContainer
    ):
        """Clients that only collect a username get it as display name."""
        use_case = await unit_env.get(RegisterUseCase)

        response = await use_case.execute(
            RegisterRequest.model_validate(
                {
                    "username": "ann_1",
                    "email": "ann@x.com",
                    "password": "longenough1",
                    "agreeToTerms": True,
                }
            )
        )

        assert response.user.display_name == "ann_1"
        assert response.user.username == "ann_1"

    @pytest.mark.asyncio
    async def test_missing_fields_are_field_errors(self, unit_env: AsyncContainer):
        """An empty form reports each missing field."""
        use_case = await unit_env.get(RegisterUseCase)

        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute(RegisterRequest.model_validate({}))

        fields = {e.field for e in exc_info.value.errors}
        assert fields == {"name", "email", "password", "agreeToTerms"}

    @pytest.mark.asyncio
    async def test_duplicate_email_leaves_store_unchanged(
        self, unit_env: AsyncContainer
    ):
        """Second registration with the same email in another case conflicts."""
        use_case = await unit_env.get(RegisterUseCase)
        user_repo = await unit_env.get(UserRepository)
        form = {
            "name": "Ann",
            "email": "ann@x.com",
            "password": "longenough1",
            "agreeToTerms": True,
        }
        await use_case.execute(RegisterRequest.model_validate(form))
        before = await user_repo.load_all()

        with pytest.raises(ConflictError):
            await use_case.execute(
                RegisterRequest.model_validate({**form, "email": "ANN@X.COM"})
            )

        assert await user_repo.load_all() == before
