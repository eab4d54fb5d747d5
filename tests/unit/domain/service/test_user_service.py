"""Unit tests for UserService."""

import asyncio
from collections.abc import Sequence
from datetime import datetime, timezone

import pytest

from splitbill.domain.error import (
    INVALID_CREDENTIALS,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from splitbill.domain.model import User
from splitbill.domain.service import (
    PasswordService,
    RegistrationForm,
    RegistrationValidator,
    UserService,
)
from splitbill.domain.value import UserId
from splitbill.persistence.repository import JsonFileUserRepository
from splitbill.persistence.repository.inmemory import InMemoryUserRepository
from tests.conftest import fast_auth_settings, make_user

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FailingUserRepository(InMemoryUserRepository):
    """Repository whose writes always fail."""

    async def save_all(self, users: Sequence[User]) -> None:
        raise StoreError("disk full")


def _service(user_repo: InMemoryUserRepository) -> UserService:
    return UserService(
        user_repo,
        PasswordService(fast_auth_settings()),
        RegistrationValidator(password_min_length=8),
        clock=lambda: NOW,
    )


def _ann_form(**overrides) -> RegistrationForm:
    values = {
        "display_name": "Ann",
        "email": "ann@x.com",
        "password": "longenough1",
        "confirm": "longenough1",
        "agree_to_terms": True,
    }
    values.update(overrides)
    return RegistrationForm(**values)


class TestRegister:
    """Tests for UserService.register()."""

    @pytest.mark.asyncio
    async def test_register_stores_hashed_password(self):
        """Should store a record with a verifiable hash and no external id."""
        user_repo = InMemoryUserRepository()
        service = _service(user_repo)

        user = await service.register(_ann_form())

        stored = await user_repo.load_all()
        assert stored == [user]
        assert user.password_hash != "longenough1"
        assert await service.password_service.verify_password(
            "longenough1", user.password_hash
        )
        assert user.external_id is None
        assert user.created_at == NOW
        assert user.last_login_at is None

    @pytest.mark.asyncio
    async def test_register_duplicate_email_any_case_is_conflict(self):
        """Should report a conflict and leave the store unchanged."""
        existing = make_user(email="ann@x.com")
        user_repo = InMemoryUserRepository([existing])
        service = _service(user_repo)

        for email in ("ann@x.com", "ANN@X.COM", "Ann@x.Com"):
            with pytest.raises(ConflictError) as exc_info:
                await service.register(_ann_form(email=email))
            assert exc_info.value.field == "email"

        assert await user_repo.load_all() == [existing]

    @pytest.mark.asyncio
    async def test_concurrent_registrations_for_one_email(self, tmp_path):
        """Two sign-ups racing for one email: one account, one conflict."""
        user_repo = JsonFileUserRepository(tmp_path / "users.json")
        service = UserService(
            user_repo,
            PasswordService(fast_auth_settings()),
            RegistrationValidator(password_min_length=8),
        )

        results = await asyncio.gather(
            service.register(_ann_form()),
            service.register(_ann_form(email="ANN@x.com")),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, User)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(created) == 1
        assert len(conflicts) == 1
        assert [u.id for u in await user_repo.load_all()] == [created[0].id]

    @pytest.mark.asyncio
    async def test_register_invalid_form_is_validation_error(self):
        """Field rule failures surface together as a ValidationError."""
        user_repo = InMemoryUserRepository()
        service = _service(user_repo)

        with pytest.raises(ValidationError) as exc_info:
            await service.register(_ann_form(password="short", confirm="short"))

        assert [e.field for e in exc_info.value.errors] == ["password"]
        assert await user_repo.load_all() == []

    @pytest.mark.asyncio
    async def test_conflict_mixed_with_other_errors_is_validation_error(self):
        """A taken email alongside other problems is reported with them."""
        user_repo = InMemoryUserRepository([make_user(email="ann@x.com")])
        service = _service(user_repo)

        with pytest.raises(ValidationError) as exc_info:
            await service.register(_ann_form(agree_to_terms=False))

        codes = {(e.field, e.code) for e in exc_info.value.errors}
        assert codes == {("agreeToTerms", "terms"), ("email", "taken")}

    @pytest.mark.asyncio
    async def test_failed_write_creates_nothing(self):
        """Should propagate StoreError without a partial record."""
        user_repo = FailingUserRepository()
        service = _service(user_repo)

        with pytest.raises(StoreError):
            await service.register(_ann_form())

        assert await user_repo.load_all() == []


class TestAuthenticate:
    """Tests for UserService.authenticate()."""

    @pytest.mark.asyncio
    async def test_sign_in_by_email_records_login(self):
        """Should accept correct credentials and stamp last_login_at."""
        user_repo = InMemoryUserRepository()
        service = _service(user_repo)
        registered = await service.register(_ann_form())

        user = await service.authenticate("ANN@x.com", "longenough1")

        assert user.id == registered.id
        assert user.last_login_at == NOW
        assert (await user_repo.load_all())[0].last_login_at == NOW

    @pytest.mark.asyncio
    async def test_sign_in_by_username(self):
        """Should accept a username as identifier."""
        service = _service(InMemoryUserRepository())
        registered = await service.register(_ann_form(username="ann_1"))

        user = await service.authenticate("Ann_1", "longenough1")

        assert user.id == registered.id

    @pytest.mark.asyncio
    async def test_all_credential_failures_look_identical(self):
        """Unknown identifier, wrong password and password-less account match."""
        delegated_only = make_user(email="g@x.com", external_id="g1")
        user_repo = InMemoryUserRepository([delegated_only])
        service = _service(user_repo)
        await service.register(_ann_form())

        messages = []
        for identifier, password in (
            ("ann@x.com", "wrongpassword"),
            ("nobody@x.com", "longenough1"),
            ("g@x.com", "anything123"),
        ):
            with pytest.raises(AuthenticationError) as exc_info:
                await service.authenticate(identifier, password)
            messages.append(str(exc_info.value))

        assert messages == [INVALID_CREDENTIALS] * 3

    @pytest.mark.asyncio
    async def test_repeated_failures_do_not_touch_the_store(self):
        """Five wrong passwords: five identical failures, no lockout, no writes."""
        user_repo = InMemoryUserRepository()
        service = _service(user_repo)
        await service.register(_ann_form())
        before = await user_repo.load_all()

        for _ in range(5):
            with pytest.raises(AuthenticationError) as exc_info:
                await service.authenticate("ann@x.com", "wrongpassword")
            assert str(exc_info.value) == INVALID_CREDENTIALS

        assert await user_repo.load_all() == before
        # Still no lockout
        assert await service.authenticate("ann@x.com", "longenough1")

    @pytest.mark.asyncio
    async def test_missing_fields_are_validation_errors(self):
        """Blank inputs are reported as field errors, not credential failures."""
        service = _service(InMemoryUserRepository())

        with pytest.raises(ValidationError):
            await service.authenticate("", "")


class TestLookup:
    """Tests for UserService lookups."""

    @pytest.mark.asyncio
    async def test_get_by_id_missing_user(self):
        """Should raise NotFoundError for an unknown id."""
        service = _service(InMemoryUserRepository())

        with pytest.raises(NotFoundError):
            await service.get_by_id(UserId("missing"))

    @pytest.mark.asyncio
    async def test_list_users_keeps_store_order(self):
        """Should return users in store order."""
        first = make_user(email="a@x.com")
        second = make_user(email="b@x.com")
        service = _service(InMemoryUserRepository([first, second]))

        assert await service.list_users() == [first, second]
