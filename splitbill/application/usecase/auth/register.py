"""Register use case."""

from typing import Optional

import logfire
from pydantic import AliasChoices, Field

from splitbill.application.usecase.base import BaseUseCase, CamelModel
from splitbill.application.usecase.view import UserView
from splitbill.domain.service import RegistrationForm, UserService


class RegisterRequest(CamelModel):
    """Sign-up form.

    Accepts the field names used by both web clients: ``name`` or
    ``displayName`` for the display name, and an optional ``username``.
    Missing fields are reported by the field rules, not by parsing.
    """

    display_name: str = Field(
        "", validation_alias=AliasChoices("name", "displayName", "display_name")
    )
    email: str = ""
    password: str = ""
    confirm: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("confirm", "confirmPassword", "confirm_password"),
    )
    agree_to_terms: bool = Field(
        False, validation_alias=AliasChoices("agreeToTerms", "agree_to_terms")
    )
    username: Optional[str] = None


class RegisterResponse(CamelModel):
    """Register response."""

    message: str
    user: UserView


class RegisterUseCase(BaseUseCase):
    """Use case for creating a local account."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize register use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: RegisterRequest) -> RegisterResponse:
        """Validate the form and store a new account.

        Clients that only collect a username use it as the display name.

        Raises:
            ValidationError: If any field rule is violated
            ConflictError: If the email or username is taken
            StoreError: If the users file could not be written
        """
        form = RegistrationForm(
            display_name=request.display_name or request.username or "",
            email=request.email,
            password=request.password,
            confirm=request.confirm,
            agree_to_terms=request.agree_to_terms,
            username=request.username,
        )
        user = await self.user_service.register(form)
        logfire.info("Registration completed", user_id=user.id)
        return RegisterResponse(
            message="User created successfully", user=UserView.from_user(user)
        )
