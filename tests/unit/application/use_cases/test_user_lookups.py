"""Unit tests for the user lookup use cases."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from tranquilo_auth.application.interfaces.exceptions import StoreUnavailableError
from tranquilo_auth.application.use_cases import (
    CheckUserExistsRequest,
    CheckUserExistsUseCase,
    GetUserRequest,
    GetUserUseCase,
)
from tranquilo_auth.domain.exceptions import ErrorKind


class TestGetUserUseCase:
    """Test profile lookup by id."""

    @pytest.mark.asyncio
    async def test_returns_public_profile(self, directory, stored_user):
        use_case = GetUserUseCase(directory)

        response = await use_case.execute(GetUserRequest(user_id=str(stored_user.id)))

        assert response.success
        assert response.data["id"] == str(stored_user.id)
        assert response.data["email"] == stored_user.email
        assert "password_hash" not in response.data

    @pytest.mark.asyncio
    async def test_unknown_id(self, directory, stored_user):
        response = await GetUserUseCase(directory).execute(GetUserRequest(user_id=str(uuid4())))

        assert response.error_kind is ErrorKind.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, directory):
        response = await GetUserUseCase(directory).execute(GetUserRequest(user_id="not-a-uuid"))

        assert response.error_kind is ErrorKind.USER_NOT_FOUND


class TestCheckUserExistsUseCase:
    """Test existence checks by cpf or email."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("attribute", ["cpf", "email"])
    async def test_existing_identifier(self, directory, stored_user, attribute):
        use_case = CheckUserExistsUseCase(directory)

        response = await use_case.execute(
            CheckUserExistsRequest(identifier=getattr(stored_user, attribute))
        )

        assert response.success
        assert response.exists
        assert response.data == {"isUserAlreadyExists": True}

    @pytest.mark.asyncio
    async def test_unknown_identifier(self, directory, stored_user):
        response = await CheckUserExistsUseCase(directory).execute(
            CheckUserExistsRequest(identifier="000.000.000-00")
        )

        assert response.success
        assert response.data == {"isUserAlreadyExists": False}

    @pytest.mark.asyncio
    async def test_store_failure(self):
        directory = AsyncMock()
        directory.find_by_identifier_or_email.side_effect = StoreUnavailableError("lookup")

        response = await CheckUserExistsUseCase(directory).execute(
            CheckUserExistsRequest(identifier="x")
        )

        assert not response.success
        assert response.error_kind is ErrorKind.STORE_UNAVAILABLE
