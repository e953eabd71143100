"""Tests for the caller identification dependency."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from demonlist.dependencies.auth import get_caller, require_helper, require_moderator, Caller
from demonlist.errors import MissingPermissions
from demonlist.services.records import Privilege

MODERATOR_KEY = "moderator_key_" + "x" * 18
HELPER_KEY = "helper_key_" + "y" * 21


class TestGetCaller:
    """Tests for get_caller dependency."""

    @pytest.fixture
    def mock_request(self) -> MagicMock:
        request = MagicMock()
        request.client.host = "203.0.113.7"
        request.url.path = "/api/v1/records/"
        return request

    @pytest.fixture
    def mock_settings(self):
        with patch("demonlist.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = MODERATOR_KEY
            mock_settings.helper_api_key = HELPER_KEY
            yield mock_settings

    @pytest.mark.asyncio
    async def test_no_key_is_public(self, mock_request: MagicMock, mock_settings) -> None:
        caller = await get_caller(mock_request, None)

        assert caller == Caller(Privilege.PUBLIC, "203.0.113.7")

    @pytest.mark.asyncio
    async def test_moderator_key(self, mock_request: MagicMock, mock_settings) -> None:
        caller = await get_caller(mock_request, MODERATOR_KEY)

        assert caller.privilege == Privilege.MODERATOR
        assert caller.is_helper and caller.is_moderator

    @pytest.mark.asyncio
    async def test_helper_key(self, mock_request: MagicMock, mock_settings) -> None:
        caller = await get_caller(mock_request, HELPER_KEY)

        assert caller.privilege == Privilege.HELPER
        assert caller.is_helper and not caller.is_moderator

    @pytest.mark.asyncio
    async def test_unknown_key_rejected(self, mock_request: MagicMock, mock_settings) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_caller(mock_request, "wrong_key_" + "z" * 22)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid API key"
        assert exc_info.value.headers == {"WWW-Authenticate": "ApiKey"}

    @pytest.mark.asyncio
    async def test_helper_key_unset_does_not_match_empty(self, mock_request: MagicMock, mock_settings) -> None:
        mock_settings.helper_api_key = None

        with pytest.raises(HTTPException):
            await get_caller(mock_request, HELPER_KEY)

    @pytest.mark.asyncio
    async def test_no_keys_configured_treats_key_as_public(self, mock_request: MagicMock) -> None:
        with patch("demonlist.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = None
            mock_settings.helper_api_key = None

            caller = await get_caller(mock_request, "anything")

        assert caller.privilege == Privilege.PUBLIC

    @pytest.mark.asyncio
    async def test_missing_client_info(self, mock_settings) -> None:
        request = MagicMock()
        request.client = None

        caller = await get_caller(request, None)

        assert caller.ip == "unknown"


class TestRequirePrivilege:
    @pytest.mark.asyncio
    async def test_require_helper(self) -> None:
        helper = Caller(Privilege.HELPER, "1.2.3.4")

        assert await require_helper(helper) is helper
        with pytest.raises(MissingPermissions):
            await require_helper(Caller(Privilege.PUBLIC, "1.2.3.4"))

    @pytest.mark.asyncio
    async def test_require_moderator(self) -> None:
        with pytest.raises(MissingPermissions):
            await require_moderator(Caller(Privilege.HELPER, "1.2.3.4"))
