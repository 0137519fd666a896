"""Unit tests for TokenService."""

from datetime import datetime

import pytest

from core.exceptions import TokenNotFoundError, TokenPurposeMismatchError
from domain.entities.auth_token import AuthToken
from domain.entities.token import TokenPurpose
from domain.services.token_service import TokenService
from infrastructure.auth.jwt_provider import JWTTokenProvider
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> TokenService:
    return TokenService(lambda: uow, JWTTokenProvider(secret_key="test-secret"))


class TestIssue:
    @pytest.mark.asyncio
    async def test_session_token_is_recorded(self, service: TokenService, uow: FakeUnitOfWork):
        issued = await service.issue(7, TokenPurpose.SESSION)

        record = uow.tokens.add.call_args.args[0]
        assert isinstance(record, AuthToken)
        assert record.jti == issued.jti
        assert record.user_id == 7
        assert record.purpose == "session"
        assert record.expires_at == issued.expires_at
        assert uow.committed

    @pytest.mark.asyncio
    async def test_confirmation_token_is_not_recorded(
        self, service: TokenService, uow: FakeUnitOfWork
    ):
        await service.issue("new@example.com", TokenPurpose.CONFIRM_REGISTRATION)

        uow.tokens.add.assert_not_called()
        assert not uow.committed


class TestVerify:
    @pytest.mark.asyncio
    async def test_active_token_verifies(self, service: TokenService, uow: FakeUnitOfWork):
        issued = await service.issue(7, TokenPurpose.RESET_PASSWORD)
        uow.tokens.get.return_value = uow.tokens.add.call_args.args[0]

        claims = await service.verify(issued.token, TokenPurpose.RESET_PASSWORD)

        assert claims.user_id == 7
        uow.tokens.get.assert_awaited_once_with(issued.jti)

    @pytest.mark.asyncio
    async def test_revoked_token_fails(self, service: TokenService, uow: FakeUnitOfWork):
        issued = await service.issue(7, TokenPurpose.SESSION)
        uow.tokens.get.return_value = None

        with pytest.raises(TokenNotFoundError):
            await service.verify(issued.token, TokenPurpose.SESSION)

    @pytest.mark.asyncio
    async def test_record_of_other_purpose_fails(
        self, service: TokenService, uow: FakeUnitOfWork
    ):
        issued = await service.issue(7, TokenPurpose.SESSION)
        record = uow.tokens.add.call_args.args[0]
        record.purpose = "reset-password"
        uow.tokens.get.return_value = record

        with pytest.raises(TokenNotFoundError):
            await service.verify(issued.token, TokenPurpose.SESSION)

    @pytest.mark.asyncio
    async def test_confirmation_token_skips_lookup(
        self, service: TokenService, uow: FakeUnitOfWork
    ):
        issued = await service.issue("a@example.com", TokenPurpose.CONFIRM_REGISTRATION)

        claims = await service.verify(issued.token, TokenPurpose.CONFIRM_REGISTRATION)

        assert claims.subject == "a@example.com"
        uow.tokens.get.assert_not_called()


class TestVerifyAny:
    @pytest.mark.asyncio
    async def test_picks_the_claimed_purpose(self, service: TokenService, uow: FakeUnitOfWork):
        issued = await service.issue(7, TokenPurpose.RESET_PASSWORD)
        uow.tokens.get.return_value = uow.tokens.add.call_args.args[0]

        claims = await service.verify_any(
            issued.token, (TokenPurpose.SESSION, TokenPurpose.RESET_PASSWORD)
        )

        assert claims.purpose == TokenPurpose.RESET_PASSWORD

    @pytest.mark.asyncio
    async def test_unaccepted_purpose_reports_mismatch(self, service: TokenService):
        issued = await service.issue("a@example.com", TokenPurpose.CONFIRM_REGISTRATION)

        with pytest.raises(TokenPurposeMismatchError):
            await service.verify_any(
                issued.token, (TokenPurpose.SESSION, TokenPurpose.RESET_PASSWORD)
            )


class TestRevokeAndPurge:
    @pytest.mark.asyncio
    async def test_revoke_deletes_record(self, service: TokenService, uow: FakeUnitOfWork):
        issued = await service.issue(7, TokenPurpose.SESSION)
        uow.tokens.get.return_value = uow.tokens.add.call_args.args[0]
        claims = await service.verify(issued.token, TokenPurpose.SESSION)
        uow.tokens.delete.return_value = True

        assert await service.revoke(claims) is True
        uow.tokens.delete.assert_awaited_once_with(issued.jti)

    @pytest.mark.asyncio
    async def test_purge_expired_uses_given_time(
        self, service: TokenService, uow: FakeUnitOfWork
    ):
        now = datetime(2026, 1, 1, 12, 0, 0)
        uow.tokens.delete_expired.return_value = 3

        assert await service.purge_expired(now) == 3
        uow.tokens.delete_expired.assert_awaited_once_with(now)
        assert uow.committed
