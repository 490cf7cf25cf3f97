import jwt
import pytest

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError, DependencyUnavailableError
from src.service.play_arena.driven_adapter.state.key_str_generator import (
    make_token_blacklist_key,
)
from src.service.play_arena.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from test.service.play_arena.fakes import FakeRedis


def _token(payload: dict, secret: str | None = None) -> str:
    return jwt.encode(
        payload,
        secret or settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )


@pytest.fixture
def jwt_auth(redis: FakeRedis) -> JwtAuth:
    return JwtAuth(redis_client=redis)  # type: ignore[arg-type]


@pytest.mark.unit
class TestCallerIdentity:
    @pytest.mark.asyncio
    async def test_identity_is_the_attuid_claim(self, jwt_auth: JwtAuth) -> None:
        assert await jwt_auth.get_caller_identity(_token({'attuid': 'aa111a'})) == 'aa111a'

    @pytest.mark.asyncio
    async def test_missing_token_is_rejected(self, jwt_auth: JwtAuth) -> None:
        with pytest.raises(AuthenticationError, match='missing'):
            await jwt_auth.get_caller_identity(None)

    @pytest.mark.asyncio
    async def test_wrong_signature_is_rejected(self, jwt_auth: JwtAuth) -> None:
        with pytest.raises(AuthenticationError):
            await jwt_auth.get_caller_identity(_token({'attuid': 'aa111a'}, secret='other'))

    @pytest.mark.asyncio
    async def test_token_without_attuid_is_rejected(self, jwt_auth: JwtAuth) -> None:
        with pytest.raises(AuthenticationError):
            await jwt_auth.get_caller_identity(_token({'sub': 'aa111a'}))

    @pytest.mark.asyncio
    async def test_revoked_token_is_rejected(self, redis: FakeRedis, jwt_auth: JwtAuth) -> None:
        token = _token({'attuid': 'aa111a'})
        redis.store[make_token_blacklist_key(prefix='blacklist:', token=token)] = '1'

        with pytest.raises(AuthenticationError, match='revoked'):
            await jwt_auth.get_caller_identity(token)

    @pytest.mark.asyncio
    async def test_unreachable_revocation_list_fails_closed(
        self, redis: FakeRedis, jwt_auth: JwtAuth
    ) -> None:
        redis.down = True

        with pytest.raises(DependencyUnavailableError):
            await jwt_auth.get_caller_identity(_token({'attuid': 'aa111a'}))
