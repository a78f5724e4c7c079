import httpx
import pytest
from joserfc import jwt
from joserfc.jwk import RSAKey

from floortrack.core.errors import IdentityProviderError, UnauthenticatedError
from floortrack.core.token_validator import FirebaseIdTokenStrategy

PROJECT_ID = "floortrack-test"
ISSUER = f"https://securetoken.google.com/{PROJECT_ID}"
JWKS_URL = "https://keys.test/securetoken"
NOW = 1_700_000_000


class FakeClock:
    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def signing_key():
    return RSAKey.generate_key(2048, parameters={"kid": "k1"})


@pytest.fixture
def jwks_requests():
    return []


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def strategy(signing_key, jwks_requests, clock):
    def handler(request: httpx.Request) -> httpx.Response:
        jwks_requests.append(request)
        return httpx.Response(
            200,
            json={"keys": [signing_key.as_dict(private=False)]},
            headers={"Cache-Control": "public, max-age=100, must-revalidate"},
        )

    return FirebaseIdTokenStrategy(
        project_id=PROJECT_ID,
        jwks_url=JWKS_URL,
        transport=httpx.MockTransport(handler),
        clock=clock,
    )


def make_token(key, **overrides) -> str:
    claims = {
        "iss": ISSUER,
        "aud": PROJECT_ID,
        "sub": "firebase-uid-1",
        "email": "someone@example.com",
        "iat": NOW - 60,
        "exp": NOW + 3600,
    }
    claims.update(overrides)
    return jwt.encode({"alg": "RS256", "kid": "k1"}, claims, key)


@pytest.mark.asyncio
async def test_valid_token_yields_subject(strategy, signing_key):
    result = await strategy.validate(make_token(signing_key))

    assert result.subject == "firebase-uid-1"
    assert result.claims["email"] == "someone@example.com"
    assert result.issuer == ISSUER


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "another-project"},
        {"iss": "https://securetoken.google.com/another-project"},
        {"exp": NOW - 10},
        {"iat": NOW + 600},
        {"sub": ""},
    ],
)
async def test_rejects_bad_claims(strategy, signing_key, overrides):
    with pytest.raises(UnauthenticatedError):
        await strategy.validate(make_token(signing_key, **overrides))


@pytest.mark.asyncio
async def test_rejects_token_signed_by_unknown_key(strategy):
    impostor = RSAKey.generate_key(2048, parameters={"kid": "k1"})

    with pytest.raises(UnauthenticatedError):
        await strategy.validate(make_token(impostor))


@pytest.mark.asyncio
async def test_rejects_garbage(strategy):
    with pytest.raises(UnauthenticatedError):
        await strategy.validate("not-a-jwt")


@pytest.mark.asyncio
async def test_signing_keys_cached_for_max_age(strategy, signing_key, jwks_requests, clock):
    token = make_token(signing_key)

    await strategy.validate(token)
    await strategy.validate(token)
    assert len(jwks_requests) == 1

    clock.now += 101
    await strategy.validate(token)
    assert len(jwks_requests) == 2


@pytest.mark.asyncio
async def test_key_endpoint_failure_is_provider_error(signing_key):
    failing = FirebaseIdTokenStrategy(
        project_id=PROJECT_ID,
        jwks_url=JWKS_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        clock=FakeClock(),
    )

    with pytest.raises(IdentityProviderError):
        await failing.validate(make_token(signing_key))


@pytest.mark.asyncio
async def test_unconfigured_project_rejects_everything(signing_key):
    unconfigured = FirebaseIdTokenStrategy(project_id="", jwks_url=JWKS_URL, clock=FakeClock())

    with pytest.raises(UnauthenticatedError):
        await unconfigured.validate(make_token(signing_key))
