from datetime import timedelta

import jwt
import pytest

from chatline.domain.exceptions import UnauthorizedError
from chatline.domain.value_objects import UserId
from chatline.infrastructure.identity import JwtIdentityProvider
from jwt_generation import generate_jwt_token

SECRET = "unit-secret"


@pytest.fixture()
def provider():
    return JwtIdentityProvider(SECRET)


@pytest.mark.asyncio
async def test_valid_token(provider):
    token = generate_jwt_token(7, secret=SECRET)
    assert await provider.verify_credentials(token) == UserId(7)


@pytest.mark.asyncio
async def test_string_id_claim_is_accepted(provider):
    token = jwt.encode({"id": "7", "exp": 9999999999}, SECRET, algorithm="HS256")
    assert await provider.verify_credentials(token) == UserId(7)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "token",
    [
        "",
        "not-a-jwt",
        generate_jwt_token(7, secret="other-secret"),
        generate_jwt_token(7, secret=SECRET, expires_in=timedelta(seconds=-10)),
        jwt.encode({"id": 7}, SECRET, algorithm="HS256"),
        jwt.encode({"email": "a@b.c", "exp": 9999999999}, SECRET, algorithm="HS256"),
        jwt.encode({"id": "abc", "exp": 9999999999}, SECRET, algorithm="HS256"),
        jwt.encode({"id": -4, "exp": 9999999999}, SECRET, algorithm="HS256"),
    ],
)
async def test_rejected_tokens(provider, token):
    with pytest.raises(UnauthorizedError):
        await provider.verify_credentials(token)


def test_secret_is_required():
    with pytest.raises(ValueError):
        JwtIdentityProvider("")
