"""Token codec and hashing helpers"""
import jwt
import pytest

from utils.security import (
    ACCESS,
    REFRESH,
    InvalidToken,
    TokenCodec,
    TokenExpired,
    generate_image,
    generate_string,
    hash_password,
    verify_password,
)

ACCESS_KEY = "access-key-for-tests-0123456789abcdef"
REFRESH_KEY = "refresh-key-for-tests-0123456789abcdef"


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(ACCESS_KEY, REFRESH_KEY)


def test_password_hash_verifies_only_the_right_password():
    hashed = hash_password("pw1")
    assert hashed != "pw1"
    assert verify_password("pw1", hashed)
    assert not verify_password("pw2", hashed)


def test_verify_password_rejects_garbage_hash():
    assert verify_password("pw1", "not-a-hash") is False


def test_generate_string_is_alphanumeric_and_sized():
    code = generate_string(32)
    assert len(code) == 32
    assert code.isalnum()
    assert generate_string(32) != code


def test_generate_image_is_unique_per_call():
    assert generate_image("user-1", 1000) != generate_image("user-1", 1000)


def test_issue_and_verify_access_token(codec):
    token = codec.issue(ACCESS, "user-1", "secret-a")
    claims = codec.verify(ACCESS, token)
    assert claims.user_id == "user-1"
    assert claims.secret == "secret-a"


def test_issue_pair_uses_independent_keys(codec):
    pair = codec.issue_pair("user-1", "secret-a", "secret-r")
    assert codec.verify(REFRESH, pair.refresh).secret == "secret-r"
    # an access token is never accepted as a refresh token and vice versa
    with pytest.raises(InvalidToken):
        codec.verify(REFRESH, pair.access)
    with pytest.raises(InvalidToken):
        codec.verify(ACCESS, pair.refresh)


def test_tampered_token_is_invalid(codec):
    token = codec.issue(ACCESS, "user-1", "secret-a")
    head, payload, signature = token.split(".")
    forged = ".".join([head, payload, signature[::-1]])
    with pytest.raises(InvalidToken):
        codec.verify(ACCESS, forged)


def test_token_signed_with_other_key_is_invalid(codec):
    other = TokenCodec("some-other-access-key-0123456789abcdef", REFRESH_KEY)
    with pytest.raises(InvalidToken):
        codec.verify(ACCESS, other.issue(ACCESS, "user-1", "secret-a"))


def test_expired_token_raises_token_expired():
    codec = TokenCodec(ACCESS_KEY, REFRESH_KEY, access_ttl=-60)
    token = codec.issue(ACCESS, "user-1", "secret-a")
    with pytest.raises(TokenExpired):
        codec.verify(ACCESS, token)


def test_token_without_secret_claim_is_invalid(codec):
    token = jwt.encode({"id": "user-1", "type": ACCESS}, ACCESS_KEY, algorithm="HS256")
    with pytest.raises(InvalidToken):
        codec.verify(ACCESS, token)


def test_unknown_purpose_is_a_programming_error(codec):
    with pytest.raises(ValueError):
        codec.issue("session", "user-1", "secret")
