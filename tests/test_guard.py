"""Access token checks behind the request guards"""
from models import AccessImage, AccountStatus, User
from services import ErrorKind, check_access_token
from services.sessions import REVOKE
from utils.security import ACCESS, TokenCodec


def _grant(services, email="u@test.com"):
    result = services.auth.register(email, "pw1", "Ada", "Lovelace")
    assert result.ok
    return result.data


def test_missing_token(services):
    result = check_access_token(services.storage, services.codec, "")
    assert result.error == ErrorKind.MISSING_TOKEN


def test_garbage_token(services):
    result = check_access_token(services.storage, services.codec, "not.a.token")
    assert result.error == ErrorKind.INVALID_TOKEN


def test_expired_token(services, app):
    grant = _grant(services)
    user = services.storage.find_one(User, email="u@test.com")
    expired = TokenCodec(
        app.config["TOKENS_ACCESS_SECRET"], app.config["TOKENS_REFRESH_SECRET"], access_ttl=-60
    ).issue(ACCESS, user.id, services.storage.find_one(AccessImage, user_id=user.id).image)

    assert check_access_token(services.storage, services.codec, grant.tokens.access).ok
    assert check_access_token(services.storage, services.codec, expired).error == ErrorKind.TOKEN_EXPIRED


def test_valid_token_binds_identity(services):
    grant = _grant(services)
    result = check_access_token(services.storage, services.codec, grant.tokens.access)
    assert result.ok
    assert result.data.role == "user"
    assert result.data.user.email == "u@test.com"
    assert result.data.user_id == result.data.user.id


def test_rotated_secret_fails_although_signature_verifies(services):
    grant = _grant(services)
    user = services.storage.find_one(User, email="u@test.com")
    services.auth.sessions.rotate_access_secret(user.id)
    services.storage.save()

    # the signature is still fine
    assert services.codec.verify(ACCESS, grant.tokens.access).user_id == user.id
    result = check_access_token(services.storage, services.codec, grant.tokens.access)
    assert result.error == ErrorKind.INVALID_TOKEN


def test_blocked_user_is_denied(services):
    grant = _grant(services)
    services.storage.update_many(User, {"email": "u@test.com"}, {"account_status": AccountStatus.BLOCKED})
    services.storage.save()
    result = check_access_token(services.storage, services.codec, grant.tokens.access)
    assert result.error == ErrorKind.ACCESS_DENIED


def test_missing_access_image_is_denied(services):
    grant = _grant(services)
    user = services.storage.find_one(User, email="u@test.com")
    services.storage.update_many(AccessImage, {"user_id": user.id}, REVOKE)
    services.storage.save()
    result = check_access_token(services.storage, services.codec, grant.tokens.access)
    assert result.error == ErrorKind.ACCESS_DENIED
