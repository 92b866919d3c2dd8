"""Session lifecycle operations, exercised directly on AuthService"""
import pytest

from models import AccessImage, AccountStatus, Password, RecordState, RefreshToken, User
from services import ErrorKind, check_access_token


@pytest.fixture
def auth(services):
    return services.auth


@pytest.fixture
def grant(auth):
    result = auth.register("u@test.com", "pw1", "Ada", "Lovelace")
    assert result.ok
    return result.data


def _user(services):
    return services.storage.find_one(User, email="u@test.com")


def test_register_creates_every_record(services, grant):
    user = _user(services)
    assert grant.role == "user"
    assert services.storage.count(Password, user_id=user.id) == 1
    assert services.storage.count(AccessImage, user_id=user.id) == 1
    assert services.storage.count(RefreshToken, user_id=user.id) == 1
    assert grant.to_dict()["tokens"].keys() == {"access", "refresh"}


def test_register_twice_is_email_already_in_use(auth, grant):
    result = auth.register("u@test.com", "other", "Eve", "Other")
    assert result.error == ErrorKind.EMAIL_ALREADY_IN_USE


def test_register_then_login_then_guard(services, auth, grant):
    result = auth.login("u@test.com", "pw1")
    assert result.ok
    assert result.data.role == "user"
    assert check_access_token(services.storage, services.codec, result.data.tokens.access).ok


def test_login_reuses_the_access_image(services, auth, grant):
    result = auth.login("u@test.com", "pw1")
    # earlier sessions stay valid, one active image per user
    assert check_access_token(services.storage, services.codec, grant.tokens.access).ok
    assert services.storage.count(AccessImage, user_id=_user(services).id) == 1
    assert services.storage.count(RefreshToken, user_id=_user(services).id) == 2
    assert result.ok


def test_login_unknown_email(auth):
    assert auth.login("nobody@test.com", "pw1").error == ErrorKind.ACCESS_DENIED


def test_lockout_after_five_failures(services, auth, grant):
    for attempt in range(1, 6):
        assert auth.login("u@test.com", "wrong").error == ErrorKind.ACCESS_DENIED
        assert _user(services).failed_login_attempts == attempt

    user = _user(services)
    assert user.account_status == AccountStatus.BLOCKED
    # even the right password no longer helps
    assert auth.login("u@test.com", "pw1").error == ErrorKind.ACCOUNT_IS_BLOCKED
    assert _user(services).failed_login_attempts == 5


def test_successful_login_resets_counter(services, auth, grant):
    auth.login("u@test.com", "wrong")
    auth.login("u@test.com", "wrong")
    assert _user(services).failed_login_attempts == 2
    assert auth.login("u@test.com", "pw1").ok
    assert _user(services).failed_login_attempts == 0


def test_login_without_password_record_blocks_account(services, auth, grant):
    services.storage.update_many(Password, {"user_id": _user(services).id}, {"state": RecordState.REVOKED})
    services.storage.save()

    assert auth.login("u@test.com", "pw1").error == ErrorKind.ACCESS_DENIED
    assert _user(services).is_blocked


def test_refresh_is_single_use(auth, grant):
    first = auth.refresh(grant.tokens.refresh)
    assert first.ok
    assert first.data.tokens.refresh != grant.tokens.refresh

    second = auth.refresh(grant.tokens.refresh)
    assert second.error == ErrorKind.ACCESS_DENIED
    # the successor keeps working
    assert auth.refresh(first.data.tokens.refresh).ok


def test_refresh_keeps_access_secret(services, auth, grant):
    result = auth.refresh(grant.tokens.refresh)
    assert check_access_token(services.storage, services.codec, result.data.tokens.access).ok
    assert check_access_token(services.storage, services.codec, grant.tokens.access).ok


def test_refresh_rejects_unknown_and_access_tokens(auth, grant):
    assert auth.refresh("garbage").error == ErrorKind.ACCESS_DENIED
    assert auth.refresh(grant.tokens.access).error == ErrorKind.ACCESS_DENIED


def test_refresh_after_stored_expiry(auth, grant, clock):
    clock.advance(604800 + 60)
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED


def test_logout_revokes_one_session_and_is_idempotent(services, auth, grant):
    other = auth.login("u@test.com", "pw1").data
    user = _user(services)

    assert auth.logout(user.id, grant.tokens.refresh).ok
    assert auth.logout(user.id, grant.tokens.refresh).ok
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED
    assert auth.refresh(other.tokens.refresh).ok


def test_logout_all_invalidates_everything(services, auth, grant):
    user = _user(services)
    assert auth.logout_all(user.id).ok

    result = check_access_token(services.storage, services.codec, grant.tokens.access)
    assert result.error == ErrorKind.INVALID_TOKEN
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED
    assert services.storage.count(AccessImage, user_id=user.id) == 1


def test_change_password_scenario(services, auth, grant):
    user = _user(services)
    result = auth.change_password(user.id, "pw1", "pw2")
    assert result.ok

    assert auth.login("u@test.com", "pw1").error == ErrorKind.ACCESS_DENIED
    assert auth.login("u@test.com", "pw2").ok
    # old sessions are gone, the returned pair works
    assert check_access_token(services.storage, services.codec, grant.tokens.access).error == ErrorKind.INVALID_TOKEN
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED
    assert check_access_token(services.storage, services.codec, result.data.access).ok
    # the superseded hash is kept as history
    assert services.storage.count(Password, state=None, user_id=user.id) == 2
    assert services.storage.count(Password, user_id=user.id) == 1


def test_change_password_with_wrong_old_password(services, auth, grant):
    user = _user(services)
    assert auth.change_password(user.id, "nope", "pw2").error == ErrorKind.OLD_PASSWORD_IS_INVALID
    assert auth.login("u@test.com", "pw1").ok


def test_change_password_resets_failed_logins(services, auth, grant):
    auth.login("u@test.com", "wrong")
    assert auth.change_password(_user(services).id, "pw1", "pw2").ok
    assert _user(services).failed_login_attempts == 0


def test_update_account(services, auth, grant):
    result = auth.update_account(_user(services), "Grace", "Hopper", "compilers")
    assert result.ok
    user = _user(services)
    assert (user.first_name, user.last_name, user.about) == ("Grace", "Hopper", "compilers")


def test_delete_account_revokes_everything(services, auth, grant):
    user_id = _user(services).id
    assert auth.delete_account(user_id).ok

    assert _user(services) is None
    assert services.storage.count(AccessImage, user_id=user_id) == 0
    assert services.storage.count(RefreshToken, user_id=user_id) == 0
    assert services.storage.count(Password, user_id=user_id) == 0
    assert check_access_token(services.storage, services.codec, grant.tokens.access).error == ErrorKind.ACCESS_DENIED
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED
    assert auth.login("u@test.com", "pw1").error == ErrorKind.ACCESS_DENIED
    # the address is free again
    assert auth.register("u@test.com", "pw1", "Ada", "Again").ok


def test_lockout_ends_every_session(services, auth, grant):
    for _ in range(5):
        auth.login("u@test.com", "wrong")

    user_id = services.storage.find_one(User, state=None, email="u@test.com").id
    assert services.storage.count(RefreshToken, user_id=user_id) == 0
    assert services.storage.count(AccessImage, user_id=user_id) == 0
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED


def test_blocking_for_missing_password_ends_every_session(services, auth, grant):
    user_id = _user(services).id
    services.storage.update_many(Password, {"user_id": user_id}, {"state": RecordState.REVOKED})
    services.storage.save()

    auth.login("u@test.com", "pw1")
    assert services.storage.count(RefreshToken, user_id=user_id) == 0
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED


def test_refresh_losing_a_concurrent_consume(services, auth, grant, monkeypatch):
    user_id = _user(services).id
    consume = auth.sessions.consume_refresh_token

    def consumed_elsewhere_first(record):
        # another request flips the row between lookup and compare-and-set
        services.storage.update_many(RefreshToken, {"id": record.id}, {"state": RecordState.REVOKED})
        return consume(record)

    monkeypatch.setattr(auth.sessions, "consume_refresh_token", consumed_elsewhere_first)
    assert auth.refresh(grant.tokens.refresh).error == ErrorKind.ACCESS_DENIED
    # no successor session was written
    assert services.storage.count(RefreshToken, state=None, user_id=user_id) == 1
