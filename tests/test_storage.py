"""DBStorage: state-scoped lookups and conditional updates"""
import pytest
from sqlalchemy.exc import IntegrityError

from models import AccessImage, RecordState, RefreshToken, User
from services.sessions import REVOKE


@pytest.fixture
def user(storage) -> User:
    user = storage.new(User(email="u@test.com", first_name="Ada", last_name="Lovelace"))
    storage.save()
    return user


def test_new_user_defaults(user):
    assert user.state == RecordState.ACTIVE
    assert user.role == "user"
    assert user.failed_login_attempts == 0
    assert user.email_is_verified is False
    assert user.full_name == "Ada Lovelace"
    assert not user.is_blocked


def test_lookups_only_see_active_records_by_default(storage, user):
    storage.update_many(User, {"id": user.id}, REVOKE)
    storage.save()

    assert storage.find_one(User, email="u@test.com") is None
    assert storage.find_one(User, state=RecordState.REVOKED, email="u@test.com") is not None
    assert storage.find_one(User, state=None, email="u@test.com") is not None
    assert storage.count(User) == 0


def test_update_many_is_a_compare_and_set(storage, user):
    token = storage.new(RefreshToken(user_id=user.id, refresh_image="r", token="t", expiration_date="1"))
    storage.save()

    assert storage.update_many(RefreshToken, {"id": token.id}, REVOKE) == 1
    # already revoked: the second attempt matches nothing
    assert storage.update_many(RefreshToken, {"id": token.id}, REVOKE) == 0
    storage.save()
    assert storage.find_one(RefreshToken, id=token.id) is None


def test_list_filter_means_in(storage, user):
    other = storage.new(User(email="v@test.com"))
    storage.save()
    found = storage.find(User, id=[user.id, other.id])
    assert {u.email for u in found} == {"u@test.com", "v@test.com"}


def test_second_active_access_image_is_rejected(storage, user):
    storage.new(AccessImage(user_id=user.id, image="first"))
    storage.new(AccessImage(user_id=user.id, image="second"))
    with pytest.raises(IntegrityError):
        storage.save()


def test_revoked_access_images_do_not_count_against_the_index(storage, user):
    storage.new(AccessImage(user_id=user.id, image="first"))
    storage.save()
    storage.update_many(AccessImage, {"user_id": user.id}, REVOKE)
    storage.new(AccessImage(user_id=user.id, image="second"))
    storage.save()

    assert storage.count(AccessImage, state=None, user_id=user.id) == 2
    assert storage.find_one(AccessImage, user_id=user.id).image == "second"


def test_to_dict_hides_secrets(storage, user):
    image = storage.new(AccessImage(user_id=user.id, image="secret"))
    storage.save()
    assert "image" not in image.to_dict()
    assert image.to_dict()["user_id"] == user.id


def test_update_one_and_get(storage, user):
    assert storage.update_one(User, {"email": "u@test.com"}, {"about": "hello"}) == 1
    assert storage.update_one(User, {"email": "nobody@test.com"}, {"about": "x"}) == 0
    storage.save()
    assert storage.get(User, user.id).about == "hello"
    assert storage.get(int, user.id) is None


def test_delete_one_removes_the_row(storage, user):
    storage.new(AccessImage(user_id=user.id, image="img"))
    storage.save()
    assert storage.delete_one(AccessImage, user_id=user.id) == 1
    assert storage.delete_one(AccessImage, user_id=user.id) == 0
    storage.save()
    assert storage.count(AccessImage, state=None, user_id=user.id) == 0


def test_create_flushes_immediately(storage):
    user = storage.create(User(email="w@test.com"))
    # visible to queries in the same transaction before any commit
    assert storage.find_one(User, id=user.id) is user
    storage.rollback()
    assert storage.find_one(User, email="w@test.com") is None
