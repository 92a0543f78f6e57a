"""Tests for AccountService: registration and profile/media updates."""

from __future__ import annotations

from pathlib import Path

import pytest
from channelhub.models.account import Account
from channelhub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    UpstreamFailureError,
    ValidationError,
)
from channelhub.services._shared.ports import InMemoryMediaStore
from channelhub.services.accounts.dto import ProfileUpdateIn, RegisterIn, UploadedFile
from channelhub.services.accounts.service import AccountService
from sqlalchemy import func, select

from tests.factories.account import AccountFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def store() -> InMemoryMediaStore:
    return InMemoryMediaStore()


@pytest.fixture()
def service(hasher, store) -> AccountService:
    return AccountService(hasher=hasher, media=store)


@pytest.fixture()
def staged(upload_file):
    def _make(name: str = "avatar.png") -> UploadedFile:
        return UploadedFile(path=upload_file(name), filename=name, content_type="image/png")

    return _make


def _register_in(staged, **overrides) -> RegisterIn:
    values = {
        "full_name": "Ana Ruiz",
        "email": "Ana@Example.com",
        "username": "AnaR",
        "password": "pw-123",
        "avatar": staged("avatar.png"),
        "cover": None,
    }
    values.update(overrides)
    return RegisterIn(**values)


def _account_count(session) -> int:
    return session.execute(select(func.count(Account.id))).scalar_one()


# ------------------------------ Register ---------------------------------- #
def test_register_creates_account_with_avatar(service, store, staged, session, hasher):
    dto = _register_in(staged)
    out = service.register(dto)

    assert out.username == "anar"
    assert out.email == "ana@example.com"
    assert out.avatar.startswith("memory://media/")
    assert out.cover_image == ""
    assert not Path(dto.avatar.path).exists()

    session.expire_all()
    stored = session.get(Account, out.id)
    assert stored.refresh_token is None
    assert stored.avatar_public_id in store
    assert stored.password_hash != "pw-123"
    assert hasher.verify("pw-123", stored.password_hash)


def test_register_with_cover(service, staged):
    out = service.register(_register_in(staged, cover=staged("cover.jpg")))
    assert out.cover_image.endswith(".jpg")


@pytest.mark.parametrize("field", ["full_name", "email", "username", "password"])
def test_register_rejects_blank_fields(service, staged, session, field):
    with pytest.raises(ValidationError) as exc:
        service.register(_register_in(staged, **{field: "   "}))
    assert str(exc.value) == "All fields are required"
    assert _account_count(session) == 0


def test_register_requires_avatar(service, staged, session):
    with pytest.raises(ValidationError) as exc:
        service.register(_register_in(staged, avatar=None))
    assert str(exc.value) == "Avatar file is required"
    assert _account_count(session) == 0


def test_register_avatar_upload_failure_creates_nothing(service, store, staged, session):
    store.fail_uploads = True
    with pytest.raises(UpstreamFailureError):
        service.register(_register_in(staged))
    assert _account_count(session) == 0


def test_register_cover_failure_is_not_fatal(hasher, staged):
    class CoverlessStore(InMemoryMediaStore):
        def upload(self, local_path):
            if local_path.endswith(".jpg"):
                Path(local_path).unlink(missing_ok=True)
                return None
            return super().upload(local_path)

    service = AccountService(hasher=hasher, media=CoverlessStore())
    out = service.register(_register_in(staged, cover=staged("cover.jpg")))
    assert out.cover_image == ""


@pytest.mark.parametrize(
    "overrides",
    [{"username": "TAKEN"}, {"email": "taken@example.com"}],
)
def test_register_conflict_checked_before_upload(service, store, staged, session, overrides):
    AccountFactory(username="taken", email="taken@example.com")
    session.commit()

    with pytest.raises(ConflictError) as exc:
        service.register(_register_in(staged, **overrides))
    assert exc.value.detail == "User with email or username already exists"
    assert store._objects == {}


# ------------------------------- Reads ------------------------------------ #
def test_current_account(service, session):
    acc = AccountFactory()
    session.commit()
    assert service.current_account(acc.id).id == acc.id

    with pytest.raises(NotFoundError):
        service.current_account("0" * 32)


# ------------------------------- Profile ---------------------------------- #
def test_update_profile(service, session):
    acc = AccountFactory(full_name="Old Name")
    session.commit()

    out = service.update_profile(acc.id, ProfileUpdateIn(full_name="New Name", email="NEW@example.com"))
    assert out.full_name == "New Name"
    assert out.email == "new@example.com"


def test_update_profile_keeps_own_email(service, session):
    acc = AccountFactory(email="same@example.com")
    session.commit()
    out = service.update_profile(acc.id, ProfileUpdateIn(full_name="Renamed", email="same@example.com"))
    assert out.email == "same@example.com"


def test_update_profile_email_conflict(service, session):
    AccountFactory(email="taken@example.com")
    acc = AccountFactory()
    session.commit()

    with pytest.raises(ConflictError):
        service.update_profile(acc.id, ProfileUpdateIn(full_name="X", email="taken@example.com"))


def test_update_profile_blank_fields(service, session):
    acc = AccountFactory()
    session.commit()
    with pytest.raises(ValidationError):
        service.update_profile(acc.id, ProfileUpdateIn(full_name="", email="a@example.com"))


# -------------------------------- Media ----------------------------------- #
def test_update_avatar_replaces_and_deletes_previous(service, store, staged, session):
    first = service.register(_register_in(staged))
    session.expire_all()
    old_public_id = session.get(Account, first.id).avatar_public_id

    out = service.update_avatar(first.id, staged("new.png"))

    assert out.avatar != first.avatar
    assert old_public_id in store.deleted
    assert old_public_id not in store


def test_update_cover_sets_image(service, staged, session):
    acc = AccountFactory()
    session.commit()
    out = service.update_cover(acc.id, staged("cover.jpg"))
    assert out.cover_image.startswith("memory://media/")


def test_update_avatar_requires_file(service, session):
    acc = AccountFactory()
    session.commit()
    with pytest.raises(ValidationError) as exc:
        service.update_avatar(acc.id, None)
    assert str(exc.value) == "Avatar file is missing"


def test_update_avatar_upload_failure_keeps_current(service, store, staged, session):
    acc = AccountFactory()
    session.commit()
    before = acc.avatar

    store.fail_uploads = True
    with pytest.raises(UpstreamFailureError):
        service.update_avatar(acc.id, staged("new.png"))

    session.expire_all()
    assert session.get(Account, acc.id).avatar == before


def test_update_media_unknown_account(service, store, staged):
    with pytest.raises(NotFoundError):
        service.update_cover("0" * 32, staged("cover.jpg"))
    assert store._objects == {}
