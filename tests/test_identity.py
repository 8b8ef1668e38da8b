"""Tests for anonymous identity issuance and session tokens."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from noitro.core.exceptions import NotFoundError
from noitro.core.security import create_session_token, verify_session_token
from noitro.modules.identity.models.user import User
from noitro.modules.identity.services.identity import (
    NICKNAMES,
    author_view,
    ensure_user,
    get_identity,
    issue_identity,
)


def _broken_session():
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    return session


class TestIssueIdentity:

    def test_new_identity_from_pool(self, db):
        identity, created, persisted = issue_identity(db)

        assert created is True
        assert persisted is True
        assert identity.nickname in NICKNAMES
        assert identity.avatar.startswith("https://api.dicebear.com/7.x/avataaars/svg?seed=")
        assert len(identity.id) == 32
        assert db.query(User).filter(User.id == identity.id).count() == 1

    def test_existing_identity_returned_unchanged(self, db):
        first, _, _ = issue_identity(db, nickname="Chị Mai Xinh")

        again, created, persisted = issue_identity(db, existing_id=first.id, nickname="Tên khác")

        assert created is False
        assert persisted is True
        assert again.id == first.id
        assert again.nickname == "Chị Mai Xinh"
        assert again.avatar == first.avatar

    def test_unknown_id_kept_for_new_identity(self, db):
        identity, created, _ = issue_identity(db, existing_id="browser-123")

        assert created is True
        assert identity.id == "browser-123"

    def test_store_unavailable_gives_ephemeral_identity(self):
        session = _broken_session()

        identity, created, persisted = issue_identity(session)

        assert created is True
        assert persisted is False
        assert identity.nickname in NICKNAMES
        session.rollback.assert_called()

    def test_store_unavailable_does_not_reuse_claimed_id(self):
        identity, created, persisted = issue_identity(_broken_session(), existing_id="browser-123")

        assert identity.id != "browser-123"
        assert len(identity.id) == 32
        assert created is True
        assert persisted is False

    def test_get_identity_missing(self, db):
        with pytest.raises(NotFoundError):
            get_identity(db, "nobody")


class TestAuthorResolution:

    def test_ensure_user_creates_placeholder(self, db):
        user = ensure_user(db, "user-9")
        db.commit()

        assert user.nickname == "Người dùng ẩn danh"
        assert user.avatar.endswith("seed=user-9")

    def test_ensure_user_keeps_existing(self, db):
        issue_identity(db, existing_id="user-9", nickname="Bà Cơm Dẻo")

        assert ensure_user(db, "user-9", nickname="Khác").nickname == "Bà Cơm Dẻo"

    def test_author_view_fallback(self):
        author = author_view(None, "ghost")

        assert author.id == "ghost"
        assert author.nickname == "Người dùng ẩn danh"


class TestSessionTokens:

    def test_round_trip(self, settings):
        token = create_session_token("abc", settings)
        assert verify_session_token(token, settings) == "abc"

    def test_wrong_secret(self, settings):
        token = create_session_token("abc", settings)
        other = settings.model_copy(update={"SECRET_KEY": "another-secret"})
        assert verify_session_token(token, other) is None

    def test_expired(self, settings):
        token = create_session_token("abc", settings, expires_delta=timedelta(seconds=-10))
        assert verify_session_token(token, settings) is None

    def test_expired_accepted_when_expiry_not_checked(self, settings):
        token = create_session_token("abc", settings, expires_delta=timedelta(seconds=-10))
        assert verify_session_token(token, settings, verify_exp=False) == "abc"

    def test_wrong_secret_rejected_when_expiry_not_checked(self, settings):
        token = create_session_token("abc", settings)
        other = settings.model_copy(update={"SECRET_KEY": "another-secret"})
        assert verify_session_token(token, other, verify_exp=False) is None

    def test_garbage(self, settings):
        assert verify_session_token("not-a-token", settings) is None
