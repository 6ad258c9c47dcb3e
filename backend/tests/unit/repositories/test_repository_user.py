"""Unit tests for UserRepository (also the UserDirectory adapter)."""

import pytest

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tokenauth.core.extensions import db
from tokenauth.repositories.user import UserRepository
from tokenauth.services._shared.policies.common import password_fingerprint


class TestUserRepository:
    """Ensure ``UserRepository`` persists users and verifies credentials."""

    @pytest.fixture()
    def repo(self, session):
        return UserRepository(db.session)

    def test_create_and_get_user(self, repo):
        u = repo.create("dora", "explorer1")

        fetched = repo.get_by_username("dora")
        assert fetched is not None
        assert fetched.id == u.id
        assert repo.get(u.id) is fetched
        assert repo.get(str(u.id)) is fetched

    def test_get_with_non_numeric_id_misses(self, repo):
        assert repo.get("abc") is None
        assert repo.get_user("abc") is None

    def test_update_password_changes_fingerprint(self, repo):
        u = UserFactory()
        before = repo.get_user(str(u.id))

        repo.update_password(u.id, "newpass123")

        after = repo.get_user(str(u.id))
        assert after.password_hash != before.password_hash
        assert after.fingerprint != before.fingerprint
        assert after.fingerprint == password_fingerprint(after.password_hash)

    def test_update_password_for_missing_user_raises(self, repo):
        with pytest.raises(ValueError):
            repo.update_password(999_999, "whatever1")

    def test_verify_credentials(self, repo):
        u = UserFactory()

        record = repo.verify_credentials(u.username, DEFAULT_PASSWORD)
        assert record is not None
        assert record.id == str(u.id)
        assert record.to_public() == {"id": str(u.id), "username": u.username}

        assert repo.verify_credentials(u.username, "wrongpass") is None
        assert repo.verify_credentials("nobody-here", DEFAULT_PASSWORD) is None

    def test_list_all_is_ordered_by_id(self, repo):
        a = UserFactory()
        b = UserFactory()
        ids = [u.id for u in repo.list_all()]
        assert ids.index(a.id) < ids.index(b.id)
