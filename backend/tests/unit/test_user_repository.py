"""
Unit tests for UserRepository against an in-memory SQLite database.
"""
import pytest
from datetime import datetime, date, timedelta
from unittest.mock import Mock
from sqlalchemy.exc import IntegrityError

from backend.core.database.repository import UserRepository
from backend.core.identity import sign_identity


class TestUserRepositoryCrud:
    """Create / find / update / delete"""

    @pytest.fixture
    def repository(self, test_db):
        return UserRepository(test_db)

    def _create(self, repository, signing_context, email, role="user", status="active"):
        identity = sign_identity(signing_context, email)
        return repository.create(
            email=email,
            role=role,
            status=status,
            email_hash=identity.email_hash,
            signature=identity.signature,
            public_key=identity.public_key,
        )

    def test_create_assigns_id_and_timestamp(self, repository, signing_context):
        user = self._create(repository, signing_context, "user@example.test")

        assert len(user.id) == 36
        assert isinstance(user.created_at, datetime)
        assert len(user.email_hash) == 48
        assert len(user.signature) == 64
        assert len(user.public_key) == 44

    def test_duplicate_email_raises_integrity_error(self, repository, signing_context):
        self._create(repository, signing_context, "dup@example.test")
        with pytest.raises(IntegrityError):
            self._create(repository, signing_context, "dup@example.test")
        # Session is still usable after the rollback
        assert repository.find_by_email("dup@example.test") is not None

    def test_find_by_id_and_email(self, repository, signing_context):
        user = self._create(repository, signing_context, "find@example.test")
        assert repository.find_by_id(user.id).email == "find@example.test"
        assert repository.find_by_email("find@example.test").id == user.id
        assert repository.find_by_id("missing") is None
        assert repository.find_by_email("missing@example.test") is None

    def test_update_only_touches_role_and_status(self, repository, signing_context):
        user = self._create(repository, signing_context, "update@example.test")
        original = (user.email, user.email_hash, user.signature, user.public_key)

        updated = repository.update(user, {
            "role": "admin",
            "status": "inactive",
            "email": "hijack@example.test",
            "signature": b"\x00" * 64,
        })

        assert updated.role == "admin"
        assert updated.status == "inactive"
        assert (updated.email, updated.email_hash, updated.signature, updated.public_key) == original

    def test_delete(self, repository, signing_context):
        user = self._create(repository, signing_context, "delete@example.test")
        user_id = user.id
        repository.delete(user)
        assert repository.find_by_id(user_id) is None


class TestUserRepositoryQueries:
    """Listing, filters and per-day counts"""

    @pytest.fixture
    def repository(self, test_db):
        return UserRepository(test_db)

    @pytest.fixture
    def users(self, make_user):
        base = datetime(2024, 3, 10, 12, 0)
        return [
            make_user("admin@qt.com", role="admin", created_at=base),
            make_user("user1@qt.com", created_at=base + timedelta(hours=1)),
            make_user("user2@qt.com", status="inactive", created_at=base + timedelta(hours=2)),
            make_user("other@example.test", created_at=base + timedelta(hours=3)),
        ]

    def test_find_many_newest_first(self, repository, users):
        found, total = repository.find_many()
        assert total == 4
        assert [u.email for u in found] == ["other@example.test", "user2@qt.com", "user1@qt.com", "admin@qt.com"]

    def test_find_many_pagination(self, repository, users):
        found, total = repository.find_many(offset=2, limit=2)
        assert total == 4
        assert [u.email for u in found] == ["user1@qt.com", "admin@qt.com"]

    def test_find_many_filters(self, repository, users):
        found, total = repository.find_many(role="admin")
        assert total == 1 and found[0].email == "admin@qt.com"

        found, total = repository.find_many(status="inactive")
        assert total == 1 and found[0].email == "user2@qt.com"

    def test_find_many_search_is_case_insensitive(self, repository, users):
        found, total = repository.find_many(search="QT.COM")
        assert total == 3
        assert all(u.email.endswith("@qt.com") for u in found)

    def test_find_many_search_treats_wildcards_literally(self, repository, make_user):
        make_user("a_b@example.com")
        make_user("axb@example.com")

        found, total = repository.find_many(search="a_b")
        assert total == 1 and found[0].email == "a_b@example.com"

        assert repository.find_many(search="%")[1] == 0
        assert repository.find_many(search="a%b")[1] == 0

    def test_find_many_offset_past_end(self, repository, users):
        found, total = repository.find_many(offset=10**19, limit=20)
        assert found == []
        assert total == 4

    def test_find_all_with_limit(self, repository, users):
        assert len(repository.find_all()) == 4
        assert [u.email for u in repository.find_all(limit=1)] == ["other@example.test"]

    def test_count_users_per_day_zero_fills(self, repository, make_user):
        today = date(2024, 3, 10)
        make_user("a@example.test", created_at=datetime(2024, 3, 10, 0, 0))
        make_user("b@example.test", created_at=datetime(2024, 3, 10, 23, 59))
        make_user("c@example.test", created_at=datetime(2024, 3, 8, 9, 30))
        make_user("old@example.test", created_at=datetime(2024, 3, 1, 9, 30))
        make_user("future@example.test", created_at=datetime(2024, 3, 11, 0, 0))

        stats = repository.count_users_per_day(3, today=today)

        assert stats == [
            {"date": "2024-03-08", "count": 1},
            {"date": "2024-03-09", "count": 0},
            {"date": "2024-03-10", "count": 2},
        ]

    def test_count_users_per_day_single_day(self, repository, make_user):
        make_user("a@example.test", created_at=datetime(2024, 3, 10, 8, 0))
        assert repository.count_users_per_day(1, today=date(2024, 3, 10)) == [
            {"date": "2024-03-10", "count": 1}
        ]


class TestUserRepositoryTransactions:
    """Commit / rollback error handling"""

    def test_commit_failure_rolls_back_and_raises(self):
        db = Mock()
        db.commit.side_effect = RuntimeError("connection lost")
        repository = UserRepository(db)

        with pytest.raises(RuntimeError):
            repository.commit()
        db.rollback.assert_called_once()

    def test_rollback_failure_is_logged_not_raised(self):
        db = Mock()
        db.rollback.side_effect = RuntimeError("connection lost")
        UserRepository(db).rollback()
        db.rollback.assert_called_once()
