"""
Tests for scripts/seed_users.py.
"""
from backend.core.database.repository import UserRepository
from backend.core.users import UsersService
from scripts.seed_users import SEED_USERS, seed


class TestSeedUsers:

    def test_seed_is_idempotent(self, test_db, signing_context):
        service = UsersService(UserRepository(test_db), signing_context)

        assert seed(service) == 3
        assert seed(service) == 0

        for email, role, status in SEED_USERS:
            user = service.repository.find_by_email(email)
            assert (user.role, user.status) == (role, status)
            assert service.verify_user_signature(user.id) is True
