#!/usr/bin/env python3
"""
Seed the database with demo users.

Creates admin@qt.com (admin), user1@qt.com and user2@qt.com (inactive)
with freshly signed identities. Existing emails are left untouched.

Usage:
    python3 scripts/seed_users.py
    DATABASE_URL=sqlite:///./qt.db python3 scripts/seed_users.py
"""
import sys
import os
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from backend.core.config import get_settings
from backend.core.database import init_db, create_tables, get_db
from backend.core.database.repository import UserRepository
from backend.core.identity import create_signing_context
from backend.core.users import UsersService

logger = logging.getLogger(__name__)

SEED_USERS = [
    ("admin@qt.com", "admin", "active"),
    ("user1@qt.com", "user", "active"),
    ("user2@qt.com", "user", "inactive"),
]


def seed(service: UsersService) -> int:
    """Create missing seed users; returns how many were created."""
    created = 0
    for email, role, status in SEED_USERS:
        if service.repository.find_by_email(email):
            logger.info(f"Skipping existing user: {email}")
            continue
        user = service.create(email, role=role, status=status)
        print(f"✅ Created {role:5} {status:8} {email} ({user.id})")
        created += 1
    return created


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)

    init_db()
    if settings.auto_create_tables:
        create_tables()

    db = next(get_db())
    try:
        service = UsersService(UserRepository(db), create_signing_context())
        created = seed(service)
    finally:
        db.close()

    print(f"Seeding complete: {created} user(s) created")


if __name__ == "__main__":
    main()
