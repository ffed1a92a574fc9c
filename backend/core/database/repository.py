"""
Database Repository - High-level database operations for admin-panel users.

Provides simple interface to store, query and aggregate users for the API
services and scripts.
"""
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime, date, timedelta
from collections import Counter
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from .models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository pattern for user database operations.
    """

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy session
        """
        self.db = db

    def create(
        self,
        email: str,
        role: str,
        status: str,
        email_hash: bytes,
        signature: bytes,
        public_key: bytes,
    ) -> User:
        """
        Insert a new user and commit.

        Raises:
            IntegrityError: If the email already exists (transaction rolled back)
        """
        user = User(
            email=email,
            role=role,
            status=status,
            email_hash=email_hash,
            signature=signature,
            public_key=public_key,
        )
        try:
            self.db.add(user)
            self.db.flush()
            self.commit()
        except IntegrityError:
            logger.warning(f"Duplicate email on insert: {email}")
            self.rollback()
            raise

        self.db.refresh(user)
        logger.info(f"User created: {user.id} ({user.email})")
        return user

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_many(
        self,
        offset: int = 0,
        limit: int = 20,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """
        Filtered, paginated listing, newest first.

        Args:
            offset: Rows to skip
            limit: Maximum rows to return
            role: Exact role filter
            status: Exact status filter
            search: Case-insensitive substring of the email

        Returns:
            Tuple of (users, total matching rows)
        """
        query = self.db.query(User)

        if role:
            query = query.filter(User.role == role)
        if status:
            query = query.filter(User.status == status)
        if search:
            query = query.filter(User.email.icontains(search, autoescape=True))

        total = query.count()
        if offset >= total:
            # Past the last page; huge offsets overflow the driver's integer type
            users = []
        else:
            users = (
                query.order_by(User.created_at.desc(), User.id)
                .offset(offset)
                .limit(limit)
                .all()
            )

        logger.debug(
            f"Users found: {len(users)} of {total} "
            f"(role={role}, status={status}, search={search})"
        )
        return users, total

    def find_all(self, limit: Optional[int] = None) -> List[User]:
        """All users, newest first (used by the export)."""
        query = self.db.query(User).order_by(User.created_at.desc(), User.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update(self, user: User, updates: Dict[str, Any]) -> User:
        """
        Apply role/status updates to a user and commit.

        Only role and status are writable; any other key is ignored so the
        email and identity columns stay as signed.
        """
        for field in ("role", "status"):
            value = updates.get(field)
            if value is not None:
                setattr(user, field, value)

        self.commit()
        self.db.refresh(user)
        logger.info(f"User updated: {user.id} {updates}")
        return user

    def delete(self, user: User) -> None:
        user_id = user.id
        self.db.delete(user)
        self.commit()
        logger.info(f"User deleted: {user_id}")

    def count_users_per_day(self, days: int, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """
        Count users created on each of the last N days (UTC), oldest first.

        Days without registrations are included with count 0.

        Args:
            days: Window length, including today
            today: Last day of the window (default: current UTC date)

        Returns:
            List of {"date": "YYYY-MM-DD", "count": int}
        """
        today = today or datetime.utcnow().date()
        start_day = today - timedelta(days=days - 1)
        window_start = datetime.combine(start_day, datetime.min.time())
        window_end = datetime.combine(today + timedelta(days=1), datetime.min.time())

        rows = self.db.query(User.created_at).filter(
            User.created_at >= window_start,
            User.created_at < window_end,
        ).all()

        per_day = Counter(created_at.date() for (created_at,) in rows)

        stats = []
        for offset in range(days):
            day = start_day + timedelta(days=offset)
            stats.append({"date": day.isoformat(), "count": per_day.get(day, 0)})

        logger.debug(f"User stats calculated: {days} days, {len(rows)} users")
        return stats

    def commit(self):
        """Commit transaction with error handling"""
        try:
            self.db.commit()
        except Exception as e:
            logger.error(f"Failed to commit transaction: {e}")
            self.db.rollback()
            raise

    def rollback(self):
        """Rollback transaction"""
        try:
            self.db.rollback()
        except Exception as e:
            logger.error(f"Failed to rollback transaction: {e}")
