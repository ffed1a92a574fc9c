"""
Users Service

Creates users with a signed email identity and handles updates, deletion
and registration statistics.
"""
from dataclasses import dataclass
from datetime import datetime, date, timedelta, timezone
from typing import Optional, List, Dict, Any, Tuple
import logging

from sqlalchemy.exc import IntegrityError

from backend.core.database.models import User
from backend.core.database.repository import UserRepository
from backend.core.errors import ConflictError, ValidationError
from backend.core.identity import NotInitializedError, SigningContext, sign_identity, verify_identity

logger = logging.getLogger(__name__)


def format_created_at(value: datetime) -> str:
    """
    Format a timestamp as ISO-8601 UTC with millisecond precision.

    Naive datetimes are treated as UTC (the database stores naive UTC).

    Example:
        >>> format_created_at(datetime(2024, 1, 1, 12, 0))
        '2024-01-01T12:00:00.000Z'
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


@dataclass
class UserStatsSummary:
    """Users-per-day series with its totals and date range."""
    stats: List[Dict[str, Any]]
    total_users: int
    start_date: str
    end_date: str
    days: int = 0


class UsersService:
    """
    User operations on top of UserRepository.

    The signing context is passed in explicitly; creating a user fails
    with NotInitializedError if the context was never initialized.
    """

    def __init__(self, repository: UserRepository, signing_context: Optional[SigningContext] = None, max_days: int = 365):
        self.repository = repository
        self.signing_context = signing_context
        self.max_days = max_days

    def create(self, email: str, role: str = "user", status: str = "active") -> User:
        """
        Create a user and sign its email.

        Raises:
            ConflictError: If a user with this email exists
            InvalidInputError: If the email is empty
            NotInitializedError: If the signing context is not initialized
        """
        if self.repository.find_by_email(email):
            raise ConflictError("User with this email already exists")

        if self.signing_context is None:
            raise NotInitializedError("No signing context configured for UsersService")
        identity = sign_identity(self.signing_context, email)

        try:
            user = self.repository.create(
                email=email,
                role=role,
                status=status,
                email_hash=identity.email_hash,
                signature=identity.signature,
                public_key=identity.public_key,
            )
        except IntegrityError as e:
            # Lost a race with a concurrent create for the same email
            raise ConflictError("User with this email already exists") from e

        logger.info(
            f"User created with signed identity: {user.id} ({user.email}), "
            f"hash={len(identity.email_hash)}B sig={len(identity.signature)}B "
            f"pubkey={len(identity.public_key)}B"
        )
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.repository.find_by_id(user_id)

    def get_many(
        self,
        page: int = 1,
        limit: int = 20,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        offset = (page - 1) * limit
        return self.repository.find_many(
            offset=offset, limit=limit, role=role, status=status, search=search
        )

    def update(self, user_id: str, role: Optional[str] = None, status: Optional[str] = None) -> Optional[User]:
        """
        Update role and/or status. Email and identity fields are never touched.

        Returns:
            Updated user, or None if it does not exist
        """
        user = self.repository.find_by_id(user_id)
        if not user:
            return None

        old_role, old_status = user.role, user.status
        updates = {key: value for key, value in (("role", role), ("status", status)) if value is not None}
        if not updates:
            return user

        user = self.repository.update(user, updates)
        logger.info(f"User {user_id} updated: role {old_role}->{user.role}, status {old_status}->{user.status}")
        return user

    def delete(self, user_id: str) -> bool:
        """
        Delete a user.

        Returns:
            True if deleted, False if it did not exist
        """
        user = self.repository.find_by_id(user_id)
        if not user:
            return False

        email = user.email
        self.repository.delete(user)
        logger.info(f"User deleted: {user_id} ({email})")
        return True

    def get_users_per_day(self, days: int = 7, today: Optional[date] = None) -> UserStatsSummary:
        """
        Registration counts for each of the last N days.

        Raises:
            ValidationError: If days is outside 1..max_days
        """
        if days < 1 or days > self.max_days:
            raise ValidationError(f"Days must be between 1 and {self.max_days}")

        today = today or datetime.utcnow().date()
        stats = self.repository.count_users_per_day(days, today=today)
        total_users = sum(point["count"] for point in stats)

        summary = UserStatsSummary(
            stats=stats,
            total_users=total_users,
            start_date=(today - timedelta(days=days - 1)).isoformat(),
            end_date=today.isoformat(),
            days=days,
        )
        logger.info(
            f"User stats retrieved: {days} days, {total_users} users "
            f"({summary.start_date} to {summary.end_date})"
        )
        return summary

    def verify_user_signature(self, user_id: str) -> Optional[bool]:
        """
        Re-check a stored user's digest and signature.

        Returns:
            True/False, or None if the user does not exist
        """
        user = self.repository.find_by_id(user_id)
        if not user:
            return None

        is_valid = verify_identity(user.email, user.email_hash, user.signature, user.public_key)
        logger.debug(f"User signature verification: {user_id} ({user.email}) valid={is_valid}")
        return is_valid
