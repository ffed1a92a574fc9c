"""
Users Export

Builds the protobuf UserList export of all users with their signed
identities. The byte fields go out exactly as stored.
"""
from typing import List, Optional
import logging

from backend.core.database.models import User
from backend.core.database.repository import UserRepository
from backend.core.identity import IdentityEntry, encode_user_list
from backend.core.users.service import format_created_at

logger = logging.getLogger(__name__)


def user_to_entry(user: User) -> IdentityEntry:
    """Map a stored user to a codec entry."""
    return IdentityEntry(
        id=user.id,
        email=user.email,
        role=user.role,
        status=user.status,
        created_at=format_created_at(user.created_at),
        email_hash=user.email_hash,
        signature=user.signature,
        public_key=user.public_key,
    )


class ExportService:
    """Serializes users into a single UserList message."""

    def __init__(self, repository: UserRepository, max_records: Optional[int] = 10000):
        self.repository = repository
        self.max_records = max_records

    def build_entries(self) -> List[IdentityEntry]:
        users = self.repository.find_all(limit=self.max_records)
        return [user_to_entry(user) for user in users]

    def build_users_protobuf(self) -> bytes:
        """
        Encode all users (newest first) as a UserList.

        Raises:
            EncodeError: If a stored user is missing identity bytes
        """
        entries = self.build_entries()
        data = encode_user_list(entries)
        logger.info(f"Users exported to protobuf: {len(entries)} users, {len(data)} bytes")
        return data
