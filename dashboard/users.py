"""
Verified user listing.

Downloads the protobuf export, decodes it and keeps only the records whose
signature checks out on this side.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from backend.core.identity.codec import IdentityEntry, decode_user_list
from dashboard.api_client import AdminAPIClient
from dashboard.verify import verify_record

logger = logging.getLogger(__name__)


@dataclass
class VerifiedUsers:
    trusted: List[IdentityEntry] = field(default_factory=list)
    rejected: List[IdentityEntry] = field(default_factory=list)


def partition_records(entries: Sequence[IdentityEntry]) -> VerifiedUsers:
    """
    Split decoded entries into trusted and rejected, keeping export order.

    A failed check only excludes that record; the rest are still processed.
    """
    result = VerifiedUsers()
    for entry in entries:
        if verify_record(entry.email, entry.email_hash, entry.signature, entry.public_key):
            result.trusted.append(entry)
        else:
            logger.warning(f"Rejected user {entry.id} ({entry.email}): signature verification failed")
            result.rejected.append(entry)
    return result


def fetch_verified_users(client: AdminAPIClient) -> VerifiedUsers:
    """Fetch the export and verify every record."""
    entries = decode_user_list(client.export_users())
    result = partition_records(entries)
    logger.info(f"Verified export: {len(result.trusted)} trusted, {len(result.rejected)} rejected")
    return result
