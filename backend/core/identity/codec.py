"""
UserList Batch Codec

Encodes signed user records into a single UserList protobuf message and
decodes them back. Byte fields pass through untouched in both directions:
the verifier needs the exact bytes that were signed.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

from google.protobuf.message import DecodeError as ProtobufDecodeError
from google.protobuf.message import EncodeError as ProtobufEncodeError

from backend.core.identity.errors import DecodeError, EncodeError
from backend.core.identity.schema import UserList

logger = logging.getLogger(__name__)

_BYTES_TYPES = (bytes, bytearray, memoryview)
_STRING_FIELDS = ("id", "email", "role", "status", "created_at")
_BYTE_FIELDS = ("email_hash", "signature", "public_key")


@dataclass(frozen=True)
class IdentityEntry:
    """One exported user: plain fields plus its signed identity."""
    id: str
    email: str
    role: str
    status: str
    created_at: str
    email_hash: bytes
    signature: bytes
    public_key: bytes


def _check_entry(index: int, entry: IdentityEntry) -> None:
    for field in _STRING_FIELDS:
        value = getattr(entry, field)
        if not isinstance(value, str):
            raise EncodeError(
                f"Record {index}: field '{field}' must be str, got {type(value).__name__}"
            )
    for field in _BYTE_FIELDS:
        value = getattr(entry, field)
        if value is None:
            raise EncodeError(f"Record {index}: byte field '{field}' is missing")
        if not isinstance(value, _BYTES_TYPES):
            raise EncodeError(
                f"Record {index}: field '{field}' must be bytes, got {type(value).__name__}"
            )


def encode_user_list(entries: Iterable[IdentityEntry]) -> bytes:
    """
    Serialize entries into one UserList message.

    Args:
        entries: Records in export order

    Returns:
        Protobuf-encoded UserList

    Raises:
        EncodeError: If a record has a missing or mistyped field
    """
    message = UserList()
    count = 0
    for index, entry in enumerate(entries):
        _check_entry(index, entry)
        try:
            message.users.add(
                id=entry.id,
                email=entry.email,
                role=entry.role,
                status=entry.status,
                created_at=entry.created_at,
                email_hash=bytes(entry.email_hash),
                signature=bytes(entry.signature),
                public_key=bytes(entry.public_key),
            )
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Record {index}: {e}") from e
        count += 1

    try:
        data = message.SerializeToString()
    except (ProtobufEncodeError, ValueError) as e:
        raise EncodeError(f"Failed to encode UserList: {e}") from e

    logger.debug(f"UserList encoded: {count} users, {len(data)} bytes")
    return data


def decode_user_list(data: bytes) -> List[IdentityEntry]:
    """
    Parse a UserList message.

    Args:
        data: Protobuf-encoded UserList

    Returns:
        Entries in wire order, byte fields as raw bytes

    Raises:
        DecodeError: If data is not bytes or is not a valid UserList
    """
    if not isinstance(data, _BYTES_TYPES):
        raise DecodeError(f"UserList payload must be bytes, got {type(data).__name__}")

    message = UserList()
    try:
        message.ParseFromString(bytes(data))
    except (ProtobufDecodeError, ValueError) as e:
        raise DecodeError(f"Invalid UserList payload: {e}") from e

    entries = [
        IdentityEntry(
            id=user.id,
            email=user.email,
            role=user.role,
            status=user.status,
            created_at=user.created_at,
            email_hash=bytes(user.email_hash),
            signature=bytes(user.signature),
            public_key=bytes(user.public_key),
        )
        for user in message.users
    ]
    logger.debug(f"UserList decoded: {len(entries)} users from {len(data)} bytes")
    return entries
