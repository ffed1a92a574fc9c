"""
Email Digest

SHA-384 over the UTF-8 bytes of an email address. The email is hashed
exactly as given: no case folding, trimming or other normalization.
"""

import hashlib

from backend.core.identity.errors import InvalidInputError


# SHA-384 output length in bytes
DIGEST_SIZE = 48


def digest_email(email: str) -> bytes:
    """
    Compute the SHA-384 digest of an email address.

    Args:
        email: Email address (non-empty string)

    Returns:
        48-byte digest

    Raises:
        InvalidInputError: If email is not a non-empty string
    """
    if not isinstance(email, str) or not email:
        raise InvalidInputError("Email must be a non-empty string")
    return hashlib.sha384(email.encode("utf-8")).digest()
