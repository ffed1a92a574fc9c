"""
Signed Identity Records

Write path: email -> SHA-384 digest -> Ed25519 signature -> stored with the
SPKI DER public key of the signing context.

The stored public key belongs to each record, so records signed before a
restart stay verifiable after the server generates a new keypair.
"""

import hmac
import logging
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from backend.core.identity.digest import digest_email
from backend.core.identity.keys import SigningContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedIdentity:
    """Cryptographic artifacts persisted alongside a user."""
    email_hash: bytes
    signature: bytes
    public_key: bytes


def sign_identity(context: SigningContext, email: str) -> SignedIdentity:
    """
    Hash and sign an email address.

    Args:
        context: Initialized signing context
        email: Email address exactly as it will be stored

    Returns:
        SignedIdentity with digest, signature and public key

    Raises:
        InvalidInputError: If email is empty
        NotInitializedError: If the context is not initialized
    """
    email_hash = digest_email(email)
    signature = context.sign(email_hash)
    return SignedIdentity(
        email_hash=email_hash,
        signature=signature,
        public_key=context.public_key(),
    )


def verify_identity(email: str, email_hash: bytes, signature: bytes, public_key: bytes) -> bool:
    """
    Server-side check of a stored identity.

    Checks that email_hash == SHA384(email) and that signature verifies
    over email_hash under the SPKI DER public key. Never raises.

    Returns:
        True if both checks pass
    """
    try:
        expected = digest_email(email)
        if not hmac.compare_digest(expected, bytes(email_hash)):
            logger.warning(f"Email hash mismatch for {email}")
            return False

        key = serialization.load_der_public_key(bytes(public_key))
        if not isinstance(key, Ed25519PublicKey):
            return False
        key.verify(bytes(signature), bytes(email_hash))
    except InvalidSignature:
        return False
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.debug(f"Malformed identity material for {email}: {e}")
        return False

    return True
