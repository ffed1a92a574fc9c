"""
Client-side Identity Verification

Checks exported user records using only public material: the email, the
stored SHA-384 digest, the Ed25519 signature and the SPKI DER public key.
Uses PyNaCl, not the server's signing stack, so a record that passes here
was checked by an independent Ed25519 implementation.

Every function in this module is total: malformed input yields False,
never an exception.
"""
import hashlib
import hmac
import logging
from typing import Optional

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import VerifyKey

logger = logging.getLogger(__name__)

# ASN.1 header of an Ed25519 SubjectPublicKeyInfo (OID 1.3.101.112)
SPKI_HEADER = bytes([0x30, 0x2A, 0x30, 0x05, 0x06, 0x03, 0x2B, 0x65, 0x70, 0x03, 0x21, 0x00])
SPKI_DER_LENGTH = 44

_BYTES_TYPES = (bytes, bytearray, memoryview)


def sha384(value) -> bytes:
    """SHA-384 of a str (UTF-8 encoded) or bytes."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    return hashlib.sha384(value).digest()


def extract_raw_public_key(spki_der: bytes) -> Optional[bytes]:
    """
    Unwrap the 32 raw key bytes from a 44-byte Ed25519 SPKI DER blob.

    Returns:
        The raw key, or None if the length or header is wrong
    """
    if not isinstance(spki_der, _BYTES_TYPES):
        return None
    spki_der = bytes(spki_der)
    if len(spki_der) != SPKI_DER_LENGTH or spki_der[:len(SPKI_HEADER)] != SPKI_HEADER:
        return None
    return spki_der[len(SPKI_HEADER):]


def verify_signature(signature: bytes, digest: bytes, public_key_der: bytes) -> bool:
    """
    Verify an Ed25519 signature over the digest bytes themselves.

    The digest is the signed message; it is not hashed again here.
    """
    raw_key = extract_raw_public_key(public_key_der)
    if raw_key is None:
        logger.debug("Rejecting public key: not an Ed25519 SPKI DER blob")
        return False

    try:
        VerifyKey(raw_key).verify(bytes(digest), bytes(signature))
        return True
    except BadSignatureError:
        return False
    except (CryptoError, ValueError, TypeError) as e:
        # Malformed signature or key bytes
        logger.debug(f"Signature check failed on malformed input: {e}")
        return False


def verify_record(email: str, email_hash: bytes, signature: bytes, public_key: bytes) -> bool:
    """
    Full record check: recompute SHA-384 of the email, compare it with the
    stored digest, then verify the signature over the recomputed digest.
    """
    if not isinstance(email, str) or not email:
        return False
    digest = sha384(email)
    try:
        if not hmac.compare_digest(digest, bytes(email_hash)):
            return False
    except TypeError:
        return False
    return verify_signature(signature, digest, public_key)
