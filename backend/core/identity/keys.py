"""
Ed25519 Signing Context

Holds the server's Ed25519 keypair for the lifetime of the process.
The keypair is generated at startup, never persisted and never rotated.

The context is an explicit object: the API creates one at startup, stores it
on app.state and passes it to whatever needs to sign. Nothing here is global.

Public keys are exported as SPKI DER (44 bytes for Ed25519):
    30 2a 30 05 06 03 2b 65 70 03 21 00 || 32 raw key bytes
"""

import logging
import threading
from typing import Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from backend.core.identity.errors import (
    CryptoInitError,
    InvalidInputError,
    NotInitializedError,
)

logger = logging.getLogger(__name__)


# ASN.1 SubjectPublicKeyInfo header for Ed25519 (OID 1.3.101.112)
ED25519_SPKI_PREFIX = bytes.fromhex("302a300506032b6570032100")

PUBLIC_KEY_DER_SIZE = 44
SIGNATURE_SIZE = 64


class SigningContext:
    """
    Process-wide Ed25519 keypair used to sign email digests.

    Call initialize() once before sign() or public_key(). Signing after
    initialization touches no mutable state, so concurrent sign() calls
    need no locking.
    """

    def __init__(self):
        self._private_key: Optional[Ed25519PrivateKey] = None
        self._public_key_der: Optional[bytes] = None
        self._init_lock = threading.Lock()

    @classmethod
    def from_private_bytes(cls, seed: bytes) -> "SigningContext":
        """
        Build an initialized context from a 32-byte raw Ed25519 seed.

        Args:
            seed: 32-byte raw private key

        Returns:
            Initialized SigningContext

        Raises:
            CryptoInitError: If the seed is not a valid Ed25519 private key
        """
        context = cls()
        try:
            private_key = Ed25519PrivateKey.from_private_bytes(seed)
        except (ValueError, TypeError) as e:
            raise CryptoInitError(f"Invalid Ed25519 private key: {e}") from e
        context._install(private_key)
        return context

    @property
    def initialized(self) -> bool:
        return self._private_key is not None

    def initialize(self) -> None:
        """
        Generate a fresh Ed25519 keypair.

        Calling this on an already initialized context keeps the existing
        key, so the public key stays stable for the context's lifetime.

        Raises:
            CryptoInitError: If key generation fails
        """
        with self._init_lock:
            if self._private_key is not None:
                logger.debug("Signing context already initialized")
                return
            try:
                private_key = Ed25519PrivateKey.generate()
            except Exception as e:
                logger.error(f"Failed to generate Ed25519 keypair: {e}")
                raise CryptoInitError("Crypto initialization failed") from e
            self._install(private_key)

        logger.info(
            f"Signing keypair initialized (algorithm=Ed25519, "
            f"public_key_length={len(self._public_key_der)})"
        )

    def _install(self, private_key: Ed25519PrivateKey) -> None:
        public_der = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        # Publish the public key first so public_key() never sees a half-set context
        self._public_key_der = public_der
        self._private_key = private_key

    def sign(self, digest: bytes) -> bytes:
        """
        Sign a digest with Ed25519 (pure mode, no prehash).

        The digest bytes are the signed message; callers pass the output of
        digest_email(), not the raw email.

        Args:
            digest: Digest bytes to sign

        Returns:
            64-byte signature (deterministic for a given key and digest)

        Raises:
            NotInitializedError: If initialize() has not been called
            InvalidInputError: If digest is not bytes
        """
        if self._private_key is None:
            raise NotInitializedError("Signing keypair not initialized. Call initialize() first.")
        if not isinstance(digest, (bytes, bytearray, memoryview)):
            raise InvalidInputError(f"Digest must be bytes, got {type(digest).__name__}")
        return self._private_key.sign(bytes(digest))

    def public_key(self) -> bytes:
        """
        Get the public key as SPKI DER.

        Returns:
            44-byte SPKI DER encoding

        Raises:
            NotInitializedError: If initialize() has not been called
        """
        if self._public_key_der is None:
            raise NotInitializedError("Signing keypair not initialized. Call initialize() first.")
        return self._public_key_der


def create_signing_context() -> SigningContext:
    """Create and initialize a signing context (used once at startup)."""
    context = SigningContext()
    context.initialize()
    return context
