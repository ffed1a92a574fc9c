"""
Unit tests for the Ed25519 signing context.
"""
import threading
import pytest
from unittest.mock import patch

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from backend.core.identity import (
    CryptoInitError,
    ED25519_SPKI_PREFIX,
    InvalidInputError,
    NotInitializedError,
    PUBLIC_KEY_DER_SIZE,
    SIGNATURE_SIZE,
    SigningContext,
    create_signing_context,
    digest_email,
)


# RFC 8032, section 7.1, TEST 1
RFC8032_SEED = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
RFC8032_PUBLIC_KEY = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")
RFC8032_EMPTY_SIGNATURE = bytes.fromhex(
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)


class TestSigningContextLifecycle:
    """Initialization rules"""

    def test_sign_before_initialize_raises(self):
        context = SigningContext()
        with pytest.raises(NotInitializedError):
            context.sign(digest_email("user@example.test"))

    def test_public_key_before_initialize_raises(self):
        context = SigningContext()
        with pytest.raises(NotInitializedError):
            context.public_key()

    def test_initialized_flag(self):
        context = SigningContext()
        assert context.initialized is False
        context.initialize()
        assert context.initialized is True

    def test_initialize_twice_keeps_key(self):
        context = SigningContext()
        context.initialize()
        first = context.public_key()
        context.initialize()
        assert context.public_key() == first

    def test_concurrent_initialize_generates_one_key(self):
        context = SigningContext()
        threads = [threading.Thread(target=context.initialize) for _ in range(8)]
        with patch(
            "backend.core.identity.keys.Ed25519PrivateKey.generate",
            wraps=Ed25519PrivateKey.generate,
        ) as generate:
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        assert generate.call_count == 1

    def test_generation_failure_raises_crypto_init_error(self):
        context = SigningContext()
        with patch(
            "backend.core.identity.keys.Ed25519PrivateKey.generate",
            side_effect=RuntimeError("no entropy"),
        ):
            with pytest.raises(CryptoInitError, match="Crypto initialization failed"):
                context.initialize()
        assert context.initialized is False

    def test_create_signing_context_is_initialized(self):
        assert create_signing_context().initialized is True

    def test_separate_contexts_have_separate_keys(self):
        assert create_signing_context().public_key() != create_signing_context().public_key()


class TestSigning:
    """sign() and public_key() contracts"""

    def test_public_key_is_spki_der(self, signing_context):
        public_key = signing_context.public_key()
        assert len(public_key) == PUBLIC_KEY_DER_SIZE == 44
        assert public_key[:12] == ED25519_SPKI_PREFIX

    def test_signature_length(self, signing_context):
        assert len(signing_context.sign(digest_email("user@example.test"))) == SIGNATURE_SIZE == 64

    def test_signature_is_deterministic(self, signing_context):
        digest = digest_email("user@example.test")
        assert signing_context.sign(digest) == signing_context.sign(digest)

    def test_signs_digest_without_prehash(self, signing_context):
        """The signature verifies with the digest itself as the message"""
        from cryptography.hazmat.primitives import serialization

        digest = digest_email("user@example.test")
        signature = signing_context.sign(digest)
        key = serialization.load_der_public_key(signing_context.public_key())
        assert isinstance(key, Ed25519PublicKey)
        key.verify(signature, digest)  # raises InvalidSignature on failure

    def test_sign_rejects_non_bytes(self, signing_context):
        with pytest.raises(InvalidInputError):
            signing_context.sign("not bytes")

    def test_sign_accepts_bytearray(self, signing_context):
        digest = digest_email("user@example.test")
        assert signing_context.sign(bytearray(digest)) == signing_context.sign(digest)


class TestKnownKey:
    """RFC 8032 test vector 1"""

    def test_public_key_matches_vector(self):
        context = SigningContext.from_private_bytes(RFC8032_SEED)
        assert context.public_key() == ED25519_SPKI_PREFIX + RFC8032_PUBLIC_KEY

    def test_signature_matches_vector(self):
        context = SigningContext.from_private_bytes(RFC8032_SEED)
        assert context.sign(b"") == RFC8032_EMPTY_SIGNATURE

    def test_invalid_seed_raises(self):
        with pytest.raises(CryptoInitError):
            SigningContext.from_private_bytes(b"too short")
