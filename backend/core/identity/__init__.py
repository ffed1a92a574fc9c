"""
Identity Signing Module

SHA-384 email digests signed with a process-wide Ed25519 keypair, and the
protobuf batch codec used to export signed records.

Submodules load on first attribute access, so a client that only needs the
codec (backend.core.identity.codec) never imports the signer.
"""
import importlib

_EXPORTS = {
    # Digest
    "DIGEST_SIZE": "digest",
    "digest_email": "digest",
    # Keys
    "ED25519_SPKI_PREFIX": "keys",
    "PUBLIC_KEY_DER_SIZE": "keys",
    "SIGNATURE_SIZE": "keys",
    "SigningContext": "keys",
    "create_signing_context": "keys",
    # Records
    "SignedIdentity": "records",
    "sign_identity": "records",
    "verify_identity": "records",
    # Codec
    "IdentityEntry": "codec",
    "encode_user_list": "codec",
    "decode_user_list": "codec",
    # Errors
    "IdentityError": "errors",
    "InvalidInputError": "errors",
    "NotInitializedError": "errors",
    "CryptoInitError": "errors",
    "CodecError": "errors",
    "EncodeError": "errors",
    "DecodeError": "errors",
}


def __getattr__(name: str):
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = getattr(importlib.import_module(f".{module_name}", __name__), name)
    globals()[name] = value
    return value


def __dir__():
    return sorted(list(globals()) + list(_EXPORTS))


__all__ = list(_EXPORTS)
