"""
Identity Signing Errors

Failures raised by the digest, signing and batch codec layers.
Signature verification never raises: a bad signature is a False result.
"""


class IdentityError(Exception):
    """Base class for identity signing failures."""


class InvalidInputError(IdentityError, ValueError):
    """Malformed input to a pure function (e.g. an empty email)."""


class NotInitializedError(IdentityError, RuntimeError):
    """Signing context used before initialize() completed."""


class CryptoInitError(IdentityError, RuntimeError):
    """Key generation failed; the process must not start without a key."""


class CodecError(IdentityError):
    """Base class for batch codec failures."""


class EncodeError(CodecError):
    """A record cannot be represented in the UserList wire schema."""


class DecodeError(CodecError):
    """Input bytes are truncated or not a valid UserList message."""
