"""
ed25519 key reconstruction and verification.

solana-vanity prints either a 32-byte seed or a full 64-byte secret key
(seed followed by public key). Both are normalised to the 64-byte form.
"""

from dataclasses import dataclass

import base58
from nacl.signing import SigningKey

from vanity_queue.constants import PUBLIC_KEY_LENGTH, SECRET_KEY_LENGTH, SEED_LENGTH
from vanity_queue.errors import IntegrityFailure, ParseFailure


@dataclass(frozen=True)
class Seed:
    """A 32-byte ed25519 seed."""

    value: bytes


@dataclass(frozen=True)
class FullKey:
    """A full secret key as reported by the tool, used as-is."""

    value: bytes


SecretKeyMaterial = Seed | FullKey


def decode_secret(encoded: str) -> SecretKeyMaterial:
    """
    Decode a base58 private key and classify it by length.

    Raises:
        ParseFailure: If the text is not valid base58.
    """
    try:
        raw = base58.b58decode(encoded)
    except ValueError as e:
        raise ParseFailure(f"Failed to parse keypair: {e}") from e

    if len(raw) == SEED_LENGTH:
        return Seed(raw)
    return FullKey(raw)


def public_key_from_seed(seed: bytes) -> bytes:
    """Derive the ed25519 public key for a 32-byte seed."""
    return bytes(SigningKey(seed).verify_key)


def expand_secret(material: SecretKeyMaterial) -> bytes:
    """
    Return the 64-byte secret key for the given material.

    A full key is checked for consistency: its trailing half must be the
    public key of its leading half.

    Raises:
        IntegrityFailure: If a full key is malformed.
    """
    match material:
        case Seed(value=seed):
            return seed + public_key_from_seed(seed)
        case FullKey(value=secret):
            if len(secret) != SECRET_KEY_LENGTH:
                raise IntegrityFailure(
                    f"Invalid secret key length: {len(secret)} bytes"
                )
            if public_key_from_seed(secret[:SEED_LENGTH]) != secret[SEED_LENGTH:]:
                raise IntegrityFailure("Invalid secret key: embedded public key does not match")
            return secret


def derive_public_key(secret_key: bytes) -> bytes:
    """Re-derive the public key from a 64-byte secret key."""
    return public_key_from_seed(secret_key[:SEED_LENGTH])


def verify_keypair(address: str, secret_key: bytes) -> str:
    """
    Check that `secret_key` belongs to `address`.

    Returns:
        The canonical base58 public key derived from the secret key.

    Raises:
        IntegrityFailure: If the derived key differs from the address.
    """
    derived = derive_public_key(secret_key)
    try:
        reported = base58.b58decode(address)
    except ValueError as e:
        raise IntegrityFailure(f"Public key mismatch: undecodable address {address!r}") from e

    if len(reported) != PUBLIC_KEY_LENGTH or reported != derived:
        raise IntegrityFailure("Public key mismatch")
    return base58.b58encode(derived).decode("ascii")


def encode_secret(secret_key: bytes) -> str:
    """Base58-encode a secret key."""
    return base58.b58encode(secret_key).decode("ascii")
