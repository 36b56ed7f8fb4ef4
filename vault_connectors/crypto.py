"""
Vault Crypto Core — key generation, signatures, AEAD and serialization.

Implements the primitives used by the entity storage connector:
- Key entropy: random BIP-39 mnemonic → seed → sliced private key
- Signatures: Ed25519, and ECDSA over Secp256k1 (SHA-256, 64-byte r||s)
- Encryption: ChaCha20-Poly1305 → [nonce 12B][ciphertext + tag 16B]

Security Note:
    Never log private keys, plaintext or ciphertext values.
    Nonces are random 96-bit; collision probability negligible under normal usage.
"""
import os
import base64
from typing import Any, Optional

import orjson
from mnemonic import Mnemonic
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .models import VaultKeyType

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # Poly1305 tag
MNEMONIC_STRENGTH = 256  # 24 words

ED25519_PRIVATE_KEY_SIZE = 32
SECP256K1_PRIVATE_KEY_SIZE = 32
CHACHA20_KEY_SIZE = 32
SECP256K1_SIGNATURE_SIZE = 64

PRIVATE_KEY_SIZES: dict[VaultKeyType, int] = {
    VaultKeyType.Ed25519: ED25519_PRIVATE_KEY_SIZE,
    VaultKeyType.Secp256k1: SECP256K1_PRIVATE_KEY_SIZE,
    VaultKeyType.ChaCha20Poly1305: CHACHA20_KEY_SIZE,
}

# Order of the secp256k1 group, used for low-S normalization.
_SECP256K1_ORDER = int(
    "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16
)

_BYTES_WRAPPER_KEY = "__vault_bytes_b64__"

_mnemonic = Mnemonic("english")


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------

def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(data: str) -> bytes:
    """Strict decode; characters outside the alphabet raise binascii.Error."""
    return base64.b64decode(data, validate=True)


def bytes_to_base64url(data: bytes) -> str:
    """Unpadded base64url, as used by JWT segments."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_to_bytes(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.b64decode(data + padding, altchars=b"-_", validate=True)


def random_bytes(length: int) -> bytes:
    return os.urandom(length)


# ---------------------------------------------------------------------------
# Key generation
# ---------------------------------------------------------------------------

def random_mnemonic(strength: int = MNEMONIC_STRENGTH) -> str:
    """Generate a random BIP-39 mnemonic phrase."""
    return _mnemonic.generate(strength=strength)


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """Derive the 64-byte BIP-39 seed for a mnemonic."""
    return Mnemonic.to_seed(mnemonic, passphrase=passphrase)


def generate_private_key(key_type: VaultKeyType) -> bytes:
    """Generate private key material for ``key_type``.

    A fresh mnemonic is turned into a seed, and the seed is sliced to
    the private key size of the algorithm.
    """
    seed = mnemonic_to_seed(random_mnemonic())
    return seed[:PRIVATE_KEY_SIZES[key_type]]


def public_key_from_private_key(
    key_type: VaultKeyType, private_key: bytes
) -> Optional[bytes]:
    """Derive the public key; None for symmetric key types.

    Secp256k1 public keys are returned SEC1-compressed (33 bytes).
    """
    if key_type == VaultKeyType.Ed25519:
        return (
            ed25519.Ed25519PrivateKey.from_private_bytes(private_key)
            .public_key()
            .public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
        )
    if key_type == VaultKeyType.Secp256k1:
        return (
            _secp256k1_private_key(private_key)
            .public_key()
            .public_bytes(
                serialization.Encoding.X962,
                serialization.PublicFormat.CompressedPoint,
            )
        )
    return None


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------

def _secp256k1_private_key(private_key: bytes) -> ec.EllipticCurvePrivateKey:
    if len(private_key) != SECP256K1_PRIVATE_KEY_SIZE:
        raise ValueError(
            f"Secp256k1 private key must be {SECP256K1_PRIVATE_KEY_SIZE} bytes, "
            f"got {len(private_key)}"
        )
    return ec.derive_private_key(int.from_bytes(private_key, "big"), ec.SECP256K1())


def ed25519_sign(private_key: bytes, data: bytes) -> bytes:
    return ed25519.Ed25519PrivateKey.from_private_bytes(private_key).sign(data)


def ed25519_verify(public_key: bytes, data: bytes, signature: bytes) -> bool:
    key = ed25519.Ed25519PublicKey.from_public_bytes(public_key)
    try:
        key.verify(signature, data)
    except InvalidSignature:
        return False
    return True


def secp256k1_sign(private_key: bytes, data: bytes) -> bytes:
    """Sign SHA-256(data) and return the compact low-S ``r || s`` form."""
    der = _secp256k1_private_key(private_key).sign(data, ec.ECDSA(hashes.SHA256()))
    r, s = decode_dss_signature(der)
    if s > _SECP256K1_ORDER // 2:
        s = _SECP256K1_ORDER - s
    return r.to_bytes(32, "big") + s.to_bytes(32, "big")


def secp256k1_verify(public_key: bytes, data: bytes, signature: bytes) -> bool:
    if len(signature) != SECP256K1_SIGNATURE_SIZE:
        return False
    key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), public_key)
    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:], "big")
    try:
        key.verify(encode_dss_signature(r, s), data, ec.ECDSA(hashes.SHA256()))
    except InvalidSignature:
        return False
    return True


def sign(key_type: VaultKeyType, private_key: bytes, data: bytes) -> bytes:
    """Sign ``data`` with an asymmetric key.

    Raises:
        ValueError: If ``key_type`` is symmetric.
    """
    if key_type == VaultKeyType.Ed25519:
        return ed25519_sign(private_key, data)
    if key_type == VaultKeyType.Secp256k1:
        return secp256k1_sign(private_key, data)
    raise ValueError(f"Key type {key_type.value} cannot sign")


def verify(
    key_type: VaultKeyType, public_key: bytes, data: bytes, signature: bytes
) -> bool:
    """Verify a signature made by ``sign``.

    Raises:
        ValueError: If ``key_type`` is symmetric.
    """
    if key_type == VaultKeyType.Ed25519:
        return ed25519_verify(public_key, data, signature)
    if key_type == VaultKeyType.Secp256k1:
        return secp256k1_verify(public_key, data, signature)
    raise ValueError(f"Key type {key_type.value} cannot verify")


# ---------------------------------------------------------------------------
# Authenticated encryption
# ---------------------------------------------------------------------------

def chacha20_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt with ChaCha20-Poly1305 under a fresh nonce.

    Format: [nonce 12B][encrypted_payload + tag 16B]

    Args:
        key: 32-byte symmetric key.
        plaintext: Data to encrypt, may be empty.

    Returns:
        Nonce-prefixed ciphertext.
    """
    cipher = ChaCha20Poly1305(key)
    nonce = random_bytes(NONCE_SIZE)
    ct = cipher.encrypt(nonce, plaintext, None)
    return nonce + ct


def chacha20_decrypt(key: bytes, envelope: bytes) -> bytes:
    """Decrypt a nonce-prefixed ChaCha20-Poly1305 envelope.

    Raises:
        ValueError: If the envelope is shorter than nonce + tag.
        cryptography.exceptions.InvalidTag: If authentication fails.
    """
    _min = NONCE_SIZE + TAG_SIZE
    if len(envelope) < _min:
        raise ValueError(
            f"envelope too short: {len(envelope)} bytes (minimum {_min})"
        )
    cipher = ChaCha20Poly1305(key)
    nonce = envelope[:NONCE_SIZE]
    ct = envelope[NONCE_SIZE:]
    return cipher.decrypt(nonce, ct, None)


# ---------------------------------------------------------------------------
# Value serialization
# ---------------------------------------------------------------------------

def serialize_value(value: Any) -> str:
    """Serialize a Python value to JSON text.

    Supports: str, int, float, dict, list, bytes, bool, None.
    bytes values are wrapped as {"__vault_bytes_b64__": "<base64>"} for safe JSON round-trip.
    """
    if isinstance(value, bytes):
        wrapped = {_BYTES_WRAPPER_KEY: bytes_to_base64(value)}
        return orjson.dumps(wrapped).decode("utf-8")
    return orjson.dumps(value).decode("utf-8")


def deserialize_value(data: str) -> Any:
    """Deserialize JSON text produced by serialize_value."""
    parsed = orjson.loads(data)
    if isinstance(parsed, dict) and _BYTES_WRAPPER_KEY in parsed and len(parsed) == 1:
        return base64_to_bytes(parsed[_BYTES_WRAPPER_KEY])
    return parsed
