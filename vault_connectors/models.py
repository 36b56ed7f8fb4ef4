"""
Vault Models — key types, structured names and stored records.

Records are the shape persisted by the entity storage connector:
key material and secret payloads travel as text (base64 or encoded
JSON), never as raw bytes.
"""
from enum import Enum
from typing import NamedTuple, Optional, Union

from datamodel import BaseModel


class VaultKeyType(str, Enum):
    """The types of keys that can be created in the vault."""

    Ed25519 = "Ed25519"
    Secp256k1 = "Secp256k1"
    ChaCha20Poly1305 = "ChaCha20Poly1305"

    @property
    def asymmetric(self) -> bool:
        return self in _ASYMMETRIC_KEY_TYPES


_ASYMMETRIC_KEY_TYPES = frozenset({VaultKeyType.Ed25519, VaultKeyType.Secp256k1})


class VaultEncryptionType(str, Enum):
    """The types of encryption that can be performed in the vault."""

    ChaCha20Poly1305 = "ChaCha20Poly1305"


class VaultName(NamedTuple):
    """Structured name of a key or secret.

    ``identity`` namespaces the name inside a partition, ``partition``
    selects the tenant. A bare ``str`` is equivalent to
    ``VaultName(name)``.
    """

    name: str
    identity: Optional[str] = None
    partition: Optional[str] = None

    @property
    def id(self) -> str:
        """Record id inside a partition: ``identity/name`` or ``name``."""
        if self.identity:
            return f"{self.identity}/{self.name}"
        return self.name

    @property
    def path(self) -> str:
        """Backend path segment, with the partition as leading component."""
        if self.partition:
            return f"{self.partition}/{self.id}"
        return self.id

    def __str__(self) -> str:
        return self.path


NameLike = Union[str, VaultName]


class VaultKeyMaterial(NamedTuple):
    """Key material as returned by ``get_key``.

    ``public_key`` is None for symmetric key types.
    """

    type: VaultKeyType
    private_key: bytes
    public_key: Optional[bytes] = None


class VaultKey(BaseModel):
    """Stored vault key, material in base64."""

    id: str
    key_type: str
    private_key: str
    public_key: Optional[str] = None


class VaultSecret(BaseModel):
    """Stored vault secret, data as encoded text."""

    id: str
    data: str
