"""
Vault Connector Interface.

Both connectors implement this protocol independently; callers pick
one through a ``VaultConnectorRegistry`` and never branch on the
concrete class.
"""
from typing import Any, Optional, Protocol, runtime_checkable

from .models import NameLike, VaultEncryptionType, VaultKeyMaterial, VaultKeyType


@runtime_checkable
class IVaultConnector(Protocol):
    """Uniform key-management and secret-storage contract."""

    async def bootstrap(self, logger_name: Optional[str] = None) -> bool:
        """Check connectivity and log the outcome; never raises."""

    async def create_key(self, name: NameLike, key_type: VaultKeyType) -> bytes:
        """Create a key, returning its public key (raw key if symmetric)."""

    async def add_key(
        self,
        name: NameLike,
        key_type: VaultKeyType,
        private_key: bytes,
        public_key: Optional[bytes],
    ) -> None:
        """Store caller-supplied key material."""

    async def get_key(self, name: NameLike) -> VaultKeyMaterial:
        """Return the type and material of a key."""

    async def rename_key(self, name: NameLike, new_name: NameLike) -> None:
        """Move a key to a new name, keeping its material."""

    async def remove_key(self, name: NameLike) -> None:
        """Destroy a key."""

    async def sign(self, name: NameLike, data: bytes) -> bytes:
        """Sign ``data`` with a key."""

    async def verify(self, name: NameLike, data: bytes, signature: bytes) -> bool:
        """Verify a signature made with a key."""

    async def encrypt(
        self, name: NameLike, encryption_type: VaultEncryptionType, data: bytes
    ) -> bytes:
        """Encrypt ``data`` with a key."""

    async def decrypt(
        self, name: NameLike, encryption_type: VaultEncryptionType, data: bytes
    ) -> bytes:
        """Decrypt data produced by ``encrypt``."""

    async def set_secret(self, name: NameLike, data: Any) -> None:
        """Store or overwrite a secret."""

    async def get_secret(self, name: NameLike) -> Any:
        """Return a stored secret."""

    async def remove_secret(self, name: NameLike) -> None:
        """Destroy a secret."""
