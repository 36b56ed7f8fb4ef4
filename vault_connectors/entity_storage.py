"""
EntityStorageVaultConnector — keys and secrets held in entity storage.

Key material is generated and used in-process; the record stores only
persist it. Provides the ``IVaultConnector`` API:

- ``create_key`` / ``add_key`` / ``get_key`` / ``rename_key`` / ``remove_key``
- ``sign`` / ``verify`` (Ed25519, Secp256k1)
- ``encrypt`` / ``decrypt`` (ChaCha20-Poly1305, nonce-prefixed envelope)
- ``set_secret`` / ``get_secret`` / ``remove_secret``

Security Note:
    Records hold private keys in base64. Protect the backing storage
    accordingly. Never log key material, only key names.
"""
import logging
from typing import Any, Optional

import jsonpickle
from jsonpickle.unpickler import loadclass
from datamodel import BaseModel
from pydantic import BaseModel as PydanticBaseModel

from . import crypto, guards
from .exceptions import AlreadyExistsError, GeneralError, NotFoundError
from .models import (
    NameLike,
    VaultEncryptionType,
    VaultKey,
    VaultKeyMaterial,
    VaultKeyType,
    VaultName,
    VaultSecret,
)
from .storage import EntityStorage, MemoryEntityStorage

logger = logging.getLogger("vault.connectors")


class SecretModelHandler(jsonpickle.handlers.BaseHandler):
    """Encode model instances stored as secrets by their ``__dict__``.

    Registered for datamodel and pydantic models, so a model passed to
    ``set_secret`` comes back from ``get_secret`` as the same class.
    """
    def flatten(self, obj, data):
        data['__dict__'] = self.context.flatten(obj.__dict__, reset=False)
        return data

    def restore(self, obj):
        mdl = loadclass(obj['py/object'])
        state = self.context.restore(obj['__dict__'], reset=False)
        if issubclass(mdl, PydanticBaseModel):
            return mdl.model_construct(**state)
        instance = mdl.__new__(mdl)
        instance.__dict__ = state
        return instance


jsonpickle.handlers.registry.register(BaseModel, SecretModelHandler, base=True)
jsonpickle.handlers.registry.register(PydanticBaseModel, SecretModelHandler, base=True)


class EntityStorageVaultConnector:
    """Vault connector performing all cryptography locally.

    Multi-step operations (existence check then write, rename) are not
    atomic: concurrent callers on the same name must serialize
    externally.
    """

    NAMESPACE = "entity-storage"
    CLASS_NAME = "EntityStorageVaultConnector"

    def __init__(
        self,
        key_storage: Optional[EntityStorage[VaultKey]] = None,
        secret_storage: Optional[EntityStorage[VaultSecret]] = None,
    ):
        self._keys = key_storage or MemoryEntityStorage(VaultKey)
        self._secrets = secret_storage or MemoryEntityStorage(VaultSecret)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_key(self, name: VaultName) -> VaultKey:
        record = await self._keys.get(name.id, partition=name.partition)
        if record is None:
            raise NotFoundError(self.CLASS_NAME, "keyNotFound", name.path)
        return record

    async def _ensure_absent(self, name: VaultName) -> None:
        existing = await self._keys.get(name.id, partition=name.partition)
        if existing is not None:
            raise AlreadyExistsError(self.CLASS_NAME, "keyAlreadyExists", name.path)

    def _store_key(
        self,
        name: VaultName,
        key_type: VaultKeyType,
        private_key: bytes,
        public_key: Optional[bytes],
    ) -> VaultKey:
        return VaultKey(
            id=name.id,
            key_type=key_type.value,
            private_key=crypto.bytes_to_base64(private_key),
            public_key=(
                crypto.bytes_to_base64(public_key) if public_key is not None else None
            ),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def bootstrap(self, logger_name: Optional[str] = None) -> bool:
        """Nothing to connect to; logs and reports success."""
        logging.getLogger(logger_name or "vault.connectors").info(
            "%s bootstrapped (namespace=%s)", self.CLASS_NAME, self.NAMESPACE
        )
        return True

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    async def create_key(self, name: NameLike, key_type: VaultKeyType) -> bytes:
        """Create a key in the vault.

        Args:
            name: Name of the key.
            key_type: Algorithm of the key.

        Returns:
            The public key, or the raw key itself for symmetric types.
            Symmetric key material leaves the vault here.

        Raises:
            GuardError: On invalid arguments.
            AlreadyExistsError: If the name is taken.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        key_type = guards.one_of(self.CLASS_NAME, "type", key_type, VaultKeyType)

        await self._ensure_absent(key_name)

        private_key = crypto.generate_private_key(key_type)
        public_key = crypto.public_key_from_private_key(key_type, private_key)

        await self._keys.set(
            self._store_key(key_name, key_type, private_key, public_key),
            partition=key_name.partition,
        )
        logger.debug("Key created: name=%s type=%s", key_name, key_type.value)
        return public_key if public_key is not None else private_key

    async def add_key(
        self,
        name: NameLike,
        key_type: VaultKeyType,
        private_key: bytes,
        public_key: Optional[bytes] = None,
    ) -> None:
        """Add caller-supplied key material.

        ``public_key`` is required for asymmetric types and ignored for
        symmetric ones.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        key_type = guards.one_of(self.CLASS_NAME, "type", key_type, VaultKeyType)
        private_key = guards.bytes_value(self.CLASS_NAME, "privateKey", private_key)
        if key_type.asymmetric:
            public_key = guards.bytes_value(self.CLASS_NAME, "publicKey", public_key)
        else:
            public_key = None

        await self._ensure_absent(key_name)

        await self._keys.set(
            self._store_key(key_name, key_type, private_key, public_key),
            partition=key_name.partition,
        )
        logger.debug("Key added: name=%s type=%s", key_name, key_type.value)

    async def get_key(self, name: NameLike) -> VaultKeyMaterial:
        key_name = guards.name(self.CLASS_NAME, "name", name)
        record = await self._require_key(key_name)
        return VaultKeyMaterial(
            type=VaultKeyType(record.key_type),
            private_key=crypto.base64_to_bytes(record.private_key),
            public_key=(
                crypto.base64_to_bytes(record.public_key)
                if record.public_key is not None else None
            ),
        )

    async def rename_key(self, name: NameLike, new_name: NameLike) -> None:
        """Move a key to ``new_name``.

        The old record is removed before the new one is written; a
        failure in between loses the key.

        Raises:
            NotFoundError: If ``name`` does not exist.
            AlreadyExistsError: If ``new_name`` is taken.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        target = guards.name(self.CLASS_NAME, "newName", new_name)

        record = await self._require_key(key_name)
        await self._ensure_absent(target)

        await self._keys.remove(key_name.id, partition=key_name.partition)
        await self._keys.set(
            VaultKey(
                id=target.id,
                key_type=record.key_type,
                private_key=record.private_key,
                public_key=record.public_key,
            ),
            partition=target.partition,
        )
        logger.debug("Key renamed: %s -> %s", key_name, target)

    async def remove_key(self, name: NameLike) -> None:
        key_name = guards.name(self.CLASS_NAME, "name", name)
        await self._require_key(key_name)
        await self._keys.remove(key_name.id, partition=key_name.partition)
        logger.debug("Key removed: name=%s", key_name)

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    async def sign(self, name: NameLike, data: bytes) -> bytes:
        key_name = guards.name(self.CLASS_NAME, "name", name)
        data = guards.bytes_value(self.CLASS_NAME, "data", data)

        record = await self._require_key(key_name)
        key_type = VaultKeyType(record.key_type)
        try:
            return crypto.sign(
                key_type, crypto.base64_to_bytes(record.private_key), data
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "signFailed",
                {"name": key_name.path, "type": key_type.value},
            ) from err

    async def verify(self, name: NameLike, data: bytes, signature: bytes) -> bool:
        key_name = guards.name(self.CLASS_NAME, "name", name)
        data = guards.bytes_value(self.CLASS_NAME, "data", data)
        signature = guards.bytes_value(self.CLASS_NAME, "signature", signature)

        record = await self._require_key(key_name)
        key_type = VaultKeyType(record.key_type)
        try:
            return crypto.verify(
                key_type,
                crypto.base64_to_bytes(record.public_key or ""),
                data,
                signature,
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "verifyFailed",
                {"name": key_name.path, "type": key_type.value},
            ) from err

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    async def encrypt(
        self,
        name: NameLike,
        encryption_type: VaultEncryptionType,
        data: bytes,
    ) -> bytes:
        """Encrypt ``data`` with the key's private material.

        Returns:
            ``nonce || ciphertext``, decryptable with ``decrypt``.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        encryption_type = guards.one_of(
            self.CLASS_NAME, "encryptionType", encryption_type, VaultEncryptionType
        )
        data = guards.bytes_value(self.CLASS_NAME, "data", data)

        record = await self._require_key(key_name)
        try:
            return crypto.chacha20_encrypt(
                crypto.base64_to_bytes(record.private_key), data
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "encryptFailed",
                {"name": key_name.path, "encryptionType": encryption_type.value},
            ) from err

    async def decrypt(
        self,
        name: NameLike,
        encryption_type: VaultEncryptionType,
        data: bytes,
    ) -> bytes:
        key_name = guards.name(self.CLASS_NAME, "name", name)
        encryption_type = guards.one_of(
            self.CLASS_NAME, "encryptionType", encryption_type, VaultEncryptionType
        )
        data = guards.bytes_value(self.CLASS_NAME, "encryptedData", data)

        record = await self._require_key(key_name)
        try:
            return crypto.chacha20_decrypt(
                crypto.base64_to_bytes(record.private_key), data
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "decryptFailed",
                {"name": key_name.path, "encryptionType": encryption_type.value},
            ) from err

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------

    async def set_secret(self, name: NameLike, data: Any) -> None:
        """Store a secret, overwriting any previous value.

        Values are encoded with jsonpickle, so bytes, datetimes and
        models round-trip.
        """
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        guards.defined(self.CLASS_NAME, "data", data)

        try:
            encoded = jsonpickle.encode(data)
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "setSecretFailed", {"name": secret_name.path}
            ) from err

        await self._secrets.set(
            VaultSecret(id=secret_name.id, data=encoded),
            partition=secret_name.partition,
        )
        logger.debug("Secret set: name=%s", secret_name)

    async def get_secret(self, name: NameLike) -> Any:
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        record = await self._secrets.get(secret_name.id, partition=secret_name.partition)
        if record is None:
            raise NotFoundError(self.CLASS_NAME, "secretNotFound", secret_name.path)
        try:
            return jsonpickle.decode(record.data)
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "getSecretFailed", {"name": secret_name.path}
            ) from err

    async def remove_secret(self, name: NameLike) -> None:
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        record = await self._secrets.get(secret_name.id, partition=secret_name.partition)
        if record is None:
            raise NotFoundError(self.CLASS_NAME, "secretNotFound", secret_name.path)
        await self._secrets.remove(secret_name.id, partition=secret_name.partition)
        logger.debug("Secret removed: name=%s", secret_name)
