"""
HashicorpVaultConnector — keys in the Transit engine, secrets in KV-v2.

Translates the ``IVaultConnector`` API into Vault REST calls:

- keys: ``{transit}/keys``, ``export``, ``sign``, ``verify``, ``encrypt``,
  ``decrypt``, ``backup``, ``restore``
- secrets: ``{kv}/data``, ``{kv}/metadata``, ``{kv}/destroy``

Keys are created exportable with plaintext backup allowed, so their
material can be read back by ``get_key`` and moved by ``rename_key``.
Multi-call operations (create, rename, remove) are not atomic; a
failure part way leaves the backend in the furthest state reached.

Security Note:
    Never log the token, key material, plaintext or ciphertext.
"""
import binascii
import logging
import re
from typing import Any, Optional, Union
from urllib.parse import quote

import orjson
from pydantic import ValidationError

from .. import crypto, guards
from ..exceptions import (
    AlreadyExistsError,
    GeneralError,
    GuardError,
    NotFoundError,
    NotSupportedError,
    is_http_status,
)
from ..models import (
    NameLike,
    VaultEncryptionType,
    VaultKeyMaterial,
    VaultKeyType,
    VaultName,
)
from .client import VaultHttpClient
from .config import HashicorpVaultConfig

logger = logging.getLogger("vault.connectors.hashicorp")

SIGNATURE_PREFIX = "vault:v1:"
_SIGNATURE_PREFIX_RE = re.compile(r"^vault:v\d+:")

_KEY_TYPE_TO_HASHICORP: dict[VaultKeyType, str] = {
    VaultKeyType.Ed25519: "ed25519",
    VaultKeyType.ChaCha20Poly1305: "chacha20-poly1305",
}
_HASHICORP_TO_KEY_TYPE = {v: k for k, v in _KEY_TYPE_TO_HASHICORP.items()}


def _data(response: Optional[dict[str, Any]]) -> dict[str, Any]:
    """The ``data`` member of a Vault response, or an empty dict."""
    if isinstance(response, dict) and isinstance(response.get("data"), dict):
        return response["data"]
    return {}


def _latest(keys: dict[str, Any]) -> Any:
    """Value of the highest version in a ``{version: value}`` map."""
    return keys[max(keys, key=int)]


class HashicorpVaultConnector:
    """Vault connector backed by a HashiCorp Vault server."""

    NAMESPACE = "hashicorp"
    CLASS_NAME = "HashicorpVaultConnector"

    def __init__(
        self,
        config: Union[HashicorpVaultConfig, dict[str, Any]],
        client: Optional[VaultHttpClient] = None,
    ):
        guards.defined(self.CLASS_NAME, "config", config)
        if isinstance(config, HashicorpVaultConfig):
            self._config = config
        else:
            try:
                self._config = HashicorpVaultConfig.model_validate(config)
            except ValidationError as err:
                failed = ", ".join(
                    ".".join(str(loc) for loc in e["loc"]) for e in err.errors()
                )
                raise GuardError(
                    self.CLASS_NAME, "guard.config", "config", failed
                ) from err
        self._client = client or VaultHttpClient(self._config)
        self._kv = self._config.kv_mount_path
        self._transit = self._config.transit_mount_path

    @property
    def config(self) -> HashicorpVaultConfig:
        return self._config

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @staticmethod
    def _segment(name: VaultName) -> str:
        return quote(name.path, safe="/")

    def secret_path(self, name: VaultName) -> str:
        return f"{self._kv}/data/{self._segment(name)}"

    def secret_metadata_path(self, name: VaultName) -> str:
        return f"{self._kv}/metadata/{self._segment(name)}"

    def secret_destroy_path(self, name: VaultName) -> str:
        return f"{self._kv}/destroy/{self._segment(name)}"

    def transit_key_path(self, name: VaultName) -> str:
        return f"{self._transit}/keys/{self._segment(name)}"

    def transit_key_config_path(self, name: VaultName) -> str:
        return f"{self.transit_key_path(name)}/config"

    def transit_export_path(
        self, name: VaultName, kind: str, version: Optional[str] = None
    ) -> str:
        return (
            f"{self._transit}/export/{kind}/{self._segment(name)}/"
            f"{version or 'latest'}"
        )

    def transit_path(self, operation: str, name: VaultName) -> str:
        """Paths of the form ``{transit}/{operation}/{name}``.

        Used for sign, verify, encrypt, decrypt, backup and restore.
        """
        return f"{self._transit}/{operation}/{self._segment(name)}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def bootstrap(self, logger_name: Optional[str] = None) -> bool:
        """Probe ``/sys/health`` and log the outcome.

        Returns:
            True if Vault answered healthy, False otherwise. Never raises.
        """
        log = logging.getLogger(logger_name or "vault.connectors")
        try:
            await self._client.fetch("GET", "sys/health")
        except Exception as err:
            log.error(
                "HashiCorp Vault connection failed: endpoint=%s: %s",
                self._config.endpoint, err,
            )
            return False
        log.info("HashiCorp Vault connected: endpoint=%s", self._config.endpoint)
        return True

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "HashicorpVaultConnector":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Key type mapping
    # ------------------------------------------------------------------

    def _map_vault_key_type(self, key_type: VaultKeyType) -> str:
        try:
            return _KEY_TYPE_TO_HASHICORP[key_type]
        except KeyError:
            raise GeneralError(
                self.CLASS_NAME, "unsupportedKeyType", {"type": key_type.value}
            ) from None

    def _map_hashicorp_key_type(self, key_type: Any) -> VaultKeyType:
        try:
            return _HASHICORP_TO_KEY_TYPE[key_type]
        except (KeyError, TypeError):
            raise GeneralError(
                self.CLASS_NAME, "unsupportedKeyType", {"type": key_type}
            ) from None

    # ------------------------------------------------------------------
    # Key reads
    # ------------------------------------------------------------------

    async def _read_key(self, name: VaultName) -> dict[str, Any]:
        """Read key information.

        Raises:
            FetchError: With status 404 if the key does not exist.
            NotFoundError: If the response carries no key name.
            GeneralError: On any other failure.
        """
        try:
            response = await self._client.fetch("GET", self.transit_key_path(name))
        except Exception as err:
            if is_http_status(err, 404):
                raise
            raise GeneralError(
                self.CLASS_NAME, "invalidReadKeyResponse", {"name": name.path}
            ) from err
        data = _data(response)
        if not data.get("name"):
            raise NotFoundError(self.CLASS_NAME, "keyNotFound", name.path)
        return data

    async def _require_key(self, name: VaultName) -> dict[str, Any]:
        """Read a key, turning absence into NotFoundError."""
        try:
            return await self._read_key(name)
        except NotFoundError:
            raise
        except Exception as err:
            if is_http_status(err, 404):
                raise NotFoundError(self.CLASS_NAME, "keyNotFound", name.path) from err
            raise

    async def _export_private_key(
        self,
        name: VaultName,
        key_type: VaultKeyType,
        version: Optional[str] = None,
    ) -> bytes:
        """Export private key material.

        Asymmetric keys export their ``signing-key``, symmetric keys
        their ``encryption-key``. Ed25519 exports (seed || public key)
        are trimmed to the 32-byte seed.
        """
        kind = "signing-key" if key_type.asymmetric else "encryption-key"
        try:
            response = await self._client.fetch(
                "GET", self.transit_export_path(name, kind, version)
            )
        except Exception as err:
            if is_http_status(err, 404):
                raise NotFoundError(
                    self.CLASS_NAME, "privateKeyNotFound", name.path
                ) from err
            raise GeneralError(
                self.CLASS_NAME, "exportPrivateKeyFailed", {"name": name.path}
            ) from err

        keys = _data(response).get("keys")
        if not isinstance(keys, dict) or not keys:
            raise NotFoundError(self.CLASS_NAME, "privateKeyNotFound", name.path)
        try:
            private_key = crypto.base64_to_bytes(_latest(keys))
            if not private_key:
                raise ValueError("empty private key export")
        except (ValueError, TypeError, binascii.Error) as err:
            raise GeneralError(
                self.CLASS_NAME, "exportPrivateKeyFailed", {"name": name.path}
            ) from err
        if key_type == VaultKeyType.Ed25519:
            private_key = private_key[:crypto.ED25519_PRIVATE_KEY_SIZE]
        return private_key

    async def get_public_key(
        self, name: NameLike, version: Optional[str] = None
    ) -> bytes:
        """Export the public key of an asymmetric key.

        Args:
            name: Name of the key.
            version: Key version; the latest when omitted.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        try:
            response = await self._client.fetch(
                "GET", self.transit_export_path(key_name, "public-key", version)
            )
        except Exception as err:
            if is_http_status(err, 404):
                raise NotFoundError(
                    self.CLASS_NAME, "publicKeyNotFound", key_name.path
                ) from err
            raise GeneralError(
                self.CLASS_NAME, "exportPublicKeyFailed", {"name": key_name.path}
            ) from err

        keys = _data(response).get("keys")
        if not isinstance(keys, dict) or not keys:
            raise NotFoundError(self.CLASS_NAME, "publicKeyNotFound", key_name.path)
        try:
            public_key = crypto.base64_to_bytes(_latest(keys))
            if not public_key:
                raise ValueError("empty public key export")
        except (ValueError, TypeError, binascii.Error) as err:
            raise GeneralError(
                self.CLASS_NAME, "exportPublicKeyFailed", {"name": key_name.path}
            ) from err
        return public_key

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    async def create_key(self, name: NameLike, key_type: VaultKeyType) -> bytes:
        """Create an exportable key in the Transit engine.

        Returns:
            The public key for asymmetric types. For symmetric types the
            raw key is recovered from a plaintext backup and returned, so
            secret material leaves Vault.

        Raises:
            GuardError: On invalid arguments.
            AlreadyExistsError: If the key exists.
            GeneralError: If the type is unsupported by Transit or a call fails.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        key_type = guards.one_of(self.CLASS_NAME, "type", key_type, VaultKeyType)
        hashicorp_type = self._map_vault_key_type(key_type)

        try:
            await self._read_key(key_name)
        except NotFoundError:
            pass
        except Exception as err:
            if not is_http_status(err, 404):
                raise
        else:
            raise AlreadyExistsError(self.CLASS_NAME, "keyAlreadyExists", key_name.path)

        try:
            await self._client.fetch(
                "POST",
                self.transit_key_path(key_name),
                {
                    "type": hashicorp_type,
                    "exportable": True,
                    "allow_plaintext_backup": True,
                },
            )
            if key_type.asymmetric:
                public_key = await self.get_public_key(key_name)
            else:
                public_key = self._raw_key_from_backup(await self.backup_key(key_name))
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "createKeyFailed",
                {"name": key_name.path, "type": key_type.value},
            ) from err

        logger.debug("Key created: name=%s type=%s", key_name, hashicorp_type)
        return public_key

    def _raw_key_from_backup(self, backup: str) -> bytes:
        """Extract the latest raw key from a Transit plaintext backup.

        The backup is base64 JSON: ``{"policy": {"keys": {version: {"key": b64}}}}``.
        """
        try:
            policy = orjson.loads(crypto.base64_to_bytes(backup))["policy"]
            keys = policy["keys"]
            latest = policy.get("latest_version")
            entry = keys[str(latest)] if latest else _latest(keys)
            return crypto.base64_to_bytes(entry["key"])
        except (ValueError, KeyError, TypeError, binascii.Error) as err:
            raise GeneralError(self.CLASS_NAME, "invalidKeyBackup") from err

    async def add_key(
        self,
        name: NameLike,
        key_type: VaultKeyType,
        private_key: bytes,
        public_key: Optional[bytes] = None,
    ) -> None:
        """Not available: Transit only holds keys it generated itself."""
        raise NotSupportedError(self.CLASS_NAME, "addKeyNotSupported")

    async def get_key(self, name: NameLike) -> VaultKeyMaterial:
        """Export a key.

        ``public_key`` is None for symmetric keys.

        Raises:
            NotFoundError: If the key does not exist.
            GeneralError: If an export call fails.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        info = await self._require_key(key_name)

        try:
            key_type = self._map_hashicorp_key_type(info.get("type"))
            public_key = (
                await self.get_public_key(key_name) if key_type.asymmetric else None
            )
            private_key = await self._export_private_key(key_name, key_type)
        except NotFoundError:
            raise
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "getKeyFailed", {"name": key_name.path}
            ) from err

        return VaultKeyMaterial(
            type=key_type, private_key=private_key, public_key=public_key
        )

    async def rename_key(self, name: NameLike, new_name: NameLike) -> None:
        """Rename a key as backup, restore under ``new_name``, remove ``name``.

        A failure after the restore leaves both names holding the key.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        target = guards.name(self.CLASS_NAME, "newName", new_name)

        try:
            backup = await self.backup_key(key_name)
            await self.restore_key(target, backup)
            await self.remove_key(key_name)
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "renameKeyFailed",
                {"name": key_name.path, "newName": target.path},
            ) from err
        logger.debug("Key renamed: %s -> %s", key_name, target)

    async def remove_key(self, name: NameLike) -> None:
        """Allow deletion in the key config, then delete the key."""
        key_name = guards.name(self.CLASS_NAME, "name", name)
        await self._require_key(key_name)

        try:
            await self.update_key_config(key_name, deletion_allowed=True)
            await self._client.fetch("DELETE", self.transit_key_path(key_name))
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "removeKeyFailed", {"name": key_name.path}
            ) from err
        logger.debug("Key removed: name=%s", key_name)

    async def update_key_config(
        self,
        name: NameLike,
        deletion_allowed: Optional[bool] = None,
        exportable: Optional[bool] = None,
    ) -> None:
        """Update a key's config; only the given options are sent."""
        key_name = guards.name(self.CLASS_NAME, "name", name)
        payload: dict[str, Any] = {}
        if deletion_allowed is not None:
            payload["deletion_allowed"] = deletion_allowed
        if exportable is not None:
            payload["exportable"] = exportable

        try:
            await self._client.fetch(
                "POST", self.transit_key_config_path(key_name), payload
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "updateKeyConfigFailed", {"name": key_name.path}
            ) from err

    async def get_key_delete_configuration(self, name: NameLike) -> bool:
        """Return True if the key may be deleted."""
        key_name = guards.name(self.CLASS_NAME, "name", name)
        try:
            response = await self._client.fetch("GET", self.transit_key_path(key_name))
        except Exception as err:
            if is_http_status(err, 404):
                raise NotFoundError(
                    self.CLASS_NAME, "keyNotFound", key_name.path
                ) from err
            raise GeneralError(
                self.CLASS_NAME, "getKeyDeleteConfigurationFailed",
                {"name": key_name.path},
            ) from err

        allowed = _data(response).get("deletion_allowed")
        if not isinstance(allowed, bool):
            raise GeneralError(
                self.CLASS_NAME, "getKeyDeleteConfigurationFailed",
                {"name": key_name.path},
            )
        return allowed

    async def backup_key(self, name: NameLike) -> str:
        """Return the opaque base64 plaintext backup of a key."""
        key_name = guards.name(self.CLASS_NAME, "name", name)
        try:
            response = await self._client.fetch(
                "GET", self.transit_path("backup", key_name)
            )
        except Exception as err:
            if is_http_status(err, 404):
                raise NotFoundError(
                    self.CLASS_NAME, "backupKeyNotFound", key_name.path
                ) from err
            raise GeneralError(
                self.CLASS_NAME, "backupKeyFailed", {"name": key_name.path}
            ) from err

        backup = _data(response).get("backup")
        if not isinstance(backup, str) or not backup:
            raise NotFoundError(self.CLASS_NAME, "backupKeyNotFound", key_name.path)
        return backup

    async def restore_key(self, name: NameLike, backup: str) -> None:
        """Create ``name`` from a backup produced by ``backup_key``."""
        key_name = guards.name(self.CLASS_NAME, "name", name)
        backup = guards.string_value(self.CLASS_NAME, "backup", backup)
        try:
            await self._client.fetch(
                "POST", self.transit_path("restore", key_name), {"backup": backup}
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "restoreKeyFailed", {"name": key_name.path}
            ) from err

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    async def sign(self, name: NameLike, data: bytes) -> bytes:
        """Sign with Transit; the ``vault:vN:`` prefix is stripped."""
        key_name = guards.name(self.CLASS_NAME, "name", name)
        data = guards.bytes_value(self.CLASS_NAME, "data", data)
        await self._require_key(key_name)

        try:
            response = await self._client.fetch(
                "POST",
                self.transit_path("sign", key_name),
                {"input": crypto.bytes_to_base64(data)},
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "signDataFailed", {"name": key_name.path}
            ) from err

        signature = _data(response).get("signature")
        if not isinstance(signature, str) or not signature:
            raise GeneralError(
                self.CLASS_NAME, "invalidSignResponse", {"name": key_name.path}
            )
        try:
            decoded = crypto.base64_to_bytes(_SIGNATURE_PREFIX_RE.sub("", signature))
        except (ValueError, binascii.Error) as err:
            raise GeneralError(
                self.CLASS_NAME, "invalidSignResponse", {"name": key_name.path}
            ) from err
        if not decoded:
            raise GeneralError(
                self.CLASS_NAME, "invalidSignResponse", {"name": key_name.path}
            )
        return decoded

    async def verify(self, name: NameLike, data: bytes, signature: bytes) -> bool:
        key_name = guards.name(self.CLASS_NAME, "name", name)
        data = guards.bytes_value(self.CLASS_NAME, "data", data)
        signature = guards.bytes_value(self.CLASS_NAME, "signature", signature)
        await self._require_key(key_name)

        try:
            response = await self._client.fetch(
                "POST",
                self.transit_path("verify", key_name),
                {
                    "input": crypto.bytes_to_base64(data),
                    "signature": SIGNATURE_PREFIX + crypto.bytes_to_base64(signature),
                },
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "verifyDataFailed", {"name": key_name.path}
            ) from err

        valid = _data(response).get("valid")
        if not isinstance(valid, bool):
            raise GeneralError(
                self.CLASS_NAME, "invalidVerifyResponse", {"name": key_name.path}
            )
        return valid

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    async def encrypt(
        self,
        name: NameLike,
        encryption_type: VaultEncryptionType,
        data: bytes,
    ) -> bytes:
        """Encrypt with Transit.

        Returns:
            Vault's ciphertext string (``vault:v1:...``) as UTF-8 bytes.
            Nonces are managed by Vault, there is no local envelope.
        """
        key_name = guards.name(self.CLASS_NAME, "name", name)
        encryption_type = guards.one_of(
            self.CLASS_NAME, "encryptionType", encryption_type, VaultEncryptionType
        )
        data = guards.bytes_value(self.CLASS_NAME, "data", data)
        await self._require_key(key_name)

        context = {"name": key_name.path, "encryptionType": encryption_type.value}
        try:
            response = await self._client.fetch(
                "POST",
                self.transit_path("encrypt", key_name),
                {"plaintext": crypto.bytes_to_base64(data)},
            )
        except Exception as err:
            raise GeneralError(self.CLASS_NAME, "encryptDataFailed", context) from err

        ciphertext = _data(response).get("ciphertext")
        if not isinstance(ciphertext, str) or not ciphertext:
            raise GeneralError(self.CLASS_NAME, "invalidEncryptResponse", context)
        return ciphertext.encode("utf-8")

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
        await self._require_key(key_name)

        context = {"name": key_name.path, "encryptionType": encryption_type.value}
        try:
            response = await self._client.fetch(
                "POST",
                self.transit_path("decrypt", key_name),
                {"ciphertext": data.decode("utf-8")},
            )
        except Exception as err:
            raise GeneralError(self.CLASS_NAME, "decryptDataFailed", context) from err

        plaintext = _data(response).get("plaintext")
        if not isinstance(plaintext, str):
            raise GeneralError(self.CLASS_NAME, "invalidDecryptResponse", context)
        try:
            return crypto.base64_to_bytes(plaintext)
        except (ValueError, binascii.Error) as err:
            raise GeneralError(
                self.CLASS_NAME, "invalidDecryptResponse", context
            ) from err

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------

    async def get_secret_versions(self, name: NameLike) -> list[int]:
        """Return the version numbers Vault keeps for a secret, ascending.

        Raises:
            NotFoundError: If the secret has no metadata or no versions.
        """
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        try:
            response = await self._client.fetch(
                "GET", self.secret_metadata_path(secret_name)
            )
        except Exception as err:
            if is_http_status(err, 404):
                raise NotFoundError(
                    self.CLASS_NAME, "secretNotFound", secret_name.path
                ) from err
            raise GeneralError(
                self.CLASS_NAME, "getSecretVersionsFailed", {"name": secret_name.path}
            ) from err

        versions = _data(response).get("versions")
        if not isinstance(versions, dict) or not versions:
            raise NotFoundError(self.CLASS_NAME, "versionsNotFound", secret_name.path)
        return sorted(int(v) for v in versions)

    async def set_secret(self, name: NameLike, data: Any) -> None:
        """Write a new secret version.

        The value is stored as JSON text under ``data`` in the KV
        document, so any JSON value (and bytes) round-trips.
        """
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        guards.defined(self.CLASS_NAME, "data", data)

        try:
            payload = {"data": {"data": crypto.serialize_value(data)}}
            await self._client.fetch("POST", self.secret_path(secret_name), payload)
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "setSecretFailed", {"name": secret_name.path}
            ) from err
        logger.debug("Secret set: name=%s", secret_name)

    async def get_secret(self, name: NameLike) -> Any:
        """Read the latest secret version.

        Documents written by other tools (without a lone ``data`` text) are
        returned as-is.
        """
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        await self.get_secret_versions(secret_name)

        try:
            response = await self._client.fetch("GET", self.secret_path(secret_name))
        except Exception as err:
            if is_http_status(err, 404):
                raise NotFoundError(
                    self.CLASS_NAME, "secretNotFound", secret_name.path
                ) from err
            raise GeneralError(
                self.CLASS_NAME, "getSecretFailed", {"name": secret_name.path}
            ) from err

        document = _data(response).get("data")
        if not isinstance(document, dict):
            raise NotFoundError(self.CLASS_NAME, "secretNotFound", secret_name.path)
        if set(document) != {"data"} or not isinstance(document["data"], str):
            return document
        try:
            return crypto.deserialize_value(document["data"])
        except (ValueError, TypeError) as err:
            raise GeneralError(
                self.CLASS_NAME, "getSecretFailed", {"name": secret_name.path}
            ) from err

    async def remove_secret(self, name: NameLike) -> None:
        """Delete the secret's metadata and every version."""
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        await self.get_secret_versions(secret_name)

        try:
            await self._client.fetch("DELETE", self.secret_metadata_path(secret_name))
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "removeSecretFailed", {"name": secret_name.path}
            ) from err
        logger.debug("Secret removed: name=%s", secret_name)

    async def remove_secret_versions(
        self, name: NameLike, versions: Optional[list[int]] = None
    ) -> None:
        """Permanently destroy secret versions, all of them by default.

        Metadata is kept, so the secret name stays known to Vault.
        """
        secret_name = guards.name(self.CLASS_NAME, "name", name)
        if versions is None:
            versions = await self.get_secret_versions(secret_name)
        elif not versions or not all(
            isinstance(v, int) and not isinstance(v, bool) and v > 0 for v in versions
        ):
            raise GuardError(self.CLASS_NAME, "guard.versions", "versions", versions)

        try:
            await self._client.fetch(
                "POST",
                self.secret_destroy_path(secret_name),
                {"versions": list(versions)},
            )
        except Exception as err:
            raise GeneralError(
                self.CLASS_NAME, "removeSecretVersionsFailed",
                {"name": secret_name.path},
            ) from err
        logger.debug("Secret versions destroyed: name=%s versions=%s", secret_name, versions)
