"""Vault Connectors — key management and secret storage behind one interface.

Two interchangeable backends implement ``IVaultConnector``:
    EntityStorageVaultConnector: local cryptography over record stores.
    HashicorpVaultConnector: HashiCorp Vault Transit and KV-v2.
"""

from .version import __version__
from .exceptions import (
    VaultConnectorError,
    GuardError,
    AlreadyExistsError,
    NotFoundError,
    NotSupportedError,
    GeneralError,
    UnauthorizedError,
    FetchError,
)
from .models import (
    VaultKeyType,
    VaultEncryptionType,
    VaultName,
    VaultKeyMaterial,
    VaultKey,
    VaultSecret,
)
from .storage import EntityStorage, MemoryEntityStorage
from .interface import IVaultConnector
from .entity_storage import EntityStorageVaultConnector
from .hashicorp import (
    HashicorpVaultConfig,
    HashicorpVaultConnector,
    VaultHttpClient,
)
from .registry import VaultConnectorRegistry
from .jwt import jwt_signer, jwt_verifier

__all__ = [
    "__version__",
    "VaultConnectorError",
    "GuardError",
    "AlreadyExistsError",
    "NotFoundError",
    "NotSupportedError",
    "GeneralError",
    "UnauthorizedError",
    "FetchError",
    "VaultKeyType",
    "VaultEncryptionType",
    "VaultName",
    "VaultKeyMaterial",
    "VaultKey",
    "VaultSecret",
    "EntityStorage",
    "MemoryEntityStorage",
    "IVaultConnector",
    "EntityStorageVaultConnector",
    "HashicorpVaultConfig",
    "HashicorpVaultConnector",
    "VaultHttpClient",
    "VaultConnectorRegistry",
    "jwt_signer",
    "jwt_verifier",
]
