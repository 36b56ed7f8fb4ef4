"""HashiCorp Vault connector: Transit keys and KV-v2 secrets.

Security Note:
    The token is sent on every request and never logged.
"""

from .client import VaultHttpClient
from .config import HashicorpVaultConfig
from .connector import HashicorpVaultConnector

__all__ = [
    "HashicorpVaultConfig",
    "HashicorpVaultConnector",
    "VaultHttpClient",
]
