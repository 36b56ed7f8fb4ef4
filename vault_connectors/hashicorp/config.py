"""
HashiCorp Vault Configuration — validated connector settings.

Reads settings from environment variables:
    VAULT_ADDRESS = <http(s)://host:port>           (required)
    VAULT_TOKEN = <token>                           (required)
    VAULT_KV_MOUNT_PATH = <kv-v2 mount>             (default: secret)
    VAULT_TRANSIT_MOUNT_PATH = <transit mount>      (default: transit)
    VAULT_API_VERSION = <api version>               (default: v1)
    VAULT_NAMESPACE = <enterprise namespace>        (optional)
    VAULT_TIMEOUT = <seconds>                       (optional)

Security Note:
    Never log the token. Only log the endpoint and mount paths.
"""
import os
import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("vault.connectors.hashicorp")


class HashicorpVaultConfig(BaseModel):
    """Validated HashiCorp Vault connector configuration."""

    endpoint: str
    token: str = Field(repr=False)
    kv_mount_path: str = Field(default="secret")
    transit_mount_path: str = Field(default="transit")
    api_version: str = Field(default="v1")
    namespace: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Endpoint is mandatory; trailing slashes are dropped."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("endpoint cannot be empty")
        return v

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not v:
            raise ValueError("token cannot be empty")
        return v

    @field_validator("kv_mount_path", "transit_mount_path", "api_version")
    @classmethod
    def validate_segment(cls, v: str) -> str:
        """Mount paths are joined with '/', so surrounding slashes are stripped."""
        v = v.strip("/")
        if not v:
            raise ValueError("path segment cannot be empty")
        return v

    @property
    def base_url(self) -> str:
        return f"{self.endpoint}/{self.api_version}"

    @classmethod
    def from_env(cls) -> "HashicorpVaultConfig":
        """Create HashicorpVaultConfig by loading values from environment.

        Returns:
            Populated HashicorpVaultConfig instance.

        Raises:
            pydantic.ValidationError: If VAULT_ADDRESS or VAULT_TOKEN is missing.
        """
        values: dict = {
            "endpoint": os.environ.get("VAULT_ADDRESS", ""),
            "token": os.environ.get("VAULT_TOKEN", ""),
        }
        optional = {
            "kv_mount_path": "VAULT_KV_MOUNT_PATH",
            "transit_mount_path": "VAULT_TRANSIT_MOUNT_PATH",
            "api_version": "VAULT_API_VERSION",
            "namespace": "VAULT_NAMESPACE",
            "timeout": "VAULT_TIMEOUT",
        }
        for field, env_name in optional.items():
            raw = os.environ.get(env_name)
            if raw:
                values[field] = raw
        config = cls(**values)
        logger.debug(
            "Loaded Vault config: endpoint=%s kv=%s transit=%s",
            config.endpoint, config.kv_mount_path, config.transit_mount_path,
        )
        return config
