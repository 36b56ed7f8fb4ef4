"""
Shared fixtures: an in-memory stand-in for the HashiCorp Vault REST API.

FakeVaultClient answers ``fetch(method, path, body)`` the way Vault's
Transit and KV-v2 engines do, using the package's own crypto for the
key operations, so the connector can be tested without a server.
"""
import re
from typing import Any, Optional
from urllib.parse import unquote

import orjson
import pytest

from vault_connectors import crypto
from vault_connectors.exceptions import FetchError
from vault_connectors.hashicorp import HashicorpVaultConfig, HashicorpVaultConnector
from vault_connectors.models import VaultKey, VaultKeyType, VaultSecret
from vault_connectors.storage import MemoryEntityStorage

_ROUTES = [
    ("key_config", re.compile(r"^transit/keys/(?P<name>.+)/config$")),
    ("key", re.compile(r"^transit/keys/(?P<name>.+)$")),
    ("export", re.compile(
        r"^transit/export/(?P<kind>[^/]+)/(?P<name>.+)/(?P<version>[^/]+)$"
    )),
    ("transit_op", re.compile(
        r"^transit/(?P<op>sign|verify|encrypt|decrypt|backup|restore)/(?P<name>.+)$"
    )),
    ("kv_data", re.compile(r"^secret/data/(?P<name>.+)$")),
    ("kv_metadata", re.compile(r"^secret/metadata/(?P<name>.+)$")),
    ("kv_destroy", re.compile(r"^secret/destroy/(?P<name>.+)$")),
]

_TYPES = {
    "ed25519": VaultKeyType.Ed25519,
    "chacha20-poly1305": VaultKeyType.ChaCha20Poly1305,
}


class FakeVaultClient:
    """Minimal Vault REST semantics for the Transit and KV-v2 engines."""

    def __init__(self):
        self.keys: dict[str, dict[str, Any]] = {}
        self.secrets: dict[str, dict[int, Optional[dict[str, Any]]]] = {}
        self.calls: list[tuple[str, str, Optional[dict[str, Any]]]] = []
        self.failures: dict[tuple[str, str], int] = {}
        self.healthy = True
        self.closed = False

    def fail(self, method: str, fragment: str, status: int = 500) -> None:
        """Make requests whose path contains ``fragment`` fail with ``status``."""
        self.failures[(method, fragment)] = status

    def _error(self, path: str, status: int) -> FetchError:
        return FetchError("FakeVaultClient", "fetchFailed", path, http_status=status)

    async def close(self) -> None:
        self.closed = True

    async def fetch(
        self, method: str, path: str, body: Optional[dict[str, Any]] = None
    ) -> Optional[dict[str, Any]]:
        self.calls.append((method, path, body))
        for (fail_method, fragment), status in self.failures.items():
            if fail_method == method and fragment in path:
                raise self._error(path, status)

        if path == "sys/health":
            if not self.healthy:
                raise self._error(path, 503)
            return {"initialized": True, "sealed": False}

        for route, pattern in _ROUTES:
            match = pattern.match(path)
            if match:
                params = {k: unquote(v) for k, v in match.groupdict().items()}
                handler = getattr(self, f"_{route}")
                return handler(method, path, body or {}, **params)
        raise self._error(path, 404)

    # ------------------------------------------------------------------
    # Transit
    # ------------------------------------------------------------------

    def _new_key(self, key_type: str, material: Optional[bytes] = None) -> dict[str, Any]:
        vault_type = _TYPES[key_type]
        private = material or crypto.generate_private_key(vault_type)
        return {
            "type": key_type,
            "private": private,
            "public": crypto.public_key_from_private_key(vault_type, private),
            "deletion_allowed": False,
            "exportable": True,
        }

    def _require(self, path: str, name: str) -> dict[str, Any]:
        if name not in self.keys:
            raise self._error(path, 404)
        return self.keys[name]

    def _key(self, method, path, body, name):
        if method == "POST":
            if body.get("type") not in _TYPES:
                raise self._error(path, 400)
            if name not in self.keys:
                self.keys[name] = self._new_key(body["type"])
            return None
        key = self._require(path, name)
        if method == "GET":
            return {"data": {
                "name": name,
                "type": key["type"],
                "deletion_allowed": key["deletion_allowed"],
                "exportable": key["exportable"],
                "latest_version": 1,
            }}
        if method == "DELETE":
            if not key["deletion_allowed"]:
                raise self._error(path, 400)
            del self.keys[name]
            return None
        raise self._error(path, 405)

    def _key_config(self, method, path, body, name):
        key = self._require(path, name)
        for option in ("deletion_allowed", "exportable"):
            if option in body:
                key[option] = body[option]
        return None

    def _export(self, method, path, body, kind, name, version):
        key = self._require(path, name)
        symmetric = key["type"] == "chacha20-poly1305"
        if kind == "encryption-key" and symmetric:
            exported = key["private"]
        elif kind == "signing-key" and not symmetric:
            # Vault exports Ed25519 signing keys as seed || public key.
            exported = key["private"] + key["public"]
        elif kind == "public-key" and not symmetric:
            exported = key["public"]
        else:
            raise self._error(path, 400)
        return {"data": {
            "name": name,
            "type": key["type"],
            "keys": {"1": crypto.bytes_to_base64(exported)},
        }}

    def _transit_op(self, method, path, body, op, name):
        if op == "restore":
            if name in self.keys:
                raise self._error(path, 400)
            policy = orjson.loads(crypto.base64_to_bytes(body["backup"]))["policy"]
            self.keys[name] = self._new_key(
                policy["type"],
                crypto.base64_to_bytes(policy["keys"]["1"]["key"]),
            )
            return None

        key = self._require(path, name)
        symmetric = key["type"] == "chacha20-poly1305"
        if op == "backup":
            policy = {
                "name": name,
                "type": key["type"],
                "latest_version": 1,
                "keys": {"1": {"key": crypto.bytes_to_base64(key["private"])}},
            }
            return {"data": {
                "backup": crypto.bytes_to_base64(orjson.dumps({"policy": policy}))
            }}
        if op == "sign":
            if symmetric:
                raise self._error(path, 400)
            signature = crypto.ed25519_sign(
                key["private"], crypto.base64_to_bytes(body["input"])
            )
            return {"data": {
                "signature": "vault:v1:" + crypto.bytes_to_base64(signature)
            }}
        if op == "verify":
            if symmetric or not body["signature"].startswith("vault:v1:"):
                raise self._error(path, 400)
            signature = crypto.base64_to_bytes(body["signature"][len("vault:v1:"):])
            valid = crypto.ed25519_verify(
                key["public"], crypto.base64_to_bytes(body["input"]), signature
            )
            return {"data": {"valid": valid}}
        if op == "encrypt":
            envelope = crypto.chacha20_encrypt(
                key["private"], crypto.base64_to_bytes(body["plaintext"])
            )
            return {"data": {"ciphertext": "vault:v1:" + crypto.bytes_to_base64(envelope)}}
        if op == "decrypt":
            ciphertext = body["ciphertext"]
            if not ciphertext.startswith("vault:v1:"):
                raise self._error(path, 400)
            try:
                plaintext = crypto.chacha20_decrypt(
                    key["private"],
                    crypto.base64_to_bytes(ciphertext[len("vault:v1:"):]),
                )
            except Exception:
                raise self._error(path, 400) from None
            return {"data": {"plaintext": crypto.bytes_to_base64(plaintext)}}
        raise self._error(path, 405)

    # ------------------------------------------------------------------
    # KV-v2
    # ------------------------------------------------------------------

    def _kv_data(self, method, path, body, name):
        if method == "POST":
            versions = self.secrets.setdefault(name, {})
            version = max(versions, default=0) + 1
            versions[version] = body["data"]
            return {"data": {"version": version}}
        versions = self.secrets.get(name)
        if not versions or versions[max(versions)] is None:
            raise self._error(path, 404)
        latest = max(versions)
        return {"data": {"data": versions[latest], "metadata": {"version": latest}}}

    def _kv_metadata(self, method, path, body, name):
        if method == "DELETE":
            self.secrets.pop(name, None)
            return None
        if name not in self.secrets:
            raise self._error(path, 404)
        return {"data": {"versions": {
            str(v): {"destroyed": doc is None}
            for v, doc in self.secrets[name].items()
        }}}

    def _kv_destroy(self, method, path, body, name):
        versions = self.secrets.get(name, {})
        for version in body.get("versions", []):
            if version in versions:
                versions[version] = None
        return None


@pytest.fixture
def fake_vault():
    return FakeVaultClient()


@pytest.fixture
def vault_config():
    return HashicorpVaultConfig(endpoint="http://vault.local:8200", token="s.test-token")


@pytest.fixture
def hashicorp_connector(vault_config, fake_vault):
    return HashicorpVaultConnector(vault_config, client=fake_vault)


@pytest.fixture
def key_storage():
    return MemoryEntityStorage(VaultKey)


@pytest.fixture
def secret_storage():
    return MemoryEntityStorage(VaultSecret)
