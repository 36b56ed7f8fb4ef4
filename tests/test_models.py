"""Tests for models, argument guards, record stores and exceptions."""
import pytest

from vault_connectors import guards
from vault_connectors.exceptions import (
    FetchError,
    GeneralError,
    GuardError,
    NotFoundError,
    is_http_status,
)
from vault_connectors.models import (
    VaultEncryptionType,
    VaultKey,
    VaultKeyType,
    VaultName,
    VaultSecret,
)
from vault_connectors.storage import DEFAULT_PARTITION, MemoryEntityStorage


# --- Models ---

class TestVaultName:

    def test_plain(self):
        name = VaultName("key")
        assert name.id == "key"
        assert name.path == "key"
        assert str(name) == "key"

    def test_structured(self):
        name = VaultName("key", identity="did:1", partition="tenant")
        assert name.id == "did:1/key"
        assert name.path == "tenant/did:1/key"


def test_key_type_symmetry():
    assert VaultKeyType.Ed25519.asymmetric
    assert VaultKeyType.Secp256k1.asymmetric
    assert not VaultKeyType.ChaCha20Poly1305.asymmetric
    assert VaultKeyType("Ed25519") is VaultKeyType.Ed25519


# --- Guards ---

class TestGuards:

    def test_string(self):
        assert guards.string_value("Src", "p", "x") == "x"
        with pytest.raises(GuardError) as exc:
            guards.string_value("Src", "p", "")
        assert exc.value.key == "guard.stringEmpty"
        assert exc.value.source == "Src"

    def test_name(self):
        assert guards.name("Src", "name", "k") == VaultName("k")
        structured = VaultName("k", partition="p")
        assert guards.name("Src", "name", structured) is structured
        with pytest.raises(GuardError) as exc:
            guards.name("Src", "name", VaultName("k", identity=""))
        assert exc.value.property == "name.identity"

    def test_one_of(self):
        assert guards.one_of(
            "Src", "t", "ChaCha20Poly1305", VaultEncryptionType
        ) is VaultEncryptionType.ChaCha20Poly1305
        with pytest.raises(GuardError) as exc:
            guards.one_of("Src", "t", "Ed25519", VaultEncryptionType)
        assert exc.value.key == "guard.arrayOneOf"

    def test_bytes(self):
        assert guards.bytes_value("Src", "d", b"") == b""
        assert guards.bytes_value("Src", "d", bytearray(b"ab")) == b"ab"
        with pytest.raises(GuardError):
            guards.bytes_value("Src", "d", [1, 2])

    def test_defined(self):
        assert guards.defined("Src", "d", 0) == 0
        with pytest.raises(GuardError):
            guards.defined("Src", "d", None)

    def test_guard_error_is_value_error(self):
        with pytest.raises(ValueError):
            guards.string_value("Src", "p", 1)

    def test_binary_values_not_rendered(self):
        with pytest.raises(GuardError) as exc:
            guards.string_value("Src", "p", b"\x00secret")
        assert exc.value.properties["value"] == "<7 bytes>"


# --- Record store ---

class TestMemoryEntityStorage:

    @pytest.mark.asyncio
    async def test_set_get_remove(self):
        store = MemoryEntityStorage(VaultSecret)
        await store.set(VaultSecret(id="a", data="x"))
        record = await store.get("a")
        assert record.id == "a"
        assert record.data == "x"

        await store.remove("a")
        assert await store.get("a") is None
        await store.remove("a")

    @pytest.mark.asyncio
    async def test_partitions(self):
        store = MemoryEntityStorage(VaultSecret)
        await store.set(VaultSecret(id="a", data="one"), partition="p1")
        await store.set(VaultSecret(id="a", data="two"), partition="p2")
        assert (await store.get("a", partition="p1")).data == "one"
        assert (await store.get("a", partition="p2")).data == "two"
        assert await store.get("a") is None
        assert store.count("p1") == 1

    @pytest.mark.asyncio
    async def test_records_are_copied(self):
        store = MemoryEntityStorage(VaultSecret)
        record = VaultSecret(id="a", data="one")
        await store.set(record)
        record.data = "changed"
        assert (await store.get("a")).data == "one"

    @pytest.mark.asyncio
    async def test_initial_records(self):
        key = VaultKey(id="k", key_type="Ed25519", private_key="AA==")
        store = MemoryEntityStorage(VaultKey, {DEFAULT_PARTITION: [key]})
        loaded = await store.get("k")
        assert loaded.key_type == "Ed25519"
        assert loaded.public_key is None


# --- Exceptions ---

def test_error_context():
    err = NotFoundError("Src", "keyNotFound", "tenant/k")
    assert err.properties == {"notFoundId": "tenant/k"}
    assert "keyNotFound" in str(err)


def test_http_status_helper():
    err = FetchError("Client", "fetchFailed", "http://v/x", http_status=404)
    assert is_http_status(err, 404)
    assert not is_http_status(err, 500)
    assert not is_http_status(GeneralError("Src", "x"), 404)

