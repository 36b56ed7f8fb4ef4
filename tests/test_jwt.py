"""Tests for JWT signing and verification through a connector."""
import orjson
import pytest

from vault_connectors import crypto
from vault_connectors.entity_storage import EntityStorageVaultConnector
from vault_connectors.exceptions import GuardError, NotFoundError, UnauthorizedError
from vault_connectors.jwt import jwt_signer, jwt_verifier
from vault_connectors.models import VaultKeyType

HEADER = {"alg": "EdDSA", "typ": "JWT"}
PAYLOAD = {"sub": "did:example:123", "iat": 1700000000}


@pytest.fixture
def connector():
    return EntityStorageVaultConnector()


@pytest.mark.asyncio
@pytest.mark.parametrize("key_type", [VaultKeyType.Ed25519, VaultKeyType.Secp256k1])
async def test_round_trip(connector, key_type):
    await connector.create_key("jwt", key_type)
    token = await jwt_signer(connector, "jwt", HEADER, PAYLOAD)

    assert token.count(".") == 2
    assert "=" not in token
    assert await jwt_verifier(connector, "jwt", token) == (HEADER, PAYLOAD)


@pytest.mark.asyncio
async def test_signature_matches_public_key(connector):
    public_key = await connector.create_key("jwt", VaultKeyType.Ed25519)
    token = await jwt_signer(connector, "jwt", HEADER, PAYLOAD)
    header, payload, signature = token.split(".")
    assert crypto.ed25519_verify(
        public_key,
        f"{header}.{payload}".encode("ascii"),
        crypto.base64url_to_bytes(signature),
    )


@pytest.mark.asyncio
async def test_tampered_payload(connector):
    await connector.create_key("jwt", VaultKeyType.Ed25519)
    token = await jwt_signer(connector, "jwt", HEADER, PAYLOAD)
    header, _, signature = token.split(".")
    forged = crypto.bytes_to_base64url(orjson.dumps({**PAYLOAD, "sub": "attacker"}))

    with pytest.raises(UnauthorizedError):
        await jwt_verifier(connector, "jwt", f"{header}.{forged}.{signature}")


@pytest.mark.asyncio
async def test_other_key(connector):
    await connector.create_key("a", VaultKeyType.Ed25519)
    await connector.create_key("b", VaultKeyType.Ed25519)
    token = await jwt_signer(connector, "a", HEADER, PAYLOAD)
    with pytest.raises(UnauthorizedError):
        await jwt_verifier(connector, "b", token)


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [
    "",
    "only.two",
    "a..c",
    "!!!.e30.c2ln",
    "W10.e30.c2ln",
    None,
])
async def test_malformed(connector, token):
    await connector.create_key("jwt", VaultKeyType.Ed25519)
    with pytest.raises(GuardError):
        await jwt_verifier(connector, "jwt", token)


@pytest.mark.asyncio
async def test_missing_key(connector):
    with pytest.raises(NotFoundError):
        await jwt_signer(connector, "nope", HEADER, PAYLOAD)


@pytest.mark.asyncio
async def test_header_must_be_object(connector):
    with pytest.raises(GuardError):
        await jwt_signer(connector, "jwt", ["alg"], PAYLOAD)
