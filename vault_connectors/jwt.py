"""
JWT signing and verification through a vault connector.

The signing key never leaves the connector: tokens are signed with
``connector.sign`` and checked with ``connector.verify``. Segments are
unpadded base64url, header and payload are JSON (orjson).
"""
from typing import Any

import orjson

from . import crypto
from .exceptions import GuardError, UnauthorizedError
from .interface import IVaultConnector
from .models import NameLike

SOURCE = "VaultJwt"


def _encode_segment(value: dict[str, Any]) -> str:
    return crypto.bytes_to_base64url(orjson.dumps(value))


def _decode_segment(segment: str, prop: str) -> dict[str, Any]:
    try:
        value = orjson.loads(crypto.base64url_to_bytes(segment))
    except ValueError as err:
        raise GuardError(SOURCE, "jwt.invalidSegment", prop, segment) from err
    if not isinstance(value, dict):
        raise GuardError(SOURCE, "jwt.invalidSegment", prop, segment)
    return value


async def jwt_signer(
    connector: IVaultConnector,
    key_name: NameLike,
    header: dict[str, Any],
    payload: dict[str, Any],
) -> str:
    """Build a compact JWS signed by ``key_name``.

    Args:
        connector: Connector holding the signing key.
        key_name: Asymmetric key to sign with.
        header: JOSE header, e.g. ``{"alg": "EdDSA", "typ": "JWT"}``.
        payload: Claims.

    Returns:
        ``header.payload.signature``.
    """
    if not isinstance(header, dict):
        raise GuardError(SOURCE, "guard.object", "header", header)
    if not isinstance(payload, dict):
        raise GuardError(SOURCE, "guard.object", "payload", payload)

    signing_input = f"{_encode_segment(header)}.{_encode_segment(payload)}"
    signature = await connector.sign(key_name, signing_input.encode("ascii"))
    return f"{signing_input}.{crypto.bytes_to_base64url(signature)}"


async def jwt_verifier(
    connector: IVaultConnector,
    key_name: NameLike,
    token: str,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Verify a token produced by ``jwt_signer``.

    Returns:
        The decoded ``(header, payload)``.

    Raises:
        GuardError: If the token is not three well-formed segments.
        UnauthorizedError: If the signature does not verify.
    """
    if not isinstance(token, str) or not token:
        raise GuardError(SOURCE, "guard.string", "token", token)
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise GuardError(SOURCE, "jwt.invalidToken", "token", token)

    header = _decode_segment(parts[0], "header")
    payload = _decode_segment(parts[1], "payload")
    try:
        signature = crypto.base64url_to_bytes(parts[2])
    except ValueError as err:
        raise GuardError(SOURCE, "jwt.invalidSegment", "signature", parts[2]) from err

    signing_input = f"{parts[0]}.{parts[1]}".encode("ascii")
    if not await connector.verify(key_name, signing_input, signature):
        raise UnauthorizedError(SOURCE, "jwt.invalidSignature")
    return header, payload
