"""Vault connector exceptions.

Every error carries the ``source`` (class raising it), a message ``key``
and a ``properties`` dict with the operation context. The original
error, when there is one, is chained as ``__cause__``.
"""
from typing import Any, Optional


class VaultConnectorError(Exception):
    """Base exception for all vault connector errors."""

    def __init__(
        self,
        source: str,
        key: str,
        properties: Optional[dict[str, Any]] = None,
    ):
        self.source = source
        self.key = key
        self.properties = properties or {}
        msg = f"{source}: {key}"
        if self.properties:
            msg += f" {self.properties!r}"
        super().__init__(msg)


class GuardError(VaultConnectorError, ValueError):
    """Raised when an argument fails validation, before any I/O."""

    def __init__(self, source: str, key: str, prop: str, value: Any = None):
        self.property = prop
        self.value = value
        super().__init__(
            source, key, {"property": prop, "value": _describe(value)}
        )


class AlreadyExistsError(VaultConnectorError):
    """Raised when a create-style operation targets an existing id."""

    def __init__(self, source: str, key: str, existing_id: str):
        self.existing_id = existing_id
        super().__init__(source, key, {"existingId": existing_id})


class NotFoundError(VaultConnectorError):
    """Raised when a key or secret does not exist."""

    def __init__(self, source: str, key: str, not_found_id: str):
        self.not_found_id = not_found_id
        super().__init__(source, key, {"notFoundId": not_found_id})


class NotSupportedError(VaultConnectorError):
    """Raised when an operation is meaningless for the backend."""
    pass


class GeneralError(VaultConnectorError):
    """Raised for unexpected backend failures, wrapping the cause."""
    pass


class UnauthorizedError(VaultConnectorError):
    """Raised when a token signature does not verify."""
    pass


class FetchError(VaultConnectorError):
    """Raised by the HTTP transport on a failed request."""

    def __init__(
        self,
        source: str,
        key: str,
        url: str,
        http_status: Optional[int] = None,
        detail: str = "",
    ):
        self.url = url
        self.http_status = http_status
        self.detail = detail
        props: dict[str, Any] = {"url": url, "httpStatus": http_status}
        if detail:
            props["detail"] = detail
        super().__init__(source, key, props)


def _describe(value: Any) -> str:
    """Render a rejected value without leaking binary content."""
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    return str(value)


def is_http_status(err: BaseException, status: int) -> bool:
    """Return True if ``err`` is a FetchError with the given HTTP status."""
    return isinstance(err, FetchError) and err.http_status == status
