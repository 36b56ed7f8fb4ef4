"""Argument guards shared by the vault connectors.

Each guard either returns the normalized value or raises GuardError.
"""
from enum import Enum
from typing import Any, TypeVar

from .exceptions import GuardError
from .models import VaultName

E = TypeVar("E", bound=Enum)


def string_value(source: str, prop: str, value: Any) -> str:
    """Require a non-empty string."""
    if not isinstance(value, str):
        raise GuardError(source, "guard.string", prop, value)
    if not value:
        raise GuardError(source, "guard.stringEmpty", prop, value)
    return value


def name(source: str, prop: str, value: Any) -> VaultName:
    """Require a non-empty name, as str or VaultName."""
    if isinstance(value, VaultName):
        string_value(source, prop, value.name)
        if value.identity is not None:
            string_value(source, f"{prop}.identity", value.identity)
        if value.partition is not None:
            string_value(source, f"{prop}.partition", value.partition)
        return value
    return VaultName(string_value(source, prop, value))


def one_of(source: str, prop: str, value: Any, enum_cls: type[E]) -> E:
    """Require a member (or member value) of ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise GuardError(source, "guard.arrayOneOf", prop, value) from None


def bytes_value(source: str, prop: str, value: Any) -> bytes:
    """Require a bytes-like value; empty is allowed."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise GuardError(source, "guard.uint8Array", prop, value)


def defined(source: str, prop: str, value: Any) -> Any:
    """Require a value other than None."""
    if value is None:
        raise GuardError(source, "guard.undefined", prop, value)
    return value
