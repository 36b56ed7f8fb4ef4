"""
Vault Connector Registry — named connector instances.

A registry is created by the application and passed to whatever needs
a connector; there is no module-level instance.
"""
import logging
from typing import Optional

from .exceptions import AlreadyExistsError, NotFoundError
from .interface import IVaultConnector

logger = logging.getLogger("vault.connectors")


class VaultConnectorRegistry:
    """Map of connector name to ``IVaultConnector`` instance."""

    CLASS_NAME = "VaultConnectorRegistry"

    def __init__(self, connectors: Optional[dict[str, IVaultConnector]] = None):
        self._connectors: dict[str, IVaultConnector] = {}
        for name, connector in (connectors or {}).items():
            self.register(name, connector)

    def register(
        self, name: str, connector: IVaultConnector, replace: bool = False
    ) -> None:
        """Register ``connector`` under ``name``.

        Raises:
            AlreadyExistsError: If ``name`` is taken and ``replace`` is False.
        """
        if name in self._connectors and not replace:
            raise AlreadyExistsError(self.CLASS_NAME, "connectorAlreadyExists", name)
        self._connectors[name] = connector
        logger.debug("Vault connector registered: %s", name)

    def unregister(self, name: str) -> Optional[IVaultConnector]:
        return self._connectors.pop(name, None)

    def get(self, name: str) -> IVaultConnector:
        try:
            return self._connectors[name]
        except KeyError:
            raise NotFoundError(self.CLASS_NAME, "connectorNotFound", name) from None

    def get_if_exists(self, name: str) -> Optional[IVaultConnector]:
        return self._connectors.get(name)

    def names(self) -> list[str]:
        return list(self._connectors)

    def __contains__(self, name: object) -> bool:
        return name in self._connectors

    def __len__(self) -> int:
        return len(self._connectors)

    async def bootstrap_all(self, logger_name: Optional[str] = None) -> dict[str, bool]:
        """Bootstrap every connector; returns the outcome per name."""
        results: dict[str, bool] = {}
        for name, connector in self._connectors.items():
            results[name] = await connector.bootstrap(logger_name)
        return results

    async def close_all(self) -> None:
        """Close connectors holding resources (those exposing ``close``)."""
        for name, connector in self._connectors.items():
            close = getattr(connector, "close", None)
            if close is not None:
                await close()
                logger.debug("Vault connector closed: %s", name)
