"""In-memory registry of saved generation backend connections."""

import uuid
from typing import Callable, Protocol

from ..errors import NotFoundError
from ..llm import ILLMProvider, create_provider
from ..logging_config import get_logger
from ..memory import ReadWriteLock
from ..models import AIConnection, ConnectionStatus, ProviderConfig

logger = get_logger(__name__)

ProviderFactory = Callable[[ProviderConfig], ILLMProvider]


class IConnectionStore(Protocol):
    """Keyed storage of connections and their providers."""

    def add(self, connection: AIConnection) -> AIConnection:
        """Validate, build the provider and store the connection."""
        ...

    def get(self, connection_id: str) -> AIConnection:
        """Get a connection or raise NotFoundError."""
        ...

    def provider_for(self, connection_id: str) -> ILLMProvider:
        """Get the provider built for a connection."""
        ...


class ConnectionStore:
    """Connections keyed by id. Each provider is built once, on add."""

    def __init__(self, provider_factory: ProviderFactory = create_provider):
        self._provider_factory = provider_factory
        self._connections: dict[str, AIConnection] = {}
        self._providers: dict[str, ILLMProvider] = {}
        self._lock = ReadWriteLock()

    def add(self, connection: AIConnection) -> AIConnection:
        """Validate, build the provider and store the connection.

        Raises ProviderConfigError before anything is stored when the
        connection is missing required fields.
        """
        provider = self._provider_factory(connection.provider_config())
        if not connection.id:
            connection.id = str(uuid.uuid4())
        connection.status = ConnectionStatus.UNTESTED

        with self._lock.write_locked():
            self._connections[connection.id] = connection
            self._providers[connection.id] = provider

        logger.info("Connection %s (%s) added", connection.id, connection.provider.value)
        return connection

    def get(self, connection_id: str) -> AIConnection:
        with self._lock.read_locked():
            connection = self._connections.get(connection_id)
        if connection is None:
            raise NotFoundError("connection not found")
        return connection

    def provider_for(self, connection_id: str) -> ILLMProvider:
        with self._lock.read_locked():
            provider = self._providers.get(connection_id)
        if provider is None:
            raise NotFoundError("connection not found")
        return provider

    def list_all(self) -> list[AIConnection]:
        with self._lock.read_locked():
            connections = list(self._connections.values())
        return sorted(connections, key=lambda c: c.created_at)

    def set_status(self, connection_id: str, status: ConnectionStatus) -> None:
        with self._lock.write_locked():
            connection = self._connections.get(connection_id)
            if connection is None:
                raise NotFoundError("connection not found")
            connection.status = status

    def delete(self, connection_id: str) -> ILLMProvider:
        """Remove a connection and return its provider so the caller can close it."""
        with self._lock.write_locked():
            if connection_id not in self._connections:
                raise NotFoundError("connection not found")
            del self._connections[connection_id]
            provider = self._providers.pop(connection_id)
        logger.info("Connection %s deleted", connection_id)
        return provider

    def providers(self) -> list[ILLMProvider]:
        with self._lock.read_locked():
            return list(self._providers.values())
