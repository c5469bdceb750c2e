"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import Settings
from .connections import ConnectionStore, ProviderFactory
from .design import DesignGenerator
from .errors import ProviderConfigError
from .llm import ILLMProvider, create_provider
from .logging_config import get_logger
from .memory import HealthMemory
from .pipeline import ExplanationPipeline

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Release provider clients."""
        ...

    async def reset(self) -> None:
        """Clear the health memory window."""
        ...


class Application:
    """Owns every long-lived component; injected into the HTTP layer."""

    def __init__(
        self,
        settings: Settings | None = None,
        provider: ILLMProvider | None = None,
        provider_factory: ProviderFactory = create_provider,
    ):
        self._settings = settings or Settings.from_env()
        self._default_provider = provider
        self._provider_factory = provider_factory

        # Components (will be initialized in start())
        self._memory: HealthMemory | None = None
        self._connections: ConnectionStore | None = None
        self._pipeline: ExplanationPipeline | None = None
        self._designs: DesignGenerator | None = None
        self._started = False

    async def start(self) -> None:
        """Initialize components in dependency order."""
        if self._started:
            return
        logger.info("Starting application")

        # 1. HealthMemory (no dependencies)
        self._memory = HealthMemory(self._settings.memory_capacity)
        logger.info("Health memory initialized (capacity=%d)", self._memory.capacity)

        # 2. Default provider (no internal dependencies)
        if self._default_provider is None:
            try:
                self._default_provider = self._provider_factory(self._settings.provider_config())
            except ProviderConfigError as e:
                # Saved connections can still be used for generation.
                logger.warning("Default provider not configured: %s", e.message)

        # 3. ConnectionStore
        self._connections = ConnectionStore(self._provider_factory)

        # 4. Pipeline (depends on HealthMemory + default provider)
        self._pipeline = ExplanationPipeline(self._memory, self._default_provider)

        # 5. DesignGenerator (depends on ConnectionStore)
        self._designs = DesignGenerator(self._connections)

        self._started = True
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Release provider clients."""
        if not self._started:
            return
        providers = list(self._connections.providers()) if self._connections else []
        if self._default_provider is not None:
            providers.append(self._default_provider)
        for provider in providers:
            await provider.aclose()
        self._started = False
        logger.info("Application stopped")

    async def reset(self) -> None:
        """Clear the health memory window."""
        if self._memory is not None:
            self._memory.clear()
            logger.info("Health memory cleared")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def memory(self) -> HealthMemory:
        """Get health memory instance."""
        if self._memory is None:
            raise RuntimeError("Application not started")
        return self._memory

    @property
    def connections(self) -> ConnectionStore:
        """Get connection store instance."""
        if self._connections is None:
            raise RuntimeError("Application not started")
        return self._connections

    @property
    def pipeline(self) -> ExplanationPipeline:
        """Get explanation pipeline instance."""
        if self._pipeline is None:
            raise RuntimeError("Application not started")
        return self._pipeline

    @property
    def designs(self) -> DesignGenerator:
        """Get design generator instance."""
        if self._designs is None:
            raise RuntimeError("Application not started")
        return self._designs
