"""Application bootstrap and lifecycle management."""

from typing import Protocol

import httpx

from .assembler import IWorkflowTreeAssembler, WorkflowTreeAssembler
from .config import Settings
from .history import HistoryFetcher
from .logging_config import get_logger
from .parser import HistoryParser
from .search import IWorkflowSearch, WorkflowSearch
from .temporal import TemporalClient

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def assembler(self) -> IWorkflowTreeAssembler:
        ...

    @property
    def search(self) -> IWorkflowSearch:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

        # Components (will be initialized in start())
        self._client: TemporalClient | None = None
        self._assembler: WorkflowTreeAssembler | None = None
        self._search: WorkflowSearch | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Upstream client (no dependencies)
        self._client = TemporalClient(self._settings, transport=self._transport)
        logger.info("Temporal client initialized for %s", self._settings.base_url)

        # 2. Fetcher + parser feed the assembler
        self._assembler = WorkflowTreeAssembler(
            fetcher=HistoryFetcher(self._client),
            parser=HistoryParser(),
        )

        # 3. Search shares the client
        self._search = WorkflowSearch(self._client)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        self._search = None
        self._assembler = None
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Temporal client closed")

    @property
    def assembler(self) -> IWorkflowTreeAssembler:
        """Get assembler instance."""
        if not self._assembler:
            raise RuntimeError("Application not started")
        return self._assembler

    @property
    def search(self) -> IWorkflowSearch:
        """Get search instance."""
        if not self._search:
            raise RuntimeError("Application not started")
        return self._search
