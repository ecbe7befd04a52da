"""Free-text workflow search, delegated to the engine."""

from typing import Any, Protocol
from urllib.parse import quote

from ..temporal import ITemporalClient


class IWorkflowSearch(Protocol):
    """Pass-through visibility query."""

    async def search(self, query: str, namespace: str) -> dict[str, Any]:
        """Return the engine's search response unchanged."""
        ...


class WorkflowSearch:
    """Runs a visibility query against the engine's workflows listing."""

    def __init__(self, client: ITemporalClient):
        self._client = client

    async def search(self, query: str, namespace: str) -> dict[str, Any]:
        return await self._client.get_json(
            f"/api/v1/namespaces/{quote(namespace, safe='')}/workflows",
            params={"query": query},
        )
