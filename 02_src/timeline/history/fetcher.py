"""Paginated retrieval of one execution's history."""

from typing import Protocol
from urllib.parse import quote

from ..errors import UpstreamError
from ..logging_config import get_logger
from ..models import Event
from ..temporal import ITemporalClient

logger = get_logger(__name__)


class IHistoryFetcher(Protocol):
    """Retrieve the complete ordered event list of one execution."""

    async def fetch(
        self, namespace: str, workflow_id: str, run_id: str | None = None
    ) -> list[Event]:
        """Follow continuation tokens until exhausted; return all events in order."""
        ...


class HistoryFetcher:
    """Follows next_page_token until the engine returns an empty one."""

    def __init__(self, client: ITemporalClient):
        self._client = client

    async def fetch(
        self, namespace: str, workflow_id: str, run_id: str | None = None
    ) -> list[Event]:
        path = (
            f"/api/v1/namespaces/{quote(namespace, safe='')}"
            f"/workflows/{quote(workflow_id, safe='')}/history"
        )
        events: list[Event] = []
        next_page_token: str | None = None
        pages = 0

        while True:
            params = {"next_page_token": next_page_token or ""}
            if run_id:
                params["execution.runId"] = run_id

            data = await self._client.get_json(path, params=params)
            page = self._page_events(data, path)
            events.extend(Event.from_dict(raw) for raw in page)
            pages += 1
            logger.debug(
                "Fetched history page %s for %s (%s events)",
                pages,
                workflow_id,
                len(page),
            )

            next_page_token = data.get("nextPageToken") or None
            if not next_page_token:
                break

        logger.info(
            "Fetched history for %s: %s events in %s pages",
            workflow_id,
            len(events),
            pages,
        )
        return events

    @staticmethod
    def _page_events(data: dict, path: str) -> list[dict]:
        history = data.get("history") or {}
        if not isinstance(history, dict):
            raise UpstreamError(f"Malformed history page for {path}")
        page = history.get("events") or []
        if not isinstance(page, list):
            raise UpstreamError(f"Malformed history page for {path}")
        return [raw for raw in page if isinstance(raw, dict)]
