"""Workflow search routes."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from ...logging_config import get_logger

logger = get_logger(__name__)


def create_search_router(app: IApplication) -> APIRouter:
    """Create search router."""
    router = APIRouter(tags=["search"])

    @router.get("/search")
    async def search_workflows(
        query: str | None = Query(None),
        namespace: str | None = Query(None),
    ) -> dict[str, Any]:
        """Pass a visibility query through to the engine."""
        if not query or not namespace:
            raise HTTPException(status_code=400, detail="Missing required query parameters")

        try:
            return await app.search.search(query, namespace)
        except Exception:
            logger.exception(
                "Failed to search workflows, query: %s, namespace: %s", query, namespace
            )
            raise HTTPException(status_code=500, detail="Failed to search workflows")

    return router
