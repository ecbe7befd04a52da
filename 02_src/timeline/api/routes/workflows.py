"""Workflow timeline routes."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ...app import IApplication
from ...errors import NotFoundError
from ...logging_config import get_logger

logger = get_logger(__name__)


class WorkflowTimelineResponse(BaseModel):
    """Root timeline plus child timelines keyed by child workflow id."""

    root: list[dict[str, Any]]
    children: dict[str, list[dict[str, Any]]]


def create_workflows_router(app: IApplication) -> APIRouter:
    """Create workflows router."""
    router = APIRouter(tags=["workflows"])

    @router.get("/workflow", response_model=WorkflowTimelineResponse)
    async def get_workflow_timeline(
        workflow_id: str | None = Query(None, alias="id"),
        namespace: str | None = Query(None),
        run_id: str | None = Query(None, alias="runId"),
    ) -> dict:
        """Timeline of one root execution and its direct child workflows."""
        if not workflow_id or not namespace or not run_id:
            raise HTTPException(status_code=400, detail="Missing required query parameters")

        try:
            timeline = await app.assembler.assemble_timeline(namespace, workflow_id, run_id)
            return timeline.to_dict()
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except Exception as e:
            logger.exception("Failed to build timeline for %s", workflow_id)
            raise HTTPException(status_code=500, detail=str(e) or "An unknown error occurred")

    return router
