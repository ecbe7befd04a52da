"""Assemble a root execution's timeline together with its direct children."""

import asyncio
from typing import Protocol

from ..history import IHistoryFetcher
from ..logging_config import get_logger
from ..models import PartialChildFailure, TimelineItem, WorkflowSpan, WorkflowTimeline
from ..parser import HistoryParser, IHistoryParser

logger = get_logger(__name__)


class IWorkflowTreeAssembler(Protocol):
    """Root timeline plus one level of child timelines."""

    async def assemble_timeline(
        self, namespace: str, root_workflow_id: str, root_run_id: str | None
    ) -> WorkflowTimeline:
        """Fetch and parse the root, then each child it started."""
        ...


class WorkflowTreeAssembler:
    """Combines HistoryFetcher and HistoryParser across root and children."""

    def __init__(self, fetcher: IHistoryFetcher, parser: IHistoryParser | None = None):
        self._fetcher = fetcher
        self._parser = parser or HistoryParser()

    async def assemble_timeline(
        self, namespace: str, root_workflow_id: str, root_run_id: str | None
    ) -> WorkflowTimeline:
        """
        Build the aggregate timeline for one root execution.

        Root fetch errors propagate. A child that fails to fetch or parse is
        logged, recorded in `failures` and left out of `children`. Grandchildren
        are not resolved.
        """
        events = await self._fetcher.fetch(namespace, root_workflow_id, root_run_id)
        root = self._parser.parse(events, workflow_id=root_workflow_id)

        children = HistoryParser.child_workflows(root)
        results = await asyncio.gather(
            *[self._child_timeline(namespace, child) for child in children],
            return_exceptions=True,
        )

        timeline = WorkflowTimeline(root=root)
        for child, result in zip(children, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                failure = PartialChildFailure(
                    workflow_id=child.workflow_id,
                    run_id=child.run_id,
                    error=str(result) or type(result).__name__,
                )
                timeline.failures.append(failure)
                logger.warning(
                    "Failed to fetch child workflow history for %s: %s",
                    child.workflow_id,
                    failure.error,
                    extra={
                        "context": {
                            "namespace": namespace,
                            "root_workflow_id": root_workflow_id,
                            "child_workflow_id": child.workflow_id,
                            "child_run_id": child.run_id,
                        }
                    },
                )
                continue
            timeline.children[child.workflow_id] = result

        logger.info(
            "Assembled timeline for %s: %s items, %s children, %s failed",
            root_workflow_id,
            len(root),
            len(timeline.children),
            len(timeline.failures),
        )
        return timeline

    async def _child_timeline(
        self, namespace: str, child: WorkflowSpan
    ) -> list[TimelineItem]:
        events = await self._fetcher.fetch(namespace, child.workflow_id, child.run_id)
        return self._parser.parse(events, workflow_id=child.workflow_id)
