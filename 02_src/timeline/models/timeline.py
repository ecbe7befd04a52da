"""Reconstructed timeline items."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union


class SpanStatus(str, Enum):
    """Lifecycle status of a workflow or activity span."""

    RUNNING = "RUNNING"
    SCHEDULED = "SCHEDULED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    CANCELED = "CANCELED"
    TERMINATED = "TERMINATED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {
        SpanStatus.COMPLETED,
        SpanStatus.FAILED,
        SpanStatus.TIMED_OUT,
        SpanStatus.CANCELED,
        SpanStatus.TERMINATED,
    }
)


class ItemKind(str, Enum):
    """Timeline item variants, serialized as the `type` field."""

    WORKFLOW = "workflow"
    CHILD_WORKFLOW = "childWorkflow"
    ACTIVITY = "activity"


def _isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


@dataclass
class WorkflowSpan:
    """A workflow (root or child) as it appears in one execution's history."""

    workflow_id: str
    kind: ItemKind = ItemKind.WORKFLOW
    status: SpanStatus = SpanStatus.RUNNING
    start_time: datetime | None = None
    end_time: datetime | None = None
    run_id: str | None = None
    workflow_type: str | None = None
    parent_workflow_id: str | None = None
    parent_run_id: str | None = None
    workflow_task_completed_event_id: int | None = None
    related_event_ids: list[int] = field(default_factory=list)
    payload: Any = None

    @property
    def id(self) -> str:
        return self.workflow_id

    @property
    def is_child(self) -> bool:
        return self.kind is ItemKind.CHILD_WORKFLOW

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "workflowId": self.workflow_id,
            "runId": self.run_id,
            "workflowType": self.workflow_type,
            "status": self.status.value,
            "startTime": _isoformat(self.start_time),
            "endTime": _isoformat(self.end_time),
            "parentWorkflowId": self.parent_workflow_id,
            "parentRunId": self.parent_run_id,
            "workflowTaskCompletedEventId": self.workflow_task_completed_event_id,
            "relatedEventIds": list(self.related_event_ids),
            "payload": self.payload,
        }


@dataclass
class ActivitySpan:
    """An activity attributed to the workflow that scheduled it."""

    activity_id: str
    activity_type: str | None
    workflow_id: str
    status: SpanStatus = SpanStatus.SCHEDULED
    schedule_time: datetime | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    workflow_task_completed_event_id: int | None = None
    related_event_ids: list[int] = field(default_factory=list)
    payload: Any = None

    kind = ItemKind.ACTIVITY

    @property
    def id(self) -> str:
        return f"{self.workflow_id}:{self.activity_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "activityId": self.activity_id,
            "activityType": self.activity_type,
            "workflowId": self.workflow_id,
            "status": self.status.value,
            "scheduleTime": _isoformat(self.schedule_time),
            "startTime": _isoformat(self.start_time),
            "endTime": _isoformat(self.end_time),
            "workflowTaskCompletedEventId": self.workflow_task_completed_event_id,
            "relatedEventIds": list(self.related_event_ids),
            "payload": self.payload,
        }


TimelineItem = Union[WorkflowSpan, ActivitySpan]


@dataclass
class PartialChildFailure:
    """A child execution whose history could not be fetched or parsed."""

    workflow_id: str
    run_id: str | None
    error: str


@dataclass
class WorkflowTimeline:
    """Root execution timeline plus the timelines of its direct children."""

    root: list[TimelineItem]
    children: dict[str, list[TimelineItem]] = field(default_factory=dict)
    failures: list[PartialChildFailure] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": [item.to_dict() for item in self.root],
            "children": {
                workflow_id: [item.to_dict() for item in items]
                for workflow_id, items in self.children.items()
            },
        }
