"""Raw engine history events."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union


class EventType(str, Enum):
    """History event kinds the timeline reconstruction understands."""

    WORKFLOW_EXECUTION_STARTED = "WORKFLOW_EXECUTION_STARTED"
    WORKFLOW_EXECUTION_COMPLETED = "WORKFLOW_EXECUTION_COMPLETED"
    WORKFLOW_EXECUTION_FAILED = "WORKFLOW_EXECUTION_FAILED"
    WORKFLOW_EXECUTION_TIMED_OUT = "WORKFLOW_EXECUTION_TIMED_OUT"
    WORKFLOW_EXECUTION_CANCELED = "WORKFLOW_EXECUTION_CANCELED"
    WORKFLOW_EXECUTION_TERMINATED = "WORKFLOW_EXECUTION_TERMINATED"
    ACTIVITY_TASK_SCHEDULED = "ACTIVITY_TASK_SCHEDULED"
    ACTIVITY_TASK_STARTED = "ACTIVITY_TASK_STARTED"
    ACTIVITY_TASK_COMPLETED = "ACTIVITY_TASK_COMPLETED"
    ACTIVITY_TASK_FAILED = "ACTIVITY_TASK_FAILED"
    ACTIVITY_TASK_TIMED_OUT = "ACTIVITY_TASK_TIMED_OUT"
    ACTIVITY_TASK_CANCELED = "ACTIVITY_TASK_CANCELED"
    START_CHILD_WORKFLOW_EXECUTION_INITIATED = "START_CHILD_WORKFLOW_EXECUTION_INITIATED"
    CHILD_WORKFLOW_EXECUTION_STARTED = "CHILD_WORKFLOW_EXECUTION_STARTED"
    CHILD_WORKFLOW_EXECUTION_COMPLETED = "CHILD_WORKFLOW_EXECUTION_COMPLETED"

    @property
    def attributes_key(self) -> str:
        """JSON key holding this kind's payload, e.g. activityTaskStartedEventAttributes."""
        return attributes_key(self.value)


EVENT_TYPE_PREFIX = "EVENT_TYPE_"

# RFC3339 with an optional fraction of any length and a Z or numeric offset
_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?$"
)


def attributes_key(kind: str) -> str:
    parts = kind.lower().split("_")
    return parts[0] + "".join(p.capitalize() for p in parts[1:]) + "EventAttributes"


def normalize_event_type(raw: str | None) -> EventType | None:
    """Map `EVENT_TYPE_ACTIVITY_TASK_STARTED` or `ACTIVITY_TASK_STARTED` to EventType."""
    if not raw:
        return None
    kind = raw.upper()
    if kind.startswith(EVENT_TYPE_PREFIX):
        kind = kind[len(EVENT_TYPE_PREFIX):]
    try:
        return EventType(kind)
    except ValueError:
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an engine timestamp.

    The engine emits nanosecond precision which datetime cannot hold, so the
    fraction is truncated to microseconds. Returns None for anything that is
    not a recognisable RFC3339 string.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        return None

    text = match.group("base")
    fraction = match.group("fraction")
    if fraction:
        text += "." + fraction[:6].ljust(6, "0")
    tz = match.group("tz")
    if tz:
        text += "+00:00" if tz == "Z" else tz

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None




def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _type_name(attrs: dict[str, Any], key: str) -> str | None:
    return _as_dict(attrs.get(key)).get("name")


def _payloads(attrs: dict[str, Any], key: str) -> Any:
    return _as_dict(attrs.get(key)).get("payloads")


@dataclass(frozen=True)
class WorkflowStartedDetails:
    """WorkflowExecutionStarted attributes."""

    workflow_id: str | None
    first_execution_run_id: str | None
    workflow_type: str | None
    parent_workflow_id: str | None
    parent_run_id: str | None
    input_payloads: Any

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "WorkflowStartedDetails":
        parent = _as_dict(attrs.get("parentWorkflowExecution"))
        return cls(
            workflow_id=attrs.get("workflowId"),
            first_execution_run_id=attrs.get("firstExecutionRunId"),
            workflow_type=_type_name(attrs, "workflowType"),
            parent_workflow_id=parent.get("workflowId"),
            parent_run_id=parent.get("runId"),
            input_payloads=_payloads(attrs, "input"),
        )


@dataclass(frozen=True)
class WorkflowClosedDetails:
    """Any workflow terminal event; the subject is implied by scope."""

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "WorkflowClosedDetails":
        return cls()


@dataclass(frozen=True)
class ActivityScheduledDetails:
    """ActivityTaskScheduled attributes."""

    activity_id: str | None
    activity_type: str | None
    workflow_task_completed_event_id: int | None

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "ActivityScheduledDetails":
        activity_id = attrs.get("activityId")
        return cls(
            activity_id=str(activity_id) if activity_id else None,
            activity_type=_type_name(attrs, "activityType"),
            workflow_task_completed_event_id=_as_int(
                attrs.get("workflowTaskCompletedEventId")
            ),
        )


@dataclass(frozen=True)
class ActivityStartedDetails:
    """ActivityTaskStarted attributes."""

    scheduled_event_id: int | None

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "ActivityStartedDetails":
        return cls(scheduled_event_id=_as_int(attrs.get("scheduledEventId")))


@dataclass(frozen=True)
class ActivityClosedDetails:
    """Activity terminal events; only completion carries a result."""

    result_payloads: Any = None

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "ActivityClosedDetails":
        return cls(result_payloads=_payloads(attrs, "result"))


@dataclass(frozen=True)
class ChildInitiatedDetails:
    """StartChildWorkflowExecutionInitiated attributes."""

    workflow_id: str | None
    workflow_type: str | None
    workflow_task_completed_event_id: int | None

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "ChildInitiatedDetails":
        return cls(
            workflow_id=attrs.get("workflowId"),
            workflow_type=_type_name(attrs, "workflowType"),
            workflow_task_completed_event_id=_as_int(
                attrs.get("workflowTaskCompletedEventId")
            ),
        )


@dataclass(frozen=True)
class ChildExecutionDetails:
    """ChildWorkflowExecutionStarted / Completed attributes."""

    workflow_id: str | None
    run_id: str | None
    workflow_type: str | None
    parent_workflow_id: str | None
    parent_run_id: str | None

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "ChildExecutionDetails":
        execution = _as_dict(attrs.get("workflowExecution"))
        parent = _as_dict(attrs.get("parentWorkflowExecution"))
        return cls(
            workflow_id=execution.get("workflowId"),
            run_id=execution.get("runId"),
            workflow_type=_type_name(attrs, "workflowType"),
            parent_workflow_id=parent.get("workflowId"),
            parent_run_id=parent.get("runId"),
        )


EventDetails = Union[
    WorkflowStartedDetails,
    WorkflowClosedDetails,
    ActivityScheduledDetails,
    ActivityStartedDetails,
    ActivityClosedDetails,
    ChildInitiatedDetails,
    ChildExecutionDetails,
]

DETAILS_BY_TYPE: dict[EventType, type] = {
    EventType.WORKFLOW_EXECUTION_STARTED: WorkflowStartedDetails,
    EventType.WORKFLOW_EXECUTION_COMPLETED: WorkflowClosedDetails,
    EventType.WORKFLOW_EXECUTION_FAILED: WorkflowClosedDetails,
    EventType.WORKFLOW_EXECUTION_TIMED_OUT: WorkflowClosedDetails,
    EventType.WORKFLOW_EXECUTION_CANCELED: WorkflowClosedDetails,
    EventType.WORKFLOW_EXECUTION_TERMINATED: WorkflowClosedDetails,
    EventType.ACTIVITY_TASK_SCHEDULED: ActivityScheduledDetails,
    EventType.ACTIVITY_TASK_STARTED: ActivityStartedDetails,
    EventType.ACTIVITY_TASK_COMPLETED: ActivityClosedDetails,
    EventType.ACTIVITY_TASK_FAILED: ActivityClosedDetails,
    EventType.ACTIVITY_TASK_TIMED_OUT: ActivityClosedDetails,
    EventType.ACTIVITY_TASK_CANCELED: ActivityClosedDetails,
    EventType.START_CHILD_WORKFLOW_EXECUTION_INITIATED: ChildInitiatedDetails,
    EventType.CHILD_WORKFLOW_EXECUTION_STARTED: ChildExecutionDetails,
    EventType.CHILD_WORKFLOW_EXECUTION_COMPLETED: ChildExecutionDetails,
}


@dataclass(frozen=True)
class Event:
    """
    A single immutable record from an execution's history.

    `details` is the typed view of the kind-specific attributes. It is None
    for unknown kinds and for events whose attributes object is absent.
    """

    event_id: int
    event_type: EventType | None
    event_time: datetime | None
    details: EventDetails | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    raw_type: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Event":
        """Build an Event from the engine's JSON representation."""
        raw_type = str(data.get("eventType") or "")
        event_type = normalize_event_type(raw_type)

        try:
            event_id = int(data.get("eventId", 0))
        except (TypeError, ValueError):
            event_id = 0

        attributes: dict[str, Any] = {}
        details = None
        if event_type is not None:
            value = data.get(event_type.attributes_key)
            if isinstance(value, dict):
                attributes = value
                details = DETAILS_BY_TYPE[event_type].from_attributes(value)

        return cls(
            event_id=event_id,
            event_type=event_type,
            event_time=parse_timestamp(data.get("eventTime")),
            details=details,
            attributes=attributes,
            raw_type=raw_type,
        )
