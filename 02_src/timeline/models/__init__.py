"""Core data models for workflow timelines."""

from .events import (
    ActivityClosedDetails,
    ActivityScheduledDetails,
    ActivityStartedDetails,
    ChildExecutionDetails,
    ChildInitiatedDetails,
    Event,
    EventDetails,
    EventType,
    WorkflowClosedDetails,
    WorkflowStartedDetails,
    parse_timestamp,
)
from .timeline import (
    ActivitySpan,
    ItemKind,
    PartialChildFailure,
    SpanStatus,
    TimelineItem,
    WorkflowSpan,
    WorkflowTimeline,
)

__all__ = [
    # Events
    "Event",
    "EventDetails",
    "EventType",
    "WorkflowStartedDetails",
    "WorkflowClosedDetails",
    "ActivityScheduledDetails",
    "ActivityStartedDetails",
    "ActivityClosedDetails",
    "ChildInitiatedDetails",
    "ChildExecutionDetails",
    "parse_timestamp",
    # Timeline
    "ActivitySpan",
    "ItemKind",
    "PartialChildFailure",
    "SpanStatus",
    "TimelineItem",
    "WorkflowSpan",
    "WorkflowTimeline",
]
