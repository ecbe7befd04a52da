"""Workflow timeline reconstruction."""

from .app import Application, IApplication
from .assembler import IWorkflowTreeAssembler, WorkflowTreeAssembler
from .config import Settings, load_settings
from .errors import ConfigurationError, NotFoundError, TimelineError, UpstreamError
from .history import HistoryFetcher, IHistoryFetcher
from .models import (
    ActivitySpan,
    Event,
    EventType,
    ItemKind,
    PartialChildFailure,
    SpanStatus,
    TimelineItem,
    WorkflowSpan,
    WorkflowTimeline,
)
from .parser import HistoryParser, IHistoryParser
from .search import IWorkflowSearch, WorkflowSearch
from .temporal import ITemporalClient, TemporalClient

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    "load_settings",
    # Errors
    "TimelineError",
    "ConfigurationError",
    "NotFoundError",
    "UpstreamError",
    # Models
    "Event",
    "EventType",
    "ItemKind",
    "SpanStatus",
    "ActivitySpan",
    "WorkflowSpan",
    "TimelineItem",
    "WorkflowTimeline",
    "PartialChildFailure",
    # Components
    "ITemporalClient",
    "TemporalClient",
    "IHistoryFetcher",
    "HistoryFetcher",
    "IHistoryParser",
    "HistoryParser",
    "IWorkflowTreeAssembler",
    "WorkflowTreeAssembler",
    "IWorkflowSearch",
    "WorkflowSearch",
]
