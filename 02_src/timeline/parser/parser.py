"""Reconstruct a workflow/activity timeline from one execution's history."""

from typing import Callable, Iterable, Protocol

from ..logging_config import get_logger
from ..models import (
    ActivityClosedDetails,
    ActivityScheduledDetails,
    ActivitySpan,
    ChildExecutionDetails,
    ChildInitiatedDetails,
    Event,
    EventType,
    ItemKind,
    SpanStatus,
    TimelineItem,
    WorkflowSpan,
    WorkflowStartedDetails,
)

logger = get_logger(__name__)


WORKFLOW_TERMINAL_STATUS = {
    EventType.WORKFLOW_EXECUTION_COMPLETED: SpanStatus.COMPLETED,
    EventType.WORKFLOW_EXECUTION_FAILED: SpanStatus.FAILED,
    EventType.WORKFLOW_EXECUTION_TIMED_OUT: SpanStatus.TIMED_OUT,
    EventType.WORKFLOW_EXECUTION_CANCELED: SpanStatus.CANCELED,
    EventType.WORKFLOW_EXECUTION_TERMINATED: SpanStatus.TERMINATED,
}

ACTIVITY_TERMINAL_STATUS = {
    EventType.ACTIVITY_TASK_COMPLETED: SpanStatus.COMPLETED,
    EventType.ACTIVITY_TASK_FAILED: SpanStatus.FAILED,
    EventType.ACTIVITY_TASK_TIMED_OUT: SpanStatus.TIMED_OUT,
    EventType.ACTIVITY_TASK_CANCELED: SpanStatus.CANCELED,
}


class IHistoryParser(Protocol):
    """Turn an ordered event list into ordered timeline items."""

    def parse(
        self, events: Iterable[Event], workflow_id: str | None = None
    ) -> list[TimelineItem]:
        """Pure and deterministic; unknown or unmatched events are ignored."""
        ...


class _TimelineBuilder:
    """
    Single left-to-right pass over one execution's events.

    Activities carry no owning workflow id in the log, so they are attributed
    to whichever workflow sits on top of `scope_stack` when they appear.
    Open activities are kept per owner in scheduling order; later events
    resolve against the most recently scheduled one that is still open.
    """

    def __init__(self, default_workflow_id: str | None = None):
        self.items: list[TimelineItem] = []
        self.workflows: dict[str, WorkflowSpan] = {}
        self.scope_stack: list[str] = []
        self.open_activities: dict[str, list[ActivitySpan]] = {}
        self._default_workflow_id = default_workflow_id

        self._handlers: dict[EventType, Callable[[Event], None]] = {
            EventType.WORKFLOW_EXECUTION_STARTED: self._on_workflow_started,
            EventType.ACTIVITY_TASK_SCHEDULED: self._on_activity_scheduled,
            EventType.ACTIVITY_TASK_STARTED: self._on_activity_started,
            EventType.START_CHILD_WORKFLOW_EXECUTION_INITIATED: self._on_child_initiated,
            EventType.CHILD_WORKFLOW_EXECUTION_STARTED: self._on_child_started,
            EventType.CHILD_WORKFLOW_EXECUTION_COMPLETED: self._on_child_completed,
        }
        for event_type in WORKFLOW_TERMINAL_STATUS:
            self._handlers[event_type] = self._on_workflow_closed
        for event_type in ACTIVITY_TERMINAL_STATUS:
            self._handlers[event_type] = self._on_activity_closed

    @property
    def scope(self) -> str | None:
        return self.scope_stack[-1] if self.scope_stack else None

    def apply(self, event: Event) -> None:
        if event.event_type is None:
            return
        handler = self._handlers.get(event.event_type)
        if handler:
            handler(event)

    def _add_workflow(self, span: WorkflowSpan) -> None:
        self.workflows[span.workflow_id] = span
        self.items.append(span)

    def _scope_span(self) -> WorkflowSpan | None:
        return self.workflows.get(self.scope) if self.scope else None

    # Workflow lifecycle

    def _on_workflow_started(self, event: Event) -> None:
        details = event.details
        if not isinstance(details, WorkflowStartedDetails):
            return
        workflow_id = details.workflow_id or self._default_workflow_id
        if not workflow_id:
            return

        span = self.workflows.get(workflow_id)
        if span is None:
            span = WorkflowSpan(
                workflow_id=workflow_id,
                kind=ItemKind.WORKFLOW,
                status=SpanStatus.RUNNING,
                start_time=event.event_time,
                run_id=details.first_execution_run_id,
                workflow_type=details.workflow_type,
                parent_workflow_id=details.parent_workflow_id,
                parent_run_id=details.parent_run_id,
                related_event_ids=[event.event_id],
                payload=details.input_payloads,
            )
            self._add_workflow(span)
        else:
            span.start_time = event.event_time
            span.run_id = span.run_id or details.first_execution_run_id
            span.workflow_type = span.workflow_type or details.workflow_type
            span.payload = details.input_payloads
            span.related_event_ids.append(event.event_id)

        self.scope_stack.append(workflow_id)

    def _on_workflow_closed(self, event: Event) -> None:
        # The closing event does not name its workflow: it belongs to the scope top
        span = self._scope_span()
        if span is not None and not span.status.is_terminal:
            span.end_time = event.event_time
            span.status = WORKFLOW_TERMINAL_STATUS[event.event_type]
            span.related_event_ids.append(event.event_id)

        if self.scope_stack:
            self.scope_stack.pop()

    # Activities

    def _on_activity_scheduled(self, event: Event) -> None:
        details = event.details
        owner = self.scope
        if not isinstance(details, ActivityScheduledDetails):
            return
        if not owner or not details.activity_id:
            return

        span = ActivitySpan(
            activity_id=details.activity_id,
            activity_type=details.activity_type,
            workflow_id=owner,
            status=SpanStatus.SCHEDULED,
            schedule_time=event.event_time,
            workflow_task_completed_event_id=details.workflow_task_completed_event_id,
            related_event_ids=[event.event_id],
        )
        self.items.append(span)
        self.open_activities.setdefault(owner, []).append(span)

    def _on_activity_started(self, event: Event) -> None:
        if event.details is None:
            return

        for span in reversed(self.open_activities.get(self.scope, [])):
            if span.status is SpanStatus.SCHEDULED:
                span.start_time = event.event_time
                span.status = SpanStatus.STARTED
                span.related_event_ids.append(event.event_id)
                return

        logger.debug("Dropped unmatched activity start event %s", event.event_id)

    def _on_activity_closed(self, event: Event) -> None:
        open_spans = self.open_activities.get(self.scope)
        if not open_spans:
            logger.debug("Dropped unmatched activity close event %s", event.event_id)
            return

        # Everything in open_spans is SCHEDULED or STARTED; the last one wins
        span = open_spans.pop()
        span.end_time = event.event_time
        span.status = ACTIVITY_TERMINAL_STATUS[event.event_type]
        span.related_event_ids.append(event.event_id)

        details = event.details
        if (
            event.event_type is EventType.ACTIVITY_TASK_COMPLETED
            and isinstance(details, ActivityClosedDetails)
            and details.result_payloads
        ):
            span.payload = details.result_payloads

    # Child workflows

    def _on_child_initiated(self, event: Event) -> None:
        details = event.details
        if not isinstance(details, ChildInitiatedDetails) or not details.workflow_id:
            return

        span = self.workflows.get(details.workflow_id)
        if span is not None:
            # A closed span keeps its first run; reopening it would put start after end
            if span.status.is_terminal:
                return
            span.start_time = event.event_time
            span.workflow_task_completed_event_id = details.workflow_task_completed_event_id
            span.related_event_ids.append(event.event_id)
            return

        parent = self._scope_span()
        # Placeholder until the child actually starts; not a scope of its own
        self._add_workflow(
            WorkflowSpan(
                workflow_id=details.workflow_id,
                kind=ItemKind.CHILD_WORKFLOW,
                status=SpanStatus.RUNNING,
                start_time=event.event_time,
                workflow_type=details.workflow_type,
                parent_workflow_id=parent.workflow_id if parent else None,
                parent_run_id=parent.run_id if parent else None,
                workflow_task_completed_event_id=details.workflow_task_completed_event_id,
                related_event_ids=[event.event_id],
            )
        )

    def _on_child_started(self, event: Event) -> None:
        details = event.details
        if not isinstance(details, ChildExecutionDetails) or not details.workflow_id:
            return

        span = self.workflows.get(details.workflow_id)
        if span is not None:
            if span.status.is_terminal:
                return
            span.start_time = event.event_time
            span.run_id = span.run_id or details.run_id
            span.workflow_type = span.workflow_type or details.workflow_type
            span.related_event_ids.append(event.event_id)
            return

        parent = self._scope_span()
        self._add_workflow(
            WorkflowSpan(
                workflow_id=details.workflow_id,
                kind=ItemKind.CHILD_WORKFLOW,
                status=SpanStatus.RUNNING,
                start_time=event.event_time,
                run_id=details.run_id,
                workflow_type=details.workflow_type,
                parent_workflow_id=details.parent_workflow_id
                or (parent.workflow_id if parent else None),
                parent_run_id=details.parent_run_id
                or (parent.run_id if parent else None),
                related_event_ids=[event.event_id],
            )
        )
        # Only a child first seen here becomes a scope; its completion is
        # resolved by id and does not pop it.
        self.scope_stack.append(details.workflow_id)

    def _on_child_completed(self, event: Event) -> None:
        details = event.details
        if not isinstance(details, ChildExecutionDetails):
            return
        span = self.workflows.get(details.workflow_id or "")
        if span is None or span.status.is_terminal:
            return

        span.end_time = event.event_time
        span.status = SpanStatus.COMPLETED
        span.related_event_ids.append(event.event_id)


class HistoryParser:
    """Stateless parser: every call builds a fresh timeline."""

    def parse(
        self, events: Iterable[Event], workflow_id: str | None = None
    ) -> list[TimelineItem]:
        """
        Reconstruct timeline items from an ordered event list.

        Args:
            events: One execution's events in history order.
            workflow_id: Fallback id for a WorkflowExecutionStarted event
                whose attributes do not carry one (older engine versions).

        Returns:
            Items in order of first appearance. Later events update items in
            place and never reorder them.
        """
        builder = _TimelineBuilder(default_workflow_id=workflow_id)
        for event in events:
            builder.apply(event)
        return builder.items

    @staticmethod
    def child_workflows(items: Iterable[TimelineItem]) -> list[WorkflowSpan]:
        """Child WorkflowSpans discovered in a parsed timeline."""
        return [
            item
            for item in items
            if isinstance(item, WorkflowSpan) and item.kind is ItemKind.CHILD_WORKFLOW
        ]
