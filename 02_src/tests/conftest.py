"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class HistoryBuilder:
    """Builds engine-shaped history JSON with sequential ids and times."""

    def __init__(self):
        self._raw: list[dict[str, Any]] = []

    @property
    def next_id(self) -> int:
        return len(self._raw) + 1

    def _add(self, kind: str, attrs: dict[str, Any] | None, **extra) -> dict[str, Any]:
        from timeline.models.events import attributes_key

        event_id = self.next_id
        raw = {
            "eventId": str(event_id),
            "eventTime": (BASE_TIME + timedelta(seconds=event_id)).strftime(
                "%Y-%m-%dT%H:%M:%S.123456789Z"
            ),
            "eventType": f"EVENT_TYPE_{kind}",
            **extra,
        }
        if attrs is not None:
            raw[attributes_key(kind)] = attrs
        self._raw.append(raw)
        return raw

    def workflow_started(self, workflow_id="wfA", run_id="runA", workflow_type="RootWorkflow", payloads=None):
        attrs = {
            "workflowId": workflow_id,
            "firstExecutionRunId": run_id,
            "workflowType": {"name": workflow_type},
        }
        if payloads is not None:
            attrs["input"] = {"payloads": payloads}
        return self._add("WORKFLOW_EXECUTION_STARTED", attrs)

    def workflow_closed(self, kind="COMPLETED"):
        return self._add(f"WORKFLOW_EXECUTION_{kind}", {})

    def activity_scheduled(self, activity_id="act1", activity_type="DoWork", task_completed_id=None):
        return self._add(
            "ACTIVITY_TASK_SCHEDULED",
            {
                "activityId": activity_id,
                "activityType": {"name": activity_type},
                "workflowTaskCompletedEventId": str(task_completed_id or self.next_id - 1),
            },
        )

    def activity_started(self, scheduled_event_id=0):
        return self._add("ACTIVITY_TASK_STARTED", {"scheduledEventId": str(scheduled_event_id)})

    def activity_closed(self, kind="COMPLETED", result=None):
        attrs: dict[str, Any] = {}
        if result is not None:
            attrs["result"] = {"payloads": result}
        return self._add(f"ACTIVITY_TASK_{kind}", attrs)

    def child_initiated(self, workflow_id="wfB", workflow_type="ChildWorkflow"):
        return self._add(
            "START_CHILD_WORKFLOW_EXECUTION_INITIATED",
            {
                "workflowId": workflow_id,
                "workflowType": {"name": workflow_type},
                "workflowTaskCompletedEventId": str(self.next_id - 1),
            },
        )

    def child_started(self, workflow_id="wfB", run_id="runB", parent=None):
        attrs: dict[str, Any] = {
            "workflowExecution": {"workflowId": workflow_id, "runId": run_id},
            "workflowType": {"name": "ChildWorkflow"},
        }
        if parent is not None:
            attrs["parentWorkflowExecution"] = {"workflowId": parent[0], "runId": parent[1]}
        return self._add("CHILD_WORKFLOW_EXECUTION_STARTED", attrs)

    def child_completed(self, workflow_id="wfB", run_id="runB"):
        return self._add(
            "CHILD_WORKFLOW_EXECUTION_COMPLETED",
            {"workflowExecution": {"workflowId": workflow_id, "runId": run_id}},
        )

    def other(self, kind="WORKFLOW_TASK_SCHEDULED"):
        return self._add(kind, {"taskQueue": {"name": "default"}})

    def raw(self) -> list[dict[str, Any]]:
        return list(self._raw)

    def events(self):
        from timeline.models import Event

        return [Event.from_dict(raw) for raw in self._raw]


@pytest.fixture
def history():
    """Fresh history builder."""
    return HistoryBuilder()


@pytest.fixture
def parser():
    """HistoryParser instance."""
    from timeline.parser import HistoryParser

    return HistoryParser()


@pytest.fixture
def settings():
    """Settings pointing at a fake upstream."""
    from timeline.config import Settings

    return Settings(api_key="test_key", endpoint="http://temporal.test", http_timeout=5.0)
