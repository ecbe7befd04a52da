"""Tests for WorkflowTreeAssembler."""

from unittest.mock import AsyncMock, Mock

import pytest

from timeline.assembler import WorkflowTreeAssembler
from timeline.errors import NotFoundError, UpstreamError
from timeline.models import SpanStatus


@pytest.fixture
def fetcher():
    """Mock history fetcher."""
    fetcher = Mock()
    fetcher.fetch = AsyncMock()
    return fetcher


def _root_with_children(builder, *child_ids):
    builder.workflow_started("root", run_id="root-run")
    for child_id in child_ids:
        builder.child_initiated(child_id)
        builder.child_started(child_id, run_id=f"{child_id}-run")
        builder.child_completed(child_id, run_id=f"{child_id}-run")
    builder.workflow_closed()
    return builder.events()


def _child_history(builder, workflow_id):
    builder.workflow_started(workflow_id, run_id=f"{workflow_id}-run", workflow_type="ChildWorkflow")
    builder.activity_scheduled("work")
    builder.activity_started()
    builder.activity_closed()
    builder.workflow_closed()
    return builder.events()


class TestWorkflowTreeAssembler:
    """Tests for assemble_timeline()."""

    @pytest.mark.asyncio
    async def test_root_and_children(self, history, fetcher):
        """Each discovered child is fetched with its own identity."""
        histories = {
            "root": _root_with_children(history, "c1", "c2"),
            "c1": _child_history(type(history)(), "c1"),
            "c2": _child_history(type(history)(), "c2"),
        }
        fetcher.fetch.side_effect = lambda ns, wf_id, run_id: histories[wf_id]

        timeline = await WorkflowTreeAssembler(fetcher).assemble_timeline("default", "root", "root-run")

        assert [item.id for item in timeline.root] == ["root", "c1", "c2"]
        assert list(timeline.children) == ["c1", "c2"]
        assert timeline.children["c1"][0].status is SpanStatus.COMPLETED
        assert timeline.children["c1"][1].workflow_id == "c1"
        assert timeline.failures == []
        fetcher.fetch.assert_any_await("default", "root", "root-run")
        fetcher.fetch.assert_any_await("default", "c1", "c1-run")
        fetcher.fetch.assert_any_await("default", "c2", "c2-run")

    @pytest.mark.asyncio
    async def test_child_failure_isolated(self, history, fetcher):
        """One failing child is left out; its sibling and the root survive."""
        root_events = _root_with_children(history, "bad", "good")
        good_events = _child_history(type(history)(), "good")

        async def fetch(ns, wf_id, run_id):
            if wf_id == "bad":
                raise UpstreamError("Failed to fetch. Status: 500", status_code=500)
            return root_events if wf_id == "root" else good_events

        fetcher.fetch.side_effect = fetch

        timeline = await WorkflowTreeAssembler(fetcher).assemble_timeline("default", "root", "root-run")

        assert len(timeline.root) == 3
        assert list(timeline.children) == ["good"]
        (failure,) = timeline.failures
        assert failure.workflow_id == "bad"
        assert failure.run_id == "bad-run"
        assert "500" in failure.error

    @pytest.mark.asyncio
    async def test_child_parse_failure_isolated(self, history, fetcher):
        """A parser error on a child history only drops that child."""
        root_events = _root_with_children(history, "c1")
        parser = Mock()
        parser.parse.side_effect = lambda events, workflow_id=None: (
            _raise(ValueError("bad history")) if workflow_id == "c1" else _real_parse(events, workflow_id)
        )
        fetcher.fetch.side_effect = lambda ns, wf_id, run_id: root_events if wf_id == "root" else []

        timeline = await WorkflowTreeAssembler(fetcher, parser).assemble_timeline("default", "root", "root-run")

        assert timeline.children == {}
        assert timeline.failures[0].error == "bad history"

    @pytest.mark.asyncio
    async def test_root_failure_propagates(self, fetcher):
        """Errors fetching the root fail the whole assembly."""
        fetcher.fetch.side_effect = NotFoundError("no such workflow")

        with pytest.raises(NotFoundError):
            await WorkflowTreeAssembler(fetcher).assemble_timeline("default", "root", "root-run")

    @pytest.mark.asyncio
    async def test_grandchildren_not_resolved(self, history, fetcher):
        """Only one level of children is fetched."""
        root_events = _root_with_children(history, "child")
        child_events = _root_with_children(type(history)(), "grandchild")
        fetcher.fetch.side_effect = lambda ns, wf_id, run_id: (
            root_events if wf_id == "root" else child_events
        )

        timeline = await WorkflowTreeAssembler(fetcher).assemble_timeline("default", "root", "root-run")

        assert list(timeline.children) == ["child"]
        assert fetcher.fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_no_children(self, history, fetcher):
        """A root without children fetches once."""
        history.workflow_started("root")
        history.workflow_closed()
        fetcher.fetch.return_value = history.events()

        timeline = await WorkflowTreeAssembler(fetcher).assemble_timeline("default", "root", "root-run")

        assert timeline.children == {}
        assert fetcher.fetch.await_count == 1


def _raise(error):
    raise error


def _real_parse(events, workflow_id):
    from timeline.parser import HistoryParser

    return HistoryParser().parse(events, workflow_id=workflow_id)
