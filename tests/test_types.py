"""Tests for type definitions and enums."""

from __future__ import annotations

import pytest

from litestar_flowstate.core.instance import WorkflowInstance
from litestar_flowstate.core.types import StateKind, WorkflowStatus


@pytest.mark.unit
class TestStateKind:
    """Tests for StateKind enum."""

    def test_state_kind_values(self) -> None:
        """Test StateKind enum has expected values."""
        assert StateKind.TASK == "task"
        assert StateKind.AUTO == "auto"
        assert StateKind.END == "end"
        assert len(StateKind) == 3

    def test_state_kind_from_string(self) -> None:
        """Test StateKind can be parsed from configuration strings."""
        assert StateKind("auto") is StateKind.AUTO

        with pytest.raises(ValueError):
            StateKind("parallel")


@pytest.mark.unit
class TestWorkflowStatus:
    """Tests for WorkflowStatus enum."""

    def test_workflow_status_values(self) -> None:
        """Test WorkflowStatus enum has expected values."""
        assert WorkflowStatus.RUNNING == "running"
        assert WorkflowStatus.COMPLETED == "completed"
        assert WorkflowStatus.ERROR == "error"
        assert len(WorkflowStatus) == 3


@pytest.mark.unit
class TestWorkflowInstance:
    """Tests for WorkflowInstance helpers."""

    def test_defaults(self) -> None:
        """Test a bare instance is running with empty history."""
        instance = WorkflowInstance(workflow_id="wf", instance_id="i", current_state="a", ctx=None)

        assert instance.status == WorkflowStatus.RUNNING
        assert instance.history == []
        assert instance.error is None
        assert instance.open_entry is None
        assert instance.is_running is True
        assert instance.is_finished is False

    @pytest.mark.parametrize("status", [WorkflowStatus.COMPLETED, WorkflowStatus.ERROR])
    def test_is_finished(self, status: WorkflowStatus) -> None:
        """Test completed and errored instances count as finished."""
        instance = WorkflowInstance(workflow_id="wf", instance_id="i", current_state="a", ctx={}, status=status)

        assert instance.is_finished is True
        assert instance.is_running is False
