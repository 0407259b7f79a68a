"""Tests for the auto-run stabilizer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from litestar_flowstate.core.definition import State, Transition, WorkflowDefinition
from litestar_flowstate.core.instance import WorkflowInstance
from litestar_flowstate.core.types import StateKind, WorkflowStatus
from litestar_flowstate.engine.lifecycle import start_workflow, start_workflow_and_run
from litestar_flowstate.engine.stabilize import run_until_stable
from litestar_flowstate.exceptions import StateNotFoundError, WorkflowStalledError

if TYPE_CHECKING:
    from tests.conftest import CallRecorder


def auto_chain(*transitions: Transition, kind: StateKind = StateKind.AUTO) -> WorkflowDefinition:
    return WorkflowDefinition(
        id="chain",
        initial_state="x",
        states={
            "x": State(id="x", kind=kind, transitions=list(transitions)),
            "y": State(id="y", kind=StateKind.TASK),
            "z": State(id="z", kind=StateKind.END),
        },
    )


@pytest.mark.unit
@pytest.mark.asyncio
class TestRunUntilStable:
    """Tests for run_until_stable."""

    async def test_task_state_is_stable(self, go_ready_definition: WorkflowDefinition) -> None:
        """Nothing happens outside auto states."""
        instance = start_workflow(go_ready_definition, {"ready": True})

        assert await run_until_stable(go_ready_definition, instance) is instance

    async def test_false_guard_leaves_instance_unchanged(self) -> None:
        """An auto state whose only guard fails is stable and still running."""
        definition = auto_chain(Transition(target="y", guard=lambda ctx: False))
        instance = start_workflow(definition, {})

        result = await run_until_stable(definition, instance)

        assert result.current_state == "x"
        assert len(result.history) == len(instance.history)
        assert result.status == WorkflowStatus.RUNNING

    async def test_no_auto_candidates_is_stable(self) -> None:
        """Evented transitions are ignored during stabilization."""
        definition = auto_chain(Transition(target="y", event="GO"))
        instance = start_workflow(definition, {})

        result = await run_until_stable(definition, instance)

        assert result is instance
        assert result.status == WorkflowStatus.RUNNING

    async def test_first_match_wins(self, recorder: CallRecorder) -> None:
        """The first passing guard is selected and later guards are not evaluated."""
        definition = auto_chain(
            Transition(target="z", guard=recorder.guard("first", False), action=recorder.action("first action")),
            Transition(target="y", guard=recorder.guard("second", True), action=recorder.action("second action")),
            Transition(target="z", guard=recorder.guard("third", True)),
        )

        result = await run_until_stable(definition, start_workflow(definition, {}))

        assert result.current_state == "y"
        assert recorder.calls == ["first", "second", "second action"]

    async def test_cascades_to_terminal(self) -> None:
        """Multiple auto states are traversed in one call."""
        definition = WorkflowDefinition(
            id="cascade",
            initial_state="a",
            states={
                "a": State(id="a", kind=StateKind.AUTO, transitions=[Transition(target="b")]),
                "b": State(id="b", kind=StateKind.AUTO, transitions=[Transition(target="c")]),
                "c": State(id="c", kind=StateKind.END),
            },
        )

        result = await start_workflow_and_run(definition, {})

        assert result.current_state == "c"
        assert result.status == WorkflowStatus.COMPLETED
        assert [entry.state_id for entry in result.history] == ["a", "b", "c"]
        assert all(entry.event is None for entry in result.history)

    async def test_guard_error_keeps_state(self) -> None:
        """A throwing guard yields ERROR with the thrown value and no state move."""
        boom = RuntimeError("guard exploded")

        def guard(ctx: Any) -> bool:
            raise boom

        definition = auto_chain(Transition(target="y", guard=guard))
        instance = start_workflow(definition, {})

        result = await run_until_stable(definition, instance)

        assert result.status == WorkflowStatus.ERROR
        assert result.error is boom
        assert result.current_state == "x"
        assert len(result.history) == 1

    async def test_action_error_stops_immediately(self, recorder: CallRecorder) -> None:
        """A failing application is not retried with the next candidate."""

        def failing_action(ctx: Any) -> None:
            raise ValueError("nope")

        definition = auto_chain(
            Transition(target="y", action=failing_action),
            Transition(target="z", guard=recorder.guard("fallback", True)),
        )

        result = await run_until_stable(definition, start_workflow(definition, {}))

        assert result.status == WorkflowStatus.ERROR
        assert isinstance(result.error, ValueError)
        assert result.current_state == "x"
        assert recorder.calls == []

    async def test_missing_target_is_error(self) -> None:
        """A dangling auto target produces ERROR with StateNotFoundError."""
        definition = auto_chain(Transition(target="nowhere"))

        result = await run_until_stable(definition, start_workflow(definition, {}))

        assert result.status == WorkflowStatus.ERROR
        assert isinstance(result.error, StateNotFoundError)

    async def test_missing_current_state_is_error(self, go_ready_definition: WorkflowDefinition) -> None:
        """An instance pointing at an unknown state errors out."""
        instance = WorkflowInstance(workflow_id="go_ready", instance_id="i", current_state="ghost", ctx={})

        result = await run_until_stable(go_ready_definition, instance)

        assert result.status == WorkflowStatus.ERROR
        assert isinstance(result.error, StateNotFoundError)

    async def test_finished_instance_untouched(self) -> None:
        """Stabilization only runs on running instances."""
        definition = auto_chain(Transition(target="y"))
        instance = start_workflow(definition, {})
        instance.status = WorkflowStatus.ERROR

        assert await run_until_stable(definition, instance) is instance

    async def test_max_steps_stalls_cycle(self) -> None:
        """An always-true auto cycle becomes a stalled error when bounded."""
        definition = WorkflowDefinition(
            id="loop",
            initial_state="a",
            states={
                "a": State(id="a", kind=StateKind.AUTO, transitions=[Transition(target="b")]),
                "b": State(id="b", kind=StateKind.AUTO, transitions=[Transition(target="a")]),
            },
        )

        result = await run_until_stable(definition, start_workflow(definition, {}), max_steps=5)

        assert result.status == WorkflowStatus.ERROR
        assert isinstance(result.error, WorkflowStalledError)
        assert result.error.max_steps == 5
        assert len(result.history) == 6

    async def test_max_steps_not_hit(self) -> None:
        """A chain shorter than the bound completes normally."""
        definition = auto_chain(Transition(target="z"))

        result = await run_until_stable(definition, start_workflow(definition, {}), max_steps=1)

        assert result.status == WorkflowStatus.COMPLETED
