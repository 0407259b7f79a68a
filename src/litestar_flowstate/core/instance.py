"""Workflow instance snapshots.

An instance is one execution of a workflow definition. Engine operations never
mutate a snapshot they are given; they return a new one instead. The context is
the exception: it is caller-owned and shared by reference, and hooks mutate it in
place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic

from litestar_flowstate.core.history import HistoryEntry
from litestar_flowstate.core.types import CtxT, WorkflowStatus

__all__ = ["TransitionResult", "WorkflowInstance"]


@dataclass
class WorkflowInstance(Generic[CtxT]):
    """Snapshot of a running or finished workflow execution.

    Attributes:
        workflow_id: Id of the definition being executed.
        instance_id: Unique id of this execution.
        current_state: Id of the occupied state.
        ctx: Caller-supplied context, never interpreted by the engine.
        history: Ordered visits; at most one entry is open.
        status: RUNNING, COMPLETED or ERROR.
        error: The failure that moved the instance to ERROR.
    """

    workflow_id: str
    instance_id: str
    current_state: str
    ctx: CtxT
    history: list[HistoryEntry] = field(default_factory=list)
    status: WorkflowStatus = WorkflowStatus.RUNNING
    error: BaseException | None = None

    @property
    def is_running(self) -> bool:
        return self.status == WorkflowStatus.RUNNING

    @property
    def is_finished(self) -> bool:
        return self.status in (WorkflowStatus.COMPLETED, WorkflowStatus.ERROR)

    @property
    def open_entry(self) -> HistoryEntry | None:
        """The entry of the occupied state, if the last entry is still open."""
        if self.history and self.history[-1].is_open:
            return self.history[-1]
        return None

    def visited_states(self) -> list[str]:
        """Ids of states the instance has entered and left, in order."""
        return [entry.state_id for entry in self.history if not entry.is_open]


@dataclass
class TransitionResult(Generic[CtxT]):
    """Outcome of dispatching an event.

    Attributes:
        instance: The resulting snapshot.
        transitioned: True only when a transition was successfully applied.
    """

    instance: WorkflowInstance[CtxT]
    transitioned: bool
