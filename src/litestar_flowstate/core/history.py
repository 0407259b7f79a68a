"""History entries and the readable audit log built from them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from litestar_flowstate.core.types import StateKind, WorkflowStatus

if TYPE_CHECKING:
    from litestar_flowstate.core.definition import WorkflowDefinition
    from litestar_flowstate.core.instance import WorkflowInstance

__all__ = ["HistoryEntry", "LogEntry", "build_log", "utc_now_iso"]


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class HistoryEntry:
    """One visit to a state.

    Attributes:
        state_id: The visited state.
        entered_at: ISO-8601 timestamp of entry.
        left_at: ISO-8601 timestamp of exit; ``None`` while the state is occupied.
        transition_id: Id of the transition that led here, if any.
        event: Event that triggered the transition; ``None`` for the initial
            placement and for auto transitions.
    """

    state_id: str
    entered_at: str
    left_at: str | None = None
    transition_id: str | None = None
    event: str | None = None

    @property
    def is_open(self) -> bool:
        return self.left_at is None


@dataclass
class LogEntry:
    """Display-oriented view of a history entry.

    Attributes:
        index: Position in the history.
        state_id: The visited state.
        state_label: The state's label, if the definition provides one.
        kind: The state's kind; TASK when the state is unknown to the definition.
        entered_at: ISO-8601 entry timestamp.
        left_at: ISO-8601 exit timestamp, if left.
        duration_ms: Time spent in the state, if left.
        event: Triggering event, if any.
        transition_id: Id of the transition that led here, if any.
        is_current: Whether this entry is the running instance's current state.
    """

    index: int
    state_id: str
    state_label: str | None
    kind: StateKind
    entered_at: str
    left_at: str | None
    duration_ms: float | None
    event: str | None
    transition_id: str | None
    is_current: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "state_id": self.state_id,
            "state_label": self.state_label,
            "kind": self.kind.value,
            "entered_at": self.entered_at,
            "left_at": self.left_at,
            "duration_ms": self.duration_ms,
            "event": self.event,
            "transition_id": self.transition_id,
            "is_current": self.is_current,
        }


def build_log(definition: WorkflowDefinition, instance: WorkflowInstance[Any]) -> list[LogEntry]:
    """Build a readable log of every state the instance visited.

    Args:
        definition: The workflow definition, used for labels and kinds.
        instance: The instance whose history is rendered.

    Returns:
        One LogEntry per history entry, in order.

    Example:
        >>> [entry.state_id for entry in build_log(definition, instance)]
        ['draft', 'review']
    """
    log: list[LogEntry] = []
    for index, entry in enumerate(instance.history):
        state = definition.get_state(entry.state_id)
        duration_ms = None
        if entry.left_at is not None:
            delta = datetime.fromisoformat(entry.left_at) - datetime.fromisoformat(entry.entered_at)
            duration_ms = delta.total_seconds() * 1000

        log.append(
            LogEntry(
                index=index,
                state_id=entry.state_id,
                state_label=state.label if state else None,
                kind=state.kind if state else StateKind.TASK,
                entered_at=entry.entered_at,
                left_at=entry.left_at,
                duration_ms=duration_ms,
                event=entry.event,
                transition_id=entry.transition_id,
                is_current=(
                    entry.is_open
                    and entry.state_id == instance.current_state
                    and instance.status == WorkflowStatus.RUNNING
                ),
            )
        )
    return log
