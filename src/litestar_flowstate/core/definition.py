"""Workflow definition structures.

This module provides the immutable data structures describing a state machine:
transitions, states, and the complete workflow definition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from litestar_flowstate.core.types import Action, Guard, StateKind
from litestar_flowstate.exceptions import WorkflowValidationError

__all__ = ["State", "Transition", "WorkflowDefinition", "create_workflow"]


@dataclass(frozen=True)
class Transition:
    """Defines a move from the owning state to ``target``.

    Attributes:
        target: Id of the destination state.
        event: Triggering event name. ``None`` makes the transition eligible only
            during auto-progression.
        guard: Optional predicate over the context; absent means always eligible.
        action: Optional side effect run after the source's exit hook and before
            the target's entry hook.
        id: Identifier recorded in the history entry.
        label: Optional human-readable label.

    Example:
        >>> Transition(target="review", event="SUBMIT", guard=lambda ctx: ctx["valid"])
    """

    target: str
    event: str | None = None
    guard: Guard | None = None
    action: Action | None = None
    id: str | None = None
    label: str | None = None

    @property
    def is_auto(self) -> bool:
        """Whether the transition fires without an external event."""
        return self.event is None


@dataclass(frozen=True)
class State:
    """A named state and its outgoing transitions.

    Transition order is significant: the first eligible transition wins.

    Attributes:
        id: Unique state id within the workflow.
        kind: TASK, AUTO or END.
        transitions: Ordered outgoing transitions.
        on_enter: Hook run when the state is entered through a transition.
        on_exit: Hook run when the state is left.
        label: Optional display label.
        description: Optional description.
        icon: Optional icon name for UIs.
        data: Arbitrary caller metadata, never read by the engine.
    """

    id: str
    kind: StateKind = StateKind.TASK
    transitions: list[Transition] = field(default_factory=list)
    on_enter: Action | None = None
    on_exit: Action | None = None
    label: str | None = None
    description: str | None = None
    icon: str | None = None
    data: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.kind == StateKind.END

    def auto_transitions(self) -> list[Transition]:
        """Event-less transitions, in definition order."""
        return [t for t in self.transitions if t.is_auto]

    def transitions_for(self, event: str) -> list[Transition]:
        """Transitions triggered by ``event``, in definition order."""
        return [t for t in self.transitions if t.event == event]


@dataclass(frozen=True)
class WorkflowDefinition:
    """Declarative state machine, shared by all of its instances.

    Attributes:
        id: Unique workflow identifier.
        initial_state: Id of the state a fresh instance is placed in.
        states: Mapping of state id to State.
        version: Definition version, used by the registry.
        description: Human-readable description.

    Example:
        >>> definition = create_workflow(
        ...     WorkflowDefinition(
        ...         id="review",
        ...         initial_state="draft",
        ...         states={
        ...             "draft": State(id="draft", transitions=[Transition(target="done", event="SUBMIT")]),
        ...             "done": State(id="done", kind=StateKind.END),
        ...         },
        ...     )
        ... )
    """

    id: str
    initial_state: str
    states: dict[str, State]
    version: int = 1
    description: str = ""

    def get_state(self, state_id: str) -> State | None:
        return self.states.get(state_id)

    def to_mermaid(self) -> str:
        """Generate a MermaidJS graph representation of the state machine.

        Returns:
            MermaidJS graph definition as a string.

        Example:
            >>> print(definition.to_mermaid())
            graph TD
                draft{{START: Draft}}
                done([END: Done])
                draft -->|SUBMIT| done
        """
        lines = ["graph TD"]

        for state_id, state in self.states.items():
            if state.kind == StateKind.TASK:
                shape_start, shape_end = "{{", "}}"
            elif state.kind == StateKind.END:
                shape_start, shape_end = "([", "])"
            else:
                shape_start, shape_end = "[", "]"

            prefix = ""
            if state_id == self.initial_state:
                prefix = "START: "
            elif state.is_terminal:
                prefix = "END: "

            label = state.label or state_id.replace("_", " ").title()
            lines.append(f"    {state_id}{shape_start}{prefix}{label}{shape_end}")

        for state_id, state in self.states.items():
            for transition in state.transitions:
                text = transition.label or transition.event or "auto"
                if transition.guard is not None:
                    text += " [guarded]"
                # Quotes break mermaid label syntax
                text = text.replace("'", "").replace('"', "")
                lines.append(f"    {state_id} -->|{text}| {transition.target}")

        return "\n".join(lines)

    def to_mermaid_with_state(
        self,
        current_state: str | None = None,
        visited_states: list[str] | None = None,
        failed_state: str | None = None,
    ) -> str:
        """Generate a MermaidJS graph with instance state highlighting.

        Args:
            current_state: Id of the state the instance occupies.
            visited_states: Ids of states the instance has left.
            failed_state: Id of the state where the instance errored.

        Returns:
            MermaidJS graph definition with state styling.
        """
        lines = self.to_mermaid().split("\n")

        for state_id in dict.fromkeys(visited_states or []):
            if state_id in (current_state, failed_state):
                continue
            lines.append(f"    style {state_id} fill:#90EE90,stroke:#006400,stroke-width:2px")

        if failed_state:
            lines.append(f"    style {failed_state} fill:#FFB6C1,stroke:#8B0000,stroke-width:2px")
        elif current_state:
            lines.append(f"    style {current_state} fill:#FFD700,stroke:#FFA500,stroke-width:3px")

        return "\n".join(lines)


def create_workflow(definition: WorkflowDefinition) -> WorkflowDefinition:
    """Check that the initial state exists and return the definition unchanged.

    No other structural validation is performed: dangling targets and auto cycles
    surface at runtime instead.

    Raises:
        WorkflowValidationError: If ``initial_state`` is not a known state.
    """
    if definition.initial_state not in definition.states:
        raise WorkflowValidationError(
            [f"Initial state '{definition.initial_state}' is not defined in workflow '{definition.id}'"]
        )
    return definition
