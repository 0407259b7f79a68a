"""Graph visualization utilities for workflows.

This module provides utilities for generating visual representations of
state machines, primarily using MermaidJS format.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litestar_flowstate.core.types import WorkflowStatus

if TYPE_CHECKING:
    from litestar_flowstate.core.definition import WorkflowDefinition
    from litestar_flowstate.core.instance import WorkflowInstance

__all__ = ["generate_mermaid_graph", "generate_mermaid_graph_with_state", "parse_graph_to_dict"]


def generate_mermaid_graph(definition: WorkflowDefinition) -> str:
    """Generate a MermaidJS graph representation of a workflow definition.

    Args:
        definition: The workflow definition to visualize.

    Returns:
        A MermaidJS flowchart definition as a string.
    """
    return definition.to_mermaid()


def generate_mermaid_graph_with_state(definition: WorkflowDefinition, instance: WorkflowInstance[Any]) -> str:
    """Generate a MermaidJS graph highlighting an instance's progress.

    Left states are shown as visited, the occupied state as current, or as failed
    when the instance errored there.

    Args:
        definition: The workflow definition to visualize.
        instance: The instance whose history is highlighted.

    Returns:
        A MermaidJS flowchart definition with state styling.
    """
    failed = instance.current_state if instance.status == WorkflowStatus.ERROR else None
    return definition.to_mermaid_with_state(
        current_state=instance.current_state,
        visited_states=instance.visited_states(),
        failed_state=failed,
    )


def parse_graph_to_dict(definition: WorkflowDefinition) -> dict[str, Any]:
    """Parse a workflow definition into a dictionary representation.

    Args:
        definition: The workflow definition to parse.

    Returns:
        A dictionary containing nodes and edges lists.

    Example:
        >>> parse_graph_to_dict(definition)["nodes"][0]
        {'id': 'draft', 'label': 'Draft', 'kind': 'task', 'is_initial': True, 'is_terminal': False}
    """
    nodes = [
        {
            "id": state_id,
            "label": state.label or state_id.replace("_", " ").title(),
            "kind": state.kind.value,
            "is_initial": state_id == definition.initial_state,
            "is_terminal": state.is_terminal,
        }
        for state_id, state in definition.states.items()
    ]

    edges = []
    for state_id, state in definition.states.items():
        for transition in state.transitions:
            edge: dict[str, Any] = {
                "source": state_id,
                "target": transition.target,
                "event": transition.event,
            }
            if transition.guard is not None:
                edge["condition"] = "guarded"
            edges.append(edge)

    return {
        "nodes": nodes,
        "edges": edges,
    }
