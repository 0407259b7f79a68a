"""Data Transfer Objects for the workflow web API.

This module defines DTOs for serializing and deserializing workflow data
in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from litestar_flowstate.core.definition import WorkflowDefinition
    from litestar_flowstate.core.history import LogEntry
    from litestar_flowstate.core.instance import WorkflowInstance

__all__ = [
    "CanFireDTO",
    "ContextDTO",
    "GraphDTO",
    "SendEventDTO",
    "StartWorkflowDTO",
    "TransitionResultDTO",
    "WorkflowDefinitionDTO",
    "WorkflowInstanceDTO",
    "WorkflowInstanceDetailDTO",
]


@dataclass
class StartWorkflowDTO:
    """DTO for starting a new workflow instance.

    Attributes:
        definition_id: Id of the workflow definition to instantiate.
        context: Initial context data.
        instance_id: Optional caller-supplied instance id.
        version: Optional definition version; latest when omitted.
    """

    definition_id: str
    context: dict[str, Any] | None = None
    instance_id: str | None = None
    version: int | None = None


@dataclass
class SendEventDTO:
    """DTO for dispatching an event to an instance."""

    event: str


@dataclass
class ContextDTO:
    """DTO for changing an instance's context.

    Attributes:
        context: New context data.
        merge: Merge into the existing context when True, replace it otherwise.
    """

    context: dict[str, Any]
    merge: bool = True


@dataclass
class WorkflowDefinitionDTO:
    """DTO for workflow definition metadata.

    Attributes:
        id: Workflow id.
        version: Workflow version.
        description: Human-readable description.
        initial_state: Id of the starting state.
        states: State summaries including their transitions.
    """

    id: str
    version: int
    description: str
    initial_state: str
    states: list[dict[str, Any]]

    @classmethod
    def from_definition(cls, definition: WorkflowDefinition) -> WorkflowDefinitionDTO:
        return cls(
            id=definition.id,
            version=definition.version,
            description=definition.description,
            initial_state=definition.initial_state,
            states=[
                {
                    "id": state.id,
                    "kind": state.kind.value,
                    "label": state.label,
                    "description": state.description,
                    "icon": state.icon,
                    "transitions": [
                        {
                            "id": t.id,
                            "target": t.target,
                            "event": t.event,
                            "label": t.label,
                            "guarded": t.guard is not None,
                        }
                        for t in state.transitions
                    ],
                }
                for state in definition.states.values()
            ],
        )


@dataclass
class WorkflowInstanceDTO:
    """DTO for workflow instance summary.

    Attributes:
        instance_id: Instance id.
        workflow_id: Id of the definition being executed.
        current_state: Occupied state.
        status: RUNNING, COMPLETED or ERROR (lowercase values).
        started_at: ISO-8601 timestamp of the first history entry.
    """

    instance_id: str
    workflow_id: str
    current_state: str
    status: str
    started_at: str | None

    @classmethod
    def from_instance(cls, instance: WorkflowInstance[Any]) -> WorkflowInstanceDTO:
        return cls(
            instance_id=instance.instance_id,
            workflow_id=instance.workflow_id,
            current_state=instance.current_state,
            status=instance.status.value,
            started_at=instance.history[0].entered_at if instance.history else None,
        )


@dataclass
class WorkflowInstanceDetailDTO:
    """DTO for detailed workflow instance information.

    Attributes:
        instance_id: Instance id.
        workflow_id: Id of the definition being executed.
        current_state: Occupied state.
        status: Instance status.
        context: Context data when it is a mapping, otherwise None.
        history: Readable log entries.
        error: String form of the failure for errored instances.
    """

    instance_id: str
    workflow_id: str
    current_state: str
    status: str
    context: dict[str, Any] | None
    history: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_instance(cls, instance: WorkflowInstance[Any], log: list[LogEntry]) -> WorkflowInstanceDetailDTO:
        return cls(
            instance_id=instance.instance_id,
            workflow_id=instance.workflow_id,
            current_state=instance.current_state,
            status=instance.status.value,
            context=instance.ctx if isinstance(instance.ctx, dict) else None,
            history=[entry.to_dict() for entry in log],
            error=repr(instance.error) if instance.error is not None else None,
        )


@dataclass
class TransitionResultDTO:
    """DTO for the outcome of an event dispatch."""

    transitioned: bool
    instance: WorkflowInstanceDetailDTO


@dataclass
class CanFireDTO:
    """DTO answering whether an event would currently trigger a transition.

    Attributes:
        event: The queried event.
        allowed: Whether dispatching the event would apply a transition.
        error: String form of the guard failure, if a guard raised.
    """

    event: str
    allowed: bool
    error: str | None = None


@dataclass
class GraphDTO:
    """DTO for workflow graph visualization.

    Attributes:
        mermaid_source: MermaidJS source.
        nodes: Node descriptions.
        edges: Edge descriptions.
    """

    mermaid_source: str
    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]
