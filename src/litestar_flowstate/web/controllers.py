"""REST API controllers for workflow management.

This module provides two controller classes:
- WorkflowDefinitionController: Inspect registered definitions and their graphs
- WorkflowInstanceController: Start instances, dispatch events, and edit context
"""

from __future__ import annotations

from typing import ClassVar

from litestar import Controller, get, post, put
from litestar.exceptions import HTTPException, NotFoundException
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK, HTTP_409_CONFLICT

from litestar_flowstate.core.types import WorkflowStatus
from litestar_flowstate.engine.local import LocalExecutionEngine  # noqa: TC001 - needed for DI
from litestar_flowstate.engine.registry import WorkflowRegistry  # noqa: TC001 - needed for DI
from litestar_flowstate.exceptions import (
    HookExecutionError,
    WorkflowAlreadyFinishedError,
    WorkflowInstanceNotFoundError,
    WorkflowNotFoundError,
)
from litestar_flowstate.web.dto import (
    CanFireDTO,
    ContextDTO,
    GraphDTO,
    SendEventDTO,
    StartWorkflowDTO,
    TransitionResultDTO,
    WorkflowDefinitionDTO,
    WorkflowInstanceDetailDTO,
    WorkflowInstanceDTO,
)
from litestar_flowstate.web.graph import (
    generate_mermaid_graph,
    generate_mermaid_graph_with_state,
    parse_graph_to_dict,
)

__all__ = [
    "WorkflowDefinitionController",
    "WorkflowInstanceController",
]


class WorkflowDefinitionController(Controller):
    """API controller for workflow definitions.

    Tags: Workflow Definitions
    """

    path = "/definitions"
    tags: ClassVar[list[str]] = ["Workflow Definitions"]

    @get("/")
    async def list_definitions(
        self,
        workflow_registry: WorkflowRegistry,
        active_only: bool = Parameter(
            default=True,
            description="Only return the latest version of each workflow",
        ),
    ) -> list[WorkflowDefinitionDTO]:
        """List all registered workflow definitions.

        Args:
            workflow_registry: Injected workflow registry.
            active_only: Whether to filter to the latest versions.

        Returns:
            List of workflow definition DTOs.
        """
        return [
            WorkflowDefinitionDTO.from_definition(definition)
            for definition in workflow_registry.list_definitions(active_only=active_only)
        ]

    @get("/{definition_id:str}")
    async def get_definition(
        self,
        definition_id: str,
        workflow_registry: WorkflowRegistry,
        version: int | None = Parameter(
            default=None,
            description="Specific version to retrieve. If omitted, returns latest.",
        ),
    ) -> WorkflowDefinitionDTO:
        """Get a specific workflow definition by id.

        Raises:
            NotFoundException: If workflow definition not found.
        """
        try:
            definition = workflow_registry.get_definition(definition_id, version=version)
        except WorkflowNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e

        return WorkflowDefinitionDTO.from_definition(definition)

    @get("/{definition_id:str}/graph")
    async def get_definition_graph(
        self,
        definition_id: str,
        workflow_registry: WorkflowRegistry,
        graph_format: str = Parameter(
            default="mermaid",
            description="Graph format: 'mermaid' or 'json'",
        ),
    ) -> GraphDTO:
        """Get the state machine graph as MermaidJS source and/or structured JSON.

        Raises:
            NotFoundException: If the definition is not found or the format is unknown.
        """
        try:
            definition = workflow_registry.get_definition(definition_id)
        except WorkflowNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e

        graph_dict = parse_graph_to_dict(definition)
        if graph_format == "mermaid":
            return GraphDTO(
                mermaid_source=generate_mermaid_graph(definition),
                nodes=graph_dict["nodes"],
                edges=graph_dict["edges"],
            )
        if graph_format == "json":
            return GraphDTO(mermaid_source="", nodes=graph_dict["nodes"], edges=graph_dict["edges"])
        raise NotFoundException(detail=f"Unknown format: {graph_format}")


class WorkflowInstanceController(Controller):
    """API controller for workflow instances.

    Tags: Workflow Instances
    """

    path = "/instances"
    tags: ClassVar[list[str]] = ["Workflow Instances"]

    @post("/")
    async def start_workflow(
        self,
        data: StartWorkflowDTO,
        workflow_engine: LocalExecutionEngine,
    ) -> WorkflowInstanceDetailDTO:
        """Start and stabilize a new workflow instance.

        Raises:
            NotFoundException: If workflow definition not found.
            HTTPException: 409 if the requested instance id is taken.
        """
        try:
            instance = await workflow_engine.start_workflow(
                data.definition_id,
                data.context or {},
                instance_id=data.instance_id,
                version=data.version,
            )
        except WorkflowNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e
        except ValueError as e:
            raise HTTPException(status_code=HTTP_409_CONFLICT, detail=str(e)) from e

        return WorkflowInstanceDetailDTO.from_instance(instance, workflow_engine.get_log(instance.instance_id))

    @get("/")
    async def list_instances(
        self,
        workflow_engine: LocalExecutionEngine,
        workflow_id: str | None = Parameter(
            default=None,
            description="Filter by workflow id",
        ),
        status: str | None = Parameter(
            default=None,
            description="Filter by status",
        ),
    ) -> list[WorkflowInstanceDTO]:
        """List workflow instances with optional filtering.

        Raises:
            NotFoundException: If the status filter is not a known status.
        """
        try:
            workflow_status = WorkflowStatus(status) if status else None
        except ValueError as e:
            raise NotFoundException(detail=f"Unknown status: {status}") from e

        return [
            WorkflowInstanceDTO.from_instance(instance)
            for instance in workflow_engine.list_instances(status=workflow_status)
            if workflow_id is None or instance.workflow_id == workflow_id
        ]

    @get("/{instance_id:str}")
    async def get_instance(
        self,
        instance_id: str,
        workflow_engine: LocalExecutionEngine,
    ) -> WorkflowInstanceDetailDTO:
        """Get an instance with its context, readable history and error.

        Raises:
            NotFoundException: If instance not found.
        """
        try:
            instance = await workflow_engine.get_instance(instance_id)
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e

        return WorkflowInstanceDetailDTO.from_instance(instance, workflow_engine.get_log(instance_id))

    @post("/{instance_id:str}/events", status_code=HTTP_200_OK)
    async def send_event(
        self,
        instance_id: str,
        data: SendEventDTO,
        workflow_engine: LocalExecutionEngine,
    ) -> TransitionResultDTO:
        """Dispatch an event to an instance.

        Hook failures are not HTTP errors: they come back as ``transitioned=false``
        with the instance in ``error`` status.

        Raises:
            NotFoundException: If instance not found.
        """
        try:
            result = await workflow_engine.send_event(instance_id, data.event)
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e

        return TransitionResultDTO(
            transitioned=result.transitioned,
            instance=WorkflowInstanceDetailDTO.from_instance(result.instance, workflow_engine.get_log(instance_id)),
        )

    @get("/{instance_id:str}/can/{event:str}")
    async def can_fire(
        self,
        instance_id: str,
        event: str,
        workflow_engine: LocalExecutionEngine,
    ) -> CanFireDTO:
        """Tell whether an event would currently trigger a transition.

        A raising guard answers ``allowed=false`` with the failure in ``error``,
        matching dispatch, which would not transition either.

        Raises:
            NotFoundException: If instance not found.
        """
        try:
            allowed = await workflow_engine.can_fire(instance_id, event)
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e
        except HookExecutionError as e:
            return CanFireDTO(event=event, allowed=False, error=repr(e.cause))

        return CanFireDTO(event=event, allowed=allowed)

    @put("/{instance_id:str}/context")
    async def update_context(
        self,
        instance_id: str,
        data: ContextDTO,
        workflow_engine: LocalExecutionEngine,
    ) -> WorkflowInstanceDetailDTO:
        """Merge into or replace an instance's context.

        Context changes never trigger transitions.

        Raises:
            NotFoundException: If instance not found.
            HTTPException: 409 if the instance is no longer running.
        """
        try:
            if data.merge:
                instance = await workflow_engine.update_context(instance_id, lambda ctx: ctx.update(data.context))
            else:
                instance = await workflow_engine.set_context(instance_id, dict(data.context))
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e
        except WorkflowAlreadyFinishedError as e:
            raise HTTPException(status_code=HTTP_409_CONFLICT, detail=str(e)) from e

        return WorkflowInstanceDetailDTO.from_instance(instance, workflow_engine.get_log(instance_id))

    @get("/{instance_id:str}/graph")
    async def get_instance_graph(
        self,
        instance_id: str,
        workflow_engine: LocalExecutionEngine,
    ) -> GraphDTO:
        """Get the workflow graph with the instance's progress highlighted.

        Raises:
            NotFoundException: If instance not found.
        """
        try:
            instance = await workflow_engine.get_instance(instance_id)
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e

        definition = workflow_engine.get_definition(instance_id)
        graph_dict = parse_graph_to_dict(definition)
        return GraphDTO(
            mermaid_source=generate_mermaid_graph_with_state(definition, instance),
            nodes=graph_dict["nodes"],
            edges=graph_dict["edges"],
        )
