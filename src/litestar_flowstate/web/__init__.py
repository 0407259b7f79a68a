"""REST API for litestar-flowstate.

The API is registered automatically when using WorkflowPlugin with
``enable_api=True`` (the default).

Example:
    Basic usage::

        from litestar import Litestar
        from litestar_flowstate import WorkflowPlugin, WorkflowPluginConfig

        app = Litestar(
            plugins=[
                WorkflowPlugin(
                    config=WorkflowPluginConfig(
                        definitions=[order_workflow],
                        api_path_prefix="/workflows",
                    )
                ),
            ],
        )
"""

from __future__ import annotations

from litestar_flowstate.web.controllers import WorkflowDefinitionController, WorkflowInstanceController
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
    "CanFireDTO",
    "ContextDTO",
    "GraphDTO",
    "SendEventDTO",
    "StartWorkflowDTO",
    "TransitionResultDTO",
    "WorkflowDefinitionController",
    "WorkflowDefinitionDTO",
    "WorkflowInstanceController",
    "WorkflowInstanceDTO",
    "WorkflowInstanceDetailDTO",
    "generate_mermaid_graph",
    "generate_mermaid_graph_with_state",
    "parse_graph_to_dict",
]
