"""Litestar Flowstate - Declarative state-machine workflows for Litestar.

This package executes workflow definitions made of states, transitions, guards,
and actions. Instances advance on external events or automatically through
auto-progress states, and every move is recorded in an audit history.

Key Features:
    - Declarative definitions, in Python or compiled from JSON configuration
    - First-match-wins guard evaluation
    - Automatic stabilization through auto states
    - Hook failures contained in the instance's error status
    - In-memory engine with serialized per-instance dispatch
    - Litestar plugin with a REST API and MermaidJS graphs

Example:
    >>> from litestar_flowstate import State, StateKind, Transition, WorkflowDefinition, create_workflow
    >>> from litestar_flowstate import send_event, start_workflow_and_run
    >>>
    >>> workflow = create_workflow(
    ...     WorkflowDefinition(
    ...         id="checkout",
    ...         initial_state="cart",
    ...         states={
    ...             "cart": State(id="cart", transitions=[Transition(target="paid", event="PAY")]),
    ...             "paid": State(id="paid", kind=StateKind.END),
    ...         },
    ...     )
    ... )
    >>> instance = await start_workflow_and_run(workflow, {"items": 3})
    >>> result = await send_event(workflow, instance, "PAY")
"""

from __future__ import annotations

from litestar_flowstate.__metadata__ import __project__, __version__
from litestar_flowstate.core import (
    HandlerRegistry,
    HistoryEntry,
    LogEntry,
    State,
    StateKind,
    Transition,
    TransitionResult,
    WorkflowConfig,
    WorkflowDefinition,
    WorkflowInstance,
    WorkflowStatus,
    build_log,
    compile_workflow_config,
    create_workflow,
)
from litestar_flowstate.engine import (
    LocalExecutionEngine,
    TransitionInfo,
    WorkflowRegistry,
    apply_transition,
    can_fire,
    run_until_stable,
    send_event,
    start_workflow,
    start_workflow_and_run,
)
from litestar_flowstate.exceptions import (
    FlowstateError,
    HandlerNotFoundError,
    HookExecutionError,
    StateNotFoundError,
    WorkflowAlreadyFinishedError,
    WorkflowInstanceNotFoundError,
    WorkflowNotFoundError,
    WorkflowStalledError,
    WorkflowValidationError,
)
from litestar_flowstate.plugin import WorkflowPlugin, WorkflowPluginConfig

__all__ = (
    "FlowstateError",
    "HandlerNotFoundError",
    "HandlerRegistry",
    "HistoryEntry",
    "HookExecutionError",
    "LocalExecutionEngine",
    "LogEntry",
    "State",
    "StateKind",
    "StateNotFoundError",
    "Transition",
    "TransitionInfo",
    "TransitionResult",
    "WorkflowAlreadyFinishedError",
    "WorkflowConfig",
    "WorkflowDefinition",
    "WorkflowInstance",
    "WorkflowInstanceNotFoundError",
    "WorkflowNotFoundError",
    "WorkflowPlugin",
    "WorkflowPluginConfig",
    "WorkflowRegistry",
    "WorkflowStalledError",
    "WorkflowStatus",
    "WorkflowValidationError",
    "__project__",
    "__version__",
    "apply_transition",
    "build_log",
    "can_fire",
    "compile_workflow_config",
    "create_workflow",
    "run_until_stable",
    "send_event",
    "start_workflow",
    "start_workflow_and_run",
)
