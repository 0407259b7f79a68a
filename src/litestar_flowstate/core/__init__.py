"""Core domain module for litestar-flowstate.

This module exports the building blocks of a state machine: types, definitions,
instances, history, and the configuration compiler.
"""

from __future__ import annotations

from litestar_flowstate.core.config import (
    HandlerRegistry,
    StateConfig,
    TransitionConfig,
    WorkflowConfig,
    compile_workflow_config,
    make_transition_id,
)
from litestar_flowstate.core.definition import State, Transition, WorkflowDefinition, create_workflow
from litestar_flowstate.core.history import HistoryEntry, LogEntry, build_log
from litestar_flowstate.core.instance import TransitionResult, WorkflowInstance
from litestar_flowstate.core.types import Action, Context, CtxT, Guard, StateKind, WorkflowStatus

__all__ = [
    "Action",
    "Context",
    "CtxT",
    "Guard",
    "HandlerRegistry",
    "HistoryEntry",
    "LogEntry",
    "State",
    "StateConfig",
    "StateKind",
    "Transition",
    "TransitionConfig",
    "TransitionResult",
    "WorkflowConfig",
    "WorkflowDefinition",
    "WorkflowInstance",
    "WorkflowStatus",
    "build_log",
    "compile_workflow_config",
    "create_workflow",
    "make_transition_id",
]
