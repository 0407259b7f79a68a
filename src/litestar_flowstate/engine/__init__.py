"""State-machine execution engine.

This module provides the transition applier, the auto-run stabilizer, the event
dispatcher, and the in-memory engine that owns live instances.
"""

from __future__ import annotations

from litestar_flowstate.engine.dispatch import can_fire, send_event
from litestar_flowstate.engine.lifecycle import start_workflow, start_workflow_and_run
from litestar_flowstate.engine.local import LocalExecutionEngine, TransitionInfo
from litestar_flowstate.engine.registry import WorkflowRegistry
from litestar_flowstate.engine.stabilize import run_until_stable
from litestar_flowstate.engine.transition import apply_transition

__all__ = [
    "LocalExecutionEngine",
    "TransitionInfo",
    "WorkflowRegistry",
    "apply_transition",
    "can_fire",
    "run_until_stable",
    "send_event",
    "start_workflow",
    "start_workflow_and_run",
]
