"""Instance creation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import uuid4

from litestar_flowstate.core.history import HistoryEntry, utc_now_iso
from litestar_flowstate.core.instance import WorkflowInstance
from litestar_flowstate.core.types import WorkflowStatus
from litestar_flowstate.engine.stabilize import run_until_stable

if TYPE_CHECKING:
    from litestar_flowstate.core.definition import WorkflowDefinition
    from litestar_flowstate.core.types import CtxT

__all__ = ["generate_instance_id", "start_workflow", "start_workflow_and_run"]

logger = logging.getLogger(__name__)


def generate_instance_id() -> str:
    return f"wf_{uuid4().hex}"


def start_workflow(
    definition: WorkflowDefinition,
    ctx: CtxT,
    instance_id: str | None = None,
) -> WorkflowInstance[CtxT]:
    """Place a fresh instance in the definition's initial state.

    The initial state's ``on_enter`` hook is not invoked: entry hooks only run when
    a state is reached through a transition.

    Args:
        definition: The workflow definition.
        ctx: Initial context, stored by reference.
        instance_id: Caller-supplied id; a unique one is generated otherwise.

    Returns:
        A RUNNING instance with one open history entry, or COMPLETED if the initial
        state is terminal.
    """
    initial = definition.get_state(definition.initial_state)
    instance = WorkflowInstance(
        workflow_id=definition.id,
        instance_id=generate_instance_id() if instance_id is None else instance_id,
        current_state=definition.initial_state,
        ctx=ctx,
        history=[HistoryEntry(state_id=definition.initial_state, entered_at=utc_now_iso())],
        status=WorkflowStatus.COMPLETED if initial is not None and initial.is_terminal else WorkflowStatus.RUNNING,
    )
    logger.info(
        "Started instance %s of workflow '%s' in state '%s'",
        instance.instance_id,
        definition.id,
        instance.current_state,
    )
    return instance


async def start_workflow_and_run(
    definition: WorkflowDefinition,
    ctx: CtxT,
    instance_id: str | None = None,
    max_steps: int | None = None,
) -> WorkflowInstance[CtxT]:
    """Start an instance and immediately stabilize it through auto states."""
    instance = start_workflow(definition, ctx, instance_id=instance_id)
    return await run_until_stable(definition, instance, max_steps=max_steps)
