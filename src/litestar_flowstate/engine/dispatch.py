"""External event dispatch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from litestar_flowstate.core.instance import TransitionResult
from litestar_flowstate.core.types import WorkflowStatus
from litestar_flowstate.engine.stabilize import mark_failed, run_until_stable, select_transition
from litestar_flowstate.engine.transition import apply_transition
from litestar_flowstate.exceptions import FlowstateError

if TYPE_CHECKING:
    from litestar_flowstate.core.definition import WorkflowDefinition
    from litestar_flowstate.core.instance import WorkflowInstance
    from litestar_flowstate.core.types import CtxT

__all__ = ["can_fire", "send_event"]

logger = logging.getLogger(__name__)


async def send_event(
    definition: WorkflowDefinition,
    instance: WorkflowInstance[CtxT],
    event: str,
    max_steps: int | None = None,
) -> TransitionResult[CtxT]:
    """Submit an external event to an instance.

    The first transition out of the current state that matches ``event`` and whose
    guard passes is applied, after which the instance is stabilized so one event
    can cascade through any number of auto states.

    Hook failures never raise from here: they produce an ERROR snapshot with
    ``transitioned=False``. Dispatching to a finished instance, an unmatched event,
    or an event whose guards all fail returns the given instance untouched.

    Args:
        definition: The workflow definition.
        instance: The instance to advance; it is not modified.
        event: The event name.
        max_steps: Optional bound passed to the stabilizer.

    Returns:
        The resulting snapshot and whether a transition was applied.
    """
    if instance.status != WorkflowStatus.RUNNING:
        return TransitionResult(instance=instance, transitioned=False)

    state = definition.get_state(instance.current_state)
    if state is None or not state.transitions:
        return TransitionResult(instance=instance, transitioned=False)

    candidates = state.transitions_for(event)
    if not candidates:
        logger.debug("Instance %s: no transition for event %s in '%s'", instance.instance_id, event, state.id)
        return TransitionResult(instance=instance, transitioned=False)

    try:
        selected = await select_transition(candidates, instance)
        if selected is None:
            return TransitionResult(instance=instance, transitioned=False)
        updated = await apply_transition(definition, instance, selected, event)
    except FlowstateError as e:
        return TransitionResult(instance=mark_failed(instance, e), transitioned=False)

    updated = await run_until_stable(definition, updated, max_steps=max_steps)
    return TransitionResult(instance=updated, transitioned=True)


async def can_fire(
    definition: WorkflowDefinition,
    instance: WorkflowInstance[CtxT],
    event: str,
) -> bool:
    """Tell whether ``send_event`` would apply a transition for ``event``.

    Mirrors the dispatcher's matching and guard evaluation without touching the
    instance. Guards are still executed, so they must be side-effect free.

    Raises:
        HookExecutionError: If a guard raises.
    """
    if instance.status != WorkflowStatus.RUNNING:
        return False

    state = definition.get_state(instance.current_state)
    if state is None:
        return False

    return await select_transition(state.transitions_for(event), instance) is not None
