"""Auto-run loop through auto-progressing states."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from litestar_flowstate.core.types import StateKind, WorkflowStatus
from litestar_flowstate.engine.transition import apply_transition, evaluate_guard
from litestar_flowstate.exceptions import FlowstateError, HookExecutionError, StateNotFoundError, WorkflowStalledError

if TYPE_CHECKING:
    from litestar_flowstate.core.definition import Transition, WorkflowDefinition
    from litestar_flowstate.core.instance import WorkflowInstance
    from litestar_flowstate.core.types import CtxT

__all__ = ["mark_failed", "run_until_stable", "select_transition"]

logger = logging.getLogger(__name__)


def mark_failed(instance: WorkflowInstance[CtxT], error: BaseException) -> WorkflowInstance[CtxT]:
    """Convert an engine failure into an ERROR snapshot.

    Hook failures keep the snapshot they carry (which may already record a state
    move) and expose the hook's own exception as ``error``.
    """
    if isinstance(error, HookExecutionError):
        instance, error = error.instance, error.cause
    logger.warning(
        "Instance %s failed in state '%s': %r",
        instance.instance_id,
        instance.current_state,
        error,
    )
    return replace(instance, status=WorkflowStatus.ERROR, error=error)


async def select_transition(
    candidates: list[Transition],
    instance: WorkflowInstance[CtxT],
) -> Transition | None:
    """Return the first candidate whose guard passes; later guards are not evaluated."""
    for transition in candidates:
        if await evaluate_guard(transition, instance):
            return transition
    return None


async def run_until_stable(
    definition: WorkflowDefinition,
    instance: WorkflowInstance[CtxT],
    max_steps: int | None = None,
) -> WorkflowInstance[CtxT]:
    """Advance through auto states until the instance needs input or finishes.

    The loop continues while the instance is running and its state is AUTO. It
    stops without error when the state has no event-less transitions or none of
    their guards pass. Any failure ends the call with an ERROR snapshot.

    Args:
        definition: The workflow definition.
        instance: The instance to stabilize; it is not modified.
        max_steps: Optional bound on applied auto transitions. ``None`` means
            unbounded, so an always-true auto cycle never returns.

    Returns:
        The stabilized snapshot; ``instance`` itself if nothing moved.
    """
    current = instance
    steps = 0

    while current.status == WorkflowStatus.RUNNING:
        state = definition.get_state(current.current_state)
        if state is None:
            return mark_failed(current, StateNotFoundError(current.current_state, definition.id))

        if state.kind != StateKind.AUTO:
            break

        candidates = state.auto_transitions()
        if not candidates:
            break

        try:
            selected = await select_transition(candidates, current)
            if selected is None:
                break

            if max_steps is not None and steps >= max_steps:
                raise WorkflowStalledError(state.id, max_steps)

            current = await apply_transition(definition, current, selected)
        except FlowstateError as e:
            return mark_failed(current, e)
        steps += 1

    if steps and current.status == WorkflowStatus.COMPLETED:
        logger.info("Instance %s completed in state '%s'", current.instance_id, current.current_state)
    return current
