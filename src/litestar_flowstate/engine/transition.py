"""Transition application.

``apply_transition`` is the only code path that moves an instance from one state
to another. Hooks run strictly in the order exit, action, enter; the history is
updated between the action and the entry hook.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from litestar_flowstate.core.history import HistoryEntry, utc_now_iso
from litestar_flowstate.core.types import WorkflowStatus
from litestar_flowstate.exceptions import HookExecutionError, StateNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from litestar_flowstate.core.definition import Transition, WorkflowDefinition
    from litestar_flowstate.core.instance import WorkflowInstance
    from litestar_flowstate.core.types import CtxT

__all__ = ["apply_transition", "evaluate_guard", "run_hook"]

logger = logging.getLogger(__name__)


async def run_hook(hook: Callable[[Any], Any], ctx: Any) -> Any:
    """Call a sync or async hook with the context and await its result if needed."""
    result = hook(ctx)
    if inspect.isawaitable(result):
        result = await result
    return result


async def evaluate_guard(
    transition: Transition,
    instance: WorkflowInstance[CtxT],
) -> bool:
    """Evaluate a transition's guard against the instance context.

    A missing guard always passes.

    Raises:
        HookExecutionError: If the guard raises; the attached snapshot is ``instance``.
    """
    if transition.guard is None:
        return True
    try:
        return bool(await run_hook(transition.guard, instance.ctx))
    except Exception as e:
        raise HookExecutionError("guard", instance.current_state, e, instance) from e


async def apply_transition(
    definition: WorkflowDefinition,
    instance: WorkflowInstance[CtxT],
    transition: Transition,
    event: str | None = None,
) -> WorkflowInstance[CtxT]:
    """Apply an already-selected transition and return the new snapshot.

    Steps, in order: resolve both states, run the current state's ``on_exit``, run
    the transition ``action``, close the open history entry, append an entry for
    the target, run the target's ``on_enter``, then derive the new status.

    Args:
        definition: The workflow definition.
        instance: A running instance; it is not modified.
        transition: The transition to apply.
        event: Triggering event recorded in history; ``None`` for auto transitions.

    Returns:
        A new instance positioned at the target state, COMPLETED if the target is
        terminal, RUNNING otherwise.

    Raises:
        StateNotFoundError: If the current or target state does not exist.
        HookExecutionError: If a hook fails. For exit/action failures the attached
            snapshot is ``instance``; for an entry failure it is the moved snapshot,
            whose history already records the new state.
    """
    current = definition.get_state(instance.current_state)
    if current is None:
        raise StateNotFoundError(instance.current_state, definition.id)

    target = definition.get_state(transition.target)
    if target is None:
        raise StateNotFoundError(transition.target, definition.id)

    if current.on_exit is not None:
        try:
            await run_hook(current.on_exit, instance.ctx)
        except Exception as e:
            raise HookExecutionError("on_exit", current.id, e, instance) from e

    if transition.action is not None:
        try:
            await run_hook(transition.action, instance.ctx)
        except Exception as e:
            raise HookExecutionError("action", current.id, e, instance) from e

    now = utc_now_iso()
    history = list(instance.history)
    if history and history[-1].is_open:
        history[-1] = replace(history[-1], left_at=now)
    history.append(
        HistoryEntry(
            state_id=target.id,
            entered_at=now,
            transition_id=transition.id,
            event=event,
        )
    )

    moved = replace(
        instance,
        current_state=target.id,
        history=history,
        status=WorkflowStatus.COMPLETED if target.is_terminal else WorkflowStatus.RUNNING,
    )
    logger.debug(
        "Instance %s: %s -> %s (event=%s)",
        instance.instance_id,
        current.id,
        target.id,
        event or "AUTO",
    )

    if target.on_enter is not None:
        try:
            await run_hook(target.on_enter, instance.ctx)
        except Exception as e:
            raise HookExecutionError("on_enter", target.id, e, moved) from e

    return moved
