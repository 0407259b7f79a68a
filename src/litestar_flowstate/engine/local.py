"""Local in-memory async execution engine.

This module provides an in-process engine that owns live workflow instances. It
serializes every operation on a given instance, which the stateless engine
functions require of their callers, and notifies observers of transitions.
"""

from __future__ import annotations

import asyncio
import copy
import inspect
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from litestar_flowstate.core.history import build_log
from litestar_flowstate.engine.dispatch import can_fire, send_event
from litestar_flowstate.engine.lifecycle import generate_instance_id, start_workflow_and_run
from litestar_flowstate.exceptions import WorkflowAlreadyFinishedError, WorkflowInstanceNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from litestar_flowstate.core.definition import WorkflowDefinition
    from litestar_flowstate.core.history import LogEntry
    from litestar_flowstate.core.instance import TransitionResult, WorkflowInstance
    from litestar_flowstate.core.types import WorkflowStatus
    from litestar_flowstate.engine.registry import WorkflowRegistry

__all__ = ["LocalExecutionEngine", "TransitionInfo"]

logger = logging.getLogger(__name__)


@dataclass
class TransitionInfo:
    """Payload handed to transition observers.

    Attributes:
        from_state: State the instance occupied before the event.
        to_state: State the instance occupies after stabilization.
        event: The dispatched event.
        instance: The resulting snapshot.
    """

    from_state: str
    to_state: str
    event: str
    instance: WorkflowInstance[Any]


class LocalExecutionEngine:
    """In-memory async execution engine for state-machine workflows.

    Attributes:
        registry: The workflow registry for looking up definitions.
        max_steps: Optional bound on auto transitions per stabilization.
        _instances: Latest snapshot per instance id.
        _definitions: Definition each instance was started from.
        _locks: One lock per instance id serializing its operations.
        _observers: Callbacks notified after state-changing dispatches.
    """

    def __init__(self, registry: WorkflowRegistry, max_steps: int | None = None) -> None:
        """Initialize the local execution engine.

        Args:
            registry: The workflow registry.
            max_steps: Optional stabilization bound; None keeps it unbounded.
        """
        self.registry = registry
        self.max_steps = max_steps
        self._instances: dict[str, WorkflowInstance[Any]] = {}
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._observers: list[Callable[[TransitionInfo], Any]] = []

    def add_observer(self, observer: Callable[[TransitionInfo], Any]) -> None:
        """Register a sync or async callback invoked when a dispatch changes state."""
        self._observers.append(observer)

    def remove_observer(self, observer: Callable[[TransitionInfo], Any]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def start_workflow(
        self,
        name: str,
        ctx: Any = None,
        instance_id: str | None = None,
        version: int | None = None,
    ) -> WorkflowInstance[Any]:
        """Start an instance of a registered workflow and stabilize it once.

        Args:
            name: The workflow id.
            ctx: Initial context; an empty dict when omitted.
            instance_id: Optional caller-supplied id.
            version: Definition version; latest when omitted.

        Returns:
            The stabilized instance.

        Raises:
            WorkflowNotFoundError: If the workflow is not registered.
            ValueError: If ``instance_id`` is already in use.

        Example:
            >>> engine = LocalExecutionEngine(registry)
            >>> instance = await engine.start_workflow("order", {"order_id": "o_1"})
        """
        definition = self.registry.get_definition(name, version)
        if instance_id is None:
            instance_id = generate_instance_id()
        # The lock entry reserves the id until the instance is stored
        if instance_id in self._locks:
            msg = f"Workflow instance '{instance_id}' already exists"
            raise ValueError(msg)
        self._locks[instance_id] = asyncio.Lock()

        try:
            instance = await start_workflow_and_run(
                definition,
                {} if ctx is None else ctx,
                instance_id=instance_id,
                max_steps=self.max_steps,
            )
        except BaseException:
            del self._locks[instance_id]
            raise

        self._instances[instance_id] = instance
        self._definitions[instance_id] = definition
        return instance

    async def send_event(self, instance_id: str, event: str) -> TransitionResult[Any]:
        """Dispatch an event, waiting for any in-flight operation on the instance.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is unknown.
        """
        definition = self.get_definition(instance_id)
        async with self._locks[instance_id]:
            before = self._instances[instance_id]
            result = await send_event(definition, before, event, max_steps=self.max_steps)
            self._instances[instance_id] = result.instance

        if result.transitioned and result.instance.current_state != before.current_state:
            await self._notify(
                TransitionInfo(
                    from_state=before.current_state,
                    to_state=result.instance.current_state,
                    event=event,
                    instance=result.instance,
                )
            )
        return result

    async def can_fire(self, instance_id: str, event: str) -> bool:
        """Tell whether ``event`` would currently trigger a transition.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is unknown.
            HookExecutionError: If a guard raises.
        """
        definition = self.get_definition(instance_id)
        async with self._locks[instance_id]:
            return await can_fire(definition, self._instances[instance_id], event)

    async def update_context(self, instance_id: str, updater: Callable[[Any], Any]) -> WorkflowInstance[Any]:
        """Apply ``updater`` to a shallow copy of the context and store the result.

        The previous snapshot keeps its original context object. Sync or async
        updaters are accepted; no stabilization runs afterwards.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is unknown.
            WorkflowAlreadyFinishedError: If the instance is no longer running.
        """
        self.get_definition(instance_id)
        async with self._locks[instance_id]:
            instance = self._running_instance(instance_id)
            ctx = copy.copy(instance.ctx)
            result = updater(ctx)
            if inspect.isawaitable(result):
                await result
            updated = replace(instance, ctx=ctx)
            self._instances[instance_id] = updated
        return updated

    async def set_context(self, instance_id: str, ctx: Any) -> WorkflowInstance[Any]:
        """Replace the context of a running instance; no stabilization runs.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is unknown.
            WorkflowAlreadyFinishedError: If the instance is no longer running.
        """
        self.get_definition(instance_id)
        async with self._locks[instance_id]:
            updated = replace(self._running_instance(instance_id), ctx=ctx)
            self._instances[instance_id] = updated
        return updated

    async def get_instance(self, instance_id: str) -> WorkflowInstance[Any]:
        """Retrieve the latest snapshot of an instance.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is unknown.
        """
        if instance_id not in self._instances:
            raise WorkflowInstanceNotFoundError(instance_id)
        return self._instances[instance_id]

    def get_definition(self, instance_id: str) -> WorkflowDefinition:
        """Return the definition an instance was started from.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is unknown.
        """
        if instance_id not in self._definitions:
            raise WorkflowInstanceNotFoundError(instance_id)
        return self._definitions[instance_id]

    def get_log(self, instance_id: str) -> list[LogEntry]:
        """Readable history of an instance.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is unknown.
        """
        return build_log(self.get_definition(instance_id), self._instances[instance_id])

    def list_instances(self, status: WorkflowStatus | None = None) -> list[WorkflowInstance[Any]]:
        """Get all instances, optionally filtered by status.

        Returns:
            List of snapshots in start order.
        """
        return [
            instance for instance in self._instances.values() if status is None or instance.status == status
        ]

    def _running_instance(self, instance_id: str) -> WorkflowInstance[Any]:
        instance = self._instances[instance_id]
        if not instance.is_running:
            raise WorkflowAlreadyFinishedError(instance_id, instance.status.value)
        return instance

    async def _notify(self, info: TransitionInfo) -> None:
        for observer in list(self._observers):
            try:
                result = observer(info)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Transition observer failed for instance %s (%s -> %s)",
                    info.instance.instance_id,
                    info.from_state,
                    info.to_state,
                )
