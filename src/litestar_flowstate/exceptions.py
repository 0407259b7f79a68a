"""Exception hierarchy for litestar-flowstate."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from litestar_flowstate.core.instance import WorkflowInstance

__all__ = (
    "FlowstateError",
    "HandlerNotFoundError",
    "HookExecutionError",
    "StateNotFoundError",
    "WorkflowAlreadyFinishedError",
    "WorkflowInstanceNotFoundError",
    "WorkflowNotFoundError",
    "WorkflowStalledError",
    "WorkflowValidationError",
)


class FlowstateError(Exception):
    """Base exception for all litestar-flowstate errors.

    All exceptions raised by litestar-flowstate inherit from this class, so callers
    can catch every workflow-related error with a single except clause.
    """


class WorkflowValidationError(FlowstateError):
    """Raised when a workflow definition or configuration is structurally invalid.

    Only the checks performed at construction or compile time raise this error,
    e.g. an initial state that is not part of the state table.

    Attributes:
        errors: List of validation error messages.
    """

    def __init__(self, errors: list[str]) -> None:
        """Initialize the exception with validation errors.

        Args:
            errors: List of validation error messages.
        """
        self.errors = errors
        super().__init__(f"Workflow validation failed: {'; '.join(errors)}")


class StateNotFoundError(FlowstateError):
    """Raised when a state id is referenced but absent from the definition.

    Attributes:
        state_id: The missing state id.
        workflow_id: The workflow whose state table was searched.
    """

    def __init__(self, state_id: str, workflow_id: str) -> None:
        """Initialize the exception with lookup details.

        Args:
            state_id: The missing state id.
            workflow_id: The workflow whose state table was searched.
        """
        self.state_id = state_id
        self.workflow_id = workflow_id
        super().__init__(f"State '{state_id}' not found in workflow '{workflow_id}'")


class HandlerNotFoundError(FlowstateError):
    """Raised when a configuration references a handler id with no implementation.

    Attributes:
        handler_id: The unresolved handler id.
        role: Either ``"guard"`` or ``"action"``.
    """

    def __init__(self, handler_id: str, role: str = "action") -> None:
        """Initialize the exception with handler details.

        Args:
            handler_id: The unresolved handler id.
            role: The role the handler was requested for.
        """
        self.handler_id = handler_id
        self.role = role
        super().__init__(f"{role.capitalize()} handler '{handler_id}' not found in handler registry")


class HookExecutionError(FlowstateError):
    """Raised when a guard, action, or entry/exit hook fails.

    The engine catches this error at the dispatch and stabilization boundaries and
    turns it into an instance with ``error`` status. ``cause`` is the original
    exception and is what ends up in ``WorkflowInstance.error``.

    Attributes:
        hook: Which hook failed: ``guard``, ``on_exit``, ``action`` or ``on_enter``.
        state_id: The state owning the hook (the target state for ``on_enter``).
        cause: The exception raised by the hook.
        instance: Snapshot reflecting every step completed before the failure.
    """

    def __init__(
        self,
        hook: str,
        state_id: str,
        cause: BaseException,
        instance: WorkflowInstance[Any],
    ) -> None:
        """Initialize the exception with hook details.

        Args:
            hook: Which hook failed.
            state_id: The state owning the hook.
            cause: The exception raised by the hook.
            instance: Snapshot reflecting the completed steps.
        """
        self.hook = hook
        self.state_id = state_id
        self.cause = cause
        self.instance = instance
        super().__init__(f"Hook '{hook}' of state '{state_id}' failed: {cause}")


class WorkflowStalledError(FlowstateError):
    """Raised when stabilization exceeds its caller-configured step bound.

    Attributes:
        state_id: The auto state the instance was in when the bound was hit.
        max_steps: The configured bound.
    """

    def __init__(self, state_id: str, max_steps: int) -> None:
        """Initialize the exception with stall details.

        Args:
            state_id: The auto state the instance was in.
            max_steps: The configured bound.
        """
        self.state_id = state_id
        self.max_steps = max_steps
        super().__init__(f"Workflow stalled in state '{state_id}' after {max_steps} auto transitions")


class WorkflowNotFoundError(FlowstateError):
    """Raised when a workflow definition is not found in the registry.

    Attributes:
        name: The id of the workflow that was not found.
        version: The specific version requested, if any.
    """

    def __init__(self, name: str, version: int | None = None) -> None:
        """Initialize the exception with workflow details.

        Args:
            name: The id of the workflow that was not found.
            version: The specific version requested, if any.
        """
        self.name = name
        self.version = version
        msg = f"Workflow '{name}'"
        if version is not None:
            msg += f" version '{version}'"
        msg += " not found"
        super().__init__(msg)


class WorkflowInstanceNotFoundError(FlowstateError):
    """Raised when a workflow instance is not held by the execution engine.

    Attributes:
        instance_id: The id of the workflow instance that was not found.
    """

    def __init__(self, instance_id: str) -> None:
        """Initialize the exception with instance details.

        Args:
            instance_id: The id of the workflow instance that was not found.
        """
        self.instance_id = instance_id
        super().__init__(f"Workflow instance '{instance_id}' not found")


class WorkflowAlreadyFinishedError(FlowstateError):
    """Raised when trying to modify the context of a finished instance.

    Completed and errored instances are immutable snapshots.

    Attributes:
        instance_id: The id of the workflow instance.
        status: The terminal status of the instance.
    """

    def __init__(self, instance_id: str, status: str) -> None:
        """Initialize the exception with instance state details.

        Args:
            instance_id: The id of the workflow instance.
            status: The terminal status of the instance.
        """
        self.instance_id = instance_id
        self.status = status
        super().__init__(f"Workflow instance '{instance_id}' is already {status}")
