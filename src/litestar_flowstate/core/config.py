"""Declarative workflow configuration and its compiler.

A configuration is plain data (typically loaded from JSON) in which guards and
actions are referenced by string id. Compiling it against a ``HandlerRegistry``
produces a runnable ``WorkflowDefinition``.

Example:
    >>> handlers = HandlerRegistry()
    >>> @handlers.register("is_ready")
    ... def is_ready(ctx):
    ...     return ctx["ready"] is True
    >>> config = WorkflowConfig.from_dict(
    ...     {
    ...         "id": "demo",
    ...         "version": 1,
    ...         "initialState": "a",
    ...         "states": {
    ...             "a": {"kind": "task", "transitions": [{"target": "b", "event": "GO"}]},
    ...             "b": {"kind": "auto", "transitions": [{"target": "c", "guard": "is_ready"}]},
    ...             "c": {"kind": "end"},
    ...         },
    ...     }
    ... )
    >>> definition = compile_workflow_config(config, handlers)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from litestar_flowstate.core.definition import State, Transition, WorkflowDefinition, create_workflow
from litestar_flowstate.core.types import Action, Guard, StateKind
from litestar_flowstate.exceptions import HandlerNotFoundError, WorkflowValidationError

__all__ = [
    "HandlerRegistry",
    "StateConfig",
    "TransitionConfig",
    "WorkflowConfig",
    "compile_workflow_config",
    "make_transition_id",
]


@dataclass
class TransitionConfig:
    """Configuration of one transition; hooks are handler ids."""

    target: str
    label: str | None = None
    event: str | None = None
    guard: str | None = None
    action: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransitionConfig:
        """Parse one transition entry.

        Raises:
            WorkflowValidationError: If ``target`` is missing.
        """
        if "target" not in data:
            raise WorkflowValidationError(["Missing required key 'target' in transition"])
        return cls(
            target=data["target"],
            label=data.get("label"),
            event=data.get("event"),
            guard=data.get("guard"),
            action=data.get("action"),
        )


@dataclass
class StateConfig:
    """Configuration of one state; hooks are handler ids."""

    kind: StateKind
    label: str | None = None
    description: str | None = None
    icon: str | None = None
    on_enter: str | None = None
    on_exit: str | None = None
    transitions: list[TransitionConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StateConfig:
        """Parse one state entry.

        Raises:
            WorkflowValidationError: If ``kind`` is missing or unknown, or a transition is invalid.
        """
        if "kind" not in data:
            raise WorkflowValidationError(["Missing required key 'kind' in state"])
        try:
            kind = StateKind(data["kind"])
        except ValueError as e:
            valid = ", ".join(k.value for k in StateKind)
            raise WorkflowValidationError([f"Unknown state kind '{data['kind']}' (expected one of {valid})"]) from e

        return cls(
            kind=kind,
            label=data.get("label"),
            description=data.get("description"),
            icon=data.get("icon"),
            on_enter=data.get("onEnter"),
            on_exit=data.get("onExit"),
            transitions=[TransitionConfig.from_dict(t) for t in data.get("transitions") or []],
        )


@dataclass
class WorkflowConfig:
    """Configuration document for a whole workflow.

    Attributes:
        id: Workflow id.
        initial_state: Id of the starting state.
        states: Mapping of state id to StateConfig.
        version: Document version.
        description: Human-readable description.
    """

    id: str
    initial_state: str
    states: dict[str, StateConfig]
    version: int = 1
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkflowConfig:
        """Parse a JSON-style document using camelCase keys.

        Raises:
            WorkflowValidationError: If a required key is missing or a state kind is unknown.
        """
        missing = [key for key in ("id", "initialState", "states") if key not in data]
        if missing:
            raise WorkflowValidationError([f"Missing required key '{key}'" for key in missing])

        return cls(
            id=data["id"],
            initial_state=data["initialState"],
            states={state_id: StateConfig.from_dict(cfg) for state_id, cfg in data["states"].items()},
            version=data.get("version", 1),
            description=data.get("description", ""),
        )


class HandlerRegistry(Mapping[str, Callable[..., Any]]):
    """String-keyed lookup table of guard and action implementations.

    Handlers may be plain functions or coroutine functions taking the context.
    """

    def __init__(self, handlers: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self._handlers: dict[str, Callable[..., Any]] = dict(handlers or {})

    def __getitem__(self, handler_id: str) -> Callable[..., Any]:
        return self._handlers[handler_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def add(self, handler_id: str, handler: Callable[..., Any]) -> None:
        self._handlers[handler_id] = handler

    def register(self, handler_id: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering the wrapped function under ``handler_id``."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.add(handler_id, handler)
            return handler

        return decorator

    def resolve_guard(self, handler_id: str | None) -> Guard | None:
        """Resolve a guard by id; ``None`` resolves to no guard.

        Raises:
            HandlerNotFoundError: If the id is not registered.
        """
        return self._resolve(handler_id, "guard")

    def resolve_action(self, handler_id: str | None) -> Action | None:
        """Resolve an action by id; ``None`` resolves to no action.

        Raises:
            HandlerNotFoundError: If the id is not registered.
        """
        return self._resolve(handler_id, "action")

    def _resolve(self, handler_id: str | None, role: str) -> Callable[..., Any] | None:
        if not handler_id:
            return None
        if handler_id not in self._handlers:
            raise HandlerNotFoundError(handler_id, role)
        return self._handlers[handler_id]


def make_transition_id(state_id: str, target: str, event: str | None) -> str:
    return f"{state_id}::{target}::{event or 'AUTO'}"


def _compile_state(state_id: str, cfg: StateConfig, handlers: HandlerRegistry) -> State:
    transitions = [
        Transition(
            id=make_transition_id(state_id, t.target, t.event),
            target=t.target,
            label=t.label,
            event=t.event,
            guard=handlers.resolve_guard(t.guard),
            action=handlers.resolve_action(t.action),
        )
        for t in cfg.transitions
    ]

    return State(
        id=state_id,
        kind=cfg.kind,
        label=cfg.label,
        description=cfg.description,
        icon=cfg.icon,
        on_enter=handlers.resolve_action(cfg.on_enter),
        on_exit=handlers.resolve_action(cfg.on_exit),
        transitions=transitions,
    )


def compile_workflow_config(
    config: WorkflowConfig | Mapping[str, Any],
    handlers: HandlerRegistry | Mapping[str, Callable[..., Any]],
) -> WorkflowDefinition:
    """Compile a configuration plus handler table into a runnable definition.

    Args:
        config: A WorkflowConfig or its raw dict form.
        handlers: Registry (or plain mapping) of handler ids to callables.

    Returns:
        The compiled WorkflowDefinition.

    Raises:
        HandlerNotFoundError: If any referenced handler id is not registered.
        WorkflowValidationError: If the initial state does not exist.
    """
    if not isinstance(config, WorkflowConfig):
        config = WorkflowConfig.from_dict(config)
    if not isinstance(handlers, HandlerRegistry):
        handlers = HandlerRegistry(handlers)

    states = {state_id: _compile_state(state_id, cfg, handlers) for state_id, cfg in config.states.items()}

    return create_workflow(
        WorkflowDefinition(
            id=config.id,
            initial_state=config.initial_state,
            states=states,
            version=config.version,
            description=config.description,
        )
    )
