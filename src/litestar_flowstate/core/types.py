"""Core type definitions for litestar-flowstate.

This module defines the enums, hook signatures, and type variables used throughout
the state-machine executor.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import StrEnum, auto
from typing import Any, TypeAlias, TypeVar

__all__ = [
    "Action",
    "Context",
    "CtxT",
    "Guard",
    "StateKind",
    "WorkflowStatus",
]


class StateKind(StrEnum):
    """Classification of states within a workflow.

    Attributes:
        TASK: Requires external input; the engine waits for an event.
        AUTO: Auto-progressing; the engine leaves it through event-less transitions.
        END: Terminal; entering it completes the instance.
    """

    TASK = auto()
    AUTO = auto()
    END = auto()


class WorkflowStatus(StrEnum):
    """Overall status of a workflow instance.

    Attributes:
        RUNNING: The instance can still transition.
        COMPLETED: The instance entered a terminal state.
        ERROR: A hook or lookup failed; ``WorkflowInstance.error`` holds the cause.
    """

    RUNNING = auto()
    COMPLETED = auto()
    ERROR = auto()


Context: TypeAlias = dict[str, Any]
"""Default context payload: a plain mutable mapping."""

CtxT = TypeVar("CtxT")
"""Type variable for the caller-owned, engine-opaque context."""

Guard: TypeAlias = Callable[[Any], "bool | Awaitable[bool]"]
"""Predicate over the context, sync or async."""

Action: TypeAlias = Callable[[Any], "None | Awaitable[None]"]
"""Side-effecting operation over the context, sync or async."""
