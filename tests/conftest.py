"""Shared test fixtures for litestar-flowstate test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from litestar_flowstate.core.definition import WorkflowDefinition
    from litestar_flowstate.engine.local import LocalExecutionEngine
    from litestar_flowstate.engine.registry import WorkflowRegistry


class CallRecorder:
    """Collects hook invocations in order."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def action(self, name: str) -> Any:
        """Return a sync action recording ``name``."""

        def _action(ctx: Any) -> None:
            self.calls.append(name)

        return _action

    def async_action(self, name: str) -> Any:
        """Return an async action recording ``name``."""

        async def _action(ctx: Any) -> None:
            self.calls.append(name)

        return _action

    def guard(self, name: str, result: bool) -> Any:
        """Return a guard recording ``name`` and returning ``result``."""

        def _guard(ctx: Any) -> bool:
            self.calls.append(name)
            return result

        return _guard


@pytest.fixture
def recorder() -> CallRecorder:
    """Create a hook call recorder."""
    return CallRecorder()


@pytest.fixture
def go_ready_definition() -> WorkflowDefinition:
    """A (task) --GO--> B (auto) --[ctx.ready]--> C (end).

    Returns:
        WorkflowDefinition instance
    """
    from litestar_flowstate.core.definition import State, Transition, WorkflowDefinition, create_workflow
    from litestar_flowstate.core.types import StateKind

    return create_workflow(
        WorkflowDefinition(
            id="go_ready",
            initial_state="A",
            states={
                "A": State(id="A", kind=StateKind.TASK, transitions=[Transition(id="A::B::GO", target="B", event="GO")]),
                "B": State(
                    id="B",
                    kind=StateKind.AUTO,
                    transitions=[Transition(id="B::C::AUTO", target="C", guard=lambda ctx: ctx["ready"] is True)],
                ),
                "C": State(id="C", kind=StateKind.END),
            },
        )
    )


@pytest.fixture
def order_config() -> dict[str, Any]:
    """A JSON-style order workflow configuration."""
    return {
        "id": "order",
        "version": 1,
        "description": "Order approval",
        "initialState": "draft",
        "states": {
            "draft": {
                "kind": "task",
                "label": "Draft",
                "transitions": [{"target": "checking", "event": "SUBMIT", "action": "stamp_submitted"}],
            },
            "checking": {
                "kind": "auto",
                "transitions": [
                    {"target": "approved", "guard": "is_small"},
                    {"target": "review"},
                ],
            },
            "review": {
                "kind": "task",
                "label": "Manager review",
                "transitions": [
                    {"target": "approved", "event": "APPROVE"},
                    {"target": "rejected", "event": "REJECT"},
                ],
            },
            "approved": {"kind": "end", "onEnter": "notify"},
            "rejected": {"kind": "end"},
        },
    }


@pytest.fixture
def order_handlers() -> Any:
    """Handler registry for ``order_config``."""
    from litestar_flowstate.core.config import HandlerRegistry

    handlers = HandlerRegistry()

    @handlers.register("stamp_submitted")
    def stamp_submitted(ctx: dict[str, Any]) -> None:
        ctx["submitted"] = True

    @handlers.register("is_small")
    def is_small(ctx: dict[str, Any]) -> bool:
        return ctx.get("amount", 0) < 100

    @handlers.register("notify")
    async def notify(ctx: dict[str, Any]) -> None:
        ctx.setdefault("notifications", []).append("approved")

    return handlers


@pytest.fixture
def order_definition(order_config: dict[str, Any], order_handlers: Any) -> WorkflowDefinition:
    """Compiled order workflow."""
    from litestar_flowstate.core.config import compile_workflow_config

    return compile_workflow_config(order_config, order_handlers)


@pytest.fixture
def workflow_registry() -> WorkflowRegistry:
    """Create a workflow registry for testing.

    Returns:
        WorkflowRegistry instance
    """
    from litestar_flowstate.engine.registry import WorkflowRegistry

    return WorkflowRegistry()


@pytest.fixture
def local_engine(
    workflow_registry: WorkflowRegistry,
    order_definition: WorkflowDefinition,
    go_ready_definition: WorkflowDefinition,
) -> LocalExecutionEngine:
    """Create a local execution engine with the sample workflows registered.

    Returns:
        LocalExecutionEngine instance
    """
    from litestar_flowstate.engine.local import LocalExecutionEngine

    workflow_registry.register(order_definition)
    workflow_registry.register(go_ready_definition)
    return LocalExecutionEngine(registry=workflow_registry)


# Pytest configuration
def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers.

    Args:
        config: Pytest config object
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
