"""Tests for the configuration compiler and handler registry."""

from __future__ import annotations

from typing import Any

import pytest

from litestar_flowstate.core.config import (
    HandlerRegistry,
    StateConfig,
    WorkflowConfig,
    compile_workflow_config,
    make_transition_id,
)
from litestar_flowstate.core.types import StateKind
from litestar_flowstate.exceptions import HandlerNotFoundError, WorkflowValidationError


@pytest.mark.unit
class TestHandlerRegistry:
    """Tests for HandlerRegistry."""

    def test_register_decorator(self) -> None:
        """The decorator stores and returns the function."""
        handlers = HandlerRegistry()

        @handlers.register("ok")
        def ok(ctx: Any) -> bool:
            return True

        assert handlers["ok"] is ok
        assert "ok" in handlers
        assert len(handlers) == 1

    def test_resolve_none(self) -> None:
        """Absent ids resolve to no hook."""
        handlers = HandlerRegistry()

        assert handlers.resolve_guard(None) is None
        assert handlers.resolve_action(None) is None

    def test_resolve_missing_guard(self) -> None:
        """Unknown guard ids raise HandlerNotFoundError naming the id."""
        handlers = HandlerRegistry()

        with pytest.raises(HandlerNotFoundError, match="is_ready") as exc_info:
            handlers.resolve_guard("is_ready")

        assert exc_info.value.handler_id == "is_ready"
        assert exc_info.value.role == "guard"

    def test_resolve_missing_action(self) -> None:
        """Unknown action ids raise HandlerNotFoundError with the action role."""
        with pytest.raises(HandlerNotFoundError) as exc_info:
            HandlerRegistry().resolve_action("send_mail")

        assert exc_info.value.role == "action"

    def test_accepts_plain_mapping(self) -> None:
        """A registry can be seeded from a dict."""

        def guard(ctx: Any) -> bool:
            return False

        handlers = HandlerRegistry({"g": guard})

        assert handlers.resolve_guard("g") is guard


@pytest.mark.unit
class TestWorkflowConfig:
    """Tests for parsing configuration documents."""

    def test_from_dict(self, order_config: dict[str, Any]) -> None:
        """camelCase keys are mapped onto the config dataclasses."""
        config = WorkflowConfig.from_dict(order_config)

        assert config.id == "order"
        assert config.initial_state == "draft"
        assert config.version == 1
        assert config.states["checking"].kind == StateKind.AUTO
        assert config.states["approved"].on_enter == "notify"
        assert config.states["draft"].transitions[0].action == "stamp_submitted"

    def test_unknown_kind(self) -> None:
        """An unknown state kind is a validation error."""
        with pytest.raises(WorkflowValidationError, match="sideways"):
            StateConfig.from_dict({"kind": "sideways"})

    def test_state_missing_kind(self) -> None:
        """A state without a kind is a validation error."""
        with pytest.raises(WorkflowValidationError, match="kind"):
            StateConfig.from_dict({})

    def test_transition_missing_target(self) -> None:
        """A transition without a target is a validation error."""
        with pytest.raises(WorkflowValidationError, match="target"):
            StateConfig.from_dict({"kind": "task", "transitions": [{"event": "GO"}]})

    def test_missing_target_through_compile(self, order_handlers: HandlerRegistry) -> None:
        """Compiling a raw document reports a missing target as a validation error."""
        document = {"id": "x", "initialState": "a", "states": {"a": {"kind": "task", "transitions": [{}]}}}

        with pytest.raises(WorkflowValidationError):
            compile_workflow_config(document, order_handlers)

    def test_missing_keys(self) -> None:
        """Required top-level keys are reported."""
        with pytest.raises(WorkflowValidationError) as exc_info:
            WorkflowConfig.from_dict({"id": "x"})

        assert len(exc_info.value.errors) == 2

    def test_state_without_transitions(self) -> None:
        """States may omit their transitions."""
        assert StateConfig.from_dict({"kind": "end"}).transitions == []


@pytest.mark.unit
class TestCompileWorkflowConfig:
    """Tests for compile_workflow_config."""

    def test_transition_ids(self, order_config: dict[str, Any], order_handlers: HandlerRegistry) -> None:
        """Transition ids are synthesized from state, target and event."""
        definition = compile_workflow_config(order_config, order_handlers)

        assert definition.states["draft"].transitions[0].id == "draft::checking::SUBMIT"
        assert [t.id for t in definition.states["checking"].transitions] == [
            "checking::approved::AUTO",
            "checking::review::AUTO",
        ]

    def test_make_transition_id(self) -> None:
        """Auto transitions use the AUTO marker."""
        assert make_transition_id("a", "b", None) == "a::b::AUTO"
        assert make_transition_id("a", "b", "GO") == "a::b::GO"

    def test_hooks_resolved(self, order_config: dict[str, Any], order_handlers: HandlerRegistry) -> None:
        """Handler ids are replaced by the registered callables."""
        definition = compile_workflow_config(order_config, order_handlers)

        assert definition.states["approved"].on_enter is order_handlers["notify"]
        assert definition.states["checking"].transitions[0].guard is order_handlers["is_small"]
        assert definition.states["checking"].transitions[1].guard is None

    def test_metadata_carried(self, order_config: dict[str, Any], order_handlers: HandlerRegistry) -> None:
        """Labels, version and description survive compilation."""
        definition = compile_workflow_config(order_config, order_handlers)

        assert definition.states["review"].label == "Manager review"
        assert definition.version == 1
        assert definition.description == "Order approval"

    def test_missing_handler(self, order_config: dict[str, Any]) -> None:
        """A missing handler fails compilation and names the id."""
        with pytest.raises(HandlerNotFoundError, match="stamp_submitted"):
            compile_workflow_config(order_config, {})

    def test_missing_initial_state(self) -> None:
        """The compiled definition must contain its initial state."""
        config = {"id": "x", "initialState": "nope", "states": {"a": {"kind": "task"}}}

        with pytest.raises(WorkflowValidationError, match="nope"):
            compile_workflow_config(config, HandlerRegistry())
