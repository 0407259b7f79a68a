"""Minimal example of litestar-flowstate integration.

This example serves an expense approval state machine compiled from a JSON-style
configuration. Small expenses are approved automatically; larger ones wait for a
manager decision.

Run with:
    cd examples/minimal
    litestar run

Or:
    uvicorn app:app --reload
"""

from __future__ import annotations

import logging
from typing import Any

from litestar import Litestar, post

from litestar_flowstate import (
    HandlerRegistry,
    LocalExecutionEngine,
    TransitionInfo,
    WorkflowPlugin,
    WorkflowPluginConfig,
    WorkflowRegistry,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Handlers
# =============================================================================

handlers = HandlerRegistry()


@handlers.register("record_submission")
def record_submission(ctx: dict[str, Any]) -> None:
    ctx["submitted"] = True


@handlers.register("below_limit")
def below_limit(ctx: dict[str, Any]) -> bool:
    return ctx.get("amount", 0) <= ctx.get("auto_approve_limit", 50)


@handlers.register("schedule_payout")
async def schedule_payout(ctx: dict[str, Any]) -> None:
    ctx["payout_reference"] = f"PAY-{ctx.get('employee', 'unknown')}-{ctx.get('amount', 0)}"


# =============================================================================
# Workflow Configuration
# =============================================================================

EXPENSE_WORKFLOW: dict[str, Any] = {
    "id": "expense",
    "version": 1,
    "description": "Expense claim approval",
    "initialState": "draft",
    "states": {
        "draft": {
            "kind": "task",
            "label": "Draft",
            "icon": "pencil",
            "transitions": [{"target": "triage", "event": "SUBMIT", "action": "record_submission"}],
        },
        "triage": {
            "kind": "auto",
            "label": "Triage",
            "transitions": [
                {"target": "paid", "guard": "below_limit", "label": "within limit"},
                {"target": "manager_review"},
            ],
        },
        "manager_review": {
            "kind": "task",
            "label": "Manager review",
            "transitions": [
                {"target": "paid", "event": "APPROVE"},
                {"target": "rejected", "event": "REJECT"},
                {"target": "draft", "event": "RETURN", "label": "needs changes"},
            ],
        },
        "paid": {"kind": "end", "label": "Paid", "onEnter": "schedule_payout"},
        "rejected": {"kind": "end", "label": "Rejected"},
    },
}

registry = WorkflowRegistry()
registry.register_config(EXPENSE_WORKFLOW, handlers)

engine = LocalExecutionEngine(registry=registry, max_steps=50)


def log_transition(info: TransitionInfo) -> None:
    logger.info("Expense %s moved %s -> %s on %s", info.instance.instance_id, info.from_state, info.to_state, info.event)


engine.add_observer(log_transition)


# =============================================================================
# Application Routes
# =============================================================================


@post("/expenses/{expense_id:str}/submit")
async def submit_expense(
    expense_id: str,
    data: dict[str, Any],
    workflow_engine: LocalExecutionEngine,
) -> dict[str, Any]:
    """Create an expense claim and submit it in one call."""
    instance = await workflow_engine.start_workflow("expense", dict(data), instance_id=expense_id)
    result = await workflow_engine.send_event(instance.instance_id, "SUBMIT")
    return {
        "expense_id": expense_id,
        "state": result.instance.current_state,
        "status": result.instance.status.value,
    }


app = Litestar(
    route_handlers=[submit_expense],
    plugins=[WorkflowPlugin(config=WorkflowPluginConfig(engine=engine))],
)
