"""Litestar plugin for workflow integration.

This module provides the WorkflowPlugin for serving litestar-flowstate state
machines from Litestar applications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.exceptions import ImproperlyConfiguredException
from litestar.plugins import InitPluginProtocol

from litestar_flowstate.engine.local import LocalExecutionEngine
from litestar_flowstate.engine.registry import WorkflowRegistry

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from litestar_flowstate.core.definition import WorkflowDefinition

__all__ = ["WorkflowPlugin", "WorkflowPluginConfig"]


@dataclass
class WorkflowPluginConfig:
    """Configuration for the WorkflowPlugin.

    Attributes:
        registry: Optional pre-configured WorkflowRegistry. If not provided,
            the engine's registry is used, or a new one will be created. When
            given together with ``engine`` it must be the engine's registry.
        engine: Optional pre-configured LocalExecutionEngine. If not provided,
            one will be created using the registry.
        definitions: Workflow definitions to register on app startup.
        max_steps: Stabilization bound for a created engine; None is unbounded.
        dependency_key_registry: The key used for dependency injection of
            the WorkflowRegistry. Defaults to "workflow_registry".
        dependency_key_engine: The key used for dependency injection of
            the engine. Defaults to "workflow_engine".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for all workflow API endpoints.
            Defaults to "/workflows".
        api_guards: List of Litestar guards to apply to all workflow API endpoints.
        api_tags: OpenAPI tags to apply to workflow API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
    """

    registry: WorkflowRegistry | None = None
    engine: LocalExecutionEngine | None = None
    definitions: list[WorkflowDefinition] = field(default_factory=list)
    max_steps: int | None = None
    dependency_key_registry: str = "workflow_registry"
    dependency_key_engine: str = "workflow_engine"
    enable_api: bool = True
    api_path_prefix: str = "/workflows"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Workflows"])
    include_api_in_schema: bool = True


class WorkflowPlugin(InitPluginProtocol):
    """Litestar plugin for state-machine workflows.

    Provides dependency injection for the WorkflowRegistry and the
    LocalExecutionEngine, and optionally mounts the REST API.

    Example:
        Using in a route handler::

            from litestar import Litestar, post
            from litestar_flowstate import LocalExecutionEngine, WorkflowPlugin, WorkflowPluginConfig


            @post("/orders/{order_id:str}/approve")
            async def approve(order_id: str, workflow_engine: LocalExecutionEngine) -> dict:
                result = await workflow_engine.send_event(order_id, "APPROVE")
                return {"transitioned": result.transitioned}


            app = Litestar(
                route_handlers=[approve],
                plugins=[WorkflowPlugin(config=WorkflowPluginConfig(definitions=[order_workflow]))],
            )
    """

    __slots__ = ("_config", "_engine", "_registry")

    def __init__(self, config: WorkflowPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or WorkflowPluginConfig()
        self._registry: WorkflowRegistry | None = None
        self._engine: LocalExecutionEngine | None = None

    @property
    def registry(self) -> WorkflowRegistry:
        """Get the workflow registry.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._registry is None:
            msg = "WorkflowPlugin has not been initialized. Access registry after app startup."
            raise RuntimeError(msg)
        return self._registry

    @property
    def engine(self) -> LocalExecutionEngine:
        """Get the execution engine.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._engine is None:
            msg = "WorkflowPlugin has not been initialized. Access engine after app startup."
            raise RuntimeError(msg)
        return self._engine

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Wire the registry, engine and optional API into the app.

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.

        Raises:
            ImproperlyConfiguredException: If both an engine and a registry are given
                and the engine does not use that registry.
        """
        if self._config.engine is not None:
            if self._config.registry is not None and self._config.registry is not self._config.engine.registry:
                msg = "WorkflowPluginConfig.registry must be the registry used by WorkflowPluginConfig.engine"
                raise ImproperlyConfiguredException(msg)
            self._engine = self._config.engine
            self._registry = self._engine.registry
        else:
            self._registry = self._config.registry or WorkflowRegistry()
            self._engine = LocalExecutionEngine(registry=self._registry, max_steps=self._config.max_steps)

        for definition in self._config.definitions:
            self._registry.register(definition)

        def provide_registry() -> WorkflowRegistry:
            return self._registry  # type: ignore[return-value]

        def provide_engine() -> LocalExecutionEngine:
            return self._engine  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_registry] = Provide(
            provide_registry,
            sync_to_thread=False,
        )
        app_config.dependencies[self._config.dependency_key_engine] = Provide(
            provide_engine,
            sync_to_thread=False,
        )

        if self._config.enable_api:
            from litestar import Router

            from litestar_flowstate.web.controllers import WorkflowDefinitionController, WorkflowInstanceController

            workflow_router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[WorkflowDefinitionController, WorkflowInstanceController],
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )
            app_config.route_handlers.append(workflow_router)

        return app_config
