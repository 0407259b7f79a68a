"""Workflow registry for managing workflow definitions.

This module provides a registry for storing, retrieving, and managing
workflow definitions with support for versioning.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from litestar_flowstate.core.config import compile_workflow_config
from litestar_flowstate.core.definition import create_workflow
from litestar_flowstate.exceptions import WorkflowNotFoundError

if TYPE_CHECKING:
    from litestar_flowstate.core.config import HandlerRegistry, WorkflowConfig
    from litestar_flowstate.core.definition import WorkflowDefinition

__all__ = ["WorkflowRegistry"]


class WorkflowRegistry:
    """Registry for storing and retrieving workflow definitions.

    Attributes:
        _definitions: Nested dict mapping workflow id -> version -> WorkflowDefinition.
    """

    def __init__(self) -> None:
        """Initialize an empty workflow registry."""
        self._definitions: dict[str, dict[int, WorkflowDefinition]] = {}

    def register(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        """Register a workflow definition under its id and version.

        Registering the same id and version again replaces the earlier definition.

        Args:
            definition: The definition to register.

        Returns:
            The registered definition.

        Raises:
            WorkflowValidationError: If the definition's initial state does not exist.

        Example:
            >>> registry = WorkflowRegistry()
            >>> registry.register(definition)
        """
        create_workflow(definition)
        self._definitions.setdefault(definition.id, {})[definition.version] = definition
        return definition

    def register_config(
        self,
        config: WorkflowConfig | Mapping[str, Any],
        handlers: HandlerRegistry | Mapping[str, Callable[..., Any]],
    ) -> WorkflowDefinition:
        """Compile a configuration document and register the result.

        Raises:
            HandlerNotFoundError: If the configuration references an unknown handler.
            WorkflowValidationError: If the configuration is invalid.
        """
        return self.register(compile_workflow_config(config, handlers))

    def get_definition(self, name: str, version: int | None = None) -> WorkflowDefinition:
        """Retrieve a workflow definition by id and optional version.

        Args:
            name: The workflow id.
            version: The workflow version. If None, returns the latest version.

        Returns:
            The requested WorkflowDefinition.

        Raises:
            WorkflowNotFoundError: If the workflow id or version is not registered.

        Example:
            >>> definition = registry.get_definition("approval")
            >>> definition_v1 = registry.get_definition("approval", 1)
        """
        versions = self._definitions.get(name)
        if not versions:
            raise WorkflowNotFoundError(name)

        if version is None:
            version = max(versions)

        if version not in versions:
            raise WorkflowNotFoundError(name, version)

        return versions[version]

    def list_definitions(self, active_only: bool = True) -> list[WorkflowDefinition]:
        """List all registered workflow definitions.

        Args:
            active_only: If True, only return the latest version of each workflow.
                If False, return all versions.

        Returns:
            List of WorkflowDefinition objects.
        """
        definitions: list[WorkflowDefinition] = []

        for versions in self._definitions.values():
            if active_only:
                definitions.append(versions[max(versions)])
            else:
                definitions.extend(versions[v] for v in sorted(versions))

        return definitions

    def unregister(self, name: str, version: int | None = None) -> None:
        """Remove a workflow from the registry.

        Args:
            name: The workflow id.
            version: The specific version to remove. If None, removes all versions.
        """
        if name not in self._definitions:
            return

        if version is None:
            del self._definitions[name]
            return

        self._definitions[name].pop(version, None)
        if not self._definitions[name]:
            del self._definitions[name]

    def has_workflow(self, name: str, version: int | None = None) -> bool:
        """Check if a workflow exists in the registry.

        Args:
            name: The workflow id.
            version: Optional specific version to check.

        Returns:
            True if the workflow exists, False otherwise.
        """
        if name not in self._definitions:
            return False

        if version is None:
            return True

        return version in self._definitions[name]

    def get_versions(self, name: str) -> list[int]:
        """Get all registered versions for a workflow, ascending.

        Raises:
            WorkflowNotFoundError: If the workflow id is not registered.
        """
        if name not in self._definitions:
            raise WorkflowNotFoundError(name)

        return sorted(self._definitions[name])
