"""Action plugin registry.

Provides a lightweight plugin system so the host framework can look up
an integration action by name and invoke it uniformly, either directly
on the plugin or via ``ActionTask.execute``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from email_plugin.schemas import ExecutionOutput

logger = logging.getLogger(__name__)


class ActionPlugin:
    """Base class for executable action plugins."""

    name: str = ""

    def __init__(self, name: Optional[str] = None):
        if name:
            self.name = name

    def execute(
        self,
        datasource_configuration: Any,
        action_configuration: Any,
        files: Optional[Sequence[Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ExecutionOutput:  # pragma: no cover - interface
        raise NotImplementedError

    def dynamic_properties(self) -> List[str]:
        return []

    def get_request(
        self,
        action_configuration: Any,
        datasource_configuration: Any = None,
        files: Optional[Sequence[Any]] = None,
    ) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def metadata(self, datasource_configuration: Any) -> Dict[str, Any]:
        return {}

    def test(self, datasource_configuration: Any) -> None:
        return None


# Global registry for plugins keyed by name
ACTION_PLUGINS: Dict[str, ActionPlugin] = {}


def register_plugin(plugin: ActionPlugin):
    """Register a plugin instance by its declared name."""

    if not plugin.name:
        raise ValueError("Plugins must define a name before registration")

    ACTION_PLUGINS[plugin.name] = plugin
    logger.debug("Registered action plugin: %s", plugin.name)


def get_plugin(name: str) -> Optional[ActionPlugin]:
    """Return a plugin by name if registered."""

    return ACTION_PLUGINS.get(name)


@dataclass
class ActionTask:
    """Wrapper that binds an action with its execution inputs."""

    action: str
    datasource_configuration: dict = field(default_factory=dict)
    action_configuration: dict = field(default_factory=dict)
    files: list = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    def execute(self) -> dict:
        plugin = get_plugin(self.action)
        if not plugin:
            raise ValueError(f"Action '{self.action}' is not registered")

        logger.info(
            "Executing action '%s' with configuration keys=%s",
            self.action,
            list(self.action_configuration),
        )
        result = plugin.execute(
            self.datasource_configuration,
            self.action_configuration,
            files=self.files,
            context=self.metadata,
        )
        return {
            "action": self.action,
            "result": result.model_dump(),
            "metadata": self.metadata,
        }


def load_default_plugins():
    """Import modules to populate the registry with built-ins."""

    from . import send_email  # noqa: F401

    logger.debug(
        "Loaded default plugins: %s", ", ".join(sorted(ACTION_PLUGINS.keys()))
    )
    return ACTION_PLUGINS


__all__ = [
    "ActionPlugin",
    "ACTION_PLUGINS",
    "ActionTask",
    "register_plugin",
    "get_plugin",
    "load_default_plugins",
]
