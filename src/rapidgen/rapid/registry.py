"""
Registry of tool definitions written to the system module.

Each caller (document, session, job) owns its own registry and passes it to
the generator explicitly.
"""

from typing import Iterator

from rapidgen.core.exceptions import ConfigurationError
from rapidgen.core.logging import get_logger
from rapidgen.kinematics.tool import RobotTool

logger = get_logger(__name__)

PREDEFINED_TOOLS = ("tool0",)


class ToolRegistry:
    """
    Ordered collection of tools by name.

    Example:
        >>> registry = ToolRegistry(owner="job-1")
        >>> registry.register(RobotTool(name="torch"))
        >>> [tool.name for tool in registry]
        ['torch']
    """

    def __init__(self, owner: str = "default") -> None:
        self.owner = owner
        self._tools: dict[str, RobotTool] = {}

    def register(self, tool: RobotTool, replace: bool = False) -> None:
        """
        Add a tool.

        Args:
            tool: Tool to add
            replace: Replace a tool registered under the same name

        Raises:
            ConfigurationError: If the name is predefined or already registered
        """
        if tool.name in PREDEFINED_TOOLS:
            raise ConfigurationError(f"Tool '{tool.name}' is predefined and cannot be registered")
        if tool.name in self._tools and not replace:
            raise ConfigurationError(
                f"Tool '{tool.name}' is already registered",
                details={"owner": self.owner},
            )
        self._tools[tool.name] = tool
        logger.debug("tool_registered", owner=self.owner, tool=tool.name)

    def unregister(self, name: str) -> RobotTool:
        """Remove a tool and return it."""
        if name not in self._tools:
            raise ConfigurationError(
                f"Tool '{name}' is not registered",
                details={"owner": self.owner, "registered": list(self._tools)},
            )
        return self._tools.pop(name)

    def get(self, name: str) -> RobotTool | None:
        return self._tools.get(name)

    def clear(self) -> None:
        self._tools.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[RobotTool]:
        return iter(list(self._tools.values()))

    def __len__(self) -> int:
        return len(self._tools)

    def __repr__(self) -> str:
        return f"ToolRegistry(owner='{self.owner}', tools={list(self._tools)})"
