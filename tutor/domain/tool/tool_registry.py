from typing import Dict, List, Any, Optional
import json

from langchain_core.runnables import RunnableConfig
from langchain_core.tools import BaseTool
from langchain_core.utils.function_calling import convert_to_openai_tool

from tutor.domain.errors import UnknownTool
from tutor.domain.models import ToolSpec


class ToolRegistry:
    """Registry for the tools the tutor may call"""

    def __init__(self, tools: Optional[List[BaseTool]] = None):
        self.tools: Dict[str, BaseTool] = {}
        self.tool_categories: Dict[str, List[str]] = {}
        for tool in tools or []:
            self.register_tool(tool)

    def register_tool(self, tool: BaseTool, category: str = "general"):
        """Register a new tool; a tool with the same name is replaced"""

        self.tools[tool.name] = tool

        names = self.tool_categories.setdefault(category, [])
        if tool.name not in names:
            names.append(tool.name)

    def get_available_tools(self) -> List[BaseTool]:
        """Get all available tools"""

        return list(self.tools.values())

    def get_tool(self, name: str) -> Optional[BaseTool]:
        """Get a specific tool"""

        return self.tools.get(name)

    def get_tools_by_category(self, category: str) -> List[BaseTool]:
        """Get tools by category"""

        names = self.tool_categories.get(category, [])
        return [self.tools[name] for name in names if name in self.tools]

    def get_tool_specs(self) -> List[ToolSpec]:
        """Describe every tool as name, description and argument schema"""

        specs = []
        for tool in self.tools.values():
            function = convert_to_openai_tool(tool)["function"]
            specs.append(ToolSpec(
                name=tool.name,
                description=tool.description,
                argument_schema=function.get("parameters", {})
            ))
        return specs

    async def invoke(self, name: str, arguments: Dict[str, Any], config: Optional[RunnableConfig] = None) -> str:
        """Run a tool by name and return its output as text"""

        tool = self.tools.get(name)
        if tool is None:
            raise UnknownTool(f"Unknown tool: {name}", tool_name=name)

        result = await tool.ainvoke(arguments, config=config)
        return stringify_tool_output(result)


def stringify_tool_output(result: Any) -> str:
    if isinstance(result, str):
        return result
    if isinstance(result, (dict, list)):
        return json.dumps(result, default=str)
    return str(result)
