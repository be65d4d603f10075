from .tool_registry import ToolRegistry, stringify_tool_output
from .tool_dispatcher import ToolDispatcher, TOOL_ERROR_MARKER, format_tool_error, is_tool_error
from .tutor_tools import build_tutor_tools

__all__ = [
    "ToolRegistry",
    "ToolDispatcher",
    "TOOL_ERROR_MARKER",
    "build_tutor_tools",
    "format_tool_error",
    "is_tool_error",
    "stringify_tool_output",
]
