from enum import Enum

from langchain_core.messages import AIMessage, HumanMessage, ToolMessage

from tutor.domain.models import Message


class Route(str, Enum):
    """Where the graph goes after a model pass"""
    CONTINUE = "continue"
    END = "end"


def route(last_message: Message) -> Route:
    """CONTINUE iff the last message is a generated one with pending tool calls"""

    if isinstance(last_message, AIMessage):
        return Route.CONTINUE if last_message.tool_calls else Route.END
    if isinstance(last_message, (HumanMessage, ToolMessage)):
        return Route.END
    raise TypeError(f"Unsupported message kind: {type(last_message).__name__}")
