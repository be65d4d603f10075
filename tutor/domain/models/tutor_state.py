from typing import Dict, Any, List, Optional, Annotated, TypedDict, Union
from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from langchain_core.messages import BaseMessage, HumanMessage, AIMessage, ToolMessage
from langgraph.graph.message import add_messages


# The only message kinds a tutoring run produces or accepts
Message = Union[HumanMessage, AIMessage, ToolMessage]


class TutorMode(str, Enum):
    """Behavior switch for the tutor's system instruction"""
    ASSISTANT = "ASSISTANT"
    TEACHER = "TEACHER"


class CollatedContext(BaseModel):
    """Retrieved context, replaced wholesale on every collation"""
    memory: str = Field(default="", description="Joined personal history snippets")
    worldview: str = Field(default="", description="Joined curated worldview snippets")


class ToolSpec(BaseModel):
    """Public description of a registered tool"""
    name: str
    description: str
    argument_schema: Dict[str, Any] = Field(default_factory=dict)


class TutorState(TypedDict):
    """State for the tutoring graph"""
    messages: Annotated[List[BaseMessage], add_messages]
    student_id: str
    mode: TutorMode
    context: CollatedContext
    iterations: int


class StudentState(BaseModel):
    """Persisted per-student record, read by the chat endpoint"""
    student_id: str
    mode: TutorMode = Field(default=TutorMode.ASSISTANT)
    help_click_count: int = Field(default=0, ge=0)
    current_quest: Optional[str] = None
    last_help_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class RunResult(BaseModel):
    """Outcome of one completed tutoring run"""
    response: str
    mode: TutorMode
    iterations: int
    tool_calls: int = 0


def message_text(message: Message) -> str:
    """Plain text of a run message, never a structured payload"""

    if isinstance(message, (HumanMessage, AIMessage, ToolMessage)):
        return content_to_text(message.content)
    raise TypeError(f"Unsupported message kind: {type(message).__name__}")


def content_to_text(content: Union[str, List[Any]]) -> str:
    """Flatten LangChain message content blocks into a string"""

    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def initial_state(student_id: str, message: str, mode: TutorMode) -> TutorState:
    """Build the state a run starts from"""

    return {
        "messages": [HumanMessage(content=message)],
        "student_id": student_id,
        "mode": mode,
        "context": CollatedContext(),
        "iterations": 0,
    }
