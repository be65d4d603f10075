from typing import List, Optional

from langchain_core.messages import BaseMessage


class TutorError(Exception):
    """Base class for every error raised by a tutoring run"""

    kind = "tutor_error"

    def __init__(self, message: str, messages: Optional[List[BaseMessage]] = None):
        super().__init__(message)
        self.messages: List[BaseMessage] = list(messages or [])


class ContextUnavailable(TutorError):
    """Memory provider failed; the run continues with empty context"""

    kind = "context_unavailable"


class GenerationFailure(TutorError):
    """Model capability failed; fatal to the run"""

    kind = "generation_failure"


class ToolExecutionFailure(TutorError):
    """A single tool call failed; recovered as an error tool result"""

    kind = "tool_execution_failure"

    def __init__(self, message: str, tool_name: str = "", call_id: str = ""):
        super().__init__(message)
        self.tool_name = tool_name
        self.call_id = call_id


class UnknownTool(ToolExecutionFailure):
    """A tool call named a tool that is not registered"""

    kind = "unknown_tool"


class LoopBoundExceeded(TutorError):
    """The model kept requesting tools past the iteration cap"""

    kind = "loop_bound_exceeded"


class RunTimeout(TutorError):
    """The run deadline elapsed before a terminal answer"""

    kind = "run_timeout"


class RunCancelled(TutorError):
    """The caller signalled cancellation before a terminal answer"""

    kind = "run_cancelled"
