from .tutor_state import (
    Message,
    TutorMode,
    CollatedContext,
    ToolSpec,
    TutorState,
    StudentState,
    RunResult,
    message_text,
    content_to_text,
    initial_state,
)

__all__ = [
    "Message",
    "TutorMode",
    "CollatedContext",
    "ToolSpec",
    "TutorState",
    "StudentState",
    "RunResult",
    "message_text",
    "content_to_text",
    "initial_state",
]
