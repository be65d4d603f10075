from typing import List, Sequence
import structlog

from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.tools import BaseTool

from tutor.domain.errors import GenerationFailure
from tutor.domain.models import CollatedContext, TutorMode
from .model_capability import ModelCapability
from .prompts import build_system_instruction

logger = structlog.get_logger(__name__)


class ResponseGenerator:
    """Runs one model pass over the conversation so far"""

    def __init__(self, model: ModelCapability):
        self.model = model

    async def generate(
        self,
        mode: TutorMode,
        context: CollatedContext,
        messages: List[BaseMessage],
        tools: Sequence[BaseTool]
    ) -> AIMessage:
        """Return exactly one generated message

        Any capability error is fatal to the run and surfaces as
        ``GenerationFailure``; there is no retry here.
        """

        system_instruction = build_system_instruction(mode, context)

        try:
            response = await self.model.invoke(system_instruction, list(messages), tools)
        except Exception as e:
            logger.error("Model invocation failed", error=str(e), mode=mode.value)
            raise GenerationFailure(f"Model invocation failed: {e}", messages) from e

        if not isinstance(response, AIMessage):
            raise GenerationFailure(
                f"Model returned {type(response).__name__}, expected AIMessage", messages
            )

        logger.info(
            "Generated response",
            mode=mode.value,
            tool_calls=len(response.tool_calls or [])
        )
        return response
