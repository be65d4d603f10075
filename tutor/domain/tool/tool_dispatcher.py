from typing import Dict, Any, List, Sequence
import asyncio
import time
import structlog

from langchain_core.messages import ToolMessage
from langchain_core.messages.tool import ToolCall

from tutor.domain.errors import ToolExecutionFailure
from tutor.infrastructure.observability.logging import agent_logger
from .tool_registry import ToolRegistry

logger = structlog.get_logger(__name__)

TOOL_ERROR_MARKER = "[tool_error]"


class ToolDispatcher:
    """Fans out the tool calls of one generated message and joins on all of them

    Every call yields exactly one ``ToolMessage`` correlated by call id.
    Failures never escape: they become error results so sibling calls and
    the run carry on.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        max_concurrency: int = 8,
        call_timeout: float = 30.0
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.registry = registry
        self.max_concurrency = max_concurrency
        self.call_timeout = call_timeout

    async def dispatch(self, tool_calls: Sequence[ToolCall], student_id: str = "") -> List[ToolMessage]:
        """Execute all calls concurrently and return one result per call"""

        if not tool_calls:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)
        config = {"configurable": {"student_id": student_id}}

        return list(await asyncio.gather(*[
            self._execute(call, semaphore, config) for call in tool_calls
        ]))

    async def _execute(
        self,
        call: ToolCall,
        semaphore: asyncio.Semaphore,
        config: Dict[str, Any]
    ) -> ToolMessage:
        name = call.get("name", "")
        call_id = call.get("id") or ""
        arguments = call.get("args") or {}

        async with semaphore:
            started = time.perf_counter()
            try:
                content = await asyncio.wait_for(
                    self.registry.invoke(name, arguments, config=config),
                    timeout=self.call_timeout
                )
            except ToolExecutionFailure as e:
                failure = e
            except asyncio.TimeoutError:
                failure = ToolExecutionFailure(f"Tool timed out after {self.call_timeout}s", name, call_id)
            except Exception as e:
                failure = ToolExecutionFailure(str(e) or type(e).__name__, name, call_id)
            else:
                agent_logger.log_tool_execution(
                    tool_name=name,
                    call_id=call_id,
                    duration_ms=(time.perf_counter() - started) * 1000,
                    success=True
                )
                return ToolMessage(content=content, tool_call_id=call_id, name=name)

        failure.call_id = call_id
        agent_logger.log_tool_execution(
            tool_name=name,
            call_id=call_id,
            duration_ms=(time.perf_counter() - started) * 1000,
            success=False,
            error=f"{failure.kind}: {failure}"
        )
        return ToolMessage(
            content=format_tool_error(failure),
            tool_call_id=call_id,
            name=name,
            status="error"
        )


def format_tool_error(failure: ToolExecutionFailure) -> str:
    """Error content handed back to the model"""

    return f"{TOOL_ERROR_MARKER} {failure.kind}: {failure}"


def is_tool_error(message: ToolMessage) -> bool:
    content = message.content if isinstance(message.content, str) else ""
    return content.startswith(TOOL_ERROR_MARKER)
