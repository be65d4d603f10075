from typing import Dict, Any, List, Literal, Optional, Union
import asyncio
import uuid

from langgraph.graph import StateGraph, END
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, ToolMessage
import structlog

from tutor.config import Settings
from tutor.domain.context.context_collator import ContextCollator
from tutor.domain.context.memory.memory_provider import MemoryProvider
from tutor.domain.errors import LoopBoundExceeded, RunCancelled, RunTimeout
from tutor.domain.generation.model_capability import ModelCapability
from tutor.domain.generation.response_generator import ResponseGenerator
from tutor.domain.models import (
    RunResult, TutorMode, TutorState, initial_state, message_text
)
from tutor.domain.orchestration.router import Route, route
from tutor.domain.tool.tool_dispatcher import ToolDispatcher
from tutor.domain.tool.tool_registry import ToolRegistry
from tutor.infrastructure.observability.logging import agent_logger

logger = structlog.get_logger(__name__)

DEFAULT_MAX_ITERATIONS = 6


class TutorAgent:
    """Tutoring orchestrator built on LangGraph

    Collate context once, then alternate model passes and tool dispatch
    until the model answers without tool calls. The number of model
    passes is capped by ``max_iterations``.
    """

    def __init__(
        self,
        model: ModelCapability,
        memory: MemoryProvider,
        registry: ToolRegistry,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        max_tool_concurrency: int = 8,
        tool_timeout: float = 30.0,
        run_timeout: Optional[float] = 120.0,
        memory_k: int = 5,
        worldview_k: int = 3
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.registry = registry
        self.collator = ContextCollator(memory, memory_k=memory_k, worldview_k=worldview_k)
        self.generator = ResponseGenerator(model)
        self.dispatcher = ToolDispatcher(
            registry,
            max_concurrency=max_tool_concurrency,
            call_timeout=tool_timeout
        )
        self.max_iterations = max_iterations
        self.run_timeout = run_timeout
        # One superstep per node visit plus slack, so the iteration cap always trips first
        self.recursion_limit = 2 * max_iterations + 5
        self.workflow = self._create_workflow()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        model: ModelCapability,
        memory: MemoryProvider,
        registry: ToolRegistry
    ) -> "TutorAgent":
        return cls(
            model=model,
            memory=memory,
            registry=registry,
            max_iterations=settings.max_iterations,
            max_tool_concurrency=settings.max_tool_concurrency,
            tool_timeout=settings.tool_timeout_seconds,
            run_timeout=settings.run_timeout_seconds,
            memory_k=settings.memory_top_k,
            worldview_k=settings.worldview_top_k
        )

    def _create_workflow(self):
        """Create the collate -> agent <-> action graph"""

        workflow = StateGraph(TutorState)

        workflow.add_node("context_collation", self.context_collation_node)
        workflow.add_node("agent", self.agent_node)
        workflow.add_node("action", self.action_node)

        workflow.set_entry_point("context_collation")
        workflow.add_edge("context_collation", "agent")

        workflow.add_conditional_edges(
            "agent",
            self.should_continue,
            {
                "continue": "action",
                "end": END,
                "bound_exceeded": END
            }
        )

        workflow.add_edge("action", "agent")

        return workflow.compile()

    async def context_collation_node(self, state: TutorState) -> Dict[str, Any]:
        """Gather memory and worldview context for the latest student message"""

        query = latest_human_text(state["messages"])
        context = await self.collator.collate(state["student_id"], query)

        agent_logger.log_context_update(
            context_type="collated",
            action="replace",
            details={
                "memory_chars": len(context.memory),
                "worldview_chars": len(context.worldview)
            }
        )
        return {"context": context}

    async def agent_node(self, state: TutorState) -> Dict[str, Any]:
        """One model pass over the full message history"""

        iteration = state["iterations"] + 1
        logger.info("Invoking model", iteration=iteration, mode=state["mode"].value)

        response = await self.generator.generate(
            mode=state["mode"],
            context=state["context"],
            messages=state["messages"],
            tools=self.registry.get_available_tools()
        )
        return {"messages": [response], "iterations": iteration}

    async def action_node(self, state: TutorState) -> Dict[str, Any]:
        """Run every tool call of the last generated message"""

        last_message = state["messages"][-1]
        if not isinstance(last_message, AIMessage):
            raise TypeError(f"Cannot dispatch tools from {type(last_message).__name__}")

        results = await self.dispatcher.dispatch(last_message.tool_calls, state["student_id"])
        logger.info("Dispatched tools", calls=len(last_message.tool_calls), results=len(results))
        return {"messages": results}

    def should_continue(self, state: TutorState) -> Literal["continue", "end", "bound_exceeded"]:
        """Route on the shape of the last message, enforcing the iteration cap"""

        decision = route(state["messages"][-1])
        iteration = state["iterations"]

        if decision == Route.CONTINUE and iteration >= self.max_iterations:
            agent_logger.log_workflow_transition("agent", "done", iteration, "bound_exceeded")
            return "bound_exceeded"

        target = "action" if decision == Route.CONTINUE else "done"
        agent_logger.log_workflow_transition("agent", target, iteration, decision.value)
        return decision.value

    async def run(
        self,
        student_id: str,
        message: str,
        mode: Union[TutorMode, str] = TutorMode.ASSISTANT,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> RunResult:
        """Process one student message through the workflow

        Raises ``GenerationFailure`` and ``LoopBoundExceeded`` to the caller,
        and ``RunTimeout``/``RunCancelled`` when the deadline elapses or
        ``cancel_event`` is set first.
        """

        mode = TutorMode(mode)
        timeout = self.run_timeout if timeout is None else timeout
        structlog.contextvars.bind_contextvars(run_id=uuid.uuid4().hex, student_id=student_id)

        try:
            logger.info("Run started", mode=mode.value)
            state = initial_state(student_id, message, mode)
            final = await self._run_with_deadline(state, timeout, cancel_event)

            messages: List[BaseMessage] = final["messages"]
            last_message = messages[-1]

            if route(last_message) == Route.CONTINUE:
                raise LoopBoundExceeded(
                    f"No terminal answer after {self.max_iterations} model passes",
                    messages
                )

            result = RunResult(
                response=message_text(last_message),
                mode=mode,
                iterations=final["iterations"],
                tool_calls=sum(1 for m in messages if isinstance(m, ToolMessage))
            )
            logger.info("Run completed", iterations=result.iterations, tool_calls=result.tool_calls)
            return result
        finally:
            structlog.contextvars.unbind_contextvars("run_id", "student_id")

    async def _run_with_deadline(
        self,
        state: TutorState,
        timeout: Optional[float],
        cancel_event: Optional[asyncio.Event]
    ) -> Dict[str, Any]:
        snapshot: Dict[str, Any] = dict(state)
        drive = asyncio.ensure_future(self._drive(state, snapshot))
        waiters = {drive}

        stopper = None
        if cancel_event is not None:
            stopper = asyncio.ensure_future(cancel_event.wait())
            waiters.add(stopper)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            drive.cancel()
            raise
        finally:
            if stopper is not None:
                stopper.cancel()

        if drive in done:
            return drive.result()

        drive.cancel()
        await asyncio.gather(drive, return_exceptions=True)
        partial = list(snapshot.get("messages", []))

        if stopper is not None and stopper in done:
            logger.warning("Run cancelled", messages=len(partial))
            raise RunCancelled("Run cancelled by caller", partial)

        logger.warning("Run timed out", timeout=timeout, messages=len(partial))
        raise RunTimeout(f"Run exceeded {timeout}s deadline", partial)

    async def _drive(self, state: TutorState, snapshot: Dict[str, Any]) -> Dict[str, Any]:
        """Stream the graph, keeping the latest full state in ``snapshot``"""

        async for values in self.workflow.astream(
            state,
            config={"recursion_limit": self.recursion_limit},
            stream_mode="values"
        ):
            snapshot.update(values)
        return snapshot


def latest_human_text(messages: List[BaseMessage]) -> str:
    """Text of the most recent student message"""

    for message in reversed(messages):
        if isinstance(message, HumanMessage):
            return message_text(message)
    return ""
