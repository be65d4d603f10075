from typing import List, Optional
import structlog
import httpx

from langchain_core.runnables import RunnableConfig
from langchain_core.tools import BaseTool, ToolException, tool

from tutor.config import Settings
from tutor.domain.context.state.student_state_store import StudentStateStore

logger = structlog.get_logger(__name__)


def build_tutor_tools(
    settings: Settings,
    student_states: StudentStateStore,
    http_client: Optional[httpx.AsyncClient] = None
) -> List[BaseTool]:
    """Tools the tutor can call: web search, app navigation, progress lookup"""

    @tool
    async def search_web(query: str) -> str:
        """Search the web for up-to-date information relevant to the student's question."""

        if not settings.search_api_key:
            raise ToolException("Web search is not configured")

        payload = {
            "query": query,
            "max_results": settings.search_max_results,
        }
        headers = {"Authorization": f"Bearer {settings.search_api_key}"}

        if http_client is not None:
            response = await http_client.post(settings.search_api_url, json=payload, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=settings.tool_timeout_seconds) as client:
                response = await client.post(settings.search_api_url, json=payload, headers=headers)
        response.raise_for_status()

        results = response.json().get("results", [])
        if not results:
            return "No results found."

        return "\n\n".join(
            f"{item.get('title', '')}\n{item.get('url', '')}\n{item.get('content', '')}".strip()
            for item in results[:settings.search_max_results]
        )

    @tool
    async def navigate_to_quest(path: str, reason: str) -> str:
        """Navigates the student to a specific quest or course page.

        Args:
            path: The URL path to navigate to, e.g. /quests/123
            reason: The pedagogical reason for this navigation
        """

        logger.info("Navigation requested", path=path, reason=reason)
        return f"Successfully triggered navigation to {path}"

    @tool
    async def check_student_progress(config: RunnableConfig) -> str:
        """Checks the completion status of current quests for the student."""

        student_id = config.get("configurable", {}).get("student_id", "")
        state = await student_states.get_state(student_id)
        if state is None:
            return "No progress recorded for this student yet."

        quest = state.current_quest or "no active quest"
        return (
            f"Student is currently on {quest}. "
            f"Help requests so far: {state.help_click_count}. "
            f"Tutor mode: {state.mode.value}."
        )

    return [search_web, navigate_to_quest, check_student_progress]
