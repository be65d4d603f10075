"""
Unit Tests for the built-in tutor tools.
"""

import httpx
import pytest
from langchain_core.tools import ToolException

from tutor.config import Settings
from tutor.domain.context.state.student_state_store import StudentStateStore
from tutor.domain.tool.tutor_tools import build_tutor_tools


def tools_by_name(settings, store, client=None):
    return {t.name: t for t in build_tutor_tools(settings, store, http_client=client)}


class TestTutorTools:

    @pytest.fixture
    def store(self):
        return StudentStateStore()

    def test_exposes_three_tools(self, store):
        names = set(tools_by_name(Settings(), store))
        assert names == {"search_web", "navigate_to_quest", "check_student_progress"}

    @pytest.mark.asyncio
    async def test_navigate_to_quest(self, store):
        tool = tools_by_name(Settings(), store)["navigate_to_quest"]

        output = await tool.ainvoke({"path": "/quests/123", "reason": "Review the basics"})

        assert output == "Successfully triggered navigation to /quests/123"

    @pytest.mark.asyncio
    async def test_progress_reads_student_state(self, store):
        await store.update_state("student-123", {"current_quest": "/quests/nehemiah"})
        await store.increment_help_clicks("student-123")
        tool = tools_by_name(Settings(), store)["check_student_progress"]

        output = await tool.ainvoke({}, config={"configurable": {"student_id": "student-123"}})

        assert "/quests/nehemiah" in output
        assert "Help requests so far: 1" in output

    @pytest.mark.asyncio
    async def test_progress_for_unknown_student(self, store):
        tool = tools_by_name(Settings(), store)["check_student_progress"]

        output = await tool.ainvoke({}, config={"configurable": {"student_id": "nobody"}})

        assert "No progress recorded" in output

    @pytest.mark.asyncio
    async def test_search_posts_query_and_formats_results(self, store):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.content
            return httpx.Response(200, json={"results": [
                {"title": "Nehemiah", "url": "https://example.org/n", "content": "Rebuilt the walls"}
            ]})

        settings = Settings(search_api_key="secret", search_api_url="https://search.test/search")
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            tool = tools_by_name(settings, store, client)["search_web"]
            output = await tool.ainvoke({"query": "nehemiah walls"})

        assert seen["auth"] == "Bearer secret"
        assert b"nehemiah walls" in seen["body"]
        assert "Rebuilt the walls" in output

    @pytest.mark.asyncio
    async def test_search_non_2xx_raises(self, store):
        settings = Settings(search_api_key="secret")
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        async with httpx.AsyncClient(transport=transport) as client:
            tool = tools_by_name(settings, store, client)["search_web"]
            with pytest.raises(httpx.HTTPStatusError):
                await tool.ainvoke({"query": "anything"})

    @pytest.mark.asyncio
    async def test_search_without_key_raises(self, store):
        tool = tools_by_name(Settings(search_api_key=None), store)["search_web"]

        with pytest.raises(ToolException):
            await tool.ainvoke({"query": "anything"})
