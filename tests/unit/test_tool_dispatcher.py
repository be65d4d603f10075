"""
Unit Tests for the tool dispatcher: fan-out, fan-in and failure isolation.
"""

import asyncio

import pytest
from langchain_core.runnables import RunnableConfig
from langchain_core.tools import tool

from tutor.domain.tool.tool_dispatcher import TOOL_ERROR_MARKER, ToolDispatcher, is_tool_error
from tutor.domain.tool.tool_registry import ToolRegistry

from tests.doubles import check_student_progress


def call(call_id, name, **args):
    return {"id": call_id, "name": name, "args": args}


class TestToolDispatcher:

    @pytest.mark.asyncio
    async def test_one_result_per_call_correlated_by_id(self, registry):
        calls = [
            call("c1", "check_student_progress"),
            call("c2", "check_student_progress"),
            call("c3", "explode", reason="x"),
        ]

        results = await ToolDispatcher(registry).dispatch(calls)

        assert len(results) == 3
        assert sorted(r.tool_call_id for r in results) == ["c1", "c2", "c3"]

    @pytest.mark.asyncio
    async def test_unknown_tool_becomes_error_result(self, registry):
        results = await ToolDispatcher(registry).dispatch([call("c9", "teleport")])

        assert len(results) == 1
        assert results[0].tool_call_id == "c9"
        assert results[0].content.startswith(TOOL_ERROR_MARKER)
        assert "unknown_tool" in results[0].content
        assert results[0].status == "error"

    @pytest.mark.asyncio
    async def test_failing_tool_does_not_abort_siblings(self, registry):
        results = await ToolDispatcher(registry).dispatch([
            call("bad", "explode", reason="kaboom"),
            call("good", "check_student_progress"),
        ])
        by_id = {r.tool_call_id: r for r in results}

        assert is_tool_error(by_id["bad"])
        assert "kaboom" in by_id["bad"].content
        assert not is_tool_error(by_id["good"])
        assert "Ancient Egypt" in by_id["good"].content

    @pytest.mark.asyncio
    async def test_invalid_arguments_become_error_result(self, registry):
        results = await ToolDispatcher(registry).dispatch([call("c1", "explode")])

        assert is_tool_error(results[0])

    @pytest.mark.asyncio
    async def test_slow_tool_times_out_into_error_result(self):
        @tool
        async def slow_lookup() -> str:
            """Never answers in time."""
            await asyncio.sleep(5)
            return "late"

        dispatcher = ToolDispatcher(ToolRegistry([slow_lookup]), call_timeout=0.05)
        results = await dispatcher.dispatch([call("c1", "slow_lookup")])

        assert is_tool_error(results[0])
        assert "timed out" in results[0].content

    @pytest.mark.asyncio
    async def test_calls_run_concurrently(self):
        started = []
        release = asyncio.Event()

        @tool
        async def wait_for_peers() -> str:
            """Blocks until every sibling has started."""
            started.append(1)
            if len(started) == 3:
                release.set()
            await asyncio.wait_for(release.wait(), timeout=1)
            return "joined"

        dispatcher = ToolDispatcher(ToolRegistry([wait_for_peers]))
        results = await dispatcher.dispatch([call(f"c{i}", "wait_for_peers") for i in range(3)])

        assert [r.content for r in results] == ["joined"] * 3

    @pytest.mark.asyncio
    async def test_concurrency_ceiling_is_respected(self):
        active = 0
        peak = 0

        @tool
        async def tracked() -> str:
            """Records how many calls overlap."""
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return "done"

        dispatcher = ToolDispatcher(ToolRegistry([tracked]), max_concurrency=2)
        results = await dispatcher.dispatch([call(f"c{i}", "tracked") for i in range(6)])

        assert len(results) == 6
        assert peak <= 2

    @pytest.mark.asyncio
    async def test_student_id_reaches_tools_through_config(self):
        @tool
        async def whoami(config: RunnableConfig) -> str:
            """Echoes the student the run belongs to."""
            return config["configurable"]["student_id"]

        results = await ToolDispatcher(ToolRegistry([whoami])).dispatch(
            [call("c1", "whoami")], student_id="student-123"
        )

        assert results[0].content == "student-123"

    @pytest.mark.asyncio
    async def test_no_calls_no_results(self, registry):
        assert await ToolDispatcher(registry).dispatch([]) == []

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError):
            ToolDispatcher(ToolRegistry([check_student_progress]), max_concurrency=0)
