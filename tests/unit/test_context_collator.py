"""
Unit Tests for the context collator.
"""

import pytest

from tutor.domain.context.context_collator import ContextCollator
from tutor.domain.context.memory.memory_provider import NullMemoryProvider

from tests.doubles import BrokenMemory, StaticMemory


class TestContextCollator:

    @pytest.mark.asyncio
    async def test_joins_snippets_with_newlines(self, memory):
        collator = ContextCollator(memory)

        context = await collator.collate("student-123", "How do I solve 2+2?")

        assert context.memory == "Student struggled with carrying digits\nStudent likes analogies"
        assert context.worldview == "Learning is building, one brick at a time"

    @pytest.mark.asyncio
    async def test_queries_use_student_scope_and_top_k(self, memory):
        collator = ContextCollator(memory, memory_k=5, worldview_k=3)

        await collator.collate("student-123", "fractions")

        assert ("memory", "student-123", "fractions", 5) in memory.queries
        assert ("worldview", "fractions", 3) in memory.queries

    @pytest.mark.asyncio
    async def test_empty_results_yield_empty_strings(self):
        context = await ContextCollator(NullMemoryProvider()).collate("s", "q")

        assert context.memory == ""
        assert context.worldview == ""

    @pytest.mark.asyncio
    async def test_provider_failure_degrades_to_empty_context(self):
        context = await ContextCollator(BrokenMemory()).collate("student-123", "q")

        assert context.memory == ""
        assert context.worldview == ""

    @pytest.mark.asyncio
    async def test_one_failing_source_keeps_the_other(self):
        class HalfBroken(StaticMemory):
            async def retrieve_worldview_context(self, query, k=3):
                raise TimeoutError("slow index")

        context = await ContextCollator(HalfBroken(memory=["kept"])).collate("s", "q")

        assert context.memory == "kept"
        assert context.worldview == ""

    @pytest.mark.asyncio
    async def test_identical_inputs_give_identical_context(self, memory):
        collator = ContextCollator(memory)

        first = await collator.collate("student-123", "same question")
        second = await collator.collate("student-123", "same question")

        assert first == second
