"""
Unit Tests for memory providers.
"""

import pytest
import pytest_asyncio
from langchain_core.documents import Document
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.vectorstores import InMemoryVectorStore

from tutor.domain.context.memory.memory_provider import (
    InMemoryMemoryProvider,
    NullMemoryProvider,
    VectorStoreMemoryProvider,
    WORLDVIEW_TYPE,
)


def callable_filter(conditions):
    return lambda doc: all(doc.metadata.get(key) == value for key, value in conditions.items())


class TestInMemoryMemoryProvider:

    @pytest_asyncio.fixture
    async def provider(self):
        provider = InMemoryMemoryProvider()
        await provider.store_interaction("student-123", "Asked about long division remainders")
        await provider.store_interaction("student-123", "Enjoyed the castle analogy")
        await provider.store_interaction("student-456", "Asked about division by zero")
        await provider.add_worldview("Division is fair sharing")
        await provider.add_worldview("Every wall starts with one brick")
        return provider

    @pytest.mark.asyncio
    async def test_history_is_student_scoped(self, provider):
        docs = await provider.retrieve_context("student-123", "division", k=5)

        assert len(docs) == 2
        assert all(d.metadata["student_id"] == "student-123" for d in docs)

    @pytest.mark.asyncio
    async def test_most_relevant_first(self, provider):
        docs = await provider.retrieve_context("student-123", "long division", k=1)

        assert docs[0].page_content == "Asked about long division remainders"

    @pytest.mark.asyncio
    async def test_worldview_is_shared_and_tagged(self, provider):
        docs = await provider.retrieve_worldview_context("division", k=3)

        assert docs[0].page_content == "Division is fair sharing"
        assert all(d.metadata["type"] == WORLDVIEW_TYPE for d in docs)

    @pytest.mark.asyncio
    async def test_zero_k_returns_nothing(self, provider):
        assert await provider.retrieve_context("student-123", "division", k=0) == []


class TestVectorStoreMemoryProvider:

    @pytest.fixture
    def store(self):
        return InMemoryVectorStore(DeterministicFakeEmbedding(size=32))

    @pytest.mark.asyncio
    async def test_filters_by_student_and_worldview(self, store):
        await store.aadd_documents([
            Document(page_content="Walls and gates", metadata={"type": WORLDVIEW_TYPE}),
        ])
        provider = VectorStoreMemoryProvider(store, filter_builder=callable_filter)
        await provider.store_interaction("student-123", "Likes geometry")
        await provider.store_interaction("student-456", "Likes poetry")

        history = await provider.retrieve_context("student-123", "geometry", k=5)
        worldview = await provider.retrieve_worldview_context("walls", k=3)

        assert [d.page_content for d in history] == ["Likes geometry"]
        assert [d.page_content for d in worldview] == ["Walls and gates"]


class TestNullMemoryProvider:

    @pytest.mark.asyncio
    async def test_always_empty(self):
        provider = NullMemoryProvider()
        await provider.store_interaction("s", "ignored")

        assert await provider.retrieve_context("s", "q") == []
        assert await provider.retrieve_worldview_context("q") == []
