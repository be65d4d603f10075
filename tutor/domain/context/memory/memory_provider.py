from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional, Callable
import asyncio
from datetime import datetime

from langchain_core.documents import Document
from langchain_core.vectorstores import VectorStore

from ..context_ranker import ContextRanker

WORLDVIEW_TYPE = "worldview"
INTERACTION_TYPE = "interaction"


class MemoryProvider(ABC):
    """Retrieval capability backing the context collator"""

    @abstractmethod
    async def retrieve_context(self, student_id: str, query: str, k: int = 5) -> List[Document]:
        """Student-scoped history snippets, most relevant first"""
        pass

    @abstractmethod
    async def retrieve_worldview_context(self, query: str, k: int = 3) -> List[Document]:
        """Curated pedagogical snippets, most relevant first"""
        pass

    async def store_interaction(self, student_id: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Persist a student interaction; providers without storage ignore it"""
        return None


class NullMemoryProvider(MemoryProvider):
    """Provider that never knows anything"""

    async def retrieve_context(self, student_id: str, query: str, k: int = 5) -> List[Document]:
        return []

    async def retrieve_worldview_context(self, query: str, k: int = 3) -> List[Document]:
        return []


class InMemoryMemoryProvider(MemoryProvider):
    """Process-local memory store with keyword ranking"""

    def __init__(self, ranker: Optional[ContextRanker] = None, max_per_student: int = 1000):
        self.interactions: Dict[str, List[Document]] = {}
        self.worldview: List[Document] = []
        self.ranker = ranker or ContextRanker()
        self.max_per_student = max_per_student
        self._lock = asyncio.Lock()

    async def store_interaction(self, student_id: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        async with self._lock:
            docs = self.interactions.setdefault(student_id, [])
            docs.append(Document(
                page_content=content,
                metadata={
                    **(metadata or {}),
                    "student_id": student_id,
                    "type": INTERACTION_TYPE,
                    "timestamp": datetime.utcnow().isoformat(),
                }
            ))

            if len(docs) > self.max_per_student:
                self.interactions[student_id] = docs[-self.max_per_student:]

    async def add_worldview(self, content: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Add a curated worldview snippet"""

        async with self._lock:
            self.worldview.append(Document(
                page_content=content,
                metadata={**(metadata or {}), "type": WORLDVIEW_TYPE}
            ))

    async def retrieve_context(self, student_id: str, query: str, k: int = 5) -> List[Document]:
        async with self._lock:
            docs = list(self.interactions.get(student_id, []))
        return self.ranker.rank_documents(query, docs, k)

    async def retrieve_worldview_context(self, query: str, k: int = 3) -> List[Document]:
        async with self._lock:
            docs = list(self.worldview)
        return self.ranker.rank_documents(query, docs, k)


def _dict_filter(conditions: Dict[str, Any]) -> Any:
    return conditions


class VectorStoreMemoryProvider(MemoryProvider):
    """Memory provider over any LangChain vector store

    Student history and worldview material share one index and are told
    apart by metadata. ``filter_builder`` turns the metadata conditions
    into whatever filter the concrete store accepts; the default passes
    the dict through, which suits Pinecone and Chroma style stores.
    """

    def __init__(
        self,
        vector_store: VectorStore,
        filter_builder: Callable[[Dict[str, Any]], Any] = _dict_filter
    ):
        self.vector_store = vector_store
        self.filter_builder = filter_builder

    async def store_interaction(self, student_id: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        await self.vector_store.aadd_documents([
            Document(
                page_content=content,
                metadata={
                    **(metadata or {}),
                    "student_id": student_id,
                    "type": INTERACTION_TYPE,
                    "timestamp": datetime.utcnow().isoformat(),
                }
            )
        ])

    async def retrieve_context(self, student_id: str, query: str, k: int = 5) -> List[Document]:
        if k <= 0:
            return []
        return await self.vector_store.asimilarity_search(
            query, k=k, filter=self.filter_builder({"student_id": student_id})
        )

    async def retrieve_worldview_context(self, query: str, k: int = 3) -> List[Document]:
        if k <= 0:
            return []
        return await self.vector_store.asimilarity_search(
            query, k=k, filter=self.filter_builder({"type": WORLDVIEW_TYPE})
        )
