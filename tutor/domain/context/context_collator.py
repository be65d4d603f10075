from typing import Awaitable, Callable, List
import asyncio
import structlog

from langchain_core.documents import Document

from tutor.domain.errors import ContextUnavailable
from tutor.domain.models import CollatedContext
from .memory.memory_provider import MemoryProvider

logger = structlog.get_logger(__name__)


class ContextCollator:
    """Assembles personal and worldview context for one model pass"""

    def __init__(self, memory: MemoryProvider, memory_k: int = 5, worldview_k: int = 3):
        self.memory = memory
        self.memory_k = memory_k
        self.worldview_k = worldview_k

    async def collate(self, student_id: str, query: str) -> CollatedContext:
        """Retrieve both context sources; failures degrade to empty text"""

        memory_docs, worldview_docs = await asyncio.gather(
            self._safe_retrieve(
                "memory",
                lambda: self.memory.retrieve_context(student_id, query, self.memory_k)
            ),
            self._safe_retrieve(
                "worldview",
                lambda: self.memory.retrieve_worldview_context(query, self.worldview_k)
            ),
        )

        return CollatedContext(
            memory=join_documents(memory_docs),
            worldview=join_documents(worldview_docs)
        )

    async def _safe_retrieve(self, source: str, retrieval: Callable[[], Awaitable[List[Document]]]) -> List[Document]:
        try:
            return list(await retrieval() or [])
        except Exception as e:
            error = ContextUnavailable(f"{source} retrieval failed: {e}")
            logger.warning("Context unavailable", source=source, kind=error.kind, error=str(error))
            return []


def join_documents(documents: List[Document]) -> str:
    """Newline-join snippet texts"""

    return "\n".join(doc.page_content for doc in documents)
