from typing import List
import re

from langchain_core.documents import Document


class ContextRanker:
    """Ranks retrieved snippets by keyword relevance to a query"""

    def rank_documents(self, query: str, documents: List[Document], k: int) -> List[Document]:
        """Return the top ``k`` documents, best first"""

        if k <= 0:
            return []

        scored = [
            (self.calculate_relevance(query, doc.page_content), idx, doc)
            for idx, doc in enumerate(documents)
        ]
        # Newer snippets win ties
        scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return [doc for _, _, doc in scored[:k]]

    def calculate_relevance(self, query: str, content: str) -> float:
        """Calculate relevance score between query and content"""

        query_lower = query.lower()
        content_lower = content.lower()

        query_words = set(re.findall(r'\w+', query_lower))
        content_words = set(re.findall(r'\w+', content_lower))

        if not query_words:
            return 0.0

        overlap = len(query_words.intersection(content_words))
        score = overlap / len(query_words)

        # Boost score if query appears as substring
        if query_lower and query_lower in content_lower:
            score += 0.3

        return min(score, 1.0)
