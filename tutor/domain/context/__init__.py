# Context collation for tutoring runs
#
# +---------------------+      +---------------------+
# |   Student memory    |      |     Worldview       |
# |---------------------|      |---------------------|
# | Past interactions   |      | Curated pedagogical |
# | (student scoped)    |      | snippets (shared)   |
# +---------------------+      +---------------------+
#            \                          /
#             \                        /
#              v                      v
#        +--------------------------------+
#        |       CollatedContext          |
#        |--------------------------------|
#        | memory:    joined top-k text   |
#        | worldview: joined top-k text   |
#        +--------------------------------+
#                       |
#                       v
#         [system instruction -> model]

from .context_collator import ContextCollator, join_documents
from .context_ranker import ContextRanker

__all__ = ["ContextCollator", "ContextRanker", "join_documents"]
