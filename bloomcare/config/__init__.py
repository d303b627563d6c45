from .knowledge_base import DEFAULT_KNOWLEDGE_BASE, KnowledgeBase

__all__ = ["DEFAULT_KNOWLEDGE_BASE", "KnowledgeBase"]
