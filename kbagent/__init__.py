"""
Support desk chat agent - answers questions over a JSON knowledge base using DeepSeek
"""

__version__ = "0.1.0"

from .chat_generator import DeepSeekClient
from .interface import AppContext, ChatInterface, answer_query
from .knowledge import KnowledgeBase, Team, load_knowledge_base
