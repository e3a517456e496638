import json

from .knowledge import KnowledgeBase

PROMPT_TEMPLATE = """
Анализируй запрос используя ТОЛЬКО эту базу знаний:
{context}

Формат ответа:
- Если запрос относится к конкретной команде: {success}
- Если не удалось определить: {unknown}"""


def build_context(kb: KnowledgeBase, query: str) -> str:
    """Knowledge base and raw query as one indented JSON document"""
    context = {
        "knowledge_base": kb.to_dict(),
        "user_query": query,
    }
    return json.dumps(context, ensure_ascii=False, indent=2)


def build_prompt(kb: KnowledgeBase, query: str) -> str:
    # The whole knowledge base goes out with every query, no truncation
    return PROMPT_TEMPLATE.format(
        context=build_context(kb, query),
        success=kb.success_template,
        unknown=kb.unknown_template,
    )
