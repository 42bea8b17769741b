"""Prompt text for context-grounded answer generation."""

DEFAULT_FALLBACK_ANSWER = "I don't know. The knowledge base does not cover this question."

SYSTEM_INSTRUCTION = """You are a support assistant that answers questions using ONLY the documents supplied in the context.

## Rules
- Use only facts stated in the context documents. Do not rely on prior knowledge.
- If the context is empty or does not contain the answer, reply exactly: "{fallback}"
- Keep answers short: a few sentences or a brief list.
- Cite the ids of the documents you used in square brackets, e.g. [DOC:faq.txt].
"""

ANSWER_PROMPT = """## Context documents:
{context}

## Question:
{question}
"""

NO_CONTEXT_NOTICE = "No context documents are available for this question."


def build_system_instruction(fallback_answer: str = DEFAULT_FALLBACK_ANSWER) -> str:
    return SYSTEM_INSTRUCTION.format(fallback=fallback_answer)


def build_user_prompt(context: str, question: str) -> str:
    """Embed the assembled context (or the no-context notice) and the literal question."""
    return ANSWER_PROMPT.format(context=context or NO_CONTEXT_NOTICE, question=question)
