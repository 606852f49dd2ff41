"""Prompt templates for grounded answering.

Keeping the prompt in one place makes it easy to audit and version.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.messages import BaseMessage

DONT_KNOW = "I don't know based on the provided documents."

GROUNDED_ANSWER_SYSTEM = f"""\
You answer questions strictly from the provided context.

Rules:
1. Use **only** the context below. Do not rely on prior knowledge and do
   not fabricate information.
2. If the answer is only partially present, state what the context does
   say and clearly state what it does not.
3. If the answer is absent entirely, reply exactly: "{DONT_KNOW}"
"""


def format_context(documents: list[Document]) -> str:
    """Concatenate chunk texts, separated by blank lines."""
    return "\n\n".join(doc.page_content for doc in documents)


def build_answer_prompt(question: str, documents: list[Document]) -> list[BaseMessage]:
    """Build the system + human messages for one grounded answer."""
    return [
        SystemMessage(content=GROUNDED_ANSWER_SYSTEM),
        HumanMessage(content=f"Question:\n{question}\n\nContext:\n{format_context(documents)}"),
    ]
