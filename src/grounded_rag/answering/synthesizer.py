"""Answer synthesis — one grounded LLM call per question."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from langchain_core.output_parsers import StrOutputParser

from grounded_rag.answering.prompts import build_answer_prompt
from grounded_rag.errors import GenerationError

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)

# Reasoning models (e.g. deepseek-r1) may prepend their chain of thought.
_THINK_RE = re.compile(r"<think>.*?</think>", re.DOTALL)


def strip_reasoning(text: str) -> str:
    return _THINK_RE.sub("", text).strip()


class AnswerSynthesizer:
    """Call the chat model with the strict-grounding prompt.

    No tool calls, no multi-step reasoning: a single blocking ``invoke``.
    """

    def __init__(self, llm: BaseChatModel) -> None:
        self._chain = llm | StrOutputParser()

    def answer(self, question: str, documents: list[Document]) -> str:
        messages = build_answer_prompt(question, documents)
        try:
            text = self._chain.invoke(messages)
        except Exception as exc:
            raise GenerationError(f"Answer generation failed: {exc}") from exc
        return strip_reasoning(text)
