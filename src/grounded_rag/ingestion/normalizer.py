"""Text normalisation — turn a source document into one clean text unit.

PDF handling has two paths:

* **Blank fillable forms.** A PDF with an ``/AcroForm`` dictionary whose
  rendered text is dominated by underscores (the blank template lines)
  carries its real data in the form fields, not in the text stream. The
  ``/V (value)`` entries are pulled straight from the raw bytes.
* **Everything else.** The extracted text goes through
  :data:`TEXT_CLEANUP_STEPS`, an ordered sequence of small pure
  transforms that undo common PDF extraction artefacts.

Each transform is importable on its own so it can be tested in isolation.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable

from langchain_core.documents import Document

from grounded_rag.errors import DocumentReadError

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n"
PDF_MAGIC = b"%PDF-"
ACROFORM_MARKER = b"/AcroForm"
# More underscores than this means template blanks dominate the text.
BLANK_FORM_UNDERSCORE_THRESHOLD = 20

_FIELD_VALUE_RE = re.compile(rb"/V\s*\(([^)]*)\)")

# ── Cleanup transforms (applied in declaration order) ─────────────────

_BLANK_LINES_RE = re.compile(r"\n\s*\n")
_LONE_PUNCT = r"[:\-,.]"
_PUNCT_LINE_RE = re.compile(rf"[ \t]*\n[ \t]*({_LONE_PUNCT})[ \t]*\n[ \t]*")
# A line-leading "- " is a list bullet, not a stranded hyphen.
_BREAK_BEFORE_PUNCT_RE = re.compile(r"[ \t]*\n[ \t]*([:,.])[ \t]+")
_BREAK_AFTER_PUNCT_RE = re.compile(rf"[ \t]+({_LONE_PUNCT})[ \t]*\n[ \t]*")
_HYPHEN_SPACE_RE = re.compile(r"(\w)- (\w)")
_SPLIT_NUMBER_RE = re.compile(r"(\d)\n(\d)")


def collapse_blank_lines(text: str) -> str:
    """Reduce any run of blank lines to a single blank line."""
    return _BLANK_LINES_RE.sub("\n\n", text)


def rejoin_lone_punctuation(text: str) -> str:
    """Pull a punctuation mark stranded by a line break back into its line.

    ``"Total\\n:\\n42"`` → ``"Total: 42"``, ``"Total\\n: 42"`` → ``"Total: 42"``,
    ``"Total :\\n42"`` → ``"Total: 42"``.
    """
    text = _PUNCT_LINE_RE.sub(r"\1 ", text)
    text = _BREAK_BEFORE_PUNCT_RE.sub(r"\1 ", text)
    return _BREAK_AFTER_PUNCT_RE.sub(r"\1 ", text)


def join_hyphenated_words(text: str) -> str:
    """``"Wire- less"`` → ``"Wire-less"``."""
    return _HYPHEN_SPACE_RE.sub(r"\1-\2", text)


def join_split_numbers(text: str) -> str:
    """``"1890\\n12"`` → ``"189012"``."""
    return _SPLIT_NUMBER_RE.sub(r"\1\2", text)


def strip_lines(text: str) -> str:
    """Trim every line and drop the empty ones."""
    return "\n".join(line.strip() for line in text.splitlines() if line.strip())


TEXT_CLEANUP_STEPS: tuple[tuple[str, Callable[[str], str]], ...] = (
    ("collapse_blank_lines", collapse_blank_lines),
    ("rejoin_lone_punctuation", rejoin_lone_punctuation),
    ("join_hyphenated_words", join_hyphenated_words),
    ("join_split_numbers", join_split_numbers),
    ("strip_lines", strip_lines),
)


def clean_text(text: str) -> str:
    """Run every cleanup step in order."""
    for _name, step in TEXT_CLEANUP_STEPS:
        text = step(text)
    return text


# ── Blank-form recovery ───────────────────────────────────────────────


def is_blank_form(raw: bytes, text: str) -> bool:
    """``True`` for an AcroForm PDF whose rendered text is mostly blanks."""
    return ACROFORM_MARKER in raw and text.count("_") > BLANK_FORM_UNDERSCORE_THRESHOLD


def extract_form_values(raw: bytes) -> list[str]:
    """Collect ``/V (value)`` field entries: trimmed, non-empty, first-seen order."""
    values: list[str] = []
    seen: set[str] = set()
    for match in _FIELD_VALUE_RE.finditer(raw):
        value = match.group(1).decode("latin-1").strip()
        if value and value not in seen:
            seen.add(value)
            values.append(value)
    return values


# ── Entry points ──────────────────────────────────────────────────────


def extract_pdf_text(path: str | Path) -> str:
    """Extract the text of every page, joined into one string."""
    from langchain_community.document_loaders import PyPDFLoader

    pages = PyPDFLoader(str(path)).load()
    return PAGE_SEPARATOR.join(page.page_content for page in pages)


def normalize_text(raw: bytes, text: str) -> str:
    """Choose between form-field recovery and the cleanup pipeline."""
    if is_blank_form(raw, text):
        values = extract_form_values(raw)
        if values:
            return "\n".join(values)
        logger.info("Blank form without field values; keeping extracted text")
        return text
    return clean_text(text)


def normalize_pdf(path: str | Path) -> Document:
    """Read one PDF and return a single normalised ``Document``.

    Raises
    ------
    DocumentReadError
        The file is missing, unreadable, not a PDF, or cannot be parsed.
    """
    source = str(path)
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise DocumentReadError(source, exc.strerror or str(exc)) from exc
    if not raw.startswith(PDF_MAGIC):
        raise DocumentReadError(source, "not a PDF file")

    try:
        text = extract_pdf_text(path)
    except Exception as exc:
        raise DocumentReadError(source, f"PDF parsing failed: {exc}") from exc

    content = normalize_text(raw, text)
    logger.debug("Normalised %s: %d -> %d chars", source, len(text), len(content))
    return Document(page_content=content, metadata={"source": source})


def normalize_inline(content: str, meta: dict[str, Any] | None = None) -> Document:
    """Wrap caller-supplied text; content is passed through unchanged."""
    meta = dict(meta or {})
    source = meta.get("source") or "inline"
    return Document(page_content=content, metadata={**meta, "source": source})
