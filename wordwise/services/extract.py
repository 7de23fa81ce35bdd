import os
from typing import Iterator

import fitz          # PyMuPDF
import docx          # python-docx

PARAGRAPH_BREAK = "\n\n"


def _clean(block: str) -> str:
    # PDF blocks keep their visual line wraps; the editor wants running prose
    return " ".join(block.split())


def _pdf_paragraphs(path: str) -> Iterator[str]:
    with fitz.open(path) as doc:
        for page in doc:
            # 'blocks' yields tuples; index 4 is the text
            for b in page.get_text("blocks") or []:
                if isinstance(b, (list, tuple)) and len(b) >= 5:
                    yield b[4] or ""


def _docx_paragraphs(path: str) -> Iterator[str]:
    for p in docx.Document(path).paragraphs:
        yield p.text or ""


def extract_paragraphs(path: str) -> list[str]:
    """
    Paragraphs of an uploaded PDF or DOCX, ready to become an editor buffer.
    Whitespace inside a paragraph is collapsed and empty ones are dropped, so
    suggestion offsets computed later line up with what the writer sees.
    """
    ext = os.path.splitext(path)[1].lower()
    if ext == ".pdf":
        source = _pdf_paragraphs(path)
    elif ext == ".docx":
        source = _docx_paragraphs(path)
    else:
        raise ValueError(f"Unsupported extension: {ext}")
    return [p for p in (_clean(raw) for raw in source) if p]


def extract_text(path: str) -> str:
    """The document as one buffer, paragraphs separated by a blank line."""
    return PARAGRAPH_BREAK.join(extract_paragraphs(path))
