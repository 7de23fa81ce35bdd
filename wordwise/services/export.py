# wordwise/services/export.py
import os
import logging
import textwrap
from pathlib import Path
from typing import Literal

import docx
import fitz  # PyMuPDF

log = logging.getLogger("export")

ExportFormat = Literal["txt", "docx", "pdf"]

PDF_WRAP = 90            # characters per line
PDF_LINES_PER_PAGE = 48


def _paragraphs(text: str) -> list[str]:
    return [p.strip() for p in text.split("\n\n")] or [""]


def _write_txt(text: str, out: Path) -> None:
    out.write_text(text, encoding="utf-8")


def _write_docx(text: str, out: Path, title: str | None) -> None:
    d = docx.Document()
    if title:
        d.add_heading(title, level=1)
    for p in _paragraphs(text):
        d.add_paragraph(p)
    d.save(str(out))


def _write_pdf(text: str, out: Path) -> None:
    lines: list[str] = []
    for p in text.splitlines() or [""]:
        lines.extend(textwrap.wrap(p, PDF_WRAP) or [""])
    doc = fitz.open()
    for i in range(0, max(len(lines), 1), PDF_LINES_PER_PAGE):
        page = doc.new_page()
        page.insert_text((72, 72), "\n".join(lines[i: i + PDF_LINES_PER_PAGE]), fontsize=11)
    doc.save(str(out))
    doc.close()


def export_document(text: str, out_dir: str, fmt: ExportFormat = "txt", title: str | None = None) -> str:
    """
    Write the current buffer to out_dir/document.<fmt> and return the absolute path.
    """
    os.makedirs(out_dir, exist_ok=True)
    target = Path(out_dir).joinpath(f"document.{fmt}")
    log.info("Exporting %d chars as %s to %s", len(text), fmt, target)
    if fmt == "txt":
        _write_txt(text, target)
    elif fmt == "docx":
        _write_docx(text, target, title)
    elif fmt == "pdf":
        _write_pdf(text, target)
    else:
        raise ValueError("fmt must be 'txt', 'docx' or 'pdf'")
    return str(target.resolve())
