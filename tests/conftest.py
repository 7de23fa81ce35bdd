# tests/conftest.py
from __future__ import annotations
import io
import os
import shutil
import tempfile
from typing import Generator

import pytest
import spacy
from fastapi.testclient import TestClient

from wordwise.main import app, init_state
from wordwise.core import config
from wordwise.models.suggestion import Explanation, Span, Suggestion

import fitz  # PyMuPDF
import docx

# --------------------------------------------------------------------
# Temporary DATA_DIR so tests don't pollute the real data dir
# --------------------------------------------------------------------
@pytest.fixture(scope="session")
def tmp_data_dir() -> Generator[str, None, None]:
    d = tempfile.mkdtemp(prefix="test-data-")
    yield d
    shutil.rmtree(d, ignore_errors=True)

@pytest.fixture(autouse=True, scope="session")
def patch_data_dir(tmp_data_dir):
    config.DATA_DIR = tmp_data_dir

@pytest.fixture(autouse=True)
def fresh_state(patch_data_dir, tmp_data_dir):
    # every test starts with an empty pattern table and no open documents
    patterns = os.path.join(tmp_data_dir, config.PATTERNS_FILE)
    if os.path.exists(patterns):
        os.remove(patterns)
    init_state(app)
    yield

# --------------------------------------------------------------------
# FastAPI test client available as fixture `client`
# --------------------------------------------------------------------
@pytest.fixture(scope="session")
def client() -> TestClient:
    return TestClient(app)

# --------------------------------------------------------------------
# Helpers to create in-memory sample PDF and DOCX
# --------------------------------------------------------------------
def _pdf_bytes(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 100), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data

def _docx_bytes(text: str) -> bytes:
    d = docx.Document()
    for p in text.split("\n\n"):
        d.add_paragraph(p)
    buf = io.BytesIO()
    d.save(buf)
    return buf.getvalue()

@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return _pdf_bytes("This is a smaple sentence with a typo.\nI goed home.")

@pytest.fixture
def sample_docx_bytes() -> bytes:
    return _docx_bytes("This is a smaple sentence with a typo.\n\nI goed home.")

# --------------------------------------------------------------------
# Suggestion factory for store / resolver tests
# --------------------------------------------------------------------
@pytest.fixture
def make_suggestion():
    counter = {"n": 0}

    def _make(text: str, start: int, end: int, replacement: str, *,
              category="spelling", severity="error", rank=0, explanation="Fix", sid=None):
        counter["n"] += 1
        return Suggestion(
            id=sid or f"s{counter['n']}",
            category=category,
            severity=severity,
            span=Span(start=start, end=end),
            original_text=text[start:end],
            replacement_text=replacement,
            explanation=Explanation.parse(explanation),
            confidence=0.9,
            source_rank=rank,
            provider="test",
        )

    return _make

# --------------------------------------------------------------------
# Stubs: no Java/LanguageTool, no spaCy model download, no OpenAI
# --------------------------------------------------------------------
@pytest.fixture(autouse=True)
def stub_language_tool(monkeypatch):
    from wordwise.services import providers as providers_mod

    class _FakeMatch:
        def __init__(self, offset, length, replacement, msg="Possible spelling mistake found."):
            self.offset = offset
            self.errorLength = length
            self.message = msg
            self.ruleId = "MORFOLOGIK_RULE_EN_US"
            self.ruleIssueType = "misspelling"
            self.replacements = [replacement]

    class _FakeLT:
        def check(self, text: str):
            pos = text.find("smaple")
            return [_FakeMatch(pos, 6, "sample")] if pos >= 0 else []

    monkeypatch.setattr(providers_mod, "LanguageTool", lambda *a, **k: _FakeLT())

@pytest.fixture(autouse=True)
def stub_spacy(monkeypatch):
    from wordwise.services import opportunities as opp_mod

    nlp = spacy.blank("en")
    nlp.add_pipe("sentencizer")
    monkeypatch.setattr(opp_mod, "_nlp", nlp)

@pytest.fixture(autouse=True)
def no_openai(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
