from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from language_tool_python import LanguageTool

from wordwise.core.config import LANGUAGE, PROVIDER_RANKS
from wordwise.models.suggestion import RawSuggestion
from wordwise.services import llm
from wordwise.services.rules import SPELLING_GRAMMAR_RULES, VOCABULARY_RULES, Rule, scan

log = logging.getLogger("providers")

_LT_SPELLING = {"misspelling", "typographical"}
_LT_STYLE = {"style", "register", "locale-violation"}
_CATEGORIES = {"grammar", "spelling", "vocabulary", "style", "clarity", "structure"}
_SEVERITIES = {"error", "warning", "suggestion"}


class ProviderError(RuntimeError):
    ...


class Provider:
    """Anything that can turn text into raw suggestions, asynchronously."""
    name: str = "provider"
    rank: int = 0

    async def analyze(self, text: str) -> List[RawSuggestion]:
        raise NotImplementedError


class FallbackProvider(Provider):
    """Regex table lookup. The table is plain data and can be swapped freely."""

    def __init__(self, rules: Iterable[Rule], name: str, rank: Optional[int] = None):
        self.rules = list(rules)
        self.name = name
        self.rank = PROVIDER_RANKS.get(name, 0) if rank is None else rank

    async def analyze(self, text: str) -> List[RawSuggestion]:
        return await asyncio.to_thread(scan, text, self.rules)


class LanguageToolProvider(Provider):
    name = "languagetool"

    def __init__(self, language: str = LANGUAGE, rank: Optional[int] = None):
        self.language = language
        self.rank = PROVIDER_RANKS[self.name] if rank is None else rank
        self._tool = None

    def tool(self):
        if self._tool is None:
            self._tool = LanguageTool(self.language)
        return self._tool

    def _check(self, text: str) -> List[RawSuggestion]:
        out: List[RawSuggestion] = []
        for m in self.tool().check(text):
            start, end = m.offset, m.offset + m.errorLength
            original = text[start:end]
            if not original:
                continue
            issue = (getattr(m, "ruleIssueType", "") or "").lower()
            if issue in _LT_SPELLING:
                category, severity = "spelling", "error"
            elif issue in _LT_STYLE:
                category, severity = "style", "suggestion"
            else:
                category, severity = "grammar", "warning" if issue == "uncategorized" else "error"
            out.append(RawSuggestion(
                category=category,
                severity=severity,
                original_text=original,
                replacement_text=m.replacements[0] if m.replacements else "",
                explanation=m.message,
                reported_start=start,
                reported_end=end,
                rule=m.ruleId,
            ))
        # LanguageTool sometimes flags without offering a fix; nothing to accept there
        return [r for r in out if r.replacement_text]

    async def analyze(self, text: str) -> List[RawSuggestion]:
        try:
            return await asyncio.to_thread(self._check, text)
        except Exception as e:
            raise ProviderError(f"LanguageTool check failed: {e}") from e


class OpenAIProvider(Provider):
    name = "openai"

    def __init__(self, level: str = "intermediate", rank: Optional[int] = None):
        self.level = level
        self.rank = PROVIDER_RANKS[self.name] if rank is None else rank

    @staticmethod
    def _to_raw(item: dict) -> Optional[RawSuggestion]:
        category = str(item.get("category", "grammar")).lower()
        if category == "esl":
            category = "grammar"
        if category not in _CATEGORIES:
            return None
        severity = item.get("severity")
        if severity not in _SEVERITIES:
            severity = None
        start, end = item.get("startIndex"), item.get("endIndex")
        return RawSuggestion(
            category=category,
            severity=severity,
            original_text=str(item["originalText"]),
            replacement_text=str(item.get("replacementText") or item.get("suggestion") or ""),
            explanation=str(item.get("explanation") or item.get("message") or ""),
            reported_start=start if isinstance(start, int) else None,
            reported_end=end if isinstance(end, int) else None,
            confidence=item.get("confidence") if isinstance(item.get("confidence"), (int, float)) else None,
            rule="openai-analysis",
        )

    async def analyze(self, text: str) -> List[RawSuggestion]:
        if not text.strip():
            return []
        try:
            items = await asyncio.to_thread(llm.suggest_corrections, text, self.level)
        except llm.LLMError as e:
            raise ProviderError(str(e)) from e
        out = []
        for item in items:
            raw = self._to_raw(item)
            if raw is None:
                log.info("Ignoring OpenAI item with unknown category: %r", item.get("category"))
                continue
            out.append(raw)
        return out


def default_providers(use_languagetool: bool = True, level: str = "intermediate") -> List[Provider]:
    """Rule tables always; LanguageTool when asked; OpenAI only with an API key."""
    providers: List[Provider] = [
        FallbackProvider(SPELLING_GRAMMAR_RULES, name="spelling"),
        FallbackProvider(VOCABULARY_RULES, name="vocabulary"),
    ]
    if use_languagetool:
        providers.append(LanguageToolProvider())
    if llm.enabled():
        providers.append(OpenAIProvider(level=level))
    return providers
