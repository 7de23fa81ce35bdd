from __future__ import annotations

import asyncio
import itertools
import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from wordwise.core.config import DEBOUNCE_SECONDS, PROVIDER_RANKS, PROVIDER_TIMEOUT
from wordwise.models.events import AcceptAllResult, OperationResult
from wordwise.models.feedback import Level, WritingType
from wordwise.models.report import AnalysisReport
from wordwise.models.suggestion import RawSuggestion, Suggestion
from wordwise.services import metrics
from wordwise.services.goals import goal_feedback
from wordwise.services.normalize import normalize
from wordwise.services.offsets import Edit
from wordwise.services.originality import check_originality
from wordwise.services.patterns import ErrorPatternAggregator
from wordwise.services.providers import Provider
from wordwise.services.resolve import resolve_overlaps
from wordwise.services.store import SuggestionStore
from wordwise.services.vocabulary import analyze_vocabulary

log = logging.getLogger("session")

Estimator = Callable[[str], Dict[Tuple[str, str], int]]


class AnalysisSession:
    """
    One open document: its SuggestionStore plus the bookkeeping that decides
    which provider results are still worth applying.

    Every analysis gets an issue sequence number. Results are applied as they
    arrive, re-located against the current buffer; a result is thrown away
    once a newer analysis has applied anything (last write wins by issue
    time, not by arrival time).
    """

    def __init__(
        self,
        document_id: str,
        text: str = "",
        providers: Optional[Iterable[Provider]] = None,
        aggregator: Optional[ErrorPatternAggregator] = None,
        debounce: float = DEBOUNCE_SECONDS,
        timeout: float = PROVIDER_TIMEOUT,
        estimate: Optional[Estimator] = None,
        level: Level = "intermediate",
        writing_type: WritingType = "essay",
    ):
        self.store = SuggestionStore(document_id, text)
        self.providers: List[Provider] = list(providers or [])
        self.aggregator = aggregator
        if aggregator is not None:
            self.store.listeners.append(aggregator.handle_event)
        self.debounce = debounce
        self.timeout = timeout
        self.estimate = estimate
        self.level = level
        self.writing_type = writing_type

        self._issue_seq = 0
        self._applied_seq = 0
        self._pending: Dict[str, List[Suggestion]] = {}
        self._unlocatable = 0
        self._debounce_task: Optional[asyncio.Task] = None

    @property
    def document_id(self) -> str:
        return self.store.document_id

    @property
    def text(self) -> str:
        return self.store.text

    @property
    def suggestions(self) -> List[Suggestion]:
        return self.store.suggestions

    @property
    def latest_issue_seq(self) -> int:
        return self._issue_seq

    @property
    def applied_seq(self) -> int:
        return self._applied_seq

    # ---- provider results -----------------------------------------------

    def issue_analysis(self) -> Tuple[int, str]:
        self._issue_seq += 1
        return self._issue_seq, self.store.text

    def _rank_of(self, provider: str) -> int:
        for p in self.providers:
            if p.name == provider:
                return p.rank
        return PROVIDER_RANKS.get(provider, 0)

    def apply_provider_result(
        self,
        issue_seq: int,
        provider: str,
        raw: Iterable[RawSuggestion],
        rank: Optional[int] = None,
    ) -> bool:
        if issue_seq < self._applied_seq or issue_seq > self._issue_seq:
            log.info("Discarding %s result for seq %d (applied=%d, issued=%d)",
                     provider, issue_seq, self._applied_seq, self._issue_seq)
            return False
        if issue_seq > self._applied_seq:
            self._applied_seq = issue_seq
            self._pending = {}
            self._unlocatable = 0

        rank = self._rank_of(provider) if rank is None else rank
        result = normalize(provider, rank, raw, self.store.text)
        self._unlocatable += result.unlocatable
        self._pending[provider] = result.suggestions
        merged = resolve_overlaps(itertools.chain.from_iterable(self._pending.values()))
        live = self.store.replace_suggestions(merged)
        log.info("seq %d: %s gave %d, live set now %d", issue_seq, provider, len(result.suggestions), len(live))
        return True

    def _sync_pending(self, edit: Optional[Edit] = None) -> None:
        """Keep per-provider results in step with the store after a mutation."""
        if edit is not None:
            self._pending = {
                name: SuggestionStore.reanchor(items, edit, self.store.text)
                for name, items in self._pending.items()
            }
            return
        live = {s.id for s in self.store.suggestions}
        self._pending = {
            name: [s for s in items if s.id in live]
            for name, items in self._pending.items()
        }

    # ---- running providers ----------------------------------------------

    async def _run(self, seq: int, provider: Provider, snapshot: str) -> bool:
        try:
            raw = await asyncio.wait_for(provider.analyze(snapshot), self.timeout)
        except asyncio.TimeoutError:
            log.warning("Provider %s timed out after %.1fs", provider.name, self.timeout)
            return False
        except Exception as e:
            log.warning("Provider %s failed: %s", provider.name, e)
            return False
        self.apply_provider_result(seq, provider.name, raw, provider.rank)
        return True

    async def analyze(self) -> AnalysisReport:
        seq, snapshot = self.issue_analysis()
        log.info("Issuing analysis seq=%d for %s (%d chars, %d providers)",
                 seq, self.document_id, len(snapshot), len(self.providers))
        ok = await asyncio.gather(*(self._run(seq, p, snapshot) for p in self.providers))
        failed = [p.name for p, good in zip(self.providers, ok) if not good]
        if failed and len(failed) == len(self.providers):
            log.warning("All providers failed for seq %d; keeping previous suggestions", seq)
        elif seq == self._applied_seq:
            await self._count_opportunities()
        return self.report(seq, failed)

    async def _count_opportunities(self) -> None:
        if self.aggregator is None or self.estimate is None:
            return
        try:
            counts = await asyncio.to_thread(self.estimate, self.store.text)
        except (OSError, ValueError) as e:
            # missing spaCy model, or text the pipeline refuses
            log.warning("Opportunity estimation unavailable: %s", e)
            return
        self.aggregator.record_opportunity_counts(counts)

    def schedule_analysis(self) -> asyncio.Task:
        """
        Debounced analyze(). A call still waiting out the quiet period is
        replaced; one that has already been issued runs to completion.
        """
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = asyncio.ensure_future(self._debounced())
        return self._debounce_task

    async def _debounced(self) -> AnalysisReport:
        await asyncio.sleep(self.debounce)
        self._debounce_task = None
        return await asyncio.shield(self.analyze())

    def report(self, seq: Optional[int] = None, failed: Optional[List[str]] = None) -> AnalysisReport:
        text = self.store.text
        live = self.store.suggestions
        score = metrics.overall_score(text, live)
        return AnalysisReport(
            document_id=self.document_id,
            issue_seq=self._issue_seq if seq is None else seq,
            overall_score=score,
            metrics=metrics.compute_metrics(text),
            strengths=metrics.strengths(live, score),
            areas_for_improvement=metrics.areas_for_improvement(live),
            vocabulary=analyze_vocabulary(text, self.level),
            goals=goal_feedback(text, self.writing_type),
            originality=check_originality(text),
            providers_failed=failed or [],
            unlocatable=self._unlocatable,
        )

    # ---- user operations ------------------------------------------------

    def edit_text(self, new_text: str) -> Optional[Edit]:
        edit = self.store.edit_text(new_text)
        if edit is not None:
            self._sync_pending(edit)
        return edit

    def load(self, text: str) -> None:
        self.store.load(text)
        self._pending = {}

    def accept_suggestion(self, suggestion_id: str) -> OperationResult:
        res = self.store.accept_suggestion(suggestion_id)
        if res.outcome == "accepted":
            edit = Edit(res.suggestion.start, res.suggestion.end, len(res.suggestion.replacement_text))
            self._pending = {
                name: [s for s in items if s.id != suggestion_id]
                for name, items in self._pending.items()
            }
            self._sync_pending(edit)
        elif res.outcome == "stale":
            self._pending = {}
        return res

    def accept_all(self) -> AcceptAllResult:
        res = self.store.accept_all()
        self._pending = {}
        return res

    def dismiss_suggestion(self, suggestion_id: str) -> OperationResult:
        res = self.store.dismiss_suggestion(suggestion_id)
        if res.outcome == "dismissed":
            self._sync_pending()
        return res


class SessionRegistry:
    """Open documents for one app instance."""

    def __init__(self, factory: Callable[..., AnalysisSession]):
        self._factory = factory
        self._sessions: Dict[str, AnalysisSession] = {}

    def open(self, text: str, document_id: Optional[str] = None, **options) -> AnalysisSession:
        """`options` (level, writing_type) go to the session factory unchanged."""
        doc_id = document_id or uuid.uuid4().hex[:12]
        session = self._factory(doc_id, text, **options)
        self._sessions[doc_id] = session
        return session

    def get(self, document_id: str) -> Optional[AnalysisSession]:
        return self._sessions.get(document_id)

    def close(self, document_id: str) -> bool:
        return self._sessions.pop(document_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
