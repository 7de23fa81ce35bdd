from fastapi import APIRouter, Depends, HTTPException, Request
from wordwise.api.deps import get_session, persist_patterns
from wordwise.models.events import OperationResult
from wordwise.services.session import AnalysisSession

router = APIRouter(tags=["suggestions"])


def _respond(res: OperationResult, session: AnalysisSession) -> dict:
    if res.outcome == "not_found":
        raise HTTPException(status_code=404, detail="Suggestion not found")
    if res.outcome == "stale":
        raise HTTPException(
            status_code=409,
            detail="Suggestion no longer matches the text; suggestions cleared, re-run analysis",
        )
    payload = session.store.snapshot_state().public()
    payload["outcome"] = res.outcome
    payload["suggestion_id"] = res.suggestion_id
    return payload


@router.post("/documents/{doc_id}/suggestions/{suggestion_id}/accept")
def accept(suggestion_id: str, request: Request, session: AnalysisSession = Depends(get_session)):
    res = session.accept_suggestion(suggestion_id)
    if res.outcome == "accepted":
        persist_patterns(request)
    return _respond(res, session)


@router.post("/documents/{doc_id}/suggestions/{suggestion_id}/dismiss")
def dismiss(suggestion_id: str, session: AnalysisSession = Depends(get_session)):
    return _respond(session.dismiss_suggestion(suggestion_id), session)


@router.post("/documents/{doc_id}/accept-all")
def accept_all(request: Request, session: AnalysisSession = Depends(get_session)):
    res = session.accept_all()
    if res.applied:
        persist_patterns(request)
    payload = session.store.snapshot_state().public()
    payload["applied"] = res.applied
    payload["skipped"] = res.skipped
    return payload
