from fastapi import HTTPException, Request
from wordwise.services.patterns import ErrorPatternAggregator
from wordwise.services.session import AnalysisSession, SessionRegistry
from wordwise.utils.storage import PatternRepository


def sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def aggregator(request: Request) -> ErrorPatternAggregator:
    return request.app.state.aggregator


def repository(request: Request) -> PatternRepository:
    return request.app.state.patterns_repo


def get_session(doc_id: str, request: Request) -> AnalysisSession:
    session = sessions(request).get(doc_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return session


def persist_patterns(request: Request) -> None:
    repository(request).save(aggregator(request).to_records())
