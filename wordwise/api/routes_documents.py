from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from wordwise.api.deps import get_session, persist_patterns, sessions
from wordwise.models.feedback import Level, WritingType
from wordwise.services.session import AnalysisSession

router = APIRouter(tags=["documents"])


class TextIn(BaseModel):
    text: str = ""


class DocumentIn(TextIn):
    level: Level = "intermediate"
    writing_type: WritingType = "essay"


@router.post("/documents")
def open_document(body: DocumentIn, request: Request):
    session = sessions(request).open(body.text, level=body.level, writing_type=body.writing_type)
    payload = session.store.snapshot_state().public()
    payload.update(level=session.level, writing_type=session.writing_type)
    return payload


@router.get("/documents/{doc_id}")
def get_document(session: AnalysisSession = Depends(get_session)):
    return session.store.snapshot_state().public()


@router.put("/documents/{doc_id}/text")
def edit_text(body: TextIn, session: AnalysisSession = Depends(get_session)):
    edit = session.edit_text(body.text)
    payload = session.store.snapshot_state().public()
    payload["edit"] = edit._asdict() if edit else None
    return payload


@router.post("/documents/{doc_id}/analyze")
async def analyze(request: Request, session: AnalysisSession = Depends(get_session)):
    report = await session.analyze()
    persist_patterns(request)
    payload = session.store.snapshot_state().public()
    payload["report"] = report.model_dump()
    return payload
