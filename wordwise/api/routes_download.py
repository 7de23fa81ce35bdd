from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from wordwise.api.deps import get_session
from wordwise.services.export import ExportFormat, export_document
from wordwise.services.session import AnalysisSession
from wordwise.utils.storage import doc_dir

router = APIRouter(tags=["download"])

@router.get("/documents/{doc_id}/export")
def export(
    fmt: ExportFormat = Query("txt", description="Output format: txt, docx or pdf"),
    title: str | None = Query(None, description="Optional heading for docx output"),
    session: AnalysisSession = Depends(get_session),
):
    path = export_document(session.text, doc_dir(session.document_id), fmt=fmt, title=title)
    filename = f"{session.document_id}.{fmt}"
    return FileResponse(path, filename=filename)
