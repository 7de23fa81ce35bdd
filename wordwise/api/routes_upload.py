from fastapi import APIRouter, UploadFile, File, HTTPException, Request
from wordwise.api.deps import sessions
from wordwise.services.extract import extract_text
from wordwise.utils.storage import save_secure

router = APIRouter(tags=["upload"])

@router.post("/documents/upload")
async def upload(request: Request, file: UploadFile = File(...)):
    doc_id, path = await save_secure(file)
    try:
        text = extract_text(path)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    session = sessions(request).open(text, document_id=doc_id)
    payload = session.store.snapshot_state().public()
    payload["stored_path"] = path
    return payload
