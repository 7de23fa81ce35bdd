import os, json, uuid, tempfile, logging
from typing import List, Optional
from fastapi import UploadFile, HTTPException
import magic
from wordwise.core import config

log = logging.getLogger("storage")


def doc_dir(doc_id: str) -> str:
    return os.path.join(config.DATA_DIR, doc_id)


async def save_secure(file: UploadFile) -> tuple[str, str]:
    _, ext = os.path.splitext(file.filename or "")
    ext = ext.lower()
    if ext not in config.ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only .pdf or .docx allowed")

    with tempfile.NamedTemporaryFile(delete=False) as tmp:
        while True:
            chunk = await file.read(1 << 20)  # 1 MB
            if not chunk:
                break
            tmp.write(chunk)
        tmp_path = tmp.name

    mime = magic.Magic(mime=True)
    file_mime = mime.from_file(tmp_path)
    if file_mime not in config.MIME_ALLOW[ext]:
        os.remove(tmp_path)
        raise HTTPException(
            status_code=400,
            detail=f"Unexpected MIME type: {file_mime} for {ext}"
        )

    doc_id = uuid.uuid4().hex[:12]
    target = doc_dir(doc_id)
    os.makedirs(target, mode=0o700, exist_ok=True)
    dest = os.path.join(target, f"original{ext}")
    os.replace(tmp_path, dest)
    return doc_id, dest


class PatternRepository:
    """Error-pattern table as a JSON list under DATA_DIR."""

    def __init__(self, path: Optional[str] = None):
        self._path = path

    @property
    def path(self) -> str:
        return self._path or os.path.join(config.DATA_DIR, config.PATTERNS_FILE)

    def load(self) -> List[dict]:
        if not os.path.isfile(self.path):
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("Could not read %s, starting fresh: %s", self.path, e)
            return []
        return data if isinstance(data, list) else []

    def save(self, records: List[dict]) -> str:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)
        return self.path
