from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from pdfdeck.config import settings
from pdfdeck.errors import ExportError, InvalidDocumentError
from pdfdeck.models import AppStatus, DocumentPayload, GenerateRequest, SessionState
from pdfdeck.pipeline import GenerationSession

logging.basicConfig(level=settings.log_level,
                    format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

app = FastAPI(title="PDF to PowerPoint Converter")

_session = GenerationSession()


def get_session() -> GenerationSession:
    return _session


def _reject_if_busy(session: GenerationSession) -> None:
    if session.state.busy:
        raise HTTPException(status_code=409, detail="A generation is already in progress.")


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/document", response_model=SessionState)
async def upload_document(file: UploadFile = File(...), session: GenerationSession = Depends(get_session)) -> SessionState:
    _reject_if_busy(session)
    data = await file.read()
    try:
        document = DocumentPayload.from_upload(data, file.filename, file.content_type)
    except InvalidDocumentError as e:
        raise HTTPException(status_code=415, detail=str(e)) from e
    logger.info("Loaded %s (%d bytes)", document.filename, len(document.data))
    return session.load_document(document)


@app.delete("/document", response_model=SessionState)
def clear_document(session: GenerationSession = Depends(get_session)) -> SessionState:
    _reject_if_busy(session)
    return session.clear()


@app.get("/session", response_model=SessionState)
def get_state(session: GenerationSession = Depends(get_session)) -> SessionState:
    return session.state


@app.post("/generate", response_model=SessionState)
async def generate(req: GenerateRequest, session: GenerationSession = Depends(get_session)) -> SessionState:
    if session.document is None:
        raise HTTPException(status_code=400, detail="Upload a PDF before generating.")
    _reject_if_busy(session)
    return await session.run(instruction=req.instruction)


@app.get("/download")
def download(session: GenerationSession = Depends(get_session)) -> FileResponse:
    if session.state.status is not AppStatus.SUCCESS:
        raise HTTPException(status_code=409, detail="No finished presentation to download.")
    try:
        pptx_path = session.export()
    except ExportError as e:
        raise HTTPException(status_code=500, detail=ExportError.user_message) from e

    path = Path(pptx_path)
    return FileResponse(
        path=str(path),
        media_type=PPTX_MEDIA_TYPE,
        filename=path.name,
    )


@app.on_event("startup")
def _ensure_dirs() -> None:
    os.makedirs(settings.output_dir, exist_ok=True)
