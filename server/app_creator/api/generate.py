# app_creator/api/generate.py
import logging
from typing import Any, Dict, List, Tuple
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from starlette.concurrency import run_in_threadpool

from app_creator.core import session as store
from app_creator.core.browser import FileNotInCollection
from app_creator.core.codegen_agent import run_companion_backend, run_generation
from app_creator.models import (
    CompanionBackendRequest,
    FileBrowserOut,
    GeneratedFile,
    GenerationPhase,
    SelectFileRequest,
    SessionOut,
)
from app_creator.utils.archive import (
    INVALID_ARCHIVE_TYPE_MESSAGE,
    UPLOAD_FAILED_MESSAGE,
    UploadError,
    archive_filename,
    build_zip,
    ingest_directory,
    ingest_zip,
    is_zip_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def llm_dependency():
    """Chat model used for generation; None lets the client build the Gemini default."""
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Generation
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/{session_id}/generate", response_model=SessionOut)
async def generate(session_id: str, llm=Depends(llm_dependency)):
    """
    Leave the last form step and run one generation. A failed generation is
    not an HTTP error: the session's result step carries the error message.
    """
    state = store.get_session(session_id)
    await run_generation(state, llm=llm)
    return store.snapshot(state)


@router.post("/{session_id}/generate/companion-backend", response_model=SessionOut)
async def generate_companion_backend(session_id: str, body: CompanionBackendRequest, llm=Depends(llm_dependency)):
    state = store.get_session(session_id)
    try:
        await run_companion_backend(state, body.framework, llm=llm)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return store.snapshot(state)


# ─────────────────────────────────────────────────────────────────────────────
# Uploads (add-backend flow)
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/{session_id}/upload/archive", response_model=SessionOut)
async def upload_archive(session_id: str, file: UploadFile = File(...)):
    state = store.get_session(session_id)
    store.begin_upload(state)
    try:
        if not is_zip_upload(file.filename, file.content_type):
            raise UploadError(INVALID_ARCHIVE_TYPE_MESSAGE)
        data = await file.read()
        store.finish_upload(state, await run_in_threadpool(ingest_zip, data))
    except UploadError as e:
        store.fail_upload(state, str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except Exception:
        logger.exception("archive ingestion failed", extra={"session_id": session_id})
        store.fail_upload(state, UPLOAD_FAILED_MESSAGE)
        raise
    finally:
        # reached on cancellation
        if state.upload_processing:
            store.fail_upload(state, UPLOAD_FAILED_MESSAGE)
    return store.snapshot(state)


@router.post("/{session_id}/upload/directory", response_model=SessionOut)
async def upload_directory(session_id: str, files: List[UploadFile] = File(...)):
    """
    Folder upload: each part's filename is the browser-relative path
    ("<folder>/src/App.tsx").
    """
    state = store.get_session(session_id)
    store.begin_upload(state)
    try:
        items: List[Tuple[str, bytes]] = []
        for f in files:
            items.append((f.filename or "", await f.read()))
        store.finish_upload(state, ingest_directory(items))
    except UploadError as e:
        store.fail_upload(state, str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except Exception:
        logger.exception("directory ingestion failed", extra={"session_id": session_id})
        store.fail_upload(state, UPLOAD_FAILED_MESSAGE)
        raise
    finally:
        if state.upload_processing:
            store.fail_upload(state, UPLOAD_FAILED_MESSAGE)
    return store.snapshot(state)


# ─────────────────────────────────────────────────────────────────────────────
# File browser / export
# ─────────────────────────────────────────────────────────────────────────────

def _require_result(state: store.AppState) -> List[GeneratedFile]:
    if state.phase is not GenerationPhase.SUCCESS or state.browser.files is None:
        raise HTTPException(status_code=409, detail="no generated files available")
    return state.browser.files


@router.get("/{session_id}/files", response_model=FileBrowserOut)
async def list_files(session_id: str):
    state = store.get_session(session_id)
    _require_result(state)
    return state.browser.snapshot()


@router.post("/{session_id}/files/select", response_model=FileBrowserOut)
async def select_file(session_id: str, body: SelectFileRequest):
    state = store.get_session(session_id)
    _require_result(state)
    try:
        state.browser.select(body.file_path)
    except FileNotInCollection:
        raise HTTPException(status_code=404, detail=f"file not found: {body.file_path}")
    return state.browser.snapshot()


@router.post("/{session_id}/files/copy", response_model=Dict[str, Any])
async def copy_file(session_id: str):
    state = store.get_session(session_id)
    _require_result(state)
    try:
        code = state.browser.copy()
    except FileNotInCollection:
        raise HTTPException(status_code=409, detail="no file selected")
    return {"file_path": state.browser.selected_path, "code": code, "copied": state.browser.copied}


def _content_disposition(filename: str) -> str:
    # header values are latin-1; non-ASCII names travel in filename*
    fallback = "".join(c if 32 <= ord(c) < 127 and c not in "\"\\" else "_" for c in filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/{session_id}/files/export")
async def export_files(session_id: str):
    state = store.get_session(session_id)
    files = _require_result(state)
    project_name = state.project.name
    data = await run_in_threadpool(build_zip, project_name, files)
    return Response(
        content=data,
        media_type="application/zip",
        headers={"Content-Disposition": _content_disposition(archive_filename(project_name))},
    )
