# app_creator/utils/archive.py
"""
Zip in, zip out.

- ingest_zip / ingest_directory turn an uploaded project into GeneratedFile
  records (text files only, bounded size, common root folder stripped).
- build_zip packs a file collection under a single root folder named after
  the project.
"""
import io
import logging
import zipfile
from typing import List, Optional, Tuple

from app_creator.models import GeneratedFile
from app_creator.utils.config import MAX_FILE_SIZE_BYTES
from app_creator.utils.file_helpers import (
    _safe_normalize,
    dedupe_paths,
    is_text_file,
    strip_common_root,
)

logger = logging.getLogger(__name__)

NO_TEXT_FILES_MESSAGE = (
    "No valid text files were found in the upload. "
    "Please check your folder or .zip file and try again."
)
INVALID_ARCHIVE_TYPE_MESSAGE = "Invalid file type. Please drop a single .zip file."
CORRUPT_ARCHIVE_MESSAGE = "The .zip file could not be read. Please check the archive and try again."
UPLOAD_FAILED_MESSAGE = "An unknown error occurred during processing."


class UploadError(Exception):
    """Recoverable upload problem; the message is shown next to the upload control."""


def is_zip_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    if content_type in ("application/zip", "application/x-zip-compressed"):
        return True
    return bool(filename) and filename.lower().endswith(".zip")


def _decode(data: bytes) -> Optional[str]:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _to_files(entries: List[Tuple[str, str]]) -> List[GeneratedFile]:
    files = [GeneratedFile(filePath=p, code=c) for p, c in dedupe_paths(entries)]
    if not files:
        raise UploadError(NO_TEXT_FILES_MESSAGE)
    return files


def ingest_zip(data: bytes, max_size: int = MAX_FILE_SIZE_BYTES) -> List[GeneratedFile]:
    """
    Read every eligible entry of a zip archive.
    Directory entries, non-text files, entries above max_size and entries that
    are not valid UTF-8 are skipped.
    """
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        logger.warning("rejecting unreadable archive: %s", e)
        raise UploadError(CORRUPT_ARCHIVE_MESSAGE) from e

    entries: List[Tuple[str, str]] = []
    skipped = 0
    with zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            path = info.filename.replace("\\", "/")
            if not is_text_file(path) or info.file_size > max_size:
                skipped += 1
                continue
            try:
                raw = zf.read(info)
            except (zipfile.BadZipFile, OSError, NotImplementedError) as e:
                logger.warning("skipping unreadable zip entry %s: %s", path, e)
                skipped += 1
                continue
            content = _decode(raw)
            if content is None:
                skipped += 1
                continue
            entries.append((path, content))

    logger.info("zip ingestion: %d eligible entries, %d skipped", len(entries), skipped)
    return _to_files(strip_common_root(entries))


def ingest_directory(items: List[Tuple[str, bytes]], max_size: int = MAX_FILE_SIZE_BYTES) -> List[GeneratedFile]:
    """
    items: (browser-relative path, raw bytes). The browser reports every path
    under the selected folder's name; that first segment is removed.
    """
    if not items:
        raise UploadError(NO_TEXT_FILES_MESSAGE)

    first = items[0][0].replace("\\", "/")
    base = first.split("/", 1)[0] + "/"

    entries: List[Tuple[str, str]] = []
    for raw_path, data in items:
        path = raw_path.replace("\\", "/")
        if path.startswith(base):
            path = path[len(base):]
        if not path or not is_text_file(path) or len(data) > max_size:
            continue
        content = _decode(data)
        if content is None:
            continue
        entries.append((path, content))

    logger.info("directory ingestion: %d of %d files kept", len(entries), len(items))
    return _to_files(entries)


def build_zip(project_name: str, files: List[GeneratedFile]) -> bytes:
    """Pack files under '<project_name>/' and return the archive bytes."""
    root = _root_folder(project_name)
    mem = io.BytesIO()
    with zipfile.ZipFile(mem, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for f in files:
            sp = _safe_normalize(f.filePath)
            if sp is None:
                logger.warning("skipping unsafe path in export: %r", f.filePath)
                continue
            zf.writestr(f"{root}/{sp}", f.code)
    return mem.getvalue()


def _root_folder(project_name: str) -> str:
    root = _safe_normalize(project_name) or "project"
    return root.replace("/", "-")


def archive_filename(project_name: str) -> str:
    return f"{_root_folder(project_name)}.zip"
