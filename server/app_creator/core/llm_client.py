# app_creator/core/llm_client.py
import os
import json
import time
import logging
from typing import Any, Dict, List, Optional

from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import TypeAdapter, ValidationError

from app_creator.models import GeneratedFile
from app_creator.utils.config import (
    DEBUG_LOGS,
    GEMINI_API_KEY_ENV,
    GEMINI_MODEL,
    GEMINI_TEMPERATURE,
    LOG_DIR,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = (
    "Failed to generate code. The model may have returned an unexpected response. "
    "Please check your inputs and try again."
)

# Declared to the model; the reply is still validated below
RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "filePath": {"type": "string"},
            "code": {"type": "string"},
        },
        "required": ["filePath", "code"],
    },
}

_FILES_ADAPTER = TypeAdapter(List[GeneratedFile])


class GenerationError(Exception):
    """
    Raised for any failed generation attempt. str(err) is safe to show to the
    user; `detail` carries the diagnostic that was logged.
    """

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


# -------------------------
# LLM init
# -------------------------
def get_llm():
    api_key = os.getenv(GEMINI_API_KEY_ENV)
    if not api_key:
        raise RuntimeError(f"Please set {GEMINI_API_KEY_ENV} environment variable for Gemini access.")
    if "GOOGLE_API_KEY" not in os.environ:
        os.environ["GOOGLE_API_KEY"] = api_key
    return ChatGoogleGenerativeAI(
        model=GEMINI_MODEL,
        temperature=GEMINI_TEMPERATURE,
        response_mime_type="application/json",
        response_schema=RESPONSE_SCHEMA,
    )


def _save_debug_log(prefix: str, payload: Dict[str, Any]):
    os.makedirs(LOG_DIR, exist_ok=True)
    fname = f"{int(time.time())}_{prefix}.json"
    path = os.path.join(LOG_DIR, fname)
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
    except OSError:
        logger.exception("Failed to write debug log")


def _message_text(result: Any) -> str:
    """Text of a chat model reply: str content, or the text parts of a multi-part content list."""
    content = getattr(result, "content", result)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    raise GenerationError(detail=f"unsupported reply content type: {type(content).__name__}")


def parse_generated_files(raw: str) -> List[GeneratedFile]:
    """
    Strict deserialization of the model reply: a JSON array whose every element
    has a non-empty string filePath and a string code. Any mismatch fails the
    whole reply.
    """
    try:
        data = json.loads(raw.strip())
    except json.JSONDecodeError as e:
        raise GenerationError(detail=f"reply is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise GenerationError(detail=f"reply is a JSON {type(data).__name__}, expected an array")
    try:
        return _FILES_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise GenerationError(detail=f"reply does not match the file schema: {e}") from e


async def generate(prompt: str, llm=None, debug: bool = DEBUG_LOGS) -> List[GeneratedFile]:
    """
    Send one prompt to Gemini and return the validated file list, unmodified.
    Raises GenerationError on upstream failure or malformed output.
    """
    start_ts = time.time()
    try:
        llm = llm if llm is not None else get_llm()
        result = await llm.ainvoke(prompt)
        raw = _message_text(result)
    except GenerationError:
        raise
    except Exception as e:
        logger.exception("LLM call failed after %.1fs", time.time() - start_ts)
        if debug:
            _save_debug_log("llm_error", {"prompt": prompt, "error": repr(e)})
        raise GenerationError(detail=repr(e)) from e

    duration = time.time() - start_ts
    if debug:
        _save_debug_log("llm_attempt", {"prompt": prompt, "raw_result": raw, "duration_s": duration})

    try:
        files = parse_generated_files(raw)
    except GenerationError as e:
        logger.error("LLM returned an invalid payload: %s", e.detail)
        if debug:
            _save_debug_log("llm_invalid_payload", {"prompt": prompt, "raw_result": raw, "error": e.detail})
        raise

    logger.info("LLM generation returned %d files in %.1fs", len(files), duration)
    return files
