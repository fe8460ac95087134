# app_creator/core/codegen_agent.py
"""
Code Generation Agent
- Exposes:
    async def run_generation(state, llm=None) -> None
    async def run_companion_backend(state, framework, llm=None) -> None
- Intended to be the single responsibility module that performs:
    - prompt selection for the active flow
    - the terminal step's loading -> success / error transitions
    - dropping results of attempts the user navigated away from
"""
import logging
import time
from typing import Callable, List, Optional

from app_creator.core import session as store
from app_creator.core.constants import (
    BACKEND_FRAMEWORKS,
    INFERRED_UI_DESCRIPTION,
    framework_ids,
)
from app_creator.core.llm_client import GenerationError, generate
from app_creator.core.prompts import (
    build_backend_for_frontend_prompt,
    build_backend_prompt,
    build_frontend_prompt,
)
from app_creator.core.wizard import WizardError, WizardPosition
from app_creator.models import FlowKind, GeneratedFile, GenerationPhase, ProjectDetails

logger = logging.getLogger(__name__)


def build_prompt(state: store.AppState) -> str:
    """Instruction string for the active flow's generation step."""
    flow = state.flow
    if flow is FlowKind.BACKEND:
        return build_backend_prompt(state.backend, state.models, state.endpoints)
    if flow is FlowKind.FRONTEND:
        return build_frontend_prompt(state.frontend, state.ui_description)
    if flow is FlowKind.ADD_BACKEND:
        if not state.uploaded_files:
            raise WizardError("Uploaded files are not available to generate a backend.")
        return build_backend_for_frontend_prompt(state.backend, INFERRED_UI_DESCRIPTION, state.uploaded_files)
    raise WizardError("no flow selected")


async def _attempt(
    state: store.AppState,
    prompt: str,
    on_success: Callable[[List[GeneratedFile]], None],
    llm=None,
) -> None:
    state.attempt += 1
    token = state.attempt
    state.phase = GenerationPhase.LOADING
    state.error = None
    state.browser.clear()

    start_ts = time.time()
    logger.info("generation attempt %d started (%s flow)", token, state.flow.value, extra={"session_id": state.session_id})
    try:
        files = await generate(prompt, llm=llm)
        error: Optional[str] = None
    except GenerationError as e:
        files, error = None, str(e)
    except Exception as e:
        logger.exception("unexpected error during generation", extra={"session_id": state.session_id})
        files, error = None, str(GenerationError(detail=repr(e)))

    if token != state.attempt:
        logger.info("discarding result of abandoned attempt %d", token, extra={"session_id": state.session_id})
        return

    duration = time.time() - start_ts
    if error is not None:
        state.phase = GenerationPhase.ERROR
        state.error = error
        logger.warning("generation failed after %.1fs", duration, extra={"session_id": state.session_id})
        return

    state.phase = GenerationPhase.SUCCESS
    state.browser.load(files)
    on_success(files)
    logger.info("generation produced %d files in %.1fs", len(files), duration, extra={"session_id": state.session_id})


def _ensure_idle(state: store.AppState) -> None:
    if state.phase is GenerationPhase.LOADING:
        raise WizardError("a generation is already in progress")
    if state.upload_processing:
        raise WizardError("an upload is being processed")


async def run_generation(state: store.AppState, llm=None) -> None:
    """
    Generate from the last form step of the active flow. The session moves to
    the generation step before the model is called.
    """
    _ensure_idle(state)
    if state.position is None:
        raise WizardError("no flow selected")
    terminal = state.position.enter_generation()
    prompt = build_prompt(state)
    state.position = terminal

    flow = state.flow
    if flow is FlowKind.FRONTEND:
        state.frontend_cache = None

    def _on_success(files: List[GeneratedFile]) -> None:
        if flow is FlowKind.FRONTEND:
            state.frontend_cache = files

    await _attempt(state, prompt, _on_success, llm=llm)


async def run_companion_backend(state: store.AppState, framework: str, llm=None) -> None:
    """
    From a finished frontend generation: switch to the backend flow's result
    step and generate a backend for the frontend that was just produced.
    """
    _ensure_idle(state)
    if not store.can_generate_companion_backend(state):
        raise WizardError("Frontend code is not available to generate a backend.")
    if framework not in framework_ids(BACKEND_FRAMEWORKS):
        raise ValueError(f"unknown backend framework '{framework}'")
    if framework == state.frontend.framework:
        raise ValueError("the backend framework must differ from the frontend framework")

    frontend_files = state.frontend_cache
    state.backend = ProjectDetails(
        name=f"{state.frontend.name}-api",
        description=state.frontend.description,
        framework=framework,
    )
    state.position = WizardPosition.terminal(FlowKind.BACKEND)
    prompt = build_backend_for_frontend_prompt(state.backend, state.ui_description, frontend_files)

    def _on_success(files: List[GeneratedFile]) -> None:
        state.frontend_cache = None

    await _attempt(state, prompt, _on_success, llm=llm)
