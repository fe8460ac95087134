# app_creator/core/session.py
"""
In-memory session & form state store.

One AppState per wizard session (one browser tab). Nothing is persisted:
a session lives in _STORE until it is deleted or the process exits.

Each session contains:
  position            - (flow, step) or None while the flow is being chosen
  backend/frontend    - project details, kept across flow switches
  models, endpoints   - backend flow form data
  ui_description      - frontend flow form data
  uploaded_files      - add-backend flow upload
  generation state    - phase, error, file browser, frontend cache
"""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app_creator.core.browser import FileBrowser
from app_creator.core.constants import (
    BACKEND_FRAMEWORKS,
    DEFAULT_BACKEND_DESCRIPTION,
    DEFAULT_BACKEND_NAME,
    DEFAULT_FRONTEND_DESCRIPTION,
    DEFAULT_FRONTEND_NAME,
    DEFAULT_UI_DESCRIPTION,
    FRONTEND_FRAMEWORKS,
    UPLOADED_BACKEND_NAME,
    framework_ids,
)
from app_creator.core.wizard import Step, WizardError, WizardPosition, flow_steps
from app_creator.models import (
    ApiEndpoint,
    ApiEndpointUpdate,
    DataModel,
    DataModelUpdate,
    FlowKind,
    GeneratedFile,
    GenerationPhase,
    ModelField,
    ModelFieldUpdate,
    ProjectDetails,
    ProjectDetailsUpdate,
    SessionOut,
    StepOut,
)
from app_creator.utils.config import SESSION_TTL_SECONDS

logger = logging.getLogger(__name__)


class NotFound(KeyError):
    """Unknown session, model, field or endpoint id."""


def _sample_models() -> List[DataModel]:
    return [
        DataModel(
            name="User",
            description="Represents a user in the system. Has fields for authentication and identification.",
            fields=[
                ModelField(name="username", type="string", required=True),
                ModelField(name="email", type="string", required=True),
                ModelField(name="password", type="string", required=True),
            ],
        ),
        DataModel(
            name="Post",
            description="Represents a blog post created by a user.",
            fields=[
                ModelField(name="title", type="string", required=True),
                ModelField(name="content", type="string", required=True),
            ],
        ),
    ]


@dataclass
class AppState:
    session_id: str
    position: Optional[WizardPosition] = None
    backend: ProjectDetails = field(default_factory=lambda: ProjectDetails(
        name=DEFAULT_BACKEND_NAME,
        description=DEFAULT_BACKEND_DESCRIPTION,
        framework=BACKEND_FRAMEWORKS[0]["id"],
    ))
    frontend: ProjectDetails = field(default_factory=lambda: ProjectDetails(
        name=DEFAULT_FRONTEND_NAME,
        description=DEFAULT_FRONTEND_DESCRIPTION,
        framework=FRONTEND_FRAMEWORKS[0]["id"],
    ))
    models: List[DataModel] = field(default_factory=_sample_models)
    endpoints: List[ApiEndpoint] = field(default_factory=list)
    ui_description: str = DEFAULT_UI_DESCRIPTION
    uploaded_files: Optional[List[GeneratedFile]] = None
    upload_error: Optional[str] = None
    upload_processing: bool = False
    phase: GenerationPhase = GenerationPhase.IDLE
    error: Optional[str] = None
    frontend_cache: Optional[List[GeneratedFile]] = None
    browser: FileBrowser = field(default_factory=FileBrowser)
    # bumped whenever an in-flight generation should be forgotten
    attempt: int = 0
    last_seen: float = field(default_factory=time.monotonic)

    @property
    def flow(self) -> Optional[FlowKind]:
        return self.position.flow if self.position else None

    @property
    def project(self) -> Optional[ProjectDetails]:
        if self.flow is None:
            return None
        return self.frontend if self.flow is FlowKind.FRONTEND else self.backend


# Single global store, keyed by session_id string
_STORE: Dict[str, AppState] = {}


# ─────────────────────────────────────────────────────────────────────────────
# Store
# ─────────────────────────────────────────────────────────────────────────────

def expire_idle_sessions(now: Optional[float] = None, ttl: float = SESSION_TTL_SECONDS) -> int:
    """Drop sessions untouched for longer than ttl seconds. Busy sessions are kept."""
    now = time.monotonic() if now is None else now
    expired = [
        sid for sid, state in _STORE.items()
        if now - state.last_seen > ttl
        and state.phase is not GenerationPhase.LOADING
        and not state.upload_processing
    ]
    for sid in expired:
        _STORE.pop(sid).attempt += 1
    if expired:
        logger.info("expired %d idle sessions", len(expired))
    return len(expired)


def create_session() -> AppState:
    expire_idle_sessions()
    sid = str(uuid.uuid4())
    state = AppState(session_id=sid)
    _STORE[sid] = state
    return state


def get_session(session_id: str) -> AppState:
    state = _STORE.get(session_id)
    if state is None:
        raise NotFound(session_id)
    state.last_seen = time.monotonic()
    return state


def delete_session(session_id: str) -> None:
    state = _STORE.pop(session_id, None)
    if state is None:
        raise NotFound(session_id)
    # late generation results for this session are dropped
    state.attempt += 1


# ─────────────────────────────────────────────────────────────────────────────
# Navigation
# ─────────────────────────────────────────────────────────────────────────────

def _reset_generation(state: AppState) -> None:
    state.attempt += 1
    state.phase = GenerationPhase.IDLE
    state.error = None
    state.browser.clear()
    state.frontend_cache = None
    state.uploaded_files = None
    state.upload_error = None


def select_flow(state: AppState, flow: FlowKind) -> None:
    """Start a flow at step 1. Project details and form inputs are kept."""
    if state.upload_processing:
        raise WizardError("an upload is being processed")
    _reset_generation(state)
    state.position = WizardPosition.start(flow)
    logger.info("selected %s flow", flow.value, extra={"session_id": state.session_id})


def restart(state: AppState) -> None:
    """Back to flow selection ("Start Over" / "Change App Type")."""
    if state.upload_processing:
        raise WizardError("an upload is being processed")
    _reset_generation(state)
    state.position = None


def _require_position(state: AppState) -> WizardPosition:
    if state.position is None:
        raise WizardError("no flow selected")
    return state.position


def next_step(state: AppState) -> None:
    pos = _require_position(state)
    if pos.step is Step.UPLOAD:
        if state.upload_processing:
            raise WizardError("an upload is being processed")
        if not state.uploaded_files:
            raise WizardError("upload a project before continuing")
        state.backend = state.backend.model_copy(update={"name": UPLOADED_BACKEND_NAME})
    state.position = pos.advance()


def back_step(state: AppState) -> None:
    pos = _require_position(state)
    if pos.is_terminal:
        # leaving the result screen abandons any pending generation
        state.attempt += 1
        state.phase = GenerationPhase.IDLE
        state.error = None
        state.browser.clear()
    state.position = pos.retreat()


# ─────────────────────────────────────────────────────────────────────────────
# Project details / UI description
# ─────────────────────────────────────────────────────────────────────────────

def update_project(state: AppState, update: ProjectDetailsUpdate) -> ProjectDetails:
    _require_position(state)
    changes = update.model_dump(exclude_none=True)
    if "framework" in changes:
        allowed = framework_ids(FRONTEND_FRAMEWORKS if state.flow is FlowKind.FRONTEND else BACKEND_FRAMEWORKS)
        if changes["framework"] not in allowed:
            raise ValueError(f"unknown framework '{changes['framework']}'")
    new_details = state.project.model_copy(update=changes)
    if state.flow is FlowKind.FRONTEND:
        state.frontend = new_details
    else:
        state.backend = new_details
    return new_details


def set_ui_description(state: AppState, description: str) -> None:
    state.ui_description = description


# ─────────────────────────────────────────────────────────────────────────────
# Data models
# ─────────────────────────────────────────────────────────────────────────────

def _find_model(state: AppState, model_id: str) -> DataModel:
    for m in state.models:
        if m.id == model_id:
            return m
    raise NotFound(model_id)


def add_model(state: AppState) -> DataModel:
    model = DataModel(name=f"NewModel{len(state.models) + 1}")
    state.models.append(model)
    return model


def update_model(state: AppState, model_id: str, update: DataModelUpdate) -> DataModel:
    model = _find_model(state, model_id)
    for key, value in update.model_dump(exclude_none=True).items():
        setattr(model, key, value)
    return model


def remove_model(state: AppState, model_id: str) -> None:
    model = _find_model(state, model_id)
    state.models.remove(model)


def add_field(state: AppState, model_id: str) -> ModelField:
    model = _find_model(state, model_id)
    new_field = ModelField()
    model.fields.append(new_field)
    return new_field


def _find_field(model: DataModel, field_id: str) -> ModelField:
    for f in model.fields:
        if f.id == field_id:
            return f
    raise NotFound(field_id)


def update_field(state: AppState, model_id: str, field_id: str, update: ModelFieldUpdate) -> ModelField:
    target = _find_field(_find_model(state, model_id), field_id)
    for key, value in update.model_dump(exclude_none=True).items():
        setattr(target, key, value)
    return target


def remove_field(state: AppState, model_id: str, field_id: str) -> None:
    model = _find_model(state, model_id)
    model.fields.remove(_find_field(model, field_id))


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────

def _find_endpoint(state: AppState, endpoint_id: str) -> ApiEndpoint:
    for ep in state.endpoints:
        if ep.id == endpoint_id:
            return ep
    raise NotFound(endpoint_id)


def add_endpoint(state: AppState) -> ApiEndpoint:
    ep = ApiEndpoint()
    state.endpoints.append(ep)
    return ep


def update_endpoint(state: AppState, endpoint_id: str, update: ApiEndpointUpdate) -> ApiEndpoint:
    ep = _find_endpoint(state, endpoint_id)
    for key, value in update.model_dump(exclude_none=True).items():
        setattr(ep, key, value)
    return ep


def remove_endpoint(state: AppState, endpoint_id: str) -> None:
    state.endpoints.remove(_find_endpoint(state, endpoint_id))


def crud_endpoints(models: List[DataModel]) -> List[ApiEndpoint]:
    """Five standard routes per model, under /api/<lowercased name>s."""
    out: List[ApiEndpoint] = []
    for model in models:
        collection = f"/api/{model.name.lower()}s"
        item = f"{collection}/:id"
        out.extend([
            ApiEndpoint(method="GET", path=collection, description=f"Get all {model.name}s."),
            ApiEndpoint(method="POST", path=collection, description=f"Create a new {model.name}."),
            ApiEndpoint(method="GET", path=item, description=f"Get a single {model.name} by ID."),
            ApiEndpoint(method="PUT", path=item, description=f"Update a {model.name} by ID."),
            ApiEndpoint(method="DELETE", path=item, description=f"Delete a {model.name} by ID."),
        ])
    return out


def auto_generate_crud(state: AppState) -> List[ApiEndpoint]:
    generated = crud_endpoints(state.models)
    state.endpoints.extend(generated)
    return generated


# ─────────────────────────────────────────────────────────────────────────────
# Uploads (add-backend flow)
# ─────────────────────────────────────────────────────────────────────────────

def begin_upload(state: AppState) -> None:
    pos = _require_position(state)
    if pos.step is not Step.UPLOAD:
        raise WizardError("uploads are only accepted on the upload step")
    if state.upload_processing:
        raise WizardError("an upload is already being processed")
    state.upload_processing = True
    state.upload_error = None
    state.uploaded_files = None


def finish_upload(state: AppState, files: List[GeneratedFile]) -> None:
    state.upload_processing = False
    state.uploaded_files = files


def fail_upload(state: AppState, message: str) -> None:
    state.upload_processing = False
    state.uploaded_files = []
    state.upload_error = message


# ─────────────────────────────────────────────────────────────────────────────
# Snapshot
# ─────────────────────────────────────────────────────────────────────────────

def can_generate_companion_backend(state: AppState) -> bool:
    return (
        state.flow is FlowKind.FRONTEND
        and state.position.is_terminal
        and state.phase is GenerationPhase.SUCCESS
        and bool(state.frontend_cache)
    )


def snapshot(state: AppState) -> SessionOut:
    pos = state.position
    return SessionOut(
        session_id=state.session_id,
        flow=pos.flow if pos else None,
        step=pos.number if pos else None,
        steps=[StepOut(**s) for s in flow_steps(pos.flow)] if pos else [],
        project=state.project,
        backend_project=state.backend,
        frontend_project=state.frontend,
        models=state.models,
        endpoints=state.endpoints,
        ui_description=state.ui_description,
        uploaded_files=[f.filePath for f in state.uploaded_files or []],
        upload_error=state.upload_error,
        upload_processing=state.upload_processing,
        generation=state.phase,
        error=state.error,
        can_generate_companion_backend=can_generate_companion_backend(state),
        browser=state.browser.snapshot(),
    )
