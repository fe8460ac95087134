# app_creator/api/wizard.py
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Response

from app_creator.core import session as store
from app_creator.core.constants import BACKEND_FRAMEWORKS, FIELD_TYPES, FRONTEND_FRAMEWORKS, HTTP_METHODS
from app_creator.core.wizard import FLOW_STEPS, flow_steps
from app_creator.models import (
    ApiEndpoint,
    ApiEndpointUpdate,
    DataModel,
    DataModelUpdate,
    ModelField,
    ModelFieldUpdate,
    ProjectDetails,
    ProjectDetailsUpdate,
    SelectFlowRequest,
    SessionOut,
    UIDescriptionUpdate,
)

router = APIRouter()
catalog_router = APIRouter()


@catalog_router.get("/catalog", response_model=Dict[str, Any])
async def catalog():
    """Static choices offered by the wizard forms."""
    return {
        "backend_frameworks": BACKEND_FRAMEWORKS,
        "frontend_frameworks": FRONTEND_FRAMEWORKS,
        "field_types": FIELD_TYPES,
        "http_methods": HTTP_METHODS,
        "flows": {flow.value: flow_steps(flow) for flow in FLOW_STEPS},
    }


# ─────────────────────────────────────────────────────────────────────────────
# Sessions & navigation
# ─────────────────────────────────────────────────────────────────────────────

@router.post("", response_model=SessionOut, status_code=201)
async def create_session():
    return store.snapshot(store.create_session())


@router.get("/{session_id}", response_model=SessionOut)
async def get_session(session_id: str):
    return store.snapshot(store.get_session(session_id))


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str):
    store.delete_session(session_id)
    return Response(status_code=204)


@router.post("/{session_id}/flow", response_model=SessionOut)
async def select_flow(session_id: str, body: SelectFlowRequest):
    state = store.get_session(session_id)
    store.select_flow(state, body.flow)
    return store.snapshot(state)


@router.post("/{session_id}/next", response_model=SessionOut)
async def next_step(session_id: str):
    state = store.get_session(session_id)
    store.next_step(state)
    return store.snapshot(state)


@router.post("/{session_id}/back", response_model=SessionOut)
async def back_step(session_id: str):
    state = store.get_session(session_id)
    store.back_step(state)
    return store.snapshot(state)


@router.post("/{session_id}/restart", response_model=SessionOut)
async def restart(session_id: str):
    state = store.get_session(session_id)
    store.restart(state)
    return store.snapshot(state)


# ─────────────────────────────────────────────────────────────────────────────
# Project setup / UI description
# ─────────────────────────────────────────────────────────────────────────────

@router.put("/{session_id}/project", response_model=ProjectDetails)
async def update_project(session_id: str, body: ProjectDetailsUpdate):
    state = store.get_session(session_id)
    try:
        return store.update_project(state, body)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.put("/{session_id}/ui-description", response_model=SessionOut)
async def update_ui_description(session_id: str, body: UIDescriptionUpdate):
    state = store.get_session(session_id)
    store.set_ui_description(state, body.description)
    return store.snapshot(state)


# ─────────────────────────────────────────────────────────────────────────────
# Data models
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/{session_id}/models", response_model=DataModel, status_code=201)
async def add_model(session_id: str):
    return store.add_model(store.get_session(session_id))


@router.patch("/{session_id}/models/{model_id}", response_model=DataModel)
async def update_model(session_id: str, model_id: str, body: DataModelUpdate):
    return store.update_model(store.get_session(session_id), model_id, body)


@router.delete("/{session_id}/models/{model_id}", status_code=204)
async def remove_model(session_id: str, model_id: str):
    store.remove_model(store.get_session(session_id), model_id)
    return Response(status_code=204)


@router.post("/{session_id}/models/{model_id}/fields", response_model=ModelField, status_code=201)
async def add_field(session_id: str, model_id: str):
    return store.add_field(store.get_session(session_id), model_id)


@router.patch("/{session_id}/models/{model_id}/fields/{field_id}", response_model=ModelField)
async def update_field(session_id: str, model_id: str, field_id: str, body: ModelFieldUpdate):
    return store.update_field(store.get_session(session_id), model_id, field_id, body)


@router.delete("/{session_id}/models/{model_id}/fields/{field_id}", status_code=204)
async def remove_field(session_id: str, model_id: str, field_id: str):
    store.remove_field(store.get_session(session_id), model_id, field_id)
    return Response(status_code=204)


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/{session_id}/endpoints", response_model=ApiEndpoint, status_code=201)
async def add_endpoint(session_id: str):
    return store.add_endpoint(store.get_session(session_id))


@router.post("/{session_id}/endpoints/crud", response_model=List[ApiEndpoint], status_code=201)
async def auto_generate_crud(session_id: str):
    """Append the standard five CRUD routes for every data model."""
    return store.auto_generate_crud(store.get_session(session_id))


@router.patch("/{session_id}/endpoints/{endpoint_id}", response_model=ApiEndpoint)
async def update_endpoint(session_id: str, endpoint_id: str, body: ApiEndpointUpdate):
    return store.update_endpoint(store.get_session(session_id), endpoint_id, body)


@router.delete("/{session_id}/endpoints/{endpoint_id}", status_code=204)
async def remove_endpoint(session_id: str, endpoint_id: str):
    store.remove_endpoint(store.get_session(session_id), endpoint_id)
    return Response(status_code=204)
