from enum import Enum
from typing import List, Literal, Optional
import uuid

from pydantic import BaseModel, Field, StrictStr


def new_id() -> str:
    return str(uuid.uuid4())


FieldType = Literal["string", "number", "boolean", "date", "reference", "array"]
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


class FlowKind(str, Enum):
    BACKEND = "backend"
    FRONTEND = "frontend"
    ADD_BACKEND = "add-backend"


class GenerationPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


class ProjectDetails(BaseModel):
    name: str
    description: str = ""
    framework: str


class ModelField(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = "newField"
    type: FieldType = "string"
    required: bool = False


class DataModel(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    fields: List[ModelField] = Field(default_factory=list)


class ApiEndpoint(BaseModel):
    id: str = Field(default_factory=new_id)
    method: HttpMethod = "GET"
    path: str = "/api/resource"
    description: str = "Fetches the resource."


class GeneratedFile(BaseModel):
    """
    A (path, content) pair returned by or fed into the generation call.
    Serialized with the camelCase keys the model is asked to emit.
    """
    filePath: StrictStr = Field(..., min_length=1, description="Relative, forward-slash separated file path")
    code: StrictStr = Field(..., description="Raw text content of the file")


# -------------------------
# Request bodies
# -------------------------
class SelectFlowRequest(BaseModel):
    flow: FlowKind


class ProjectDetailsUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    framework: Optional[str] = None


class UIDescriptionUpdate(BaseModel):
    description: str


class DataModelUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class ModelFieldUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[FieldType] = None
    required: Optional[bool] = None


class ApiEndpointUpdate(BaseModel):
    method: Optional[HttpMethod] = None
    path: Optional[str] = None
    description: Optional[str] = None


class CompanionBackendRequest(BaseModel):
    framework: str


class SelectFileRequest(BaseModel):
    file_path: str


# -------------------------
# Responses
# -------------------------
class StepOut(BaseModel):
    number: int
    title: str


class FileBrowserOut(BaseModel):
    files: List[str] = Field(default_factory=list)
    selected: Optional[GeneratedFile] = None
    copied: bool = False


class SessionOut(BaseModel):
    session_id: str
    flow: Optional[FlowKind] = None
    step: Optional[int] = None
    steps: List[StepOut] = Field(default_factory=list)
    project: Optional[ProjectDetails] = None
    backend_project: ProjectDetails
    frontend_project: ProjectDetails
    models: List[DataModel]
    endpoints: List[ApiEndpoint]
    ui_description: str
    uploaded_files: List[str] = Field(default_factory=list)
    upload_error: Optional[str] = None
    upload_processing: bool = False
    generation: GenerationPhase = GenerationPhase.IDLE
    error: Optional[str] = None
    can_generate_companion_backend: bool = False
    browser: FileBrowserOut = Field(default_factory=FileBrowserOut)
