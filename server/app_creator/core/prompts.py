# app_creator/core/prompts.py
"""
Prompts used by the generation pipeline.

Everything here is a pure function of the wizard state: no I/O, no LLM calls.
The model is always asked for a JSON array of {"filePath", "code"} objects;
core/llm_client.py enforces that shape on the way back.
"""
from typing import List

from app_creator.core.constants import MANAGED_DATABASE_FRAMEWORKS
from app_creator.models import ApiEndpoint, DataModel, GeneratedFile, ProjectDetails

NO_ENDPOINTS_INSTRUCTION = (
    "No specific endpoints defined. Please generate standard CRUD endpoints "
    "(create, read all, read one, update, delete) for every model provided."
)

OUTPUT_RULES = (
    "**Output format:**\n"
    "Return a single JSON array and nothing else. Each element is an object with two string keys:\n"
    ' - "filePath": the full relative path of the file using forward slashes (e.g. "src/models/User.js")\n'
    ' - "code": the complete content of that file\n'
    "Do not include any explanatory text outside of the JSON array."
)


def format_models(models: List[DataModel]) -> str:
    blocks = []
    for model in models:
        lines = [f'- Model Name: "{model.name}"']
        if model.description:
            lines.append(f'  Description: "{model.description}"')
        lines.append("  Fields:")
        for field in model.fields:
            suffix = " (required)" if field.required else ""
            lines.append(f"    - {field.name}: {field.type}{suffix}")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


def format_endpoints(endpoints: List[ApiEndpoint]) -> str:
    if not endpoints:
        return NO_ENDPOINTS_INSTRUCTION
    return "\n".join(
        f"- Endpoint: {ep.method} {ep.path}\n  Description: {ep.description}" for ep in endpoints
    )


def format_files(files: List[GeneratedFile]) -> str:
    """Serialize a file collection with explicit per-file boundaries."""
    parts = []
    for f in files:
        parts.append(f"--- BEGIN FILE: {f.filePath} ---\n{f.code}\n--- END FILE: {f.filePath} ---")
    return "\n\n".join(parts)


def framework_constraints(framework: str) -> str:
    """Extra rules for frameworks that need them; empty string otherwise."""
    managed = MANAGED_DATABASE_FRAMEWORKS.get(framework)
    if not managed:
        return ""
    env_list = ", ".join(managed["env_vars"])
    return (
        "**Framework constraints (managed database):**\n"
        f" - Access the database exclusively through the managed client library ({managed['client_library']}).\n"
        " - Do NOT generate schema migration files, ORM migration scripts or database bootstrapping code; "
        "describe the required tables in the README instead.\n"
        f" - Document every required environment variable ({env_list}) in README.md and provide a .env.example file.\n"
    )


def _project_block(details: ProjectDetails) -> str:
    return (
        "**Project Specifications:**\n\n"
        f"- **Project Name:** {details.name}\n"
        f"- **Description:** {details.description}\n"
        f"- **Framework:** {details.framework}\n"
    )


def _with_constraints(prompt: str, framework: str) -> str:
    extra = framework_constraints(framework)
    if extra:
        prompt += "\n" + extra
    return prompt + "\n" + OUTPUT_RULES + "\n"


def build_backend_prompt(details: ProjectDetails, models: List[DataModel], endpoints: List[ApiEndpoint]) -> str:
    prompt = (
        "You are an expert backend developer. Your task is to generate a complete, production-ready "
        "backend application based on the user's specifications.\n\n"
        f"{_project_block(details)}\n"
        "**Data Models:**\n"
        f"{format_models(models)}\n\n"
        "**API Endpoints:**\n"
        f"{format_endpoints(endpoints)}\n\n"
        "**Instructions:**\n"
        "1. Generate a complete file structure: package definitions (package.json, go.mod, requirements.txt), "
        "application entry points, model/schema definitions, route handlers and controller logic.\n"
        "2. Implement the models. For each data model create the schema or model file with the correct field "
        "types and validation (e.g. required fields).\n"
        "3. Implement the API endpoints. For each endpoint create the route and the business logic in a "
        "controller/handler function matching its description.\n"
        "4. Use environment variables for configuration (database connection strings, server port), implement "
        "proper error handling, and separate models, routes and controllers.\n"
        "5. Provide a README.md with setup, install and run instructions.\n"
    )
    return _with_constraints(prompt, details.framework)


def build_frontend_prompt(details: ProjectDetails, ui_description: str) -> str:
    prompt = (
        "You are an expert frontend developer. Your task is to generate a complete, runnable frontend "
        "application based on the user's description of the UI.\n\n"
        f"{_project_block(details)}\n"
        "**UI Description:**\n"
        f"{ui_description}\n\n"
        "**Instructions:**\n"
        "1. Generate a complete file structure including the package definition, build configuration, "
        "entry point, components and styles.\n"
        "2. Implement every element and interaction described above; keep state handling simple and local.\n"
        "3. Split the UI into small, reusable components.\n"
        "4. Provide a README.md with install and run instructions.\n"
    )
    return _with_constraints(prompt, details.framework)


def build_backend_for_frontend_prompt(
    details: ProjectDetails, ui_description: str, files: List[GeneratedFile]
) -> str:
    prompt = (
        "You are an expert full-stack developer. An existing frontend application is provided below. "
        "Your task is to generate a complete backend application that serves every piece of data and every "
        "action the frontend needs.\n\n"
        f"{_project_block(details)}\n"
        "**UI Description:**\n"
        f"{ui_description}\n\n"
        "**Existing Frontend Files:**\n"
        "Each file is delimited by '--- BEGIN FILE: <path> ---' and '--- END FILE: <path> ---'.\n\n"
        f"{format_files(files)}\n\n"
        "**Instructions:**\n"
        "1. Infer the data models and API endpoints from the frontend code (fetch calls, forms, displayed data).\n"
        "2. Generate only the backend: package definition, entry point, models, routes and controllers.\n"
        "3. Match the request/response shapes the frontend already expects, and enable CORS for the frontend origin.\n"
        "4. Use environment variables for configuration and implement proper error handling.\n"
        "5. Provide a README.md explaining how to run the backend and how the frontend connects to it.\n"
    )
    return _with_constraints(prompt, details.framework)
