"""Unit tests for prompt formatting (app_creator.core.prompts)."""

from __future__ import annotations

import pytest

from app_creator.core.prompts import (
    NO_ENDPOINTS_INSTRUCTION,
    build_backend_for_frontend_prompt,
    build_backend_prompt,
    build_frontend_prompt,
    format_endpoints,
    format_files,
    format_models,
    framework_constraints,
)
from app_creator.models import ApiEndpoint, DataModel, GeneratedFile, ModelField, ProjectDetails


@pytest.fixture
def details() -> ProjectDetails:
    return ProjectDetails(name="blog-api", description="A blog backend", framework="python-flask-sqlalchemy")


@pytest.fixture
def models() -> list[DataModel]:
    return [
        DataModel(
            name="Post",
            description="A blog post",
            fields=[
                ModelField(name="title", type="string", required=True),
                ModelField(name="publishedAt", type="date", required=False),
                ModelField(name="author", type="reference", required=True),
            ],
        ),
        DataModel(name="Tag", fields=[ModelField(name="label", type="string")]),
    ]


class TestFormatModels:
    @pytest.mark.unit
    def test_fields_echo_type_and_requiredness(self, models):
        text = format_models(models)
        assert "    - title: string (required)" in text
        assert "    - publishedAt: date\n" in text
        assert "    - author: reference (required)" in text
        assert "    - label: string" in text
        assert "label: string (required)" not in text

    @pytest.mark.unit
    def test_description_only_when_present(self, models):
        text = format_models(models)
        assert 'Model Name: "Post"\n  Description: "A blog post"' in text
        assert 'Model Name: "Tag"\n  Fields:' in text


class TestFormatEndpoints:
    @pytest.mark.unit
    def test_empty_asks_for_crud(self):
        assert format_endpoints([]) == NO_ENDPOINTS_INSTRUCTION
        assert "CRUD" in NO_ENDPOINTS_INSTRUCTION

    @pytest.mark.unit
    def test_lists_endpoints(self):
        text = format_endpoints([ApiEndpoint(method="DELETE", path="/api/posts/:id", description="Delete a Post by ID.")])
        assert "- Endpoint: DELETE /api/posts/:id" in text
        assert "Description: Delete a Post by ID." in text


class TestFormatFiles:
    @pytest.mark.unit
    def test_markers_per_file(self):
        files = [
            GeneratedFile(filePath="src/App.tsx", code="export {}"),
            GeneratedFile(filePath="index.html", code="<div>--- END FILE ---</div>"),
        ]
        text = format_files(files)
        assert "--- BEGIN FILE: src/App.tsx ---\nexport {}\n--- END FILE: src/App.tsx ---" in text
        assert "--- BEGIN FILE: index.html ---" in text
        assert text.count("--- BEGIN FILE:") == 2
        assert text.index("src/App.tsx") < text.index("index.html")


class TestFrameworkConstraints:
    @pytest.mark.unit
    def test_managed_database(self):
        text = framework_constraints("supabase-edge-functions")
        assert "@supabase/supabase-js" in text
        assert "migration" in text
        assert "SUPABASE_URL" in text
        assert ".env.example" in text

    @pytest.mark.unit
    def test_regular_framework_has_none(self):
        assert framework_constraints("go-gin-gorm") == ""


class TestBuildPrompts:
    @pytest.mark.unit
    def test_backend_prompt(self, details, models):
        prompt = build_backend_prompt(details, models, [])
        assert "**Project Name:** blog-api" in prompt
        assert "**Framework:** python-flask-sqlalchemy" in prompt
        assert NO_ENDPOINTS_INSTRUCTION in prompt
        assert '"filePath"' in prompt and '"code"' in prompt
        assert "managed database" not in prompt

    @pytest.mark.unit
    def test_backend_prompt_managed_database(self, details, models):
        managed = details.model_copy(update={"framework": "supabase-edge-functions"})
        prompt = build_backend_prompt(managed, models, [])
        assert "Do NOT generate schema migration files" in prompt

    @pytest.mark.unit
    def test_frontend_prompt(self):
        fe = ProjectDetails(name="todo", description="", framework="react-vite-tailwind")
        prompt = build_frontend_prompt(fe, "A todo list with checkboxes")
        assert "A todo list with checkboxes" in prompt
        assert "react-vite-tailwind" in prompt

    @pytest.mark.unit
    def test_backend_for_frontend_prompt(self, details):
        files = [GeneratedFile(filePath="src/api.ts", code="fetch('/api/todos')")]
        prompt = build_backend_for_frontend_prompt(details, "todo list", files)
        assert "--- BEGIN FILE: src/api.ts ---" in prompt
        assert "fetch('/api/todos')" in prompt
        assert "todo list" in prompt

    @pytest.mark.unit
    def test_pure(self, details, models):
        assert build_backend_prompt(details, models, []) == build_backend_prompt(details, models, [])
