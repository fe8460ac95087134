"""Shared pytest fixtures for the App Creator test suite.

Provides reusable fixtures for:
- A clean in-memory session store per test
- Fake chat models standing in for Gemini
- Zip archive builders
- A FastAPI TestClient wired to a fake model
"""

from __future__ import annotations

import asyncio
import io
import json
import zipfile
from types import SimpleNamespace
from typing import Any

import pytest

from app_creator.core import llm_client
from app_creator.core import session as store


# ---------------------------------------------------------------------------
# Fake chat model
# ---------------------------------------------------------------------------

class FakeLLM:
    """Minimal async chat model: records prompts, returns canned content or raises."""

    def __init__(self, content: Any = None, exc: Exception | None = None, gate: asyncio.Event | None = None):
        self.content = content
        self.exc = exc
        self.gate = gate
        self.prompts: list[str] = []

    async def ainvoke(self, prompt: str):
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(content=self.content)


SAMPLE_FILES = [
    {"filePath": "package.json", "code": '{"name": "my-awesome-api"}'},
    {"filePath": "src/index.js", "code": "console.log('hello');\n"},
    {"filePath": "README.md", "code": "# my-awesome-api\n"},
]


@pytest.fixture
def sample_files_json() -> str:
    return json.dumps(SAMPLE_FILES)


@pytest.fixture
def fake_llm(sample_files_json) -> FakeLLM:
    return FakeLLM(content=sample_files_json)


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_store():
    store._STORE.clear()
    yield
    store._STORE.clear()


@pytest.fixture(autouse=True)
def tmp_log_dir(tmp_path, monkeypatch):
    """Keep debug logs out of the working directory."""
    log_dir = tmp_path / "ai_backend_logs"
    monkeypatch.setattr(llm_client, "LOG_DIR", str(log_dir))
    return log_dir


@pytest.fixture
def state() -> store.AppState:
    return store.create_session()


# ---------------------------------------------------------------------------
# Archives
# ---------------------------------------------------------------------------

def make_zip(entries: dict[str, bytes | str], dirs: tuple[str, ...] = ()) -> bytes:
    mem = io.BytesIO()
    with zipfile.ZipFile(mem, mode="w") as zf:
        for d in dirs:
            zf.writestr(d if d.endswith("/") else d + "/", b"")
        for name, data in entries.items():
            zf.writestr(name, data)
    return mem.getvalue()


@pytest.fixture
def frontend_zip() -> bytes:
    return make_zip(
        {
            "todo-app/package.json": '{"name": "todo-app"}',
            "todo-app/src/App.tsx": "export default function App() { return null; }\n",
            "todo-app/src/logo.png": b"\x89PNG\r\n",
            "todo-app/Dockerfile": "FROM node:20\n",
        },
        dirs=("todo-app/", "todo-app/src/"),
    )


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

@pytest.fixture
def client(fake_llm):
    from fastapi.testclient import TestClient

    from app_creator.api.generate import llm_dependency
    from app_creator.main import app

    app.dependency_overrides[llm_dependency] = lambda: fake_llm
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
