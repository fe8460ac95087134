# app_creator/core/constants.py
from typing import Dict, List

BACKEND_FRAMEWORKS: List[Dict[str, str]] = [
    {"id": "nodejs-express-mongoose", "name": "Node.js + Express + Mongoose"},
    {"id": "python-flask-sqlalchemy", "name": "Python + Flask + SQLAlchemy"},
    {"id": "go-gin-gorm", "name": "Go + Gin + GORM"},
    {"id": "supabase-edge-functions", "name": "Supabase (Edge Functions + Postgres)"},
]

FRONTEND_FRAMEWORKS: List[Dict[str, str]] = [
    {"id": "react-vite-tailwind", "name": "React + Vite + Tailwind CSS"},
    {"id": "vue-vite", "name": "Vue 3 + Vite"},
    {"id": "svelte-vite", "name": "Svelte + Vite"},
    {"id": "vanilla-html-css-js", "name": "HTML + CSS + JavaScript"},
]

# Frameworks backed by a hosted database: no migrations, managed client SDK instead
MANAGED_DATABASE_FRAMEWORKS = {
    "supabase-edge-functions": {
        "client_library": "@supabase/supabase-js",
        "env_vars": ["SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"],
    },
}

FIELD_TYPES = ["string", "number", "boolean", "date", "reference", "array"]

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]

DEFAULT_BACKEND_NAME = "my-awesome-api"
DEFAULT_BACKEND_DESCRIPTION = "A brief description of my new backend API."
DEFAULT_FRONTEND_NAME = "my-awesome-app"
DEFAULT_FRONTEND_DESCRIPTION = "A brief description of my new frontend app."
UPLOADED_BACKEND_NAME = "my-uploaded-app-api"

DEFAULT_UI_DESCRIPTION = (
    'A simple todo list app. It should have an input field, an "Add" button, and a list of todos. '
    "Each todo item should have a checkbox to mark it as complete and a delete button."
)
INFERRED_UI_DESCRIPTION = "UI description to be inferred from the provided code."


def framework_ids(frameworks: List[Dict[str, str]]) -> List[str]:
    return [fw["id"] for fw in frameworks]
