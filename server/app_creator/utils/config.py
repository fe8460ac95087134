# app_creator/utils/config.py
import os

from dotenv import load_dotenv

load_dotenv()

# ----------------------------
# Gemini
# ----------------------------
GEMINI_API_KEY_ENV = "GOOGLE_API_KEY_GEMINI"
GEMINI_MODEL = os.environ.get("AI_GEMINI_MODEL", "gemini-2.5-pro")
GEMINI_TEMPERATURE = float(os.environ.get("AI_TEMPERATURE", 0.2))

# ----------------------------
# Debug logs
# ----------------------------
LOG_DIR = os.environ.get("AI_BACKEND_LOG_DIR", "./ai_backend_logs")
DEBUG_LOGS = os.environ.get("AI_DEBUG_LOGS", "0").lower() in ("1", "true", "yes")

# ----------------------------
# Uploads / file browser
# ----------------------------
MAX_FILE_SIZE_BYTES = int(os.environ.get("AI_MAX_FILE_SIZE_BYTES", 5 * 1024 * 1024))  # 5MB
COPY_ACK_SECONDS = float(os.environ.get("AI_COPY_ACK_SECONDS", 2))

# ----------------------------
# Sessions
# ----------------------------
SESSION_TTL_SECONDS = float(os.environ.get("AI_SESSION_TTL_SECONDS", 60 * 60))

# ----------------------------
# Server
# ----------------------------
HOST = os.environ.get("AI_HOST", "127.0.0.1")
PORT = int(os.environ.get("AI_PORT", 8000))
