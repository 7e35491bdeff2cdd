"""
settings.py
Config del backend leída de variables de entorno (.env en local/dev).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

ENV_MODE = (os.getenv("ENV", "") or "").lower()

# Solo cargar .env en local/dev
if ENV_MODE in ("dev", "local", ""):
    load_dotenv(ENV_PATH, override=False)


def _env_bool(name: str, default: str) -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes")


HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()

# Si es true, un store nuevo arranca con los usuarios/productos de demo
SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", "true")

# -------------------------
# CORS (permisivo)
# -------------------------
CORS_ALLOW_ORIGIN = os.getenv("CORS_ALLOW_ORIGIN", "*")
CORS_ALLOW_HEADERS = "Origin, X-Requested-With, Content-Type, Accept"
CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE"
