# shopadmin/config.py
from __future__ import annotations
import os


class Config:
    # Backend REST API root; every resource path is relative to it
    API_BASE_URL = os.environ.get(
        "SHOPADMIN_API_URL",  # optional alternative backend
        "http://localhost:8000/api",  # default local development backend
    )

    # Durable session storage (SQLAlchemy URL)
    STORAGE_URL = os.environ.get("SHOPADMIN_STORAGE_URL", "sqlite:///shopadmin.sqlite3")
    SESSION_STORAGE_KEY = "auth-storage"

    REQUEST_TIMEOUT = float(os.environ.get("SHOPADMIN_REQUEST_TIMEOUT", "30"))

    # List filters wait for this much input inactivity before fetching
    SEARCH_DEBOUNCE_SECONDS = float(os.environ.get("SHOPADMIN_SEARCH_DEBOUNCE", "0.5"))
