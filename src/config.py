"""Configuration module for the forum access core.

This module provides centralized configuration management, including directory
paths, API server settings, credential hashing, invitation codes and content
limits. All configuration values can be overridden via environment variables.
"""

import os
import string
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/forum.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Credential Configuration ---

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# First entry of every username listing, stands for "no user selected"
USER_LIST_PLACEHOLDER: str = os.getenv("USER_LIST_PLACEHOLDER", "<Select a User>")

# --- Invitation Code Configuration ---

INVITATION_CODE_LENGTH: int = int(os.getenv("INVITATION_CODE_LENGTH", "6"))
INVITATION_CODE_ALPHABET: str = os.getenv(
    "INVITATION_CODE_ALPHABET", string.ascii_uppercase + string.digits
)
# Number of fresh codes tried before issuance gives up on collisions
INVITATION_CODE_MAX_ATTEMPTS: int = int(
    os.getenv("INVITATION_CODE_MAX_ATTEMPTS", "10")
)

# --- Content Configuration ---

# Upper bound for post and reply bodies (matches the content column size)
MAX_CONTENT_LENGTH: int = int(os.getenv("MAX_CONTENT_LENGTH", "500"))

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24))
)

# Display metadata for the API
API_TITLE: str = os.getenv("API_TITLE", "Forum Access API")
API_VERSION: str = "1.0.0"
