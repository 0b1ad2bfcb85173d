"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.database import init_db
from core.logging_config import setup_logging
from config import (
    API_HOST,
    API_PORT,
    API_TITLE,
    API_VERSION,
    CORS_ALLOWED_ORIGINS,
)
from api.routes import admin, auth, posts, profile

# Setup logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables if they do not exist."""
    init_db()
    yield


# Initialize FastAPI application
app = FastAPI(
    title=API_TITLE,
    description="Accounts, invitation codes and ownership-checked posts and replies.",
    version=API_VERSION,
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(admin.router)
app.include_router(posts.router)


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """Return API information and documentation links."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Serving on {server_url}")
    print(f"API docs: {server_url}/docs")
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
