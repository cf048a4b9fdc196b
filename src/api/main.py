"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars at import time
load_dotenv()

# main.py is at <root>/src/api/main.py; src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import health, users
from api.error_handlers import register_error_handlers
from adapter.hashing.bcrypt_hasher import BcryptPasswordHasher
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes
from adapter.mongodb.user_repository import MongoUserRepository
from services.bootstrap_service import (
    DEFAULT_ADMIN_LOGIN,
    DEFAULT_ADMIN_NAME,
    DEFAULT_ADMIN_PASSWORD,
    ensure_default_admin,
)
from utils.logging import setup_structured_logging

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "User Directory API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: indexes and the default admin on startup."""
    client = get_mongodb_client()
    if client:
        db = client[DATABASE_NAME]
        if ensure_all_indexes(db):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")

        ensure_default_admin(
            MongoUserRepository(db),
            BcryptPasswordHasher(),
            login=os.getenv("DEFAULT_ADMIN_LOGIN", DEFAULT_ADMIN_LOGIN),
            password=os.getenv("DEFAULT_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
            name=os.getenv("DEFAULT_ADMIN_NAME", DEFAULT_ADMIN_NAME),
        )
    else:
        logger.warning("MongoDB unavailable, skipping index creation and admin bootstrap")

    yield  # App runs here


app = FastAPI(
    title=SERVICE_NAME,
    description="User directory: create, update, list, revoke and restore users on behalf of an acting user",
    version=VERSION,
    lifespan=lifespan,
)

# No cookies or Authorization header are used, so credentials stay disabled
cors_origins_env = os.getenv("CORS_ORIGINS", "*")
if cors_origins_env == "*":
    cors_origins = ["*"]
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(users.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False  # structured logging already covers requests
    )
