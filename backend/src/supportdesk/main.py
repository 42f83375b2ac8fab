"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Logging constants defined here (not in constants/) because logging.basicConfig()
# must run before any module imports that might create loggers.
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    level=logging.INFO,
)

# Unify uvicorn loggers with app format
for uvicorn_logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
    uvicorn_logger = logging.getLogger(uvicorn_logger_name)
    uvicorn_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    uvicorn_logger.addHandler(handler)

from supportdesk.api.deps import get_knowledge_base, get_settings  # noqa: E402
from supportdesk.api.routers import chat, faq, kb, session  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan handler for startup and shutdown events.

    On startup:
    - Loads the FAQ dataset into memory
    - Logs the LLM provider used for fallback answers
    """
    settings = get_settings()
    knowledge_base = get_knowledge_base()
    logger.info(
        f"SupportDesk started with {len(knowledge_base.get_all_entries())} FAQ entries, "
        f"LLM fallback {settings.active_provider}/{settings.active_model}"
    )

    yield


app = FastAPI(
    title="SupportDesk",
    description="FAQ-first customer support chat with LLM fallback",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for the chat widget
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(chat.router)
app.include_router(faq.router)
app.include_router(kb.router)
app.include_router(session.router)
