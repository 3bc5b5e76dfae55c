"""
api/app.py — FastAPI app instance + session middleware + static file serving
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from config import STATIC_DIR, SUPABASE_KEY, SUPABASE_URL
from api.config import CLEANUP_INTERVAL, SESSION_COOKIE, SESSION_TTL
from api.routes import router
from api.sample_questions import SAMPLE_QUESTIONS, SAMPLE_TESTS
import api.session as session
from timed_quiz.services.store import InMemoryStore, QuizStore

logger = logging.getLogger(__name__)


def _default_store() -> QuizStore:
    if SUPABASE_URL and SUPABASE_KEY:
        from timed_quiz.services.supabase_store import SupabaseStore
        logger.info("Using Supabase store")
        return SupabaseStore()
    logger.info("Supabase not configured, serving sample content from memory")
    return InMemoryStore(SAMPLE_TESTS, SAMPLE_QUESTIONS)


async def _cleanup_loop() -> None:
    """Sweep expired sessions every CLEANUP_INTERVAL seconds."""
    while True:
        await asyncio.sleep(CLEANUP_INTERVAL)
        removed = session.cleanup_expired()
        if removed:
            logger.info(f"Cleaned up {removed} expired sessions")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    # runs on the server's loop so abandoning an exam can cancel its timer task
    task = asyncio.create_task(_cleanup_loop())
    try:
        yield
    finally:
        task.cancel()


def create_app(store: QuizStore | None = None) -> FastAPI:
    app = FastAPI(title="Timed Quiz", docs_url=None, redoc_url=None, lifespan=_lifespan)
    app.state.store = store or _default_store()

    # CORS (allow mobile browsers and other origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Session middleware: read the session id from the cookie, issue one if missing
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=SESSION_TTL,
        )
        return response

    app.include_router(router)

    # static files
    if os.path.isdir(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    # root -> index.html
    @app.get("/")
    async def serve_index():
        index_path = os.path.join(STATIC_DIR, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"error": "index.html not found"}

    return app
