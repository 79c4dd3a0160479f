from __future__ import annotations  # FastAPI server for scheduled interview access and voice sessions

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import interviews as interview_routes
from api import routes as voice_routes
from config.settings import Settings, settings as default_settings
from conversation import InMemorySessionStore, VoiceInterviewEngine
from interviews import InterviewStore, seed_demo_data
from services.access import AccessService
from transcripts import TranscriptStore

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:  # Wire stores and services into one app
    cfg = app_settings or default_settings

    interview_store = InterviewStore(Path(cfg.DB_PATH))
    if cfg.SEED_DEMO_DATA:
        seeded = seed_demo_data(interview_store)
        if seeded:
            logger.info("Seeded demo interviews: %s", ", ".join(seeded))

    transcript_store = TranscriptStore(Path(cfg.TRANSCRIPT_DIR))
    executor = (
        ThreadPoolExecutor(max_workers=1, thread_name_prefix="transcript-writer")
        if cfg.TRANSCRIPT_ASYNC_WRITES
        else None
    )
    engine = VoiceInterviewEngine(
        transcript_store,
        sessions=InMemorySessionStore(
            max_sessions=cfg.VOICE_SESSION_MAX,
            ttl_seconds=cfg.VOICE_SESSION_TTL_SECONDS,
        ),
        executor=executor,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        try:
            yield
        finally:
            if executor is not None:
                # Drain queued transcript writes before the process exits
                executor.shutdown(wait=True)

    app = FastAPI(title="Interview Access API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.CORS_ORIGINS),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.interview_store = interview_store
    app.state.access_service = AccessService(interview_store)
    app.state.transcript_store = transcript_store
    app.state.voice_engine = engine

    @app.get("/health", tags=["Health"])
    def health_check() -> dict:
        return {"status": "ok"}

    app.include_router(interview_routes.router, tags=["Interviews"])
    app.include_router(voice_routes.router, tags=["Voice interview"])
    return app


def main() -> None:  # Run the development server
    import uvicorn

    uvicorn.run("api_server:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
