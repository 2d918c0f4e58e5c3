# -*- coding: utf-8 -*-
"""
CareSynapse health-record API

Structured record entry, Excel import/export, a clinical timeline and
AI-generated clinician/patient summaries. All state is held in memory for the
lifetime of the process.
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .deps import get_session
from .records.api import router as record_router
from .session import Session
from .summaries.api import router as summaries_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="CareSynapse",
    description="Health record entry and AI summarization demo",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(record_router)
app.include_router(summaries_router)


@app.get("/api/health")
def health() -> dict:
    return {
        "status": "ok",
        "summarizer_configured": bool(settings.gemini_api_key),
        "model": settings.gemini_model,
    }


@app.get("/api/status", summary="Loading flag, last error and current notification")
def get_status(session: Session = Depends(get_session)) -> dict:
    notice = session.notifier.current()
    return {
        "revision": session.store.revision,
        "is_loading": session.is_loading,
        "has_summaries": session.store.summaries is not None,
        "error": session.last_error,
        "notification": notice.model_dump(mode="json") if notice else None,
    }


@app.delete("/api/notification", summary="Dismiss the current notification")
def dismiss_notification(session: Session = Depends(get_session)) -> dict:
    session.notifier.dismiss()
    return {"status": "ok"}


@app.delete("/api/error", summary="Dismiss the last error")
def dismiss_error(session: Session = Depends(get_session)) -> dict:
    session.clear_error()
    return {"status": "ok"}
