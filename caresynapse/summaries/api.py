# -*- coding: utf-8 -*-
"""Summaries: API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_session
from ..errors import (
    RemoteAuthError,
    SummarizerError,
    SummaryInProgress,
    ValidationError,
)
from ..records.models import AiSummaries
from ..session import Session

router = APIRouter(prefix="/api/summaries", tags=["Summaries"])


@router.get("", response_model=AiSummaries, summary="Summaries for the current record")
def get_summaries(session: Session = Depends(get_session)):
    if session.store.summaries is None:
        raise HTTPException(status_code=404, detail="No summaries generated for the current record")
    return session.store.summaries


@router.post("", summary="Generate summaries for the current record")
async def generate_summaries(session: Session = Depends(get_session)):
    try:
        summaries = await session.generate_summaries()
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    except SummaryInProgress as exc:
        raise HTTPException(status_code=409, detail=exc.message) from exc
    except RemoteAuthError as exc:
        raise HTTPException(status_code=401, detail=exc.message) from exc
    except SummarizerError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc

    if summaries is None:
        return {"status": "discarded", "summaries": None}
    return {"status": "ok", "summaries": summaries.model_dump(by_alias=True)}


@router.delete("", summary="Clear summaries")
def clear_summaries(session: Session = Depends(get_session)):
    session.store.clear_summaries()
    return {"status": "ok"}
