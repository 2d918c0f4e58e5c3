# -*- coding: utf-8 -*-
"""Shared FastAPI dependencies."""

from __future__ import annotations

from .session import Session

# One process serves one browser session; state lives only in memory.
_session = Session()


def get_session() -> Session:
    return _session
