"""FastAPI entry point for the rank dashboard.

This module exposes the ranking table, the chart payload and the chart
selection toggle over REST, plus an explicit reload trigger. The routes
defined here interact with a singleton ``STORE`` provided by
``data_store.py``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from . import data_store
from .ranking import parse_limit


app = FastAPI(title="Rank Dashboard", version="1.0")

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _store() -> data_store.RankStore:
    # looked up per request so tests can swap the singleton
    return data_store.STORE


class ToggleBody(BaseModel):
    ticker: str


@app.get("/healthz")
def healthz():
    return {"ok": True, "app": app.title, "version": app.version}


@app.get("/routes")
def list_routes():
    paths = []
    for r in app.router.routes:
        if hasattr(r, "methods") and hasattr(r, "path"):
            paths.append({"path": r.path, "methods": sorted(list(r.methods))})
    return {"routes": sorted(paths, key=lambda x: x["path"])}


@app.get("/", response_class=HTMLResponse)
def index(request: Request, limit: Optional[str] = None) -> HTMLResponse:
    store = _store()
    rows = store.ranking_rows(limit)
    snap = store.snapshot
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "rows": rows,
            "reference_date": snap.reference_date,
            "error": store.last_error,
            "limit": store.default_limit if limit is None else parse_limit(limit, store.default_limit),
        },
    )


@app.get("/rankings")
def rankings(limit: Optional[str] = None) -> Dict[str, Any]:
    """Top rows for the reference date. An unusable ``limit`` falls back to the default."""
    store = _store()
    rows = store.ranking_rows(limit)
    return {
        "reference_date": store.snapshot.reference_date,
        "limit": store.default_limit if limit is None else parse_limit(limit, store.default_limit),
        "rows": rows,
        "error": store.last_error,
    }


@app.get("/chart")
def chart() -> Dict[str, Any]:
    return _store().chart()


@app.post("/selection/toggle")
def toggle_selection(body: ToggleBody) -> Dict[str, Any]:
    store = _store()
    try:
        payload = store.toggle(body.ticker)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"selected": store.is_selected(body.ticker.strip()), "chart": payload}


@app.delete("/selection")
def clear_selection() -> Dict[str, Any]:
    _store().clear_selection()
    return {"ok": True}


@app.get("/status")
def status() -> Dict[str, Any]:
    return _store().status()


@app.post("/reload")
def reload() -> Dict[str, Any]:
    """Re-fetch the dataset. The previous snapshot stays in place if the fetch fails."""
    store = _store()
    if not store.load():
        raise HTTPException(503, store.last_error or "Failed to load rankings")
    return {"ok": True, "reference_date": store.snapshot.reference_date}
