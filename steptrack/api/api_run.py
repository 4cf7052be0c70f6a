from fastapi import FastAPI, Request, Query, Response
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from datetime import date as _date
from typing import Optional
import logging

from steptrack.api.api_state import lock, get_registry
from steptrack.events.web_observers import start as start_event_observers, get_events as get_web_events
from steptrack.infra.pdf_utils import generate_leaderboard_pdf
from steptrack.logic.ranking.engine import RankingEngine
from steptrack.utilities.config import TEMPLATES_DIR

# Routers
from steptrack.api.routes import individuals, groups, rankings

# Logging
logger = logging.getLogger("steptrack_app")

# Initialize FastAPI app
app = FastAPI(title="Step Tracker API")

# Include routers
app.include_router(individuals.router)
app.include_router(groups.router)
app.include_router(rankings.router)

# Templates
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@app.on_event("startup")
def _startup():
    """Register event bus subscribers and load the registry when the app starts."""
    start_event_observers()
    logger.info("Web observers for membership events started")
    registry = get_registry()
    logger.info("Registry ready: %s", registry)


# -------------------- UI PAGES --------------------
@app.get("/", response_class=HTMLResponse)
def leaderboard_page(request: Request):
    with lock:
        engine = RankingEngine(get_registry())
        ranked = engine.leaderboard()
        top = engine.top_daily_achievers()
    return templates.TemplateResponse(
        request,
        "leaderboard.html",
        {
            "ranked_groups": ranked,
            "top_individuals": top,
            "current_date": _date.today().strftime("%d.%m.%Y"),
        }
    )


@app.get("/export_pdf")
def export_pdf():
    with lock:
        engine = RankingEngine(get_registry())
        ranked = engine.leaderboard()
        top = engine.top_daily_achievers()
    pdf_bytes = generate_leaderboard_pdf(ranked, top)
    filename = f"leaderboard_{_date.today().isoformat()}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


# -------------------- API: Events & health --------------------
@app.get('/api/events')
def api_events(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent membership and reward events.

    Client polling strategy:
        1. First call without 'since' to load the current backlog.
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/events?since=<next_cursor>
    """
    return get_web_events(since)


@app.get('/api/health/invariants')
def api_invariants():
    with lock:
        problems = get_registry().check_invariants()
    return {"consistent": not problems, "problems": problems}
