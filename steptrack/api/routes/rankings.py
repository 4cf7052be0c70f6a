from fastapi import APIRouter, Query

from steptrack.api.api_state import lock, get_registry
from steptrack.logic.ranking.engine import RankingEngine
from steptrack.utilities.constants import TOP_N_DEFAULT

router = APIRouter(prefix="/api/rankings", tags=["rankings"])


@router.get("/top")
def top_daily_achievers(n: int = Query(default=TOP_N_DEFAULT, ge=1, le=100)):
    """Individuals who met today's goal, most steps first."""
    with lock:
        top = RankingEngine(get_registry()).top_daily_achievers(n)
    return {
        "count": len(top),
        "individuals": [
            {"rank": rank, "id": ind.id, "name": ind.name, "steps": ind.today_steps,
             "daily_step_goal": ind.daily_step_goal}
            for rank, ind in enumerate(top, start=1)
        ]
    }


@router.get("/leaderboard")
def leaderboard():
    with lock:
        ranked = RankingEngine(get_registry()).leaderboard()
    return {
        "count": len(ranked),
        "groups": [
            {"rank": rank, "group_id": g.group_id, "group_name": g.group_name,
             "total_weekly_steps": total, "weekly_group_goal": g.weekly_group_goal}
            for rank, (g, total) in enumerate(ranked, start=1)
        ]
    }
