from fastapi import APIRouter, HTTPException
import logging

from steptrack.api.api_state import lock, get_registry, persist, raise_for_result
from steptrack.domain.Result import Status
from steptrack.logic.groups.operations import GroupOperations
from steptrack.logic.ranking.engine import RankingEngine
from steptrack.utilities.validators import IndividualInput, StepsInput, GoalInput

router = APIRouter(prefix="/api/individuals", tags=["individuals"])
logger = logging.getLogger(__name__)


@router.get("")
def list_individuals(start: int | None = None, end: int | None = None):
    """All individuals in id order, or only ids in [start, end]. The bounds go together."""
    if (start is None) != (end is None):
        raise HTTPException(status_code=400, detail="Provide both 'start' and 'end', or neither")
    with lock:
        registry = get_registry()
        if start is not None:
            individuals = registry.individuals_in_range(start, end)
        else:
            individuals = registry.individuals()
    return {"count": len(individuals), "individuals": [ind.to_dict() for ind in individuals]}


@router.post("", status_code=201)
def add_individual(payload: IndividualInput):
    with lock:
        result = raise_for_result(get_registry().add_individual(
            payload.id, payload.name, payload.age, payload.daily_step_goal, payload.weekly_step_count
        ))
        persist()
    return {"success": True, "message": result.message, "individual": result.value.to_dict()}


@router.get("/{individual_id}")
def get_individual(individual_id: int):
    with lock:
        individual = get_registry().lookup_individual(individual_id)
    if individual is None:
        raise HTTPException(status_code=404, detail=f"Individual with ID {individual_id} not found.")
    return individual.to_dict()


@router.delete("/{individual_id}")
def delete_individual(individual_id: int):
    with lock:
        result = raise_for_result(GroupOperations(get_registry()).delete_individual(individual_id))
        persist()
    return {"success": True, "message": result.message}


@router.put("/{individual_id}/steps")
def update_steps(individual_id: int, payload: StepsInput):
    """Append one day (steps) or replace the whole history (weekly_step_count)."""
    if (payload.steps is None) == (payload.weekly_step_count is None):
        raise HTTPException(status_code=400, detail="Provide exactly one of 'steps' or 'weekly_step_count'")
    with lock:
        registry = get_registry()
        if payload.steps is not None:
            result = registry.record_steps(individual_id, payload.steps)
        else:
            result = registry.set_weekly_steps(individual_id, payload.weekly_step_count)
        raise_for_result(result)
        persist()
    return result.value.to_dict()


@router.put("/{individual_id}/goal")
def update_goal(individual_id: int, payload: GoalInput):
    with lock:
        result = raise_for_result(get_registry().update_daily_goal(individual_id, payload.daily_step_goal))
        persist()
    return result.value.to_dict()


@router.post("/{individual_id}/rewards")
def check_rewards(individual_id: int):
    """Award rank points when the individual is in today's top 3. Repeated calls award again."""
    with lock:
        result = RankingEngine(get_registry()).reward_if_top_n(individual_id)
        if result.status is Status.NOT_IN_TOP_N:
            return {"awarded": False, "message": result.message, "total_points": result.value}
        raise_for_result(result)
        persist()
    reward = result.value
    logger.info("Reward check for %s: rank %s", individual_id, reward.rank + 1)
    return {
        "awarded": True,
        "rank": reward.rank + 1,
        "points": reward.points,
        "total_points": reward.total_points,
        "message": result.message
    }


@router.get("/{individual_id}/goal-suggestion")
def goal_suggestion(individual_id: int):
    """Suggest a daily goal. Nothing is stored; apply it with PUT /{id}/goal."""
    with lock:
        result = raise_for_result(RankingEngine(get_registry()).suggest_goal_update(individual_id))
    suggestion = result.value
    return {
        "current_goal": suggestion.current_goal,
        "suggested_goal": suggestion.suggested_goal,
        "changed": suggestion.changed,
        "achieved_days": suggestion.achieved_days,
        "average_steps": round(suggestion.average_steps, 2),
        "message": suggestion.message
    }
