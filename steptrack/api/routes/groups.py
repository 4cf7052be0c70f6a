from fastapi import APIRouter, HTTPException, Query

from steptrack.api.api_state import lock, get_registry, persist, raise_for_result
from steptrack.logic.groups.operations import GroupOperations
from steptrack.logic.ranking.engine import RankingEngine
from steptrack.logic.reporting.group_range import compute_group_range
from steptrack.utilities.validators import GroupCreateInput, GroupMergeInput

router = APIRouter(prefix="/api/groups", tags=["groups"])


@router.get("")
def list_groups():
    with lock:
        groups = get_registry().groups()
    return {"count": len(groups), "groups": [g.to_dict() for g in groups]}


@router.post("", status_code=201)
def create_group(payload: GroupCreateInput):
    """Create a group. Skipped candidates are reported in 'warnings'."""
    with lock:
        result = raise_for_result(GroupOperations(get_registry()).create_group(
            payload.group_id, payload.group_name, payload.member_ids, payload.weekly_group_goal
        ))
        persist()
    return {"success": True, "message": result.message, "warnings": result.warnings,
            "group": result.value.to_dict()}


@router.post("/merge")
def merge_groups(payload: GroupMergeInput):
    with lock:
        result = raise_for_result(GroupOperations(get_registry()).merge_groups(
            payload.group_id_1, payload.group_id_2, payload.new_group_name, payload.new_weekly_goal
        ))
        persist()
    return {"success": True, "message": result.message, "group": result.value.to_dict()}


@router.get("/range")
def group_range(start: str = Query(..., description="First group id (inclusive)"),
                end: str = Query(..., description="Last group id (inclusive)")):
    """Groups whose ids fall in [start, end] (string order), ranked by weekly steps."""
    with lock:
        groups = compute_group_range(get_registry(), start, end)
    return {"start": start, "end": end, "count": len(groups), "groups": groups}


@router.get("/{group_id}")
def get_group(group_id: str):
    with lock:
        group = get_registry().lookup_group(group_id)
    if group is None:
        raise HTTPException(status_code=404, detail=f"Group with ID {group_id} not found.")
    return group.to_dict()


@router.delete("/{group_id}")
def delete_group(group_id: str):
    """Delete a group; its members become un-grouped."""
    with lock:
        result = raise_for_result(GroupOperations(get_registry()).delete_group(group_id))
        persist()
    return {"success": True, "message": result.message, "ungrouped": result.value}


@router.get("/{group_id}/achievement")
def group_achievement(group_id: str):
    with lock:
        result = raise_for_result(RankingEngine(get_registry()).check_group_achievement(group_id))
        # The refreshed total is derived state; no save needed
    achievement = result.value
    return {
        "group_id": group_id,
        "achieved": achievement.achieved,
        "total_weekly_steps": achievement.total,
        "weekly_group_goal": achievement.goal,
        "remaining": achievement.remaining,
        "message": result.message
    }
