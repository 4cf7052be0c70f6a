"""Group range report.

Builds the structured "groups in an id range" view: every group whose id
falls between two ids (inclusive, string ordering), ranked by total weekly
steps, with member names resolved.
"""
from typing import Any, Dict, List

from steptrack.domain.MembershipRegistry import MembershipRegistry
from steptrack.logic.ranking.engine import RankingEngine


def compute_group_range(registry: MembershipRegistry, start_group_id: str, end_group_id: str) -> List[Dict[str, Any]]:
    """Return ranked group summaries for group ids in [start_group_id, end_group_id].

    Returns list of dicts:
        { rank, group_id, group_name, weekly_group_goal, total_weekly_steps,
          achieved, members: [ { id, name }, ... ] }
    """
    engine = RankingEngine(registry)
    groups = registry.groups_in_range(start_group_id, end_group_id)
    result: List[Dict[str, Any]] = []
    for rank, (group, total) in enumerate(engine.leaderboard(groups), start=1):
        members = []
        for member_id in group.member_ids:
            individual = registry.lookup_individual(member_id)
            if individual:
                members.append({'id': individual.id, 'name': individual.name})
        result.append({
            'rank': rank,
            'group_id': group.group_id,
            'group_name': group.group_name,
            'weekly_group_goal': group.weekly_group_goal,
            'total_weekly_steps': total,
            'achieved': total >= group.weekly_group_goal,
            'members': members
        })
    return result

__all__ = ["compute_group_range"]
