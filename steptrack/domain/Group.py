"""Group domain entity: id, name, sorted unique member ids, weekly goal, derived total steps."""
from typing import Iterable, List, Optional


class Group:
    def __init__(self, group_id: str, group_name: str = "", member_ids: Optional[Iterable[int]] = None,
                 weekly_group_goal: int = 0, total_weekly_steps: int = 0):
        self.group_id = group_id
        self.group_name = group_name
        # Deduplicated and sorted for deterministic output
        self.member_ids: List[int] = sorted(set(member_ids)) if member_ids else []
        self.weekly_group_goal = weekly_group_goal
        self.total_weekly_steps = total_weekly_steps

    def discard_member(self, individual_id: int) -> bool:
        '''Removes a member id if present. Returns whether it was removed.'''
        if individual_id in self.member_ids:
            self.member_ids.remove(individual_id)
            return True
        return False

    def copy(self) -> "Group":
        return Group(self.group_id, self.group_name, self.member_ids,
                     self.weekly_group_goal, self.total_weekly_steps)

    def __str__(self) -> str:
        members = ",".join(str(m) for m in self.member_ids)
        return (f"Group(ID={self.group_id}, Name={self.group_name}, Members=[{members}], "
                f"Goal={self.weekly_group_goal}, TotalSteps={self.total_weekly_steps})")

    __repr__ = __str__

    def to_dict(self):
        return {
            "group_id": self.group_id,
            "group_name": self.group_name,
            "member_ids": list(self.member_ids),
            "weekly_group_goal": self.weekly_group_goal,
            "total_weekly_steps": self.total_weekly_steps,
        }
