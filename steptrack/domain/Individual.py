"""Individual domain entity: identity, daily goal, weekly step history, group back-reference, points."""
from typing import List, Optional


class Individual:
    def __init__(self, id: int, name: str = "", age: int = 0, daily_step_goal: int = 0,
                 weekly_step_count: Optional[List[int]] = None, current_group_id: Optional[str] = None,
                 points: int = 0):
        # Avoid mutable default arguments
        self.id = id
        self.name = name
        self.age = age
        self.daily_step_goal = daily_step_goal
        self.weekly_step_count = list(weekly_step_count) if weekly_step_count else []
        self.current_group_id = current_group_id
        self.points = points

    @property
    def today_steps(self) -> Optional[int]:
        '''Steps of the most recent day, or None when there is no history.'''
        return self.weekly_step_count[-1] if self.weekly_step_count else None

    def met_daily_goal(self) -> bool:
        today = self.today_steps
        return today is not None and today >= self.daily_step_goal

    def weekly_total(self) -> int:
        return sum(self.weekly_step_count)

    def copy(self) -> "Individual":
        return Individual(self.id, self.name, self.age, self.daily_step_goal,
                          self.weekly_step_count, self.current_group_id, self.points)

    def __str__(self) -> str:
        steps = ",".join(str(s) for s in self.weekly_step_count)
        group = self.current_group_id if self.current_group_id else "None"
        return (f"Individual(ID={self.id}, Name={self.name}, Age={self.age}, "
                f"DailyGoal={self.daily_step_goal}, WeeklySteps=[{steps}], "
                f"Group={group}, Points={self.points})")

    __repr__ = __str__

    def to_dict(self):
        '''Converts the Individual to a plain dictionary for JSON responses.'''
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "daily_step_goal": self.daily_step_goal,
            "weekly_step_count": list(self.weekly_step_count),
            "current_group_id": self.current_group_id,
            "points": self.points,
        }
