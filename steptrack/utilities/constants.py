from typing import Final

MAX_MEMBERS: Final[int] = 5
TOP_N_DEFAULT: Final[int] = 3
# Rank index (0-based) -> points earned
REWARD_POINTS: Final[dict[int, int]] = {0: 100, 1: 75, 2: 50}

SUGGESTION_MIN_DAYS: Final[int] = 7
# Days of step history kept per individual
HISTORY_DAYS: Final[int] = 7
CONSISTENT_ACHIEVER_DAYS: Final[int] = 6
CONSISTENT_MISS_DAYS: Final[int] = 2
EXCEED_RATIO: Final[float] = 1.2
INCREASE_RATIO: Final[float] = 1.1
SHORTFALL_RATIO: Final[float] = 0.8
DECREASE_RATIO: Final[float] = 0.9

INDIVIDUALS_HEADER: Final[list[str]] = ["ID", "Name", "Age", "DailyStepGoal", "WeeklyStepCount", "Points"]
GROUPS_HEADER: Final[list[str]] = ["GroupID", "GroupName", "MemberIDs", "WeeklyGroupGoal"]
LIST_SEPARATOR: Final[str] = ";"
