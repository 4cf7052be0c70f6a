"""Daily rankings, group totals, rewards and goal suggestions.

The engine only reads the registry, except for two explicit writes that go
through registry methods: awarded points and the derived group step total.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from steptrack.domain.Group import Group
from steptrack.domain.Individual import Individual
from steptrack.domain.MembershipRegistry import MembershipRegistry
from steptrack.domain.Result import Result, Status
from steptrack.events.event_helpers import publish_reward_awarded
from steptrack.utilities.constants import (
    TOP_N_DEFAULT, REWARD_POINTS, SUGGESTION_MIN_DAYS,
    CONSISTENT_ACHIEVER_DAYS, CONSISTENT_MISS_DAYS,
    EXCEED_RATIO, INCREASE_RATIO, SHORTFALL_RATIO, DECREASE_RATIO
)

__all__ = ["RankingEngine", "GroupAchievement", "Reward", "GoalSuggestion"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupAchievement:
    achieved: bool
    total: int
    goal: int

    @property
    def remaining(self) -> int:
        return max(self.goal - self.total, 0)


@dataclass(frozen=True)
class Reward:
    rank: int  # 0-based
    points: int
    total_points: int


@dataclass(frozen=True)
class GoalSuggestion:
    current_goal: int
    suggested_goal: int
    achieved_days: int
    average_steps: float
    message: str

    @property
    def changed(self) -> bool:
        return self.suggested_goal != self.current_goal


class RankingEngine:
    def __init__(self, registry: MembershipRegistry):
        self.registry = registry

    # --- Individuals ------------------------------------------------------
    def top_daily_achievers(self, n: int = TOP_N_DEFAULT) -> List[Individual]:
        """Individuals whose last recorded day meets their goal, best first.

        Ties keep registry (id) order because sorted() is stable.
        """
        eligible = [ind for ind in self.registry.individuals() if ind.met_daily_goal()]
        eligible.sort(key=lambda ind: ind.today_steps, reverse=True)
        return eligible[:max(n, 0)]

    def reward_if_top_n(self, individual_id: int, n: int = TOP_N_DEFAULT) -> Result:
        """Award rank points if the individual is currently among the top daily achievers.

        Points accumulate on every qualifying call; calling twice on the same
        day awards twice.
        """
        individual = self.registry.lookup_individual(individual_id)
        if individual is None:
            return Result.failure(Status.NOT_FOUND, f"Individual with ID {individual_id} not found.")

        top = self.top_daily_achievers(n)
        rank = next((i for i, ind in enumerate(top) if ind.id == individual_id), None)
        if rank is None or rank not in REWARD_POINTS:
            return Result(Status.NOT_IN_TOP_N, individual.points,
                          f"{individual.name} is not in the top {n} daily goal achievers today.")

        points = REWARD_POINTS[rank]
        total = self.registry.award_points(individual_id, points).value
        logger.info("Awarded %s points to %s (ID: %s) for rank %s", points, individual.name, individual_id, rank + 1)
        publish_reward_awarded(self.registry.event_bus, individual_id, rank, points, total)
        return Result.success(Reward(rank, points, total),
                              f"Congratulations! You are Rank {rank + 1} and earned {points} points!")

    def suggest_goal_update(self, individual_id: int) -> Result:
        """Suggest a new daily goal from the last week of history. Never applies it."""
        individual = self.registry.lookup_individual(individual_id)
        if individual is None:
            return Result.failure(Status.NOT_FOUND, f"Individual with ID {individual_id} not found.")

        steps = individual.weekly_step_count
        goal = individual.daily_step_goal
        if len(steps) < SUGGESTION_MIN_DAYS:
            return Result.failure(
                Status.INSUFFICIENT_DATA,
                f"Not enough weekly data to provide a meaningful suggestion (need {SUGGESTION_MIN_DAYS} days)."
            )

        achieved_days = sum(1 for s in steps if s >= goal)
        average = sum(steps) / len(steps)
        new_goal = goal

        if achieved_days >= CONSISTENT_ACHIEVER_DAYS:
            if average > goal * EXCEED_RATIO:
                new_goal = math.floor(goal * INCREASE_RATIO)
                message = ("You consistently achieve your daily goal and often exceed it! "
                           f"Consider increasing your daily goal to {new_goal} steps to challenge yourself further.")
            else:
                message = ("You consistently achieve your daily goal. Keep up the great work! "
                           f"Current goal of {goal} steps seems appropriate.")
        elif achieved_days <= CONSISTENT_MISS_DAYS:
            if average < goal * SHORTFALL_RATIO:
                new_goal = math.floor(goal * DECREASE_RATIO)
                message = ("You are consistently missing your daily goal. "
                           f"Consider lowering your daily goal to {new_goal} steps to build consistency and confidence.")
            else:
                message = ("You sometimes miss your daily goal. Review your activity patterns. "
                           f"Current goal of {goal} steps might be achievable with slight adjustments.")
        else:
            message = f"Your performance is mixed. Current goal of {goal} steps is a good target. Focus on consistency."

        return Result.success(GoalSuggestion(goal, new_goal, achieved_days, average, message), message)

    # --- Groups -----------------------------------------------------------
    def group_total_steps(self, group: Group) -> int:
        """Sum of every recorded day of every current member. Unknown members count as 0."""
        total = 0
        for member_id in group.member_ids:
            individual = self.registry.lookup_individual(member_id)
            if individual:
                total += individual.weekly_total()
        return total

    def check_group_achievement(self, group_id: str) -> Result:
        group = self.registry.lookup_group(group_id)
        if group is None:
            return Result.failure(Status.NOT_FOUND, f"Group with ID {group_id} not found.")
        total = self.group_total_steps(group)
        self.registry.set_group_total(group_id, total)
        achievement = GroupAchievement(total >= group.weekly_group_goal, total, group.weekly_group_goal)
        if achievement.achieved:
            message = f"Congratulations! Group '{group.group_name}' has achieved its weekly goal!"
        else:
            message = (f"Group '{group.group_name}' has not yet achieved its weekly goal. "
                       f"Needs {achievement.remaining} more steps.")
        return Result.success(achievement, message)

    def leaderboard(self, groups: Optional[Iterable[Group]] = None) -> List[Tuple[Group, int]]:
        """Groups paired with their weekly totals, highest first; ties keep input order.

        Defaults to every group in the registry.
        """
        pool = self.registry.groups() if groups is None else list(groups)
        ranked = []
        for group in pool:
            ranked.append((group, self.group_total_steps(group)))
        ranked.sort(key=lambda pair: pair[1], reverse=True)
        return ranked
