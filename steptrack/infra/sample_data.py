"""Sample data generation: 20 individuals and five starter groups written as CSV."""
import logging
from pathlib import Path
from typing import List, Union

from steptrack.domain.MembershipRegistry import MembershipRegistry
from steptrack.events.Event_Bus import EventBus
from steptrack.infra.Registry_Repository import RegistryRepository

__all__ = ["generate_sample_data_csv", "build_sample_registry", "sample_week", "SAMPLE_GROUPS"]

logger = logging.getLogger(__name__)

SAMPLE_INDIVIDUALS = 20
SAMPLE_GROUPS = [
    ("G1", "Fitness Fanatics", [1, 2, 3, 4, 5], 35000),
    ("G2", "Step Squad", [6, 7, 8, 9], 30000),
    ("G3", "Trail Blazers", [10, 11, 12], 25000),
    ("G4", "Pace Setters", [13, 14], 20000),
    ("G5", "Solo Stars", [15], 10000),
]  # Individuals 16-20 start un-grouped


def sample_week(i: int, daily_goal: int) -> List[int]:
    """Seven days of steps for sample user i.

    Every 3rd user always meets the goal, every 5th (not 3rd) always misses
    it, everyone else alternates.
    """
    steps = []
    for j in range(7):
        day = daily_goal - 500 + j * 100
        if j % 2 == 0:
            day = daily_goal + 200 + j * 50
        if i % 3 == 0:
            day = daily_goal + 100 + j * 50
        elif i % 5 == 0:
            day = daily_goal - 1000 + j * 50
        steps.append(day)
    return steps


def build_sample_registry() -> MembershipRegistry:
    # Private bus: seeding should not show up in the live event feed
    registry = MembershipRegistry(EventBus())
    for i in range(1, SAMPLE_INDIVIDUALS + 1):
        daily_goal = 5000 + i * 100
        registry.add_individual(i, f"User{i}", 20 + (i % 30), daily_goal, sample_week(i, daily_goal))
    for group_id, name, members, goal in SAMPLE_GROUPS:
        registry.restore_group(group_id, name, members, goal)
    return registry


def generate_sample_data_csv(individuals_file: Union[str, Path], groups_file: Union[str, Path]) -> MembershipRegistry:
    """Write the sample individuals and groups CSV files and return the registry they describe."""
    registry = build_sample_registry()
    RegistryRepository(individuals_file, groups_file).save(registry)
    logger.info("Generated sample CSV files '%s' and '%s'", individuals_file, groups_file)
    return registry

