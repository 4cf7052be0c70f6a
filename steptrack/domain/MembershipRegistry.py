"""Membership registry: individuals and groups kept in two ordered stores.

The registry owns every Individual and Group record and is the only place
where an individual's ``current_group_id`` and a group's ``member_ids`` are
written. Public lookups return copies, so callers can read freely without
being able to break the pairing between the two stores:

  - every member id of a group is an existing individual pointing back at it
  - every individual's group id is None or a group that lists them
  - no group has more than MAX_MEMBERS members
  - ids are unique per store
"""
from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from steptrack.domain.Group import Group
from steptrack.domain.Individual import Individual
from steptrack.domain.OrderedStore import OrderedStore
from steptrack.domain.Result import Result, Status
from steptrack.events.Event_Bus import GLOBAL_EVENT_BUS, EventBus
from steptrack.events.event_helpers import (
    publish_individual_added, publish_individual_deleted,
    publish_group_deleted, publish_member_skipped
)
from steptrack.utilities.constants import MAX_MEMBERS, HISTORY_DAYS

logger = logging.getLogger(__name__)


class MembershipRegistry:
    def __init__(self, event_bus: Optional[EventBus] = None):
        self._individuals: OrderedStore[int, Individual] = OrderedStore(lambda ind: ind.id)
        self._groups: OrderedStore[str, Group] = OrderedStore(lambda grp: grp.group_id)
        self._event_bus = event_bus or GLOBAL_EVENT_BUS

    # --- Observer helpers -------------------------------------------------
    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    def set_event_bus(self, bus: EventBus):
        self._event_bus = bus
        return self

    # --- Individuals ------------------------------------------------------
    def add_individual(self, id: int, name: str, age: int, daily_step_goal: int,
                       weekly_step_count: Optional[Iterable[int]] = None) -> Result:
        '''
        Adds a new, ungrouped individual. Fails with ALREADY_EXISTS when the id is taken.
        '''
        if daily_step_goal <= 0:
            raise ValueError(f"Daily step goal must be positive: {daily_step_goal}")
        steps = list(weekly_step_count or [])
        if any(s < 0 for s in steps):
            raise ValueError(f"Step counts cannot be negative: {steps}")
        if self._individuals.contains(id):
            return Result.failure(Status.ALREADY_EXISTS, f"Individual with ID {id} already exists.")
        individual = Individual(id, name, age, daily_step_goal, steps)
        self._individuals.insert(individual)
        logger.info("Individual %s (ID: %s) added", name, id)
        publish_individual_added(self._event_bus, id, name)
        return Result.success(individual.copy(), f"Individual {name} (ID: {id}) added successfully.")

    def lookup_individual(self, id: int) -> Optional[Individual]:
        individual = self._individuals.search(id)
        return individual.copy() if individual else None

    def has_individual(self, id: int) -> bool:
        return self._individuals.contains(id)

    def delete_individual(self, id: int) -> Result:
        '''
        Deletes an individual. A grouped individual is first removed from
        the owning group's member list, then the record itself is removed.
        '''
        individual = self._individuals.search(id)
        if individual is None:
            return Result.failure(Status.NOT_FOUND, f"Individual with ID {id} not found.")

        group_id = individual.current_group_id
        if group_id:
            group = self._groups.search(group_id)
            if group and group.discard_member(id):
                logger.info("Individual %s removed from group %s", individual.name, group.group_name)
            individual.current_group_id = None

        self._individuals.remove(id)
        logger.info("Individual %s (ID: %s) deleted", individual.name, id)
        publish_individual_deleted(self._event_bus, id, group_id)
        return Result.success(individual.copy(), f"Individual {individual.name} (ID: {id}) deleted successfully.")

    def award_points(self, id: int, points: int) -> Result:
        '''Adds points to the individual's running total. Points never decrease.'''
        if points < 0:
            raise ValueError(f"Points awarded cannot be negative: {points}")
        individual = self._individuals.search(id)
        if individual is None:
            return Result.failure(Status.NOT_FOUND, f"Individual with ID {id} not found.")
        individual.points += points
        return Result.success(individual.points)

    def update_daily_goal(self, id: int, daily_step_goal: int) -> Result:
        if daily_step_goal <= 0:
            raise ValueError(f"Daily step goal must be positive: {daily_step_goal}")
        individual = self._individuals.search(id)
        if individual is None:
            return Result.failure(Status.NOT_FOUND, f"Individual with ID {id} not found.")
        individual.daily_step_goal = daily_step_goal
        return Result.success(individual.copy(), f"Daily goal set to {daily_step_goal}.")

    def record_steps(self, id: int, steps: int) -> Result:
        '''
        Appends a new day of steps. The history is a rolling window of the
        last HISTORY_DAYS days, so the oldest day drops off once full.
        '''
        if steps < 0:
            raise ValueError(f"Step count cannot be negative: {steps}")
        individual = self._individuals.search(id)
        if individual is None:
            return Result.failure(Status.NOT_FOUND, f"Individual with ID {id} not found.")
        individual.weekly_step_count.append(steps)
        del individual.weekly_step_count[:-HISTORY_DAYS]
        return Result.success(individual.copy())

    def set_weekly_steps(self, id: int, weekly_step_count: Iterable[int]) -> Result:
        steps = list(weekly_step_count)
        if any(s < 0 for s in steps):
            raise ValueError(f"Step counts cannot be negative: {steps}")
        individual = self._individuals.search(id)
        if individual is None:
            return Result.failure(Status.NOT_FOUND, f"Individual with ID {id} not found.")
        individual.weekly_step_count = steps
        return Result.success(individual.copy())

    def individuals(self) -> List[Individual]:
        '''All individuals in id order (copies).'''
        return [ind.copy() for ind in self._individuals.all_values()]

    def individuals_in_range(self, start_id: int, end_id: int) -> List[Individual]:
        return [ind.copy() for ind in self._individuals.range(start_id, end_id)]

    def individual_count(self) -> int:
        return self._individuals.size()

    # --- Groups -----------------------------------------------------------
    def lookup_group(self, group_id: str) -> Optional[Group]:
        group = self._groups.search(group_id)
        return group.copy() if group else None

    def has_group(self, group_id: str) -> bool:
        return self._groups.contains(group_id)

    def delete_group(self, group_id: str) -> Result:
        '''
        Deletes a group and un-groups (does not delete) its members. Member
        back-references are cleared before the group record is removed.
        '''
        group = self._groups.search(group_id)
        if group is None:
            return Result.failure(Status.NOT_FOUND, f"Group with ID {group_id} not found.")

        released = []
        for member_id in group.member_ids:
            individual = self._individuals.search(member_id)
            if individual and individual.current_group_id == group_id:
                individual.current_group_id = None
                released.append(member_id)
                logger.info("Individual %s (ID: %s) is now un-grouped", individual.name, member_id)

        if not self._groups.remove(group_id):
            return Result.failure(Status.INCONSISTENT_STATE,
                                  f"Group {group_id} was found but could not be removed.")
        logger.info("Group '%s' (ID: %s) deleted", group.group_name, group_id)
        publish_group_deleted(self._event_bus, group_id, released)
        return Result.success(released, f"Group '{group.group_name}' (ID: {group_id}) deleted successfully.")

    def set_group_total(self, group_id: str, total_weekly_steps: int) -> Result:
        '''Stores the derived weekly step total computed by the ranking engine.'''
        group = self._groups.search(group_id)
        if group is None:
            return Result.failure(Status.NOT_FOUND, f"Group with ID {group_id} not found.")
        group.total_weekly_steps = total_weekly_steps
        return Result.success(total_weekly_steps)

    def groups(self) -> List[Group]:
        '''All groups in group id order (copies).'''
        return [grp.copy() for grp in self._groups.all_values()]

    def groups_in_range(self, start_group_id: str, end_group_id: str) -> List[Group]:
        '''Groups whose ids fall in [start, end] using plain string ordering (so "G10" < "G2").'''
        return [grp.copy() for grp in self._groups.range(start_group_id, end_group_id)]

    def group_count(self) -> int:
        return self._groups.size()

    # --- Linking ----------------------------------------------------------
    def link_group(self, group_id: str, group_name: str, member_ids: Iterable[int],
                   weekly_group_goal: int) -> Group:
        '''
        Inserts a group and points each member back at it in one step.

        Used by GroupOperations and restore_group once they have filtered the
        candidates. The group id must be free and every member must exist,
        be ungrouped and fit within MAX_MEMBERS; otherwise ValueError is
        raised and nothing changes.
        '''
        group = Group(group_id, group_name, member_ids, weekly_group_goal)
        if self._groups.contains(group_id):
            raise ValueError(f"Group with ID {group_id} already exists.")
        if len(group.member_ids) > MAX_MEMBERS:
            raise ValueError(f"A group cannot have more than {MAX_MEMBERS} members.")
        for member_id in group.member_ids:
            individual = self._individuals.search(member_id)
            if individual is None or individual.current_group_id:
                raise ValueError(f"Individual {member_id} is missing or already grouped.")
        self._groups.insert(group)
        for member_id in group.member_ids:
            self._individuals.search(member_id).current_group_id = group_id
        return group.copy()

    def restore_group(self, group_id: str, group_name: str, member_ids: Iterable[int],
                      weekly_group_goal: int) -> Result:
        '''
        Re-creates a persisted group while loading. Unlike create_group this
        keeps a group even when no member survives, because a saved group may
        legitimately be empty after its members were deleted. Members that
        are missing, already grouped or beyond MAX_MEMBERS are dropped with a warning.
        '''
        if self._groups.contains(group_id):
            return Result.failure(Status.ALREADY_EXISTS, f"Group with ID {group_id} already exists.")

        warnings: List[str] = []
        accepted: List[int] = []
        for member_id in dict.fromkeys(member_ids):
            individual = self._individuals.search(member_id)
            if individual is None:
                reason, msg = 'not_found', f"Individual with ID {member_id} not found. Skipping."
            elif individual.current_group_id:
                reason, msg = 'already_grouped', (f"Individual {individual.name} (ID: {member_id}) already "
                                                  f"belongs to group {individual.current_group_id}. Skipping.")
            elif len(accepted) >= MAX_MEMBERS:
                reason, msg = 'over_capacity', (f"Group {group_id} is full ({MAX_MEMBERS} members); "
                                                f"dropping member {member_id}.")
            else:
                accepted.append(member_id)
                continue
            logger.warning(msg)
            warnings.append(msg)
            publish_member_skipped(self._event_bus, group_id, member_id, reason)

        group = self.link_group(group_id, group_name, accepted, weekly_group_goal)
        return Result.success(group, warnings=warnings)

    # --- Consistency ------------------------------------------------------
    def check_invariants(self) -> List[str]:
        '''Returns a description of every membership invariant violation (empty when consistent).'''
        problems: List[str] = []
        seen_ids = set()
        for individual in self._individuals.all_values():
            if individual.id in seen_ids:
                problems.append(f"duplicate individual id {individual.id}")
            seen_ids.add(individual.id)
            if individual.current_group_id:
                group = self._groups.search(individual.current_group_id)
                if group is None:
                    problems.append(f"individual {individual.id} points at missing group {individual.current_group_id}")
                elif individual.id not in group.member_ids:
                    problems.append(f"individual {individual.id} not listed by group {group.group_id}")
        seen_groups = set()
        for group in self._groups.all_values():
            if group.group_id in seen_groups:
                problems.append(f"duplicate group id {group.group_id}")
            seen_groups.add(group.group_id)
            if len(group.member_ids) > MAX_MEMBERS:
                problems.append(f"group {group.group_id} has {len(group.member_ids)} members")
            for member_id in group.member_ids:
                individual = self._individuals.search(member_id)
                if individual is None:
                    problems.append(f"group {group.group_id} lists missing individual {member_id}")
                elif individual.current_group_id != group.group_id:
                    problems.append(f"group {group.group_id} lists {member_id} who points at {individual.current_group_id}")
        return problems

    def __repr__(self) -> str:
        return f"MembershipRegistry(individuals={len(self._individuals)}, groups={len(self._groups)})"
