"""Group-level transactions over the membership registry.

create_group, delete_group, delete_individual and merge_groups either
complete fully or leave the registry untouched, with one exception that is
reported rather than hidden: a merge whose second delete fails after the
first one succeeded returns INCONSISTENT_STATE (no automatic rollback).
"""
from __future__ import annotations
import logging
from typing import Iterable, List

from steptrack.domain.MembershipRegistry import MembershipRegistry
from steptrack.domain.Result import Result, Status
from steptrack.events.event_helpers import (
    publish_group_created, publish_group_merged, publish_member_skipped
)
from steptrack.utilities.constants import MAX_MEMBERS

__all__ = ["GroupOperations"]

logger = logging.getLogger(__name__)


class GroupOperations:
    def __init__(self, registry: MembershipRegistry):
        self.registry = registry

    def create_group(self, group_id: str, group_name: str, candidate_ids: Iterable[int],
                     weekly_group_goal: int) -> Result:
        """Create a group from candidate member ids.

        The MAX_MEMBERS cap applies to the raw number of requested ids, before
        any filtering. Candidates that do not exist or already belong to a
        group are skipped with a warning; repeated ids count once. When no
        candidate survives, nothing is created (NO_VALID_MEMBERS).
        """
        candidates = list(candidate_ids)
        if self.registry.has_group(group_id):
            return Result.failure(Status.ALREADY_EXISTS, f"Group with ID {group_id} already exists.")
        if len(candidates) > MAX_MEMBERS:
            return Result.failure(Status.TOO_MANY_MEMBERS,
                                  f"A group cannot have more than {MAX_MEMBERS} members.")

        warnings: List[str] = []
        accepted: List[int] = []
        for member_id in candidates:
            if member_id in accepted:
                continue
            individual = self.registry.lookup_individual(member_id)
            if individual is None:
                msg = f"Individual with ID {member_id} not found. Skipping."
                reason = 'not_found'
            elif individual.current_group_id:
                msg = (f"Individual {individual.name} (ID: {member_id}) already belongs to "
                       f"group {individual.current_group_id}. Skipping.")
                reason = 'already_grouped'
            else:
                accepted.append(member_id)
                continue
            logger.warning(msg)
            warnings.append(msg)
            publish_member_skipped(self.registry.event_bus, group_id, member_id, reason)

        if not accepted:
            return Result.failure(Status.NO_VALID_MEMBERS, "No valid members to create the group.", warnings)

        group = self.registry.link_group(group_id, group_name, accepted, weekly_group_goal)
        logger.info("Group '%s' (ID: %s) created with members %s", group_name, group_id, group.member_ids)
        publish_group_created(self.registry.event_bus, group_id, group.member_ids)
        return Result.success(group, f"Group '{group_name}' (ID: {group_id}) created successfully.", warnings)

    def delete_group(self, group_id: str) -> Result:
        return self.registry.delete_group(group_id)

    def delete_individual(self, individual_id: int) -> Result:
        return self.registry.delete_individual(individual_id)

    def merge_groups(self, group_id_1: str, group_id_2: str, new_group_name: str,
                     new_weekly_goal: int) -> Result:
        """Merge two groups into a new group that reuses group_id_1.

        Both groups must exist and the union of their members must fit in
        MAX_MEMBERS; otherwise nothing changes. The originals are then deleted
        (which un-groups their members) and the merged group is linked.
        """
        group1 = self.registry.lookup_group(group_id_1)
        if group1 is None:
            return Result.failure(Status.NOT_FOUND, f"Group with ID {group_id_1} not found.")
        group2 = self.registry.lookup_group(group_id_2)
        if group2 is None:
            return Result.failure(Status.NOT_FOUND, f"Group with ID {group_id_2} not found.")

        merged_ids = sorted(set(group1.member_ids) | set(group2.member_ids))
        if len(merged_ids) > MAX_MEMBERS:
            return Result.failure(
                Status.TOO_MANY_MEMBERS,
                f"Merging these groups would exceed the maximum of {MAX_MEMBERS} members. "
                "Please remove members from one of the groups before merging."
            )

        deleted = self.registry.delete_group(group_id_1)
        if not deleted.ok:
            return Result.failure(deleted.status,
                                  f"Could not delete original group {group_id_1} during merge: {deleted.message}")
        if group_id_2 != group_id_1:
            deleted = self.registry.delete_group(group_id_2)
            if not deleted.ok:
                msg = (f"Group {group_id_1} was deleted but group {group_id_2} could not be: "
                       f"{deleted.message} Members {group1.member_ids} are now un-grouped.")
                logger.error(msg)
                return Result.failure(Status.INCONSISTENT_STATE, msg)

        group = self.registry.link_group(group_id_1, new_group_name, merged_ids, new_weekly_goal)
        logger.info("Groups '%s' and '%s' merged into '%s' (ID: %s)",
                    group1.group_name, group2.group_name, new_group_name, group_id_1)
        publish_group_merged(self.registry.event_bus, group_id_1, group_id_2, group.member_ids)
        return Result.success(
            group,
            f"Groups '{group1.group_name}' and '{group2.group_name}' merged into new group "
            f"'{new_group_name}' (ID: {group_id_1})."
        )
