"""Event helper utilities.

This module provides helper functions for publishing membership and reward
events. Every helper takes the bus to publish on, so components that were
given their own bus (tests, embedded use) never leak onto the global one.

Quick import:
    from steptrack.events.event_helpers import (
        publish_group_created, publish_member_skipped, publish_reward_awarded
    )
"""
from __future__ import annotations
from typing import Iterable, Optional
from .Event_Bus import (
    EventBus,
    INDIVIDUAL_ADDED, INDIVIDUAL_DELETED, GROUP_CREATED, GROUP_DELETED,
    GROUP_MERGED, GROUP_MEMBER_SKIPPED, REWARD_AWARDED,
)

__all__ = [
    'publish_individual_added', 'publish_individual_deleted',
    'publish_group_created', 'publish_group_deleted', 'publish_group_merged',
    'publish_member_skipped', 'publish_reward_awarded',
]


def publish_individual_added(bus: EventBus, individual_id: int, name: str):
    bus.publish(INDIVIDUAL_ADDED, {'individual_id': individual_id, 'name': name})


def publish_individual_deleted(bus: EventBus, individual_id: int, group_id: Optional[str]):
    """Publish an individual.deleted event; group_id is the group they were removed from, if any."""
    bus.publish(INDIVIDUAL_DELETED, {'individual_id': individual_id, 'group_id': group_id})


def publish_group_created(bus: EventBus, group_id: str, member_ids: Iterable[int]):
    bus.publish(GROUP_CREATED, {'group_id': group_id, 'member_ids': list(member_ids)})


def publish_group_deleted(bus: EventBus, group_id: str, member_ids: Iterable[int]):
    """Publish a group.deleted event listing the members that became ungrouped."""
    bus.publish(GROUP_DELETED, {'group_id': group_id, 'member_ids': list(member_ids)})


def publish_group_merged(bus: EventBus, group_id: str, absorbed_group_id: str, member_ids: Iterable[int]):
    bus.publish(GROUP_MERGED, {
        'group_id': group_id,
        'absorbed_group_id': absorbed_group_id,
        'member_ids': list(member_ids)
    })


def publish_member_skipped(bus: EventBus, group_id: str, individual_id: int, reason: str):
    """Publish a warning-level signal for a candidate member that was not added.

    reason is one of 'not_found', 'already_grouped', 'over_capacity'.
    """
    bus.publish(GROUP_MEMBER_SKIPPED, {
        'group_id': group_id,
        'individual_id': individual_id,
        'reason': reason
    })


def publish_reward_awarded(bus: EventBus, individual_id: int, rank: int, points: int, total_points: int):
    bus.publish(REWARD_AWARDED, {
        'individual_id': individual_id,
        'rank': rank,
        'points': points,
        'total_points': total_points
    })
