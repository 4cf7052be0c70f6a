"""Simple Event Bus / Observer implementation for membership and reward events.

Event names used so far:
  individual.added -> payload {"individual_id": int, "name": str}
  individual.deleted -> payload {"individual_id": int, "group_id": str | None}
  group.created -> payload {"group_id": str, "member_ids": list[int]}
  group.deleted -> payload {"group_id": str, "member_ids": list[int]}
  group.merged -> payload {"group_id": str, "absorbed_group_id": str, "member_ids": list[int]}
  group.member_skipped -> payload {"group_id": str, "individual_id": int, "reason": str}
  reward.awarded -> payload {"individual_id": int, "rank": int, "points": int, "total_points": int}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
INDIVIDUAL_ADDED = "individual.added"
INDIVIDUAL_DELETED = "individual.deleted"
GROUP_CREATED = "group.created"
GROUP_DELETED = "group.deleted"
GROUP_MERGED = "group.merged"
GROUP_MEMBER_SKIPPED = "group.member_skipped"
REWARD_AWARDED = "reward.awarded"

ALL_EVENTS = (
	INDIVIDUAL_ADDED, INDIVIDUAL_DELETED, GROUP_CREATED, GROUP_DELETED,
	GROUP_MERGED, GROUP_MEMBER_SKIPPED, REWARD_AWARDED,
)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				# Listener errors are logged; delivery to the remaining listeners continues
				logger.exception("[EventBus] Error delivering %s to %s", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def create_event(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	"EventBus", "GLOBAL_EVENT_BUS", "create_event", "ALL_EVENTS",
	"INDIVIDUAL_ADDED", "INDIVIDUAL_DELETED", "GROUP_CREATED", "GROUP_DELETED",
	"GROUP_MERGED", "GROUP_MEMBER_SKIPPED", "REWARD_AWARDED",
]
