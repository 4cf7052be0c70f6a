"""Process-wide registry shared by the HTTP routes.

The registry is loaded lazily from the configured CSV repository. Routes
hold ``lock`` around every core call that touches the registry and around
the write-through ``persist()`` that follows a mutation, because FastAPI
runs sync endpoints in a threadpool.
"""
import logging
from threading import RLock
from typing import Optional

from fastapi import HTTPException

from steptrack.domain.MembershipRegistry import MembershipRegistry
from steptrack.domain.Result import Result, Status
from steptrack.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from steptrack.infra.Registry_Repository import RegistryRepository
from steptrack.infra.sample_data import generate_sample_data_csv
from steptrack.utilities.config import SEED_SAMPLE_DATA

logger = logging.getLogger(__name__)

lock = RLock()
_repository = RegistryRepository()
_registry: Optional[MembershipRegistry] = None
_seed = SEED_SAMPLE_DATA

STATUS_TO_HTTP = {
    Status.NOT_FOUND: 404,
    Status.ALREADY_EXISTS: 409,
    Status.TOO_MANY_MEMBERS: 400,
    Status.NO_VALID_MEMBERS: 400,
    Status.INSUFFICIENT_DATA: 400,
    Status.INCONSISTENT_STATE: 500,
}


def configure(repository: RegistryRepository, seed: bool = False) -> MembershipRegistry:
    """Point the API at another repository (used by tests and startup) and reload."""
    global _repository, _registry, _seed
    with lock:
        _repository = repository
        _registry = None
        _seed = seed
        return get_registry()


def get_registry() -> MembershipRegistry:
    global _registry
    with lock:
        if _registry is None:
            if _seed and not _repository.exists():
                generate_sample_data_csv(_repository.individuals_file, _repository.groups_file)
            # Loading goes through a private bus so the startup load is not replayed as live events
            _registry = _repository.load(EventBus()).set_event_bus(GLOBAL_EVENT_BUS)
        return _registry


def persist():
    """Write-through save after a mutating operation."""
    with lock:
        if _registry is not None:
            _repository.save(_registry)


def raise_for_result(result: Result) -> Result:
    """Translate a failed core Result into an HTTPException; pass successes through."""
    if result.ok:
        return result
    status_code = STATUS_TO_HTTP.get(result.status, 400)
    if status_code >= 500:
        logger.error("Operation failed: %s", result.message)
    raise HTTPException(
        status_code=status_code,
        detail={"status": result.status.value, "message": result.message, "warnings": result.warnings}
    )


__all__ = ['lock', 'configure', 'get_registry', 'persist', 'raise_for_result', 'STATUS_TO_HTTP']
