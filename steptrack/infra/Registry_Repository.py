"""CSV persistence for the membership registry (loader and saver)."""
import csv
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from steptrack.domain.MembershipRegistry import MembershipRegistry
from steptrack.events.Event_Bus import EventBus
from steptrack.infra.paths import INDIVIDUALS_FILE, GROUPS_FILE
from steptrack.utilities.constants import INDIVIDUALS_HEADER, GROUPS_HEADER, LIST_SEPARATOR

logger = logging.getLogger(__name__)

# Header used by the first CSV layout: step counts spread over trailing columns, no points
LEGACY_STEP_COLUMN = "WeeklyStepCount1"


def _split_ints(value: str) -> List[int]:
    return [int(part) for part in value.split(LIST_SEPARATOR) if part.strip()]


def _join_ints(values) -> str:
    return LIST_SEPARATOR.join(str(v) for v in values)


def _atomic_write(path: Path, header: List[str], rows: List[list]):
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}_", suffix=".csv")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            writer = csv.writer(tmp)
            writer.writerow(header)
            writer.writerows(rows)
        shutil.move(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


class RegistryRepository:
    def __init__(self, individuals_file: Union[str, Path] = INDIVIDUALS_FILE,
                 groups_file: Union[str, Path] = GROUPS_FILE):
        self.individuals_file = Path(individuals_file)
        self.groups_file = Path(groups_file)

    def exists(self) -> bool:
        return self.individuals_file.exists() or self.groups_file.exists()

    def load(self, event_bus: Optional[EventBus] = None) -> MembershipRegistry:
        """Build a registry from the CSV files. Missing files give an empty store; bad lines are skipped."""
        registry = MembershipRegistry(event_bus)
        self._load_individuals(registry)
        self._load_groups(registry)
        logger.info("Loaded data. Individuals: %s, Groups: %s", registry.individual_count(), registry.group_count())
        return registry

    def _load_individuals(self, registry: MembershipRegistry):
        if not self.individuals_file.exists():
            logger.warning("Individuals CSV file '%s' not found. Starting with empty individual data.",
                           self.individuals_file)
            return
        with open(self.individuals_file, "r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            legacy = bool(header) and LEGACY_STEP_COLUMN in header
            for line_no, parts in enumerate(reader, start=2):
                if not parts:
                    continue
                if len(parts) < 4 or (not legacy and len(parts) < 5):
                    logger.warning("Skipping malformed individual data line %s: %r", line_no, parts)
                    continue
                try:
                    id = int(parts[0])
                    name = parts[1]
                    age = int(parts[2])
                    daily_goal = int(parts[3])
                    if legacy:
                        steps = [int(p) for p in parts[4:] if p.strip()]
                        points = 0
                    else:
                        steps = _split_ints(parts[4])
                        points = int(parts[5]) if len(parts) > 5 and parts[5].strip() else 0
                    if points < 0:
                        raise ValueError(f"Points cannot be negative: {points}")
                    added = registry.add_individual(id, name, age, daily_goal, steps)
                    if not added.ok:
                        logger.warning("Skipping individual data line %s: %s", line_no, added.message)
                        continue
                    if points:
                        registry.award_points(id, points)
                except ValueError as e:
                    logger.warning("Error parsing individual data line %s %r: %s", line_no, parts, e)

    def _load_groups(self, registry: MembershipRegistry):
        if not self.groups_file.exists():
            logger.warning("Groups CSV file '%s' not found. Starting with empty group data.", self.groups_file)
            return
        with open(self.groups_file, "r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for line_no, parts in enumerate(reader, start=2):
                if not parts:
                    continue
                if len(parts) < 4:
                    logger.warning("Skipping malformed group data line %s: %r", line_no, parts)
                    continue
                try:
                    restored = registry.restore_group(parts[0], parts[1], _split_ints(parts[2]), int(parts[3]))
                except ValueError as e:
                    logger.warning("Error parsing group data line %s %r: %s", line_no, parts, e)
                    continue
                if not restored.ok:
                    logger.warning("Skipping group data line %s: %s", line_no, restored.message)

    def save(self, registry: MembershipRegistry):
        """Write both CSV files from the registry's ordered dumps."""
        individual_rows = [
            [ind.id, ind.name, ind.age, ind.daily_step_goal, _join_ints(ind.weekly_step_count), ind.points]
            for ind in registry.individuals()
        ]
        group_rows = [
            [grp.group_id, grp.group_name, _join_ints(grp.member_ids), grp.weekly_group_goal]
            for grp in registry.groups()
        ]
        _atomic_write(self.individuals_file, INDIVIDUALS_HEADER, individual_rows)
        _atomic_write(self.groups_file, GROUPS_HEADER, group_rows)
        logger.debug("Data saved to %s and %s", self.individuals_file, self.groups_file)
