"""Snapshot Store - Local persistence for logs, check-ins and settings.

This module handles all file I/O for the single local user.
All I/O is contained here; business logic is in the core module.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.days import local_date
from ..core.energy import normalize_check, normalize_log, resolve_profile
from ..core.models import AppSettings, CheckEntry, LogEntry, Profile


logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path.home() / ".nomutore" / "snapshot.json"


@dataclass
class SnapshotConfig:
    """Configuration for the snapshot store.

    Attributes:
        path: JSON file holding the snapshot
    """

    path: Path = field(default_factory=lambda: Path(os.environ.get("NOMUTORE_DATA_FILE", DEFAULT_DATA_FILE)))


@dataclass
class Snapshot:
    """An in-memory copy of everything the engine needs.

    Stored records that could not be normalized are kept verbatim in the
    unreadable_* lists, and invalid stored settings in raw_settings, so a
    save writes them back unchanged.
    """

    profile: Profile = field(default_factory=Profile)
    settings: AppSettings = field(default_factory=AppSettings)
    logs: list[LogEntry] = field(default_factory=list)
    checks: list[CheckEntry] = field(default_factory=list)
    unreadable_logs: list[Any] = field(default_factory=list)
    unreadable_checks: list[Any] = field(default_factory=list)
    raw_settings: Any = None


class SnapshotReadError(Exception):
    """The snapshot file exists but cannot be read."""


class SnapshotStore:
    """Store for persisting records to a local JSON file.

    File structure:
        {
            "profile": { weight_kg, height_cm, ... },
            "settings": { modes: {mode1, mode2}, base_exercise, ... },
            "logs": [ {id, timestamp_ms, kcal, ...}, ... ],
            "checks": [ {id, timestamp_ms, is_dry_day, ...}, ... ]
        }

    Exports from the browser app (camelCase keys, legacy minutes) are
    accepted on read and rewritten in canonical form on the next save.
    """

    def __init__(self, config: SnapshotConfig | None = None) -> None:
        """Initialize the store.

        Args:
            config: Snapshot configuration
        """
        self.config = config or SnapshotConfig()

    @property
    def path(self) -> Path:
        return self.config.path

    # ==================== Snapshot Operations ====================

    def _read_raw(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise SnapshotReadError(str(e)) from e
        if not isinstance(data, dict):
            raise SnapshotReadError("Snapshot root must be an object")
        return data

    def _parse(self, data: dict[str, Any]) -> Snapshot:
        snapshot = Snapshot(profile=resolve_profile(data.get("profile")))

        try:
            snapshot.settings = AppSettings(**(data.get("settings") or {}))
        except Exception as e:
            logger.warning("Invalid settings in snapshot, using defaults: %s", str(e))
            snapshot.raw_settings = data.get("settings")

        for raw in data.get("logs") or []:
            try:
                snapshot.logs.append(normalize_log(raw, snapshot.profile))
            except Exception as e:
                logger.warning("Skipping malformed log record: %s", str(e))
                snapshot.unreadable_logs.append(raw)

        for raw in data.get("checks") or []:
            try:
                snapshot.checks.append(normalize_check(raw))
            except Exception as e:
                logger.warning("Skipping malformed check record: %s", str(e))
                snapshot.unreadable_checks.append(raw)

        logger.debug("Loaded %d logs and %d checks", len(snapshot.logs), len(snapshot.checks))
        return snapshot

    def load(self) -> Snapshot:
        """Load and normalize the snapshot for reading.

        Records that cannot be normalized are skipped with a warning.

        Returns:
            Snapshot (empty if the file is missing or unreadable)
        """
        logger.debug("Loading snapshot from %s", self.path)
        try:
            return self._parse(self._read_raw())
        except SnapshotReadError as e:
            logger.error("Failed to read snapshot: %s", str(e))
            return Snapshot()

    def _load_for_update(self) -> Snapshot | None:
        """Load the snapshot before a write.

        Returns:
            Snapshot, or None if the file exists but cannot be read, in which
            case the caller must not save
        """
        try:
            return self._parse(self._read_raw())
        except SnapshotReadError as e:
            logger.error("Refusing to write over unreadable snapshot %s: %s", self.path, str(e))
            return None

    def save(self, snapshot: Snapshot) -> bool:
        """Write the whole snapshot.

        The file is written to a temporary sibling and then swapped in.

        Args:
            snapshot: Snapshot to persist

        Returns:
            True if successful
        """
        logger.info("Saving snapshot to %s", self.path)
        settings = snapshot.settings.model_dump(mode="json")
        if snapshot.raw_settings is not None:
            settings = snapshot.raw_settings
        data = {
            "profile": snapshot.profile.model_dump(mode="json"),
            "settings": settings,
            "logs": [log.model_dump(mode="json") for log in snapshot.logs] + snapshot.unreadable_logs,
            "checks": [check.model_dump(mode="json") for check in snapshot.checks]
            + snapshot.unreadable_checks,
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
            return True
        except Exception as e:
            logger.error("Failed to save snapshot: %s", str(e))
            return False

    # ==================== Settings Operations ====================

    def save_profile(self, profile: Profile) -> bool:
        """Replace the stored profile."""
        snapshot = self._load_for_update()
        if snapshot is None:
            return False
        snapshot.profile = profile
        return self.save(snapshot)

    def save_settings(self, settings: AppSettings) -> bool:
        """Replace the stored display settings."""
        snapshot = self._load_for_update()
        if snapshot is None:
            return False
        snapshot.settings = settings
        snapshot.raw_settings = None
        return self.save(snapshot)

    # ==================== Log Operations ====================

    def add_log(self, log: LogEntry) -> LogEntry | None:
        """Append a log entry.

        Args:
            log: The entry to add

        Returns:
            The stored entry if successful, None otherwise
        """
        snapshot = self._load_for_update()
        if snapshot is None:
            return None
        snapshot.logs.append(log)
        if self.save(snapshot):
            return log
        return None

    def update_log(self, log_id: str, updates: dict) -> LogEntry | None:
        """Replace a log entry with an edited copy.

        Args:
            log_id: ID of the entry to update
            updates: Fields to change

        Returns:
            Updated entry if successful, None otherwise
        """
        snapshot = self._load_for_update()
        if snapshot is None:
            return None

        for i, log in enumerate(snapshot.logs):
            if log.id == log_id:
                data = log.model_dump()
                data.update(updates)
                snapshot.logs[i] = LogEntry(**data)
                break
        else:
            logger.warning("Log not found: %s", log_id)
            return None

        if self.save(snapshot):
            return snapshot.logs[i]
        return None

    def delete_log(self, log_id: str) -> bool:
        """Delete a log entry.

        Args:
            log_id: ID of the entry to delete

        Returns:
            True if the entry existed and the snapshot was saved
        """
        snapshot = self._load_for_update()
        if snapshot is None:
            return False
        original_count = len(snapshot.logs)
        snapshot.logs = [log for log in snapshot.logs if log.id != log_id]

        if len(snapshot.logs) == original_count:
            logger.warning("Log not found: %s", log_id)
            return False

        return self.save(snapshot)

    # ==================== Check Operations ====================

    def save_check(self, check: CheckEntry) -> CheckEntry | None:
        """Store a check-in, replacing any other check-in on the same day.

        Args:
            check: The check-in to store

        Returns:
            The stored check-in if successful, None otherwise
        """
        snapshot = self._load_for_update()
        if snapshot is None:
            return None
        day = local_date(check.timestamp_ms, snapshot.profile)
        kept = [c for c in snapshot.checks if local_date(c.timestamp_ms, snapshot.profile) != day]
        if len(kept) != len(snapshot.checks):
            logger.info("Replacing check-in for %s", day)
        snapshot.checks = kept + [check]

        if self.save(snapshot):
            return check
        return None
