"""
JSON file entity store.

All lab data lives in memory in an ``EntityStore``: one ordered dict per
entity kind, keyed by id.  The file on disk is only a snapshot of that
state.  It is read once at startup (``load``) and rewritten in full
after every mutation (``save``).  The snapshot layout is::

    {
        "members": [[id, {...}], ...],
        "meetings": [...],
        "rotation": [...],
        "announcements": [...],
        "auditLogs": [...]
    }

An unreadable snapshot is renamed aside at load time so that it
survives the next write.  A failed write is logged and counted but
never raised: the in-memory mutation stands and the next successful
write persists it.  The failure counters are reported by the
``/health`` endpoint.

Services receive the store as an explicit argument.  Routers obtain it
through the ``get_store`` dependency, which tests override with a
store backed by a temporary file.
"""

import asyncio
import json
import logging
import os
import tempfile
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, TypeVar
from zoneinfo import ZoneInfo

from ..schemas.announcement import Announcement
from ..schemas.audit import AuditLog
from ..schemas.meeting import Meeting
from ..schemas.member import Member
from ..schemas.rotation import RotationEntry
from .config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Snapshot key -> (store attribute, entity model)
COLLECTIONS = {
    "members": ("members", Member),
    "meetings": ("meetings", Meeting),
    "rotation": ("rotation", RotationEntry),
    "announcements": ("announcements", Announcement),
    "auditLogs": ("audit_logs", AuditLog),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def filter_deleted(items: Iterable[T]) -> List[T]:
    """Drop soft-deleted records, keeping insertion order."""
    return [item for item in items if getattr(item, "deleted_at", None) is None]


def get_live(collection: Dict[str, T], entity_id: str) -> Optional[T]:
    """Return the record with ``entity_id`` unless it is absent or soft-deleted."""
    item = collection.get(entity_id)
    if item is None or getattr(item, "deleted_at", None) is not None:
        return None
    return item


def get_data_path(data_file: Optional[str] = None) -> Path:
    """Compute the path of the snapshot file.

    Absolute paths are used as is; relative ones are resolved against
    the current working directory.
    """
    path = Path(data_file or settings.data_file)
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


class EntityStore:
    """In-memory collections with write-through snapshot persistence."""

    def __init__(
        self,
        data_file,
        on_persist_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self.data_file = Path(data_file)
        self.members: Dict[str, Member] = {}
        self.meetings: Dict[str, Meeting] = {}
        self.rotation: Dict[str, RotationEntry] = {}
        self.announcements: Dict[str, Announcement] = {}
        self.audit_logs: Dict[str, AuditLog] = {}
        # Every mutation path (including the rotation re-index and
        # reorder) runs under this lock.
        self.write_lock = asyncio.Lock()
        self.on_persist_error = on_persist_error
        self.persistence_failures = 0
        self.last_persistence_error: Optional[str] = None
        self.snapshot_found = False
        self.quarantined_file: Optional[Path] = None

    # ------------------------------------------------------------------
    # Snapshot helpers
    # ------------------------------------------------------------------
    def to_document(self) -> dict:
        """Serialise all collections as lists of ``[id, entity]`` pairs."""
        document = {}
        for key, (attr, _model) in COLLECTIONS.items():
            document[key] = [
                [entity_id, entity.model_dump(mode="json", by_alias=True)]
                for entity_id, entity in getattr(self, attr).items()
            ]
        return document

    def replace_all(
        self,
        members: Iterable[Member] = (),
        meetings: Iterable[Meeting] = (),
        rotation: Iterable[RotationEntry] = (),
        announcements: Iterable[Announcement] = (),
        audit_logs: Iterable[AuditLog] = (),
    ) -> None:
        """Swap in new contents for all five collections."""
        self.members = {m.id: m for m in members}
        self.meetings = {m.id: m for m in meetings}
        self.rotation = {r.id: r for r in rotation}
        self.announcements = {a.id: a for a in announcements}
        self.audit_logs = {log.id: log for log in audit_logs}

    def load(self) -> bool:
        """Read the snapshot file into memory.

        Returns ``True`` when a snapshot file exists, even if it could
        not be parsed.  An unreadable file is logged, renamed to
        ``<name>.corrupt-<timestamp>`` next to the original and the
        store starts empty.
        """
        if not self.data_file.exists():
            logger.info("No lab data file at %s", self.data_file)
            self.snapshot_found = False
            return False
        self.snapshot_found = True
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
            collections = {}
            for key, (attr, model) in COLLECTIONS.items():
                collections[attr] = [model.model_validate(entity) for _entity_id, entity in raw.get(key) or []]
        except (OSError, ValueError, TypeError, AttributeError):
            logger.exception("Failed to load lab data from %s; starting empty", self.data_file)
            self._quarantine()
            return True
        self.replace_all(**collections)
        logger.info(
            "Loaded %d members, %d meetings, %d rotation entries, %d announcements, %d audit logs",
            len(self.members),
            len(self.meetings),
            len(self.rotation),
            len(self.announcements),
            len(self.audit_logs),
        )
        return True

    def _quarantine(self) -> Optional[Path]:
        """Move an unreadable snapshot aside so later saves cannot overwrite it."""
        target = self.data_file.with_name(
            f"{self.data_file.name}.corrupt-{utcnow().strftime('%Y%m%dT%H%M%S%fZ')}"
        )
        try:
            os.replace(self.data_file, target)
        except OSError:
            logger.exception("Could not move unreadable lab data file %s aside", self.data_file)
            return None
        logger.warning("Unreadable lab data moved to %s", target)
        self.quarantined_file = target
        return target

    def save(self) -> bool:
        """Write the full snapshot to disk.

        The file is replaced atomically.  Returns ``False`` if the write
        failed; the error is logged, counted and handed to
        ``on_persist_error`` but never raised.
        """
        tmp_path = None
        try:
            payload = json.dumps(self.to_document(), indent=2)
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.data_file.parent, prefix=".lab-data-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.data_file)
            return True
        except Exception as exc:
            self.persistence_failures += 1
            self.last_persistence_error = str(exc)
            logger.exception("Failed to save lab data to %s", self.data_file)
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_path)
            if self.on_persist_error is not None:
                try:
                    self.on_persist_error(exc)
                except Exception:
                    logger.exception("Persistence error callback failed")
            return False


_store: Optional[EntityStore] = None


def init_store(data_file: Optional[str] = None) -> EntityStore:
    """Create the application store and load the snapshot file.

    Called once from the application startup event.  The caller checks
    ``store.snapshot_found`` to decide whether to load seed data.
    """
    global _store
    store = EntityStore(get_data_path(data_file))
    store.load()
    _store = store
    return store


def get_store() -> EntityStore:
    """FastAPI dependency returning the application store."""
    if _store is None:
        raise RuntimeError("Entity store has not been initialised")
    return _store


def lab_today() -> date:
    """Current calendar date in the lab's time zone."""
    return datetime.now(ZoneInfo(settings.timezone)).date()
