"""Persisted plugin state: endpoint, reminder flag and publish records."""

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from notesend.content import NoteMetadata, content_hash

logger = logging.getLogger(__name__)

STATE_DIR_NAME = ".notesend"
STATE_FILE_NAME = "state.json"


@dataclass
class PublishRecord:
    """When a note was last published and what its content hashed to."""

    timestamp: int  # epoch milliseconds
    content_hash: str

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "content-hash": self.content_hash}

    @classmethod
    def from_dict(cls, data: dict) -> "PublishRecord":
        return cls(
            timestamp=int(data.get("timestamp", 0)),
            content_hash=str(data.get("content-hash", "")),
        )


class NoteStatus(Enum):
    """Publish state of a note."""

    UNPUBLISHED = "unpublished"
    PENDING_CONFIRMATION = "pending_confirmation"  # send-flag false, user asked to confirm
    PUBLISHED = "published"
    CHANGED = "changed"


def classify(
    metadata: NoteMetadata,
    record: PublishRecord | None,
    current_hash: str,
    confirming: bool = False,
) -> NoteStatus:
    """Derive a note's status from its metadata, publish record and fingerprint.

    ``confirming`` marks a user-initiated publish that is waiting for an
    answer. A note without the send flag is pending confirmation until then.
    """
    if confirming and not metadata.send_flag:
        return NoteStatus.PENDING_CONFIRMATION
    if record is None:
        return NoteStatus.UNPUBLISHED
    if record.content_hash == current_hash:
        return NoteStatus.PUBLISHED
    return NoteStatus.CHANGED


@dataclass
class PluginState:
    """Everything notesend persists between runs."""

    endpoint_url: str = ""
    has_shown_reminder: bool = False
    publish_records: dict[str, PublishRecord] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "endpoint-url": self.endpoint_url,
            "has-shown-reminder": self.has_shown_reminder,
            "publish-records": {path: r.to_dict() for path, r in self.publish_records.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PluginState":
        records = data.get("publish-records") or {}
        return cls(
            endpoint_url=data.get("endpoint-url", ""),
            has_shown_reminder=data.get("has-shown-reminder", False),
            publish_records={path: PublishRecord.from_dict(r) for path, r in records.items()},
        )


class StateStorage:
    """Manages plugin state stored in .notesend/state.json inside the vault.

    Every mutation is flushed to disk right away, except inside
    ``transaction()``, where a single flush happens when the outermost
    transaction exits.
    """

    def __init__(self, vault_path: Path) -> None:
        self.vault_path = vault_path
        self.state_dir = vault_path / STATE_DIR_NAME
        self.state_file = self.state_dir / STATE_FILE_NAME
        self._state: PluginState | None = None
        self._depth = 0
        self._dirty = False

    def get(self) -> PluginState:
        """Get current state, loading from disk on first access."""
        if self._state is None:
            self._state = self._load()
        return self._state

    def update(self, **kwargs) -> PluginState:
        """Update top-level state fields and save."""
        state = self.get()

        for key, value in kwargs.items():
            if key == "publish_records" or not hasattr(state, key):
                raise AttributeError(f"Unknown state field: {key}")
            setattr(state, key, value)

        self._mark_dirty()
        return state

    def get_record(self, note_path: str) -> PublishRecord | None:
        return self.get().publish_records.get(note_path)

    def has_record(self, note_path: str) -> bool:
        return note_path in self.get().publish_records

    def set_record(self, note_path: str, timestamp: int, fingerprint: str) -> PublishRecord:
        """Create or overwrite the publish record for a note."""
        record = PublishRecord(timestamp=timestamp, content_hash=fingerprint)
        self.get().publish_records[note_path] = record
        self._mark_dirty()
        return record

    def record_publish(
        self, note_path: str, content: str, now: int | None = None
    ) -> PublishRecord:
        """Record a successful publish of content at the current time."""
        timestamp = now if now is not None else int(time.time() * 1000)
        return self.set_record(note_path, timestamp, content_hash(content))

    @contextmanager
    def transaction(self) -> Iterator["StateStorage"]:
        """Group mutations into a single flush."""
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            if self._depth == 0 and self._dirty:
                self._save(self.get())

    def _mark_dirty(self) -> None:
        self._dirty = True
        if self._depth == 0:
            self._save(self.get())

    def _load(self) -> PluginState:
        """Load state from disk, falling back to defaults."""
        if not self.state_file.exists():
            return PluginState()

        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
            return PluginState.from_dict(data)
        except (json.JSONDecodeError, OSError, AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Failed to load state, using defaults: {e}")
            return PluginState()

    def _save(self, state: PluginState) -> None:
        """Save state to disk."""
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            self.state_file.write_text(
                json.dumps(state.to_dict(), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            self._dirty = False
        except OSError as e:
            logger.error(f"Failed to save state: {e}")
