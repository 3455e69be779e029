"""Publish orchestration - single note, blocks and batches."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from notesend.console import Colors
from notesend.content import (
    FrontmatterError,
    NoteMetadata,
    build_payload,
    content_hash,
    extract_metadata,
    set_send_flag,
    split_blocks,
    update_send_flag,
)
from notesend.storage import NoteStatus, PublishRecord, StateStorage, classify

from .client import PublishClient, PublishResult

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200

TEST_NOTE = (
    "Test note\n\n"
    "This is a test note sent by notesend to check the endpoint connection.\n\n"
    "#test #notesend"
)


class EndpointNotConfiguredError(RuntimeError):
    """Raised before any I/O when no endpoint URL is set."""

    def __init__(self) -> None:
        super().__init__(
            "Endpoint URL is not set. Run 'notesend config --endpoint URL' or set ENDPOINT_URL."
        )


@dataclass
class PreparedNote:
    """A note read from the vault with its payload ready to send."""

    path: str
    full_path: Path
    title: str
    content: str
    metadata: NoteMetadata
    payload: str
    record: PublishRecord | None = None

    @property
    def requires_confirmation(self) -> bool:
        """Notes without the send flag are only sent after the user confirms."""
        return not self.metadata.send_flag

    @property
    def status(self) -> NoteStatus:
        return classify(self.metadata, self.record, content_hash(self.content), confirming=True)

    @property
    def preview(self) -> str:
        if len(self.payload) > PREVIEW_LENGTH:
            return self.payload[:PREVIEW_LENGTH] + "..."
        return self.payload


@dataclass
class PublishOutcome:
    """Result of publishing one note."""

    path: str
    result: PublishResult
    record: PublishRecord | None = None
    flag_updated: bool = False

    @property
    def success(self) -> bool:
        return self.result.success


@dataclass
class BatchResult:
    """Result of publishing several notes or blocks."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def add(self, key: str, success: bool, error: str = "") -> None:
        if success:
            self.succeeded.append(key)
        else:
            self.failed.append(key)
            if error:
                self.errors[key] = error


class Publisher:
    """Prepares notes and sends them through the publish client."""

    def __init__(self, vault_path: Path, storage: StateStorage, client: PublishClient) -> None:
        self.vault_path = vault_path.resolve()
        self.storage = storage
        self.client = client

    def _ensure_configured(self) -> None:
        if not self.client.is_configured:
            raise EndpointNotConfiguredError()

    def _validate_path(self, path: str) -> Path:
        """Validate that path is within vault and return resolved path."""
        if path.startswith("/"):
            path = path[1:]
        if not path.endswith(".md"):
            path += ".md"

        full_path = (self.vault_path / path).resolve()

        try:
            full_path.relative_to(self.vault_path)
        except ValueError as e:
            raise ValueError(f"Path escapes vault: {path}") from e

        return full_path

    def _note_id(self, full_path: Path) -> str:
        return full_path.relative_to(self.vault_path).as_posix()

    def load_note(self, path: str) -> tuple[str, Path, str]:
        """Return (note id, full path, raw content) for a vault-relative path."""
        full_path = self._validate_path(path)
        if not full_path.is_file():
            raise FileNotFoundError(f"Note not found: {path}")
        return self._note_id(full_path), full_path, full_path.read_text(encoding="utf-8")

    def prepare_note(self, path: str) -> PreparedNote:
        """Read a note and build its payload."""
        self._ensure_configured()
        note_id, full_path, content = self.load_note(path)
        metadata = extract_metadata(content)

        return PreparedNote(
            path=note_id,
            full_path=full_path,
            title=full_path.stem,
            content=content,
            metadata=metadata,
            payload=build_payload(full_path.stem, content, metadata),
            record=self.storage.get_record(note_id),
        )

    async def publish_prepared(self, prepared: PreparedNote) -> PublishOutcome:
        """Send a prepared note and record it on success."""
        self._ensure_configured()
        logger.info(f"{Colors.DIM}Publishing {prepared.path}{Colors.RESET}")

        result = await self.client.send(prepared.payload)
        outcome = PublishOutcome(path=prepared.path, result=result)
        if not result.success:
            return outcome

        if not prepared.metadata.send_flag:
            outcome.flag_updated = update_send_flag(prepared.full_path, True)

        # Fingerprint the content that was sent, with the send flag as now on disk.
        # Edits made after prepare_note stay unpublished and show up as changed.
        sent = prepared.content
        if outcome.flag_updated:
            try:
                sent = set_send_flag(prepared.content, True)
            except FrontmatterError as e:
                logger.warning(f"Could not rebuild flagged content of {prepared.path}: {e}")

        outcome.record = self.storage.record_publish(prepared.path, sent)
        logger.info(f"{Colors.GREEN}Published {prepared.path}{Colors.RESET}")
        return outcome

    async def publish_note(self, path: str) -> PublishOutcome:
        """Prepare and publish a note without asking for confirmation."""
        return await self.publish_prepared(self.prepare_note(path))

    def prepare_blocks(self, path: str) -> list[str]:
        """Split a note into blocks that can be published separately."""
        self._ensure_configured()
        _, _, content = self.load_note(path)
        return split_blocks(content, extract_metadata(content).tags)

    async def publish_blocks(
        self, path: str, blocks: list[str], selected: list[int] | None = None
    ) -> BatchResult:
        """Publish the selected blocks one at a time.

        If at least one block was accepted, the note's send flag is set.
        Blocks do not create a publish record.
        """
        self._ensure_configured()
        indices = list(range(len(blocks))) if selected is None else selected
        batch = BatchResult()

        for index in indices:
            if not 0 <= index < len(blocks):
                batch.add(str(index), False, "No such block")
                continue
            result = await self.client.send(blocks[index])
            batch.add(str(index), result.success, result.message)

        if batch.success_count:
            _, full_path, _ = self.load_note(path)
            update_send_flag(full_path, True)

        logger.info(
            f"Blocks from {path}: {batch.success_count} sent, {batch.failure_count} failed"
        )
        return batch

    async def publish_batch(self, paths: list[str]) -> BatchResult:
        """Publish notes strictly one after another.

        A failing note never stops the batch. Records of succeeding notes are
        flushed together when the batch ends.
        """
        self._ensure_configured()
        batch = BatchResult()

        with self.storage.transaction():
            for path in paths:
                try:
                    prepared = self.prepare_note(path)
                    result = await self.client.send(prepared.payload)
                    if result.success:
                        self.storage.record_publish(prepared.path, prepared.content)
                    batch.add(path, result.success, result.message)
                except Exception as e:
                    logger.exception(f"{Colors.RED}Failed to publish {path}: {e}{Colors.RESET}")
                    batch.add(path, False, str(e))

        logger.info(f"Batch finished: {batch.success_count} published, {batch.failure_count} failed")
        return batch

    async def send_test(self) -> PublishResult:
        """Send a fixed test note to check the endpoint."""
        self._ensure_configured()
        return await self.client.send(TEST_NOTE)
