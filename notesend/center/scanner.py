"""Vault scanner - collects notes and their publish status."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from notesend.content import NoteMetadata, content_hash, extract_metadata
from notesend.storage import NoteStatus, StateStorage, classify

logger = logging.getLogger(__name__)


@dataclass
class NoteItem:
    """A note as shown in the publication center."""

    path: str  # vault-relative, forward slashes
    title: str
    folder: str  # "" for the vault root
    content: str
    metadata: NoteMetadata
    status: NoteStatus

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class FolderNode:
    """One level of the folder tree."""

    name: str = ""
    files: list[NoteItem] = field(default_factory=list)
    subfolders: dict[str, "FolderNode"] = field(default_factory=dict)

    def iter_notes(self):
        """Yield every note in this folder and below."""
        yield from self.files
        for sub in self.subfolders.values():
            yield from sub.iter_notes()

    def find(self, folder: str) -> "FolderNode | None":
        """Find a descendant folder by slash-separated path."""
        node = self
        for part in [p for p in folder.strip("/").split("/") if p]:
            node = node.subfolders.get(part)
            if node is None:
                return None
        return node


def build_tree(items: list[NoteItem]) -> FolderNode:
    """Arrange notes into a folder tree."""
    root = FolderNode()
    for item in items:
        node = root
        for part in [p for p in item.folder.split("/") if p]:
            if part not in node.subfolders:
                node.subfolders[part] = FolderNode(name=part)
            node = node.subfolders[part]
        node.files.append(item)
    return root


class VaultScanner:
    """Scans a vault for markdown notes."""

    def __init__(self, vault_path: Path) -> None:
        self.vault_path = vault_path

    def scan(self, storage: StateStorage) -> list[NoteItem]:
        """Read every note and classify it against the stored records."""
        items: list[NoteItem] = []

        for md_file in sorted(self.vault_path.rglob("*.md")):
            rel = md_file.relative_to(self.vault_path)
            # Skip hidden folders (.obsidian, .notesend, ...)
            if any(part.startswith(".") for part in rel.parts):
                continue

            try:
                items.append(self._scan_note(md_file, rel, storage))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to read {md_file}: {e}")
                continue

        logger.debug(f"Scanned {len(items)} notes in {self.vault_path}")
        return items

    def _scan_note(self, file_path: Path, rel: Path, storage: StateStorage) -> NoteItem:
        content = file_path.read_text(encoding="utf-8")
        note_path = rel.as_posix()
        folder = rel.parent.as_posix()
        metadata = extract_metadata(content)

        return NoteItem(
            path=note_path,
            title=file_path.stem,
            folder="" if folder == "." else folder,
            content=content,
            metadata=metadata,
            status=classify(metadata, storage.get_record(note_path), content_hash(content)),
        )
