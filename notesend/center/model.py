"""Publication center state - categories and selection over the vault."""

import logging

from notesend.publisher import BatchResult, Publisher

from .scanner import FolderNode, NoteItem, NoteStatus, VaultScanner, build_tree

logger = logging.getLogger(__name__)

UNPUBLISHED = "unpublished"
CHANGED = "changed"
PUBLISHED = "published"

CATEGORIES = (UNPUBLISHED, CHANGED, PUBLISHED)
SELECTABLE_CATEGORIES = (UNPUBLISHED, CHANGED)


class PublicationCenter:
    """Holds the notes, their categories and the current selection.

    Views read from this object; nothing here renders or prints.
    """

    def __init__(self, publisher: Publisher) -> None:
        self.publisher = publisher
        self.scanner = VaultScanner(publisher.vault_path)
        self.items: list[NoteItem] = []
        self.selected: set[str] = set()
        self.last_result: BatchResult | None = None

    def refresh(self) -> None:
        """Rescan the vault. Selections of notes that are gone are dropped."""
        self.items = self.scanner.scan(self.publisher.storage)
        selectable = {item.path for item in self.selectable_items()}
        self.selected &= selectable

    def category(self, name: str) -> list[NoteItem]:
        if name == UNPUBLISHED:
            # Only notes marked for sending are offered for a first publish
            return [
                i
                for i in self.items
                if i.status == NoteStatus.UNPUBLISHED and i.metadata.send_flag
            ]
        if name == CHANGED:
            return [i for i in self.items if i.status == NoteStatus.CHANGED]
        if name == PUBLISHED:
            return [i for i in self.items if i.status == NoteStatus.PUBLISHED]
        raise ValueError(f"Unknown category: {name}")

    def tree(self, name: str) -> FolderNode:
        return build_tree(self.category(name))

    def selectable_items(self) -> list[NoteItem]:
        return [item for name in SELECTABLE_CATEGORIES for item in self.category(name)]

    def is_selectable(self, path: str) -> bool:
        return any(item.path == path for item in self.selectable_items())

    def select(self, path: str) -> bool:
        """Select a note. Returns False if the note cannot be selected."""
        if not self.is_selectable(path):
            return False
        self.selected.add(path)
        return True

    def deselect(self, path: str) -> None:
        self.selected.discard(path)

    def toggle(self, path: str) -> bool:
        """Flip selection of a note. Returns the new selection state."""
        if path in self.selected:
            self.selected.discard(path)
            return False
        return self.select(path)

    def select_folder(self, folder: str, selected: bool = True) -> int:
        """Select or deselect every selectable note under a folder.

        Returns the number of notes affected.
        """
        count = 0
        for name in SELECTABLE_CATEGORIES:
            node = self.tree(name).find(folder)
            if node is None:
                continue
            for item in node.iter_notes():
                if selected:
                    self.selected.add(item.path)
                else:
                    self.selected.discard(item.path)
                count += 1
        return count

    def select_category(self, name: str) -> int:
        if name not in SELECTABLE_CATEGORIES:
            raise ValueError(f"Notes in '{name}' cannot be selected")
        items = self.category(name)
        self.selected.update(item.path for item in items)
        return len(items)

    def clear_selection(self) -> None:
        self.selected.clear()

    async def publish_selected(self) -> BatchResult:
        """Publish the selection in path order and rescan the vault."""
        result = await self.publisher.publish_batch(sorted(self.selected))
        self.last_result = result
        self.selected.difference_update(result.succeeded)
        self.refresh()
        return result
