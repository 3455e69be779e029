"""Publication center - browse the vault by publish status and batch publish."""

from .model import CATEGORIES, CHANGED, PUBLISHED, UNPUBLISHED, PublicationCenter
from .scanner import FolderNode, NoteItem, NoteStatus, VaultScanner, build_tree, classify
from .views import render_batch_result, render_center, render_tree

__all__ = [
    "CATEGORIES",
    "CHANGED",
    "PUBLISHED",
    "UNPUBLISHED",
    "FolderNode",
    "NoteItem",
    "NoteStatus",
    "PublicationCenter",
    "VaultScanner",
    "build_tree",
    "classify",
    "render_batch_result",
    "render_center",
    "render_tree",
]
