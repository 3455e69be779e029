"""Note content preparation - frontmatter, normalization, hashing, payloads."""

from .frontmatter import (
    SEND_FLAG_KEY,
    FrontmatterError,
    NoteMetadata,
    extract_metadata,
    set_send_flag,
    strip_frontmatter,
    update_send_flag,
)
from .hashing import content_hash
from .normalize import collapse_blank_lines, normalize_content, strip_emphasis
from .payload import build_payload, format_aliases, format_tags, split_blocks

__all__ = [
    "SEND_FLAG_KEY",
    "FrontmatterError",
    "NoteMetadata",
    "build_payload",
    "collapse_blank_lines",
    "content_hash",
    "extract_metadata",
    "format_aliases",
    "format_tags",
    "normalize_content",
    "set_send_flag",
    "split_blocks",
    "strip_emphasis",
    "strip_frontmatter",
    "update_send_flag",
]
