"""Assemble the text sent to the endpoint."""

import re
from collections.abc import Iterable

from .frontmatter import NoteMetadata, strip_frontmatter
from .normalize import normalize_content, strip_emphasis

ALIASES_LABEL = "Aliases:"
BLOCK_SEPARATOR_RE = re.compile(r"\n\n+")


def format_tags(tags: Iterable[str]) -> str:
    """Render tags as '#tag' words. Whitespace inside a tag is removed."""
    cleaned = {re.sub(r"\s+", "", tag) for tag in tags}
    return " ".join(f"#{tag}" for tag in sorted(cleaned) if tag)


def format_aliases(aliases: str | list[str] | None) -> str:
    if not aliases:
        return ""
    if isinstance(aliases, str):
        return f"{ALIASES_LABEL} {aliases}"
    return f"{ALIASES_LABEL} {', '.join(str(a) for a in aliases)}"


def build_payload(title: str, text: str, metadata: NoteMetadata) -> str:
    """Build the payload for a whole note.

    Order is fixed: title, normalized body, aliases, tags.
    """
    parts = [title, normalize_content(text)]

    aliases_line = format_aliases(metadata.aliases)
    if aliases_line:
        parts.append(aliases_line)

    tags_line = format_tags(metadata.tags)
    if tags_line:
        parts.append(tags_line)

    return "\n\n".join(part for part in parts if part)


def split_blocks(text: str, tags: Iterable[str] = ()) -> list[str]:
    """Split a note into paragraph blocks, each ending with the note's tags."""
    body = strip_emphasis(strip_frontmatter(text))
    tags_line = format_tags(tags)

    blocks = []
    for block in BLOCK_SEPARATOR_RE.split(body):
        block = block.strip()
        if not block:
            continue
        if tags_line:
            block += "\n" + tags_line
        blocks.append(block)
    return blocks
