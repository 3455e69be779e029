"""YAML frontmatter parsing and send-flag write-back."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

SEND_FLAG_KEY = "send-flag"

FRONTMATTER_RE = re.compile(r"^---\n(.*?)\n---", re.DOTALL)
# Block plus the line break after the closing marker
FRONTMATTER_BLOCK_RE = re.compile(r"^---\n.*?\n---(?:\n|$)", re.DOTALL)


class FrontmatterError(ValueError):
    """Raised when an existing frontmatter block cannot be rewritten."""


@dataclass
class NoteMetadata:
    """Metadata read from a note's frontmatter."""

    tags: frozenset[str] = field(default_factory=frozenset)
    send_flag: bool = False
    aliases: str | list[str] | None = None


def _load_block(text: str) -> dict[str, Any] | None:
    """Return the parsed frontmatter mapping, or None when there is no block.

    Raises FrontmatterError when the block is not a valid YAML mapping.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return None

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(f"Frontmatter is not a mapping: {type(data).__name__}")
    return data


def _normalize_tags(value: Any) -> frozenset[str]:
    if isinstance(value, str):
        return frozenset([value])
    if isinstance(value, list):
        return frozenset(str(tag) for tag in value if tag is not None)
    return frozenset()


def extract_metadata(text: str) -> NoteMetadata:
    """Extract tags, send flag and aliases from note text.

    Missing or malformed frontmatter yields defaults. This never raises, so a
    broken metadata block cannot abort a publish.
    """
    try:
        data = _load_block(text)
    except FrontmatterError as e:
        logger.warning(f"Failed to parse frontmatter, using defaults: {e}")
        return NoteMetadata()

    if not data:
        return NoteMetadata()

    aliases = data.get("aliases")
    if not isinstance(aliases, (str, list)) or not aliases:
        aliases = None

    return NoteMetadata(
        tags=_normalize_tags(data.get("tags")),
        send_flag=data.get(SEND_FLAG_KEY) is True,
        aliases=aliases,
    )


def strip_frontmatter(text: str) -> str:
    """Remove the leading frontmatter block."""
    return FRONTMATTER_BLOCK_RE.sub("", text, count=1)


def set_send_flag(text: str, value: bool) -> str:
    """Return note text with the send flag set, keeping other frontmatter keys."""
    data = _load_block(text)

    if data is None:
        fm_str = yaml.dump({SEND_FLAG_KEY: value}, default_flow_style=False, allow_unicode=True)
        return f"---\n{fm_str}---\n{text}"

    data[SEND_FLAG_KEY] = value
    fm_str = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return FRONTMATTER_RE.sub(lambda _: f"---\n{fm_str}---", text, count=1)


def update_send_flag(path: Path, value: bool) -> bool:
    """Rewrite the send flag of the note at path. Returns False on failure."""
    try:
        content = path.read_text(encoding="utf-8")
        path.write_text(set_send_flag(content, value), encoding="utf-8")
        return True
    except (OSError, FrontmatterError) as e:
        logger.error(f"Failed to update {SEND_FLAG_KEY} in {path}: {e}")
        return False
