"""Plain-text normalization of note bodies."""

import re

from .frontmatter import strip_frontmatter

BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
ITALIC_RE = re.compile(r"\*(.*?)\*")
UNDERSCORE_ITALIC_RE = re.compile(r"_(.*?)_")
BLANK_LINES_RE = re.compile(r"\n{3,}")


def strip_emphasis(text: str) -> str:
    """Remove bold and italic markers, keeping the inner text.

    The destination does not render markdown emphasis.
    """
    text = BOLD_RE.sub(r"\1", text)
    text = ITALIC_RE.sub(r"\1", text)
    return UNDERSCORE_ITALIC_RE.sub(r"\1", text)


def collapse_blank_lines(text: str) -> str:
    """Collapse three or more consecutive newlines to two."""
    return BLANK_LINES_RE.sub("\n\n", text)


def normalize_content(text: str) -> str:
    """Strip frontmatter and emphasis, collapse blank lines, trim.

    Trimming can bring a metadata-shaped block to the start of the text, so the
    passes repeat until nothing changes. Every pass only removes characters.
    """
    while True:
        result = collapse_blank_lines(strip_emphasis(strip_frontmatter(text))).strip()
        if result == text:
            return result
        text = result
