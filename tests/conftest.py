"""Shared test fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from notesend.publisher import PublishClient, Publisher
from notesend.storage import StateStorage

ENDPOINT = "https://notes.example.com/iwh/abc/def/"


@pytest.fixture
def tmp_vault(tmp_path: Path) -> Path:
    """Create a temporary vault directory with sample notes."""
    vault = tmp_path / "vault"
    vault.mkdir()

    # Marked for sending
    (vault / "Ideas.md").write_text(
        "---\ntags: [idea, writing]\nsend-flag: true\naliases: Thoughts\n---\n"
        "A **bold** idea.\n\n\n\nSecond _thought_ here.\n",
        encoding="utf-8",
    )
    # No frontmatter at all
    (vault / "Plain.md").write_text("Just a plain note.\n", encoding="utf-8")

    projects = vault / "Projects"
    projects.mkdir()
    (projects / "Alpha.md").write_text(
        "---\ntags: project\nsend-flag: true\n---\nAlpha plan.\n", encoding="utf-8"
    )
    (projects / "Draft.md").write_text(
        "---\nsend-flag: false\n---\nNot ready yet.\n", encoding="utf-8"
    )

    nested = projects / "Deep"
    nested.mkdir()
    (nested / "Beta.md").write_text("---\nsend-flag: true\n---\nBeta.\n", encoding="utf-8")

    # Hidden folders are ignored
    hidden = vault / ".obsidian"
    hidden.mkdir()
    (hidden / "Ignored.md").write_text("ignored", encoding="utf-8")

    return vault


@pytest.fixture
def sample_note_content() -> str:
    """Sample note content for testing."""
    return """---
tags: [a, b]
send-flag: true
aliases:
  - First
  - Second
---

# Heading

Some *emphasis* and **strong** text.



Another paragraph.
"""


class RecordingEndpoint:
    """Fake endpoint that records requests and answers via a callable."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def contents(self) -> list[str]:
        """Form 'content' field of every request received."""
        from urllib.parse import parse_qs

        return [parse_qs(r.content.decode())["content"][0] for r in self.requests]


@pytest.fixture
def endpoint() -> RecordingEndpoint:
    """Endpoint that accepts everything with {"code": 0}."""
    return RecordingEndpoint(lambda request: httpx.Response(200, json={"code": 0}))


@pytest.fixture
def storage(tmp_vault: Path) -> StateStorage:
    return StateStorage(tmp_vault)


@pytest.fixture
def publisher(tmp_vault: Path, storage: StateStorage, endpoint: RecordingEndpoint) -> Publisher:
    client = PublishClient(ENDPOINT, transport=endpoint.transport)
    return Publisher(tmp_vault, storage, client)


def read_state(vault: Path) -> dict:
    return json.loads((vault / ".notesend" / "state.json").read_text(encoding="utf-8"))
