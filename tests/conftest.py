"""
Pytest configuration and fixtures for orphaned-images tests.
"""

import json

import pytest
from pathlib import Path

from orphaned_images.models import VaultFile
from orphaned_images.utils import VaultIOError, file_extension, file_name


class MemoryStore:
    """In-memory DocumentStore with switchable failures."""

    def __init__(
        self,
        files: dict[str, str],
        links: dict[str, dict[str, int]] | None = None,
        unreadable: set[str] | None = None,
        undeletable: set[str] | None = None,
        fail_writes: bool = False,
    ):
        self.files = dict(files)
        self.links = links or {}
        self.unreadable = unreadable or set()
        self.undeletable = undeletable or set()
        self.fail_writes = fail_writes
        self.reads: list[str] = []
        self.deleted: list[str] = []
        self.trashed: list[str] = []

    def _vault_file(self, path: str) -> VaultFile:
        name = file_name(path)
        return VaultFile(path=path, name=name, extension=file_extension(name))

    async def list_files(self) -> list[VaultFile]:
        return [self._vault_file(p) for p in self.files]

    async def resolved_links(self) -> dict[str, dict[str, int]]:
        return self.links

    async def read(self, path: str) -> str:
        self.reads.append(path)
        if path in self.unreadable or path not in self.files:
            raise VaultIOError(f"Failed to read {path}")
        return self.files[path]

    async def write(self, path: str, content: str) -> None:
        if self.fail_writes:
            raise VaultIOError(f"Failed to write {path}")
        self.files[path] = content

    async def delete(self, path: str) -> None:
        if path in self.undeletable:
            raise VaultIOError(f"Failed to delete {path}")
        del self.files[path]
        self.deleted.append(path)

    async def trash(self, path: str) -> None:
        if path in self.undeletable:
            raise VaultIOError(f"Failed to trash {path}")
        del self.files[path]
        self.trashed.append(path)

    async def get_file(self, path: str) -> VaultFile | None:
        if path not in self.files:
            return None
        return self._vault_file(path)


@pytest.fixture
def make_store():
    """Factory for in-memory stores."""
    return MemoryStore


@pytest.fixture
def temp_vault(tmp_path: Path):
    """Create a temporary vault with notes, images, and canvases."""
    vault_path = tmp_path / "vault"
    vault_path.mkdir()

    (vault_path / "Notes").mkdir()
    (vault_path / "Attachments").mkdir()
    (vault_path / "Boards").mkdir()
    (vault_path / ".obsidian").mkdir()

    # Note 1: wikilink embed by name and relative Markdown link with encoded space
    (vault_path / "Notes" / "Daily.md").write_text("""# Daily

Today's sketch:

![[diagram.png]]

See the [chart](../Attachments/chart%201.jpg) and [[Project]].
""", encoding="utf-8")

    # Note 2: linked from Daily by name
    (vault_path / "Notes" / "Project.md").write_text("""# Project

No images here, only a [website](https://example.com/unused.png).
""", encoding="utf-8")

    # Note 3: links inside code are not references
    (vault_path / "Notes" / "Code.md").write_text("""# Code

```markdown
![[unused.png]]
```

Inline `![[z orphan.bmp]]` too.
""", encoding="utf-8")

    # Images
    for name in [
        "diagram.png",
        "chart 1.jpg",
        "unused.png",
        "board.gif",
        "café.svg",
        "LOUD.PNG",
        "z orphan.bmp",
    ]:
        (vault_path / "Attachments" / name).write_bytes(b"\x89PNG fake image data")

    (vault_path / "Attachments" / "readme.txt").write_text("Not an image", encoding="utf-8")

    # Canvas 1: file node pointing at board.gif
    (vault_path / "Boards" / "Plan.canvas").write_text(json.dumps({
        "nodes": [
            {"id": "n1", "type": "text", "text": "Roadmap", "x": 0, "y": 0, "width": 200, "height": 100},
            {"id": "n2", "type": "file", "file": "Attachments/board.gif", "x": 300, "y": 0, "width": 400, "height": 300},
        ],
        "edges": [
            {"id": "e1", "fromNode": "n1", "toNode": "n2"},
        ],
    }), encoding="utf-8")

    # Canvas 2: path only visible after JSON decoding (é escape)
    (vault_path / "Boards" / "Escaped.canvas").write_text(
        '{"nodes":[{"id":"n1","type":"file","file":"Attachments/caf\\u00e9.svg"}],"edges":[]}',
        encoding="utf-8",
    )

    # Canvas 3: malformed
    (vault_path / "Boards" / "Broken.canvas").write_text("{not json", encoding="utf-8")

    # Hidden files are never scanned
    (vault_path / ".obsidian" / "hidden.png").write_bytes(b"hidden")

    yield vault_path


@pytest.fixture
def vault(temp_vault):
    """Create a Vault instance over the temp vault."""
    from orphaned_images.vault import Vault
    return Vault(temp_vault)


@pytest.fixture
def preferences_store(tmp_path: Path):
    """Create a PreferencesStore backed by a temp file."""
    from orphaned_images.preferences import PreferencesStore
    return PreferencesStore(tmp_path / "prefs" / "data.json")


@pytest.fixture
def patched_tools(temp_vault, preferences_store, monkeypatch):
    """Patch the tool module's vault and preferences store."""
    from orphaned_images import tools
    from orphaned_images.vault import Vault

    vault = Vault(temp_vault)
    monkeypatch.setattr(tools, "vault", vault)
    monkeypatch.setattr(tools, "preferences_store", preferences_store)
    return vault
