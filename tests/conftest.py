import pytest
from pathlib import Path


@pytest.fixture
def make_files():
    """Writes {relative_path: content} under a root. Bytes are written raw."""
    def _make(root: Path, files: dict) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root
    return _make


@pytest.fixture(autouse=True)
def no_global_excludes(tmp_path, monkeypatch):
    """Keeps the developer's own global git excludes out of every test."""
    monkeypatch.setattr("repodump.walker.global_excludes_file", lambda: tmp_path / "no-global-excludes")
