"""Tests for filesystem helpers."""

from pathlib import Path

from postfolio.core import atomic_write


class TestAtomicWrite:
    def test_creates_parents_and_writes(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "index.html"
        atomic_write(target, "<p>hi</p>")
        assert target.read_text(encoding="utf-8") == "<p>hi</p>"

    def test_replaces_without_leftovers(self, tmp_path: Path):
        target = tmp_path / "index.html"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["index.html"]
