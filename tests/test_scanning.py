import os
import pytest
from pathlib import Path
from findex.models import IndexOptions
from findex.scanning.filesystem import DiskScanner, expand_root

def _names(scanner, root):
    return sorted(r.filename for r in scanner.scan(root))

def test_scanner_prunes_ignored_and_hidden_dirs(tmp_path, touch):
    touch(tmp_path / "notes.txt")
    touch(tmp_path / ".git" / "config.txt")
    touch(tmp_path / "node_modules" / "pkg" / "index.txt")
    touch(tmp_path / ".cache" / "blob.txt")
    touch(tmp_path / "docs" / "guide.txt")
    touch(tmp_path / ".profile")

    scanner = DiskScanner(IndexOptions(roots=[str(tmp_path)]))

    assert _names(scanner, tmp_path) == ["guide.txt", "notes.txt"]

def test_scanner_include_hidden_still_prunes_ignored(tmp_path, touch):
    touch(tmp_path / ".cache" / "blob.txt")
    touch(tmp_path / ".profile")
    touch(tmp_path / ".git" / "HEAD")

    scanner = DiskScanner(IndexOptions(roots=[str(tmp_path)], include_hidden=True))

    assert _names(scanner, tmp_path) == [".profile", "blob.txt"]

def test_hidden_root_itself_is_walked(tmp_path, touch):
    root = tmp_path / ".config"
    touch(root / "settings.json")

    scanner = DiskScanner(IndexOptions(roots=[str(root)]))

    assert _names(scanner, root) == ["settings.json"]

def test_only_extensions_filters_files_but_traverses_dirs(tmp_path, touch):
    touch(tmp_path / "a.PDF")
    touch(tmp_path / "b.txt")
    touch(tmp_path / "deep" / "nested" / "c.pdf")

    scanner = DiskScanner(IndexOptions(roots=[str(tmp_path)], only_extensions={".pdf"}))

    assert _names(scanner, tmp_path) == ["a.PDF", "c.pdf"]

def test_record_fields(tmp_path, touch):
    path = touch(tmp_path / "Final_Report-v2.PDF", mtime=1_600_000_000, content="12345")

    scanner = DiskScanner(IndexOptions(roots=[str(tmp_path)]))
    (rec,) = list(scanner.scan(tmp_path))

    assert rec.path == str(path)
    assert os.path.isabs(rec.path)
    assert rec.filename == "Final_Report-v2.PDF"
    assert rec.filename_norm == "final report v2 pdf"
    assert rec.ext == "pdf"
    assert rec.mtime == 1_600_000_000
    assert rec.size == 5
    assert rec.is_dir is False

@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlink_policy(tmp_path, touch):
    target = touch(tmp_path / "real" / "target.txt")
    links = tmp_path / "links"
    links.mkdir()
    try:
        os.symlink(target, links / "alias.txt")
        os.symlink(tmp_path / "real", links / "dir_alias")
        os.symlink(tmp_path / "missing.txt", links / "dangling.txt")
    except OSError:
        pytest.skip("cannot create symlinks here")

    default = DiskScanner(IndexOptions(roots=[str(links)]))
    assert _names(default, links) == []

    follow = DiskScanner(IndexOptions(roots=[str(links)], follow_symlinks=True))
    # Linked files are indexed; linked dirs are not descended into; dangling links are skipped
    assert _names(follow, links) == ["alias.txt"]

def test_resolve_roots_skips_missing_and_nested(tmp_path):
    outer = tmp_path / "outer"
    inner = outer / "inner"
    inner.mkdir(parents=True)
    missing = tmp_path / "missing"
    a_file = tmp_path / "file.txt"
    a_file.write_text("x")

    scanner = DiskScanner(IndexOptions(roots=[str(inner), str(missing), str(outer), str(outer), str(a_file)]))
    usable, skipped = scanner.resolve_roots()

    assert usable == [outer]
    assert skipped == [missing, a_file]

def test_expand_root_applies_home_and_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("FINDEX_TEST_DIR", "docs")

    assert expand_root("~") == tmp_path
    assert expand_root("~/$FINDEX_TEST_DIR/../docs/") == tmp_path / "docs"
    assert expand_root("relative").is_absolute()

@pytest.mark.skipif(os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                    reason="permission bits are not enforced")
def test_unreadable_directory_is_skipped(tmp_path, touch):
    touch(tmp_path / "ok.txt")
    locked = tmp_path / "locked"
    touch(locked / "secret.txt")
    locked.chmod(0)
    try:
        scanner = DiskScanner(IndexOptions(roots=[str(tmp_path)]))
        assert _names(scanner, tmp_path) == ["ok.txt"]
        assert scanner.entry_errors == 1
    finally:
        locked.chmod(0o755)

def _write_bytes_name(directory, raw_name):
    path = os.path.join(os.fsencode(directory), raw_name)
    try:
        with open(path, "wb") as f:
            f.write(b"x")
    except OSError:
        pytest.skip("filesystem rejects non-UTF-8 names")

@pytest.mark.skipif(os.name == "nt", reason="names are always unicode on Windows")
def test_undecodable_name_is_skipped(tmp_path, touch):
    touch(tmp_path / "good_report.pdf")
    _write_bytes_name(tmp_path, b"bad\xffname.pdf")

    scanner = DiskScanner(IndexOptions(roots=[str(tmp_path)]))

    assert _names(scanner, tmp_path) == ["good_report.pdf"]
    assert scanner.entry_errors == 1


class _VanishingEntry:
    """DirEntry stand-in for a file deleted between listing and stat."""
    def __init__(self, entry):
        self._entry = entry

    def __getattr__(self, name):
        return getattr(self._entry, name)

    def stat(self, follow_symlinks=True):
        raise FileNotFoundError(2, "No such file or directory", self._entry.path)


class _FlakyScandir:
    def __init__(self, it, broken):
        self._it = it
        self._broken = broken

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self._it.close()

    def __iter__(self):
        for e in self._it:
            yield _VanishingEntry(e) if e.name == self._broken else e


def test_entry_stat_failure_is_skipped(tmp_path, touch, monkeypatch):
    touch(tmp_path / "a.txt")
    touch(tmp_path / "gone.txt")
    touch(tmp_path / "sub" / "z.txt")

    real_scandir = os.scandir
    monkeypatch.setattr(os, "scandir", lambda p: _FlakyScandir(real_scandir(p), "gone.txt"))

    scanner = DiskScanner(IndexOptions(roots=[str(tmp_path)]))

    assert _names(scanner, tmp_path) == ["a.txt", "z.txt"]
    assert scanner.entry_errors == 1
