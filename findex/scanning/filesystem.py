import os
import logging
from pathlib import Path
from typing import Iterator, List, Tuple

from ..exceptions import RootUnavailableError, TransientEntryError
from ..models import FileRecord, IndexOptions
from ..search.normalize import normalize, ext_lower

class DiskScanner:
    """
    Walks index roots and turns every admissible file into a FileRecord.
    Applies the hidden / ignore / extension / symlink policy; per-entry
    failures are logged at debug level and skipped.
    """
    def __init__(self, options: IndexOptions):
        self.options = options
        self.entry_errors = 0

    def resolve_roots(self) -> Tuple[List[Path], List[Path]]:
        """
        Expands and cleans the configured roots.

        Returns:
            (usable, skipped). Duplicate roots and roots nested inside another
            usable root are dropped so every path is observed once per pass.
        """
        usable: List[Path] = []
        skipped: List[Path] = []
        for raw in self.options.roots:
            root = expand_root(raw)
            try:
                self._check_root(root)
            except RootUnavailableError as e:
                logging.warning(str(e))
                skipped.append(root)
                continue
            usable.append(root)

        # Collapse duplicates and nested roots, keeping the first outermost one
        collapsed: List[Path] = []
        for root in sorted(set(usable), key=lambda p: len(p.parts)):
            if any(root == kept or kept in root.parents for kept in collapsed):
                logging.info(f"Root {root} is already covered by another root.")
                continue
            collapsed.append(root)
        ordered = [r for r in dict.fromkeys(usable) if r in collapsed]
        return ordered, skipped

    def scan(self, root: Path) -> Iterator[FileRecord]:
        """Generator that yields a FileRecord for every admitted file under root."""
        for entry in self._iter_files(root):
            record = self._process_entry(entry)
            if record:
                yield record

    def _check_root(self, root: Path):
        if not root.exists():
            raise RootUnavailableError(root, "does not exist")
        if not root.is_dir():
            raise RootUnavailableError(root, "not a directory")
        try:
            with os.scandir(root):
                pass
        except OSError as e:
            raise RootUnavailableError(root, e.strerror or str(e)) from e

    def _iter_files(self, root: Path) -> Iterator[os.DirEntry]:
        """Depth-first walker using os.scandir; prunes ignored and hidden dirs."""
        ignore = self.options.ignore_dirs
        include_hidden = self.options.include_hidden

        stack = [str(root)]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                self._entry_error(Path(current), e)
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            for e in entries:
                try:
                    # Symlinked directories are never descended into
                    is_dir = e.is_dir(follow_symlinks=False)
                except OSError as err:
                    self._entry_error(Path(e.path), err)
                    continue

                if is_dir:
                    if e.name in ignore:
                        continue
                    if not include_hidden and e.name.startswith("."):
                        continue
                    dirs.append(e.path)
                else:
                    yield e

            # Push dirs reversed so we process A before Z
            for d in reversed(dirs):
                stack.append(d)

    def _process_entry(self, entry: os.DirEntry):
        """Applies the file policy to one non-directory entry."""
        name = entry.name

        # 0. Names that are not valid UTF-8 (surrogate-escaped bytes) cannot be stored
        try:
            entry.path.encode("utf-8")
        except UnicodeEncodeError as e:
            shown = os.fsencode(entry.path).decode("utf-8", "backslashreplace")
            self._entry_error(Path(shown), e)
            return None

        # 1. Hidden files
        if not self.options.include_hidden and name.startswith("."):
            return None

        # 2. Extension allow-set
        ext = ext_lower(name)
        only = self.options.only_extensions
        if only and ext not in only:
            return None

        try:
            # 3. Symlink policy
            if entry.is_symlink():
                if not self.options.follow_symlinks:
                    return None
                if not entry.is_file(follow_symlinks=True):
                    # Dangling link or link to a directory
                    return None
                st = entry.stat(follow_symlinks=True)
            else:
                if not entry.is_file(follow_symlinks=False):
                    # Sockets, fifos, devices
                    return None
                st = entry.stat(follow_symlinks=False)
        except OSError as e:
            self._entry_error(Path(entry.path), e)
            return None

        return FileRecord(
            path=entry.path,
            filename=name,
            filename_norm=normalize(name),
            ext=ext,
            mtime=int(st.st_mtime),
            size=st.st_size,
            is_dir=False,
        )

    def _entry_error(self, path: Path, cause: Exception):
        self.entry_errors += 1
        logging.debug(f"Skipping entry: {TransientEntryError(path, cause)}")


def expand_root(raw: str) -> Path:
    """Applies ~ and $VAR expansion and returns an absolute, cleaned path."""
    expanded = os.path.expandvars(os.path.expanduser(str(raw)))
    return Path(os.path.abspath(expanded))
