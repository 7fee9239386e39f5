import sqlite3
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, FrozenSet

from ..exceptions import StoreError
from ..models import FileRecord

RECORD_COLUMNS = "path, filename, filename_norm, ext, mtime, size, is_dir, seen_gen"

class CatalogOperations:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def write_transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Wraps one reconciliation pass.
        BEGIN IMMEDIATE takes the write lock up front, so a second writer
        waits (busy timeout) instead of interleaving its sweep with ours.
        Readers keep seeing the previous snapshot until COMMIT.
        """
        if self.conn.in_transaction:
            raise StoreError("uncommitted changes pending; refusing to start an index pass")
        self.conn.execute("BEGIN IMMEDIATE")
        try:
            yield self.conn
            self.conn.commit()
        except BaseException:
            self.conn.rollback()
            logging.debug("Write transaction rolled back.")
            raise

    def next_generation(self, now: int) -> int:
        """
        Picks a generation id strictly newer than anything stored,
        even if two passes start within the same second.
        """
        cur = self.conn.cursor()
        cur.execute("SELECT COALESCE(MAX(seen_gen), 0) FROM files")
        (latest,) = cur.fetchone()
        return max(int(now), int(latest) + 1)

    def upsert_file_record(self, rec: FileRecord, generation: int):
        """
        Inserts or refreshes a row by path.
        Every derived field is overwritten, so filename and filename_norm
        always change together.
        """
        self.conn.execute(f"""
            INSERT INTO files ({RECORD_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(path) DO UPDATE SET
                filename = excluded.filename,
                filename_norm = excluded.filename_norm,
                ext = excluded.ext,
                mtime = excluded.mtime,
                size = excluded.size,
                is_dir = excluded.is_dir,
                seen_gen = excluded.seen_gen
        """, (
            rec.path, rec.filename, rec.filename_norm, rec.ext,
            rec.mtime, rec.size, int(rec.is_dir), generation
        ))

    def sweep_older_than(self, generation: int) -> int:
        """Deletes every row not observed by the given generation."""
        cur = self.conn.execute("DELETE FROM files WHERE seen_gen <> ?", (generation,))
        return cur.rowcount

    def shortlist_by_substring(self,
                               patterns: Sequence[str],
                               ext_filter: Optional[FrozenSet[str]],
                               limit: int) -> List[FileRecord]:
        """
        Returns files whose filename_norm contains any of the patterns,
        newest first, capped at `limit`.
        """
        patterns = [p for p in patterns if p]
        if not patterns or limit <= 0:
            return []

        where = "(" + " OR ".join("instr(filename_norm, ?) > 0" for _ in patterns) + ")"
        args: List[object] = list(patterns)

        if ext_filter:
            exts = sorted(ext_filter)
            where += " AND ext IN (" + ",".join("?" for _ in exts) + ")"
            args.extend(exts)

        args.append(limit)
        cur = self.conn.cursor()
        cur.execute(f"""
            SELECT {RECORD_COLUMNS}
            FROM files
            WHERE {where} AND is_dir = 0
            ORDER BY mtime DESC, path ASC
            LIMIT ?
        """, args)
        return [self._row_to_record(r) for r in cur.fetchall()]

    def fetch_by_path(self, path: str) -> Optional[FileRecord]:
        cur = self.conn.cursor()
        cur.execute(f"SELECT {RECORD_COLUMNS} FROM files WHERE path = ?", (path,))
        row = cur.fetchone()
        return self._row_to_record(row) if row else None

    def fetch_all(self) -> List[FileRecord]:
        cur = self.conn.cursor()
        cur.execute(f"SELECT {RECORD_COLUMNS} FROM files ORDER BY path")
        return [self._row_to_record(r) for r in cur.fetchall()]

    def count_files(self) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) FROM files")
        return cur.fetchone()[0]

    def catalog_stats(self) -> dict:
        """Summary numbers for the `stats` command."""
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*), MAX(seen_gen), MIN(mtime), MAX(mtime) FROM files")
        total, generation, oldest, newest = cur.fetchone()
        cur.execute("""
            SELECT ext, COUNT(*) AS n FROM files
            GROUP BY ext ORDER BY n DESC, ext ASC LIMIT 10
        """)
        return {
            'files': total,
            'generation': generation,
            'oldest_mtime': oldest,
            'newest_mtime': newest,
            'top_extensions': cur.fetchall(),
        }

    @staticmethod
    def _row_to_record(row) -> FileRecord:
        path, filename, norm, ext, mtime, size, is_dir, seen_gen = row
        return FileRecord(
            path=path, filename=filename, filename_norm=norm,
            ext=ext or "", mtime=int(mtime or 0), size=int(size or 0),
            is_dir=bool(is_dir), seen_gen=int(seen_gen)
        )
