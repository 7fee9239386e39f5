import sqlite3
import logging
import time
from pathlib import Path
from typing import List, Optional

from .database.db import DBManager
from .database.ops import CatalogOperations
from .exceptions import StoreError
from .models import IndexOptions, IndexSummary, QueryOptions, SearchResult
from .scanning.reconciler import Reconciler
from .search.ranker import Ranker

class FindexApp:
    def __init__(self, db_path: Path):
        self.db_manager = DBManager(db_path)

    def index(self, options: IndexOptions, show_progress: bool = False) -> IndexSummary:
        """
        Runs one reconciliation pass.
        1. Pick a generation id newer than anything stored
        2. Walk roots, upserting every admitted file with that generation
        3. Sweep rows from older generations
        All three happen in one transaction: readers see either the old
        snapshot or the new one, never a mix.
        """
        with self.db_manager.write_lock:
            conn = self.db_manager.connect()
            db_ops = CatalogOperations(conn)
            reconciler = Reconciler(db_ops, options, show_progress=show_progress)
            try:
                with db_ops.write_transaction():
                    generation = db_ops.next_generation(int(time.time()))
                    summary = reconciler.run(generation)
            except sqlite3.Error as e:
                raise StoreError(f"index pass failed and was rolled back: {e}") from e

        if summary.roots_skipped:
            logging.warning(f"Skipped {len(summary.roots_skipped)} unavailable root(s).")
        return summary

    def search(self, query: str, options: Optional[QueryOptions] = None) -> List[SearchResult]:
        conn = self.db_manager.connect()
        try:
            return Ranker(CatalogOperations(conn)).search(query, options)
        except sqlite3.Error as e:
            raise StoreError(f"query failed: {e}") from e

    def stats(self) -> dict:
        conn = self.db_manager.connect()
        try:
            return CatalogOperations(conn).catalog_stats()
        except sqlite3.Error as e:
            raise StoreError(f"cannot read catalog: {e}") from e

    def close(self):
        self.db_manager.close()
