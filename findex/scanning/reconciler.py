import logging
import time
from typing import Optional

from tqdm import tqdm

from ..database.ops import CatalogOperations
from ..exceptions import ConfigurationError, RootUnavailableError
from ..models import IndexOptions, IndexSummary
from .filesystem import DiskScanner

class Reconciler:
    """
    Mark-and-sweep synchronization of the catalog with the filesystem.

    Every admitted file is upserted stamped with the pass generation; once
    all roots are walked, rows carrying any other generation are deleted.
    Deletions, renames and moved roots all fall out of the sweep, no
    listing diff is needed.

    The caller owns the transaction: run() must execute inside
    CatalogOperations.write_transaction() so the upserts and the sweep
    commit (or roll back) together.
    """
    def __init__(self, db_ops: CatalogOperations, options: IndexOptions, show_progress: bool = False):
        if not options.roots:
            raise ConfigurationError("no roots provided")
        self.db = db_ops
        self.options = options
        self.show_progress = show_progress
        self.scanner = DiskScanner(options)

    def run(self, generation: int) -> IndexSummary:
        t0 = time.perf_counter()
        summary = IndexSummary(generation=generation)

        roots, skipped = self.scanner.resolve_roots()
        summary.roots_skipped = skipped
        if not roots:
            # Sweeping after an empty walk would wipe the catalog
            # (e.g. an unmounted external disk), so refuse instead.
            raise RootUnavailableError(
                skipped[0],
                f"no usable roots ({len(skipped)} skipped); previous index left untouched"
            )

        progress: Optional[tqdm] = None
        if self.show_progress:
            progress = tqdm(desc="Indexing", unit="file")

        try:
            for root in roots:
                logging.info(f"Scanning {root}...")
                for record in self.scanner.scan(root):
                    self.db.upsert_file_record(record, generation)
                    summary.indexed += 1
                    if progress is not None:
                        progress.update(1)
                    elif summary.indexed % self.options.batch_size == 0:
                        logging.debug(f"Indexed {summary.indexed} files so far...")
                summary.roots_scanned.append(root)
        finally:
            if progress is not None:
                progress.close()

        # Sweep anything not seen in this generation
        summary.swept = self.db.sweep_older_than(generation)
        summary.elapsed_sec = time.perf_counter() - t0

        if self.scanner.entry_errors:
            logging.debug(f"Skipped {self.scanner.entry_errors} unreadable entries.")
        logging.info(
            f"Generation {generation}: indexed {summary.indexed} files, "
            f"removed {summary.swept} stale rows."
        )
        return summary
