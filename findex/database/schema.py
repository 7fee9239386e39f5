"""
Database schema definitions.
"""
import sqlite3
import logging

CURRENT_SCHEMA_VERSION = 1

def init_schema(conn: sqlite3.Connection):
    """
    Applies the catalog schema to the database.
    Idempotent: safe to run on every startup.
    """
    with conn:
        # 1. Version Tracking (For future migrations)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            );
        """)

        cur = conn.cursor()
        cur.execute("SELECT version FROM schema_version")
        if not cur.fetchone():
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (CURRENT_SCHEMA_VERSION,))

        # 2. File Table
        # One row per observed path; seen_gen is the reconciliation stamp
        conn.execute("""
        CREATE TABLE IF NOT EXISTS files (
            id              INTEGER PRIMARY KEY,
            path            TEXT NOT NULL UNIQUE,
            filename        TEXT NOT NULL,
            filename_norm   TEXT NOT NULL,
            ext             TEXT,
            mtime           INTEGER,
            size            INTEGER,
            is_dir          INTEGER NOT NULL DEFAULT 0,
            seen_gen        INTEGER NOT NULL DEFAULT 0
        );
        """)

        # 3. Indices: shortlist predicate, ext filter, recency order, sweep
        conn.execute("CREATE INDEX IF NOT EXISTS idx_filename_norm ON files(filename_norm);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_ext ON files(ext);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_mtime ON files(mtime);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_seen_gen ON files(seen_gen);")

    logging.debug("Database schema initialized.")
