import os
import time
import pytest
import sqlite3
from findex.database.schema import init_schema
from findex.database.ops import CatalogOperations
from findex.models import FileRecord
from findex.search.normalize import normalize, ext_lower

@pytest.fixture
def conn():
    """Returns an in-memory SQLite connection with the schema initialized."""
    c = sqlite3.connect(":memory:")
    init_schema(c)
    try:
        yield c
    finally:
        c.close()

@pytest.fixture
def db_ops(conn):
    """Returns a CatalogOperations instance attached to the in-memory DB."""
    return CatalogOperations(conn)

@pytest.fixture
def make_record():
    """Builds a FileRecord the way the scanner would for a given filename."""
    def _make(filename, mtime=None, directory="/data", size=1):
        return FileRecord(
            path=f"{directory}/{filename}",
            filename=filename,
            filename_norm=normalize(filename),
            ext=ext_lower(filename),
            mtime=int(time.time()) if mtime is None else int(mtime),
            size=size,
        )
    return _make

@pytest.fixture
def touch():
    """Creates a file (and parents), optionally pinning its mtime."""
    def _touch(path, mtime=None, content="x"):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path
    return _touch
