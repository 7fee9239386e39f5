import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from . import config
from .actions.opener import open_path
from .actions.picker import FzfPicker
from .core import FindexApp
from .exceptions import ConfigurationError, FindexError
from .filters import apply_since, build_ext_filter, parse_since
from .models import IndexOptions, QueryOptions

def setup_logging(db_path: Path, verbose: bool):
    """Logs to stderr and to a file next to the catalog; stdout is for results."""
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if str(db_path) != ":memory:":
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(db_path.parent / config.LOG_FILENAME, encoding='utf-8'))
        except OSError as e:
            print(f"Warning: file logging disabled: {e}", file=sys.stderr)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

def _add_common(p: argparse.ArgumentParser):
    p.add_argument("--db", type=Path, default=config.DEFAULT_DB_PATH, help="Path to the SQLite catalog (default: ~/.findex/index.db)")
    p.add_argument("--pdf", action="store_true", help="Only PDFs")
    p.add_argument("--img", action="store_true", help="Only images (png, jpg, jpeg, heic, webp, gif, tiff)")
    p.add_argument("--ext", action="append", default=[], metavar="EXT", help="Only this extension (repeatable)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

def _add_query_args(p: argparse.ArgumentParser, default_limit: int):
    p.add_argument("--limit", type=int, default=default_limit, help=f"Max results (default: {default_limit})")
    p.add_argument("--shortlist", type=int, default=config.DEFAULT_SHORTLIST, help="Candidates pulled from the catalog before scoring")
    p.add_argument("--since", default="", help="Only files modified within a window like 24h, 7d, 2w")
    p.add_argument("query", nargs="*", help="Free-text query")

def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(prog="findex", description="findex: fast filename index + search")
    sub = p.add_subparsers(dest="command", required=True)

    p_index = sub.add_parser("index", help="Walk roots and refresh the catalog")
    _add_common(p_index)
    p_index.add_argument("--root", action="append", default=[], help="Root to index (repeatable, default: ~)")
    p_index.add_argument("--hidden", action="store_true", help="Include hidden files and directories")
    p_index.add_argument("--follow", action="store_true", help="Index symlinked files")
    p_index.add_argument("--ignore", action="append", default=[], metavar="NAME", help="Extra directory name to prune (repeatable)")
    p_index.add_argument("--progress", action="store_true", help="Show a progress bar")

    p_q = sub.add_parser("q", help="Print ranked matches")
    _add_common(p_q)
    _add_query_args(p_q, config.DEFAULT_LIMIT)
    p_q.add_argument("--paths-only", action="store_true", help="Print paths without scores")

    for name, help_text in (("open", "Pick a match with fzf and open it"),
                            ("reveal", "Pick a match with fzf and reveal it in the file manager")):
        p_pick = sub.add_parser(name, help=help_text)
        _add_common(p_pick)
        _add_query_args(p_pick, config.DEFAULT_PICK_LIMIT)

    p_stats = sub.add_parser("stats", help="Summarize the catalog")
    p_stats.add_argument("--db", type=Path, default=config.DEFAULT_DB_PATH, help="Path to the SQLite catalog")
    p_stats.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)

def run_index(app: FindexApp, args) -> int:
    options = IndexOptions(
        roots=args.root or list(config.DEFAULT_ROOTS),
        include_hidden=args.hidden,
        follow_symlinks=args.follow,
        ignore_dirs=config.DEFAULT_IGNORE_DIRS | set(args.ignore),
        only_extensions=build_ext_filter(args.pdf, args.img, args.ext),
    )
    summary = app.index(options, show_progress=args.progress)
    print(f"Indexed {summary.indexed} files in {summary.elapsed_sec:.3f}s")
    return 0

def _ranked(app: FindexApp, args):
    query = " ".join(args.query)
    if not query.strip():
        raise ConfigurationError("query required")
    cutoff = parse_since(args.since)

    options = QueryOptions(
        limit=args.limit,
        shortlist=args.shortlist,
        ext_filter=build_ext_filter(args.pdf, args.img, args.ext),
    )
    return apply_since(app.search(query, options), cutoff)

def run_query(app: FindexApp, args) -> int:
    for r in _ranked(app, args):
        if args.paths_only:
            print(r.path)
        else:
            print(f"{r.score:.2f}  {r.path}")
    return 0

def run_pick(app: FindexApp, args, reveal: bool) -> int:
    results = _ranked(app, args)
    if not results:
        print("No matches.")
        return 0

    choice = FzfPicker().pick([r.path for r in results])
    if not choice:
        return 0
    open_path(choice, reveal=reveal)
    return 0

def run_stats(app: FindexApp, args) -> int:
    stats = app.stats()
    print(f"Catalog:     {args.db}")
    print(f"Files:       {stats['files']}")
    if stats['generation']:
        print(f"Generation:  {stats['generation']} ({datetime.fromtimestamp(stats['generation']):%Y-%m-%d %H:%M:%S})")
    if stats['newest_mtime'] is not None:
        print(f"Newest file: {datetime.fromtimestamp(stats['newest_mtime']):%Y-%m-%d %H:%M:%S}")
        print(f"Oldest file: {datetime.fromtimestamp(stats['oldest_mtime']):%Y-%m-%d %H:%M:%S}")
    for ext, n in stats['top_extensions']:
        print(f"  {ext or '(none)':<10} {n}")
    return 0

def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    db_path = args.db.expanduser()
    args.db = db_path

    setup_logging(db_path, args.verbose)

    app = FindexApp(db_path)
    try:
        if args.command == "index":
            code = run_index(app, args)
        elif args.command == "q":
            code = run_query(app, args)
        elif args.command in ("open", "reveal"):
            code = run_pick(app, args, reveal=args.command == "reveal")
        else:
            code = run_stats(app, args)
    except FindexError as e:
        logging.error(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(130)
    finally:
        app.close()
    sys.exit(code)

if __name__ == "__main__":
    main()
