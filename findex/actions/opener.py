"""
Opens a chosen file (or reveals it in the file manager) with the host OS.
Failures are logged, never raised: the search already succeeded.
"""
import os
import sys
import logging
import subprocess
from pathlib import Path
from typing import List, Optional


def open_command(path: str, reveal: bool = False, platform: Optional[str] = None) -> Optional[List[str]]:
    """
    Builds the OS command for the action, or None on Windows plain open,
    which goes through os.startfile instead.
    """
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open", "-R", path] if reveal else ["open", path]
    if platform.startswith("win"):
        return ["explorer", f"/select,{path}"] if reveal else None
    # Linux: most file managers don't support highlighting, open the folder
    target = str(Path(path).parent) if reveal else path
    return ["xdg-open", target]


def open_path(path: str, reveal: bool = False) -> bool:
    cmd = open_command(path, reveal)
    try:
        if cmd is None:
            os.startfile(path)  # type: ignore[attr-defined]
            return True
        proc = subprocess.run(cmd, check=False)
    except OSError as e:
        logging.error(f"Could not open {path}: {e}")
        return False
    if proc.returncode != 0:
        logging.warning(f"{cmd[0]} exited with status {proc.returncode} for {path}")
        return False
    return True
