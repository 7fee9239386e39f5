import shutil
import logging
import subprocess
from typing import Optional, Sequence

from .. import config
from ..exceptions import CollaboratorUnavailable

class FzfPicker:
    """
    Hands ranked paths to fzf (one per line, best first) and reads back
    the chosen line, if any.
    """
    def __init__(self, binary: str = config.FZF_BINARY):
        self.binary = binary

    def pick(self, paths: Sequence[str]) -> Optional[str]:
        fzf_path = shutil.which(self.binary)
        if not fzf_path:
            raise CollaboratorUnavailable(
                f"{self.binary} not found. Install it (e.g. `brew install fzf`) and retry."
            )

        cmd = [fzf_path, *config.FZF_ARGS]
        logging.debug(f"Launching picker with {len(paths)} candidates")
        # stderr is left attached to the terminal: fzf draws its UI there
        proc = subprocess.run(
            cmd,
            input="".join(f"{p}\n" for p in paths),
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
        if proc.returncode in config.FZF_NO_SELECTION_CODES:
            return None
        if proc.returncode != 0:
            logging.warning(f"{self.binary} exited with status {proc.returncode}")
            return None

        choice = proc.stdout.strip()
        return choice or None
