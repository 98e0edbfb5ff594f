# backups.py – session-keyed copies of workbench.html

import shutil
from pathlib import Path
from typing import List

from handler_base import info, write_text_exact

BACKUP_SUFFIX = ".bak-custom-css"


class BackupStore:
    def __init__(self, html_file: Path):
        self.html_file = html_file
        self.directory = html_file.parent

    def path_for(self, session_id: str) -> Path:
        return self.directory / f"{self.html_file.stem}.{session_id}{BACKUP_SUFFIX}"

    def list(self) -> List[Path]:
        return sorted(
            p for p in self.directory.iterdir() if p.name.endswith(BACKUP_SUFFIX)
        )

    def create(self, session_id: str, html: str) -> Path:
        path = self.path_for(session_id)
        write_text_exact(path, html)
        info(f"Backup written to {path}")
        return path

    # copy backup over the live file; False when there is nothing to restore
    def restore(self, session_id: str) -> bool:
        path = self.path_for(session_id)
        if not path.exists():
            return False
        shutil.copyfile(path, self.html_file)
        return True

    def sweep(self) -> List[str]:
        removed = []
        for path in self.list():
            path.unlink()
            removed.append(path.name)
        return removed
