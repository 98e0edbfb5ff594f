# patcher.py – install / uninstall / reinstall custom CSS in workbench.html

import uuid
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import messages as msg
from backups import BackupStore
from handler_base import error, info, write_text_exact
from handler_css import CSSPayload
from handler_html import WorkbenchHandler, sentinel_lines

WORKBENCH_PARTS = ("vs", "code", "electron-sandbox", "workbench", "workbench.html")

# resources/app/out of the usual VS Code installs
APP_DIR_CANDIDATES = (
    "/usr/share/code/resources/app/out",
    "/opt/visual-studio-code/resources/app/out",
    "/snap/code/current/usr/share/code/resources/app/out",
    "/Applications/Visual Studio Code.app/Contents/Resources/app/out",
    "~/AppData/Local/Programs/Microsoft VS Code/resources/app/out",
)


def workbench_html_for(app_dir: Path) -> Path:
    return app_dir.joinpath(*WORKBENCH_PARTS)


def discover_app_dir(candidates=APP_DIR_CANDIDATES) -> Optional[Path]:
    for c in candidates:
        app_dir = Path(c).expanduser()
        if workbench_html_for(app_dir).exists():
            return app_dir
    return None


def _log_notice(message: str, action: Optional[str] = None):
    info(f"[notice] {message}" + (f" ({action})" if action else ""))


class CustomCSSPatcher:
    def __init__(
        self,
        html_file: Path,
        payload: Optional[CSSPayload] = None,
        notify: Callable[..., None] = _log_notice,
    ):
        self.html_file = html_file
        self.payload = payload or CSSPayload()
        self.backups = BackupStore(html_file)
        self.notify = notify

    def _handler(self) -> WorkbenchHandler:
        return WorkbenchHandler.parse(self.html_file)

    # ------------------------------------------------ main commands
    def install(self) -> Dict[str, Any]:
        # an existing patch is rolled back first so the new backup is the pristine file
        previous = self._uninstall_impl()
        session_id = str(uuid.uuid4())
        info(f"UUID Session: {session_id}")
        backup = self._create_backup(session_id)
        self._perform_patch(session_id)
        return {
            "installed": True,
            "session_id": session_id,
            "backup": backup.name,
            "previous": previous,
        }

    def uninstall(self) -> Dict[str, Any]:
        res = self._uninstall_impl()
        if res is None:
            self.notify(msg.NOT_INSTALLED)
            return {"uninstalled": False, "message": msg.NOT_INSTALLED}
        self.notify(msg.DISABLED, msg.RESTART_IDE)
        return {"uninstalled": True, **res}

    def reinstall(self) -> Dict[str, Any]:
        return self.install()

    def status(self) -> Dict[str, Any]:
        h = self._handler()
        return {
            "workbench_html": str(self.html_file),
            "installed": h.installed,
            "session_id": h.session_id,
            "markers": sentinel_lines(h.text),
            "backups": [p.name for p in self.backups.list()],
        }

    # ------------------------------------------------ backup
    def _session_id(self) -> Optional[str]:
        try:
            return self._handler().session_id
        except OSError as exc:
            self.notify(msg.SOMETHING_WRONG + str(exc))
            raise

    def _create_backup(self, session_id: str) -> Path:
        try:
            h = self._handler()
            if not h.has("html_close"):
                raise Exception(f"No closing </html> tag in {self.html_file}")
            return self.backups.create(session_id, h.clean_text())
        except OSError:
            self.notify(msg.ADMIN)
            raise

    def _uninstall_impl(self) -> Optional[Dict[str, Any]]:
        session_id = self._session_id()
        if not session_id:
            return None
        try:
            restored = self.backups.restore(session_id)
            if not restored:
                error(f"Backup for session {session_id} is missing; file left as is")
            removed = self.backups.sweep()
        except OSError:
            self.notify(msg.ADMIN)
            raise
        return {"session_id": session_id, "restored": restored, "removed": removed}

    # ------------------------------------------------ patching
    def _perform_patch(self, session_id: str):
        h = self._handler()
        style_block = self.payload.style_block()
        info(f"injectHTML: {style_block}")
        html = h.patched_text(session_id, style_block)
        try:
            write_text_exact(self.html_file, html)
        except OSError:
            self.notify(msg.ADMIN)
            raise
        self.notify(msg.ENABLED, msg.RESTART_IDE)
