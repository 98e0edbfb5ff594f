#!/usr/bin/env python3
# workbench_css_mcp.py
#
# MCP server exposing the custom-CSS patcher and the sandbox URL opener.
#
# ─────────────────────────────────────────────────────────────────────────────
#  COMMANDS
# ─────────────────────────────────────────────────────────────────────────────
# customcss_install     patch workbench.html, keep a session-keyed backup
# customcss_uninstall   restore the backup named by the session sentinel
# customcss_update      uninstall + install
# customcss_status      sentinels and backups currently on disk
# open_with_url_prefix  check the sandbox server, then open the file's URL
# ─────────────────────────────────────────────────────────────────────────────

import asyncio
import json
import textwrap
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

import messages as msg
from handler_base import error, info
from handler_css import CSSPayload
from patcher import CustomCSSPatcher, discover_app_dir, workbench_html_for
from url_opener import UrlOpener

SERVER_NAME = "workbench-css"


# --------------------------------------------------------------------------- #
#  MCP server
# --------------------------------------------------------------------------- #
class WorkbenchCSSMCPServer:
    def __init__(self, config_path: Optional[Path] = None):
        self.server = Server(SERVER_NAME)
        self.config_path = config_path or Path(__file__).with_name("config.json")
        self.config: Dict[str, Any] = {}
        self.notices: List[Dict[str, Any]] = []
        self.patcher: Optional[CustomCSSPatcher] = None
        self.opener: Optional[UrlOpener] = None
        self._register_handlers()

    # ------------------------------------------------ configuration
    def _load_config(self):
        cfg = self.config_path
        self.config = json.loads(cfg.read_text()) if cfg.exists() else {}

        if self.config.get("workbench_html"):
            html_file = Path(self.config["workbench_html"]).expanduser().resolve()
        elif self.config.get("app_dir"):
            html_file = workbench_html_for(Path(self.config["app_dir"]).expanduser())
        else:
            app_dir = discover_app_dir()
            if app_dir is None:
                raise Exception(
                    f"No VS Code install found; set 'workbench_html' or 'app_dir' in {cfg}"
                )
            html_file = workbench_html_for(app_dir)

        payload = CSSPayload(
            [Path(p).expanduser() for p in self.config.get("css_files", [])]
        )
        self.patcher = CustomCSSPatcher(html_file, payload, notify=self._notify)
        self.opener = UrlOpener(
            url_prefix=self.config.get("url_prefix", msg.DEFAULT_URL_PREFIX),
            workspace_folders=[
                p
                for p in self.config.get("workspace_folders", [])
                if Path(p).expanduser().exists()
            ],
            timeout=float(self.config.get("http_timeout", 5.0)),
        )
        info(f"Main HTML file {html_file}")
        info(f"URL prefix {self.opener.url_prefix}")

    def _ensure_loaded(self):
        if self.patcher is None:
            self._load_config()

    # ------------------------------------------------ notifications
    def _notify(self, message: str, action: Optional[str] = None):
        self.notices.append({"message": message, "action": action})

    def _drain_notices(self) -> List[Dict[str, Any]]:
        notices, self.notices = self.notices, []
        return notices

    # ------------------------------------------------ commands
    def _install(self):
        self._ensure_loaded()
        return self.patcher.install()

    def _uninstall(self):
        self._ensure_loaded()
        return self.patcher.uninstall()

    def _update(self):
        self._ensure_loaded()
        return self.patcher.reinstall()

    def _status(self):
        self._ensure_loaded()
        return self.patcher.status()

    async def _open_with_url_prefix(self, file: Optional[str]):
        self._ensure_loaded()
        res = await self.opener.open(file)
        if not res["opened"]:
            self._notify(res["message"])
        return res

    # ------------------------------------------------ dispatch
    async def dispatch(self, name: str, args: Any) -> Dict[str, Any]:
        args = args or {}
        try:
            if name == "guidelines":
                res = {"guidelines": GUIDELINES}
            elif name == "customcss_install":
                res = self._install()
            elif name == "customcss_uninstall":
                res = self._uninstall()
            elif name == "customcss_update":
                res = self._update()
            elif name == "customcss_status":
                res = self._status()
            elif name == "open_with_url_prefix":
                res = await self._open_with_url_prefix(args.get("file"))
            else:
                res = {"error": f"Unknown tool {name}"}
            res["notifications"] = self._drain_notices()
            return res
        except Exception as exc:
            error(f"{name} failed: {exc}")
            return {
                "error": str(exc),
                "trace": traceback.format_exc(),
                "notifications": self._drain_notices(),
            }

    # ------------------------------------------------ tool registration
    def _register_handlers(self):
        def schema(**props):
            return {"type": "object", "properties": props, "required": list(props)}

        tools: Dict[str, tuple] = {
            "guidelines": (schema(), "How the custom CSS commands behave."),
            "customcss_install": (
                schema(),
                "Inject custom CSS into workbench.html (restart VS Code after).",
            ),
            "customcss_uninstall": (
                schema(),
                "Restore workbench.html from the session backup.",
            ),
            "customcss_update": (schema(), "Uninstall then install custom CSS."),
            "customcss_status": (
                schema(),
                "Report sentinels and backup files for workbench.html.",
            ),
            "open_with_url_prefix": (
                schema(file={"type": "string"}),
                "Open a workspace file on the sandbox server in the browser.",
            ),
        }

        @self.server.list_tools()
        async def list_tools():
            return [
                types.Tool(name=n, description=desc, inputSchema=sch)
                for n, (sch, desc) in tools.items()
            ]

        @self.server.call_tool()
        async def call_tool(name: str, args: Any):
            res = await self.dispatch(name, args)
            return [types.TextContent(type="text", text=json.dumps(res, indent=2))]

    # ------------------------------------------------ run loop
    async def run(self):
        try:
            self._load_config()
        except Exception as exc:
            error(str(exc))
            return
        async with mcp.server.stdio.stdio_server() as (r, w):
            await self.server.run(
                r,
                w,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version="1.0.0",
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )


GUIDELINES = textwrap.dedent(
    """
    ### workbench-css Guidelines

    • `customcss_install` writes a backup next to workbench.html, then injects
      the style block before `</html>` between sentinel comments.
    • `customcss_uninstall` does nothing when no session sentinel is present.
    • Installing again rolls back the previous patch first.
    • Every change needs a VS Code restart; see `notifications` in each result.
    • Write errors usually mean VS Code must be run with admin privileges.
    """
).strip()


async def main():
    await WorkbenchCSSMCPServer().run()


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
