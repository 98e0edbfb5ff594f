# url_opener.py – open a workspace file on the local sandbox server

import re
import webbrowser
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx

import messages as msg
from handler_base import error, info

_app_prefix = re.compile(r"(^|.*/)(app-sandbox|app)/")


class UrlError(Exception):
    """A user-visible reason why no URL could be derived."""


def workspace_folder_for(fpath: Path, folders: List[Path]) -> Optional[Path]:
    # innermost folder wins for nested workspaces
    owners = [f for f in folders if fpath == f or f in fpath.parents]
    return max(owners, key=lambda f: len(f.parts), default=None)


def resolve_url(file: Optional[str], folders: List[Path], url_prefix: str) -> str:
    if not file:
        raise UrlError(msg.NO_FILE_SELECTED)
    fpath = Path(file).expanduser().resolve()
    folder = workspace_folder_for(fpath, folders)
    if folder is None:
        raise UrlError(msg.NO_WORKSPACE_FOLDER)
    rel = fpath.relative_to(folder).as_posix()
    return url_prefix + _app_prefix.sub("", rel, count=1)


async def check_if_sandbox_is_running(client: httpx.AsyncClient, url: str) -> bool:
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        error(f"Server is not running: {exc}")
        return False
    if not response.is_success:
        error(f"Server is not running: HTTP {response.status_code}")
        return False
    return True


async def check_if_page_exists(client: httpx.AsyncClient, url: str) -> bool:
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        error(f"Failed to fetch the page: {exc}")
        return False
    return response.status_code == 200


class UrlOpener:
    def __init__(
        self,
        url_prefix: str = msg.DEFAULT_URL_PREFIX,
        workspace_folders: Optional[List[Path]] = None,
        opener: Callable[[str], Any] = webbrowser.open,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url_prefix = url_prefix
        self.workspace_folders = [
            Path(f).expanduser().resolve() for f in workspace_folders or []
        ]
        self.opener = opener
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport
        )

    async def open(self, file: Optional[str]) -> Dict[str, Any]:
        try:
            url = resolve_url(file, self.workspace_folders, self.url_prefix)
        except UrlError as exc:
            return {"opened": False, "message": str(exc)}

        async with self._client() as client:
            if not await check_if_sandbox_is_running(client, self.url_prefix):
                return {"opened": False, "url": url, "message": msg.NO_SANDBOX_RUNNING}
            if not await check_if_page_exists(client, url):
                return {"opened": False, "url": url, "message": msg.PAGE_NOT_FOUND}

        info(f"Opening {url}")
        self.opener(url)
        return {"opened": True, "url": url, "message": msg.OPENED}
