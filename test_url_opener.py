import tempfile
import unittest
from pathlib import Path

import httpx

import messages as msg
from url_opener import UrlError, UrlOpener, resolve_url, workspace_folder_for

PREFIX = "http://sandbox.test/"


class ResolveUrlTest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()

    def _url(self, rel):
        return resolve_url(str(self.root / rel), [self.root], PREFIX)

    def test_strips_app_prefix(self):
        self.assertEqual(self._url("src/app/pages/index.html"), PREFIX + "pages/index.html")
        self.assertEqual(self._url("app-sandbox/demo.html"), PREFIX + "demo.html")

    def test_leading_app_segment_stripped_once(self):
        self.assertEqual(self._url("app-sandbox/x/app/y.html"), PREFIX + "x/app/y.html")

    def test_lookalike_directory_kept(self):
        self.assertEqual(self._url("myapp/x.html"), PREFIX + "myapp/x.html")

    def test_no_file(self):
        with self.assertRaises(UrlError) as ctx:
            resolve_url("", [self.root], PREFIX)
        self.assertEqual(str(ctx.exception), msg.NO_FILE_SELECTED)

    def test_outside_workspace(self):
        with tempfile.TemporaryDirectory() as other:
            with self.assertRaises(UrlError) as ctx:
                resolve_url(str(Path(other) / "a.html"), [self.root], PREFIX)
        self.assertEqual(str(ctx.exception), msg.NO_WORKSPACE_FOLDER)

    def test_innermost_folder_wins(self):
        inner = self.root / "pkg"
        self.assertEqual(workspace_folder_for(inner / "a.html", [self.root, inner]), inner)
        self.assertEqual(self._url("pkg/a.html"), PREFIX + "pkg/a.html")


class UrlOpenerTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()
        self.requests = []
        self.opened = []
        self.responses = {}

    def _handler(self, request: httpx.Request):
        self.requests.append(str(request.url))
        status = self.responses.get(str(request.url), 200)
        if status is None:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(status)

    def _opener(self):
        return UrlOpener(
            url_prefix=PREFIX,
            workspace_folders=[self.root],
            opener=self.opened.append,
            transport=httpx.MockTransport(self._handler),
        )

    async def test_opens_after_two_checks_in_order(self):
        res = await self._opener().open(str(self.root / "app" / "index.html"))
        self.assertTrue(res["opened"])
        self.assertEqual(self.requests, [PREFIX, PREFIX + "index.html"])
        self.assertEqual(self.opened, [PREFIX + "index.html"])

    async def test_outside_workspace_makes_no_request(self):
        with tempfile.TemporaryDirectory() as other:
            res = await self._opener().open(str(Path(other) / "index.html"))
        self.assertEqual(res["message"], msg.NO_WORKSPACE_FOLDER)
        self.assertEqual(self.requests, [])
        self.assertEqual(self.opened, [])

    async def test_no_file_selected(self):
        res = await self._opener().open(None)
        self.assertEqual(res["message"], msg.NO_FILE_SELECTED)
        self.assertEqual(self.requests, [])

    async def test_sandbox_down(self):
        self.responses[PREFIX] = None
        res = await self._opener().open(str(self.root / "index.html"))
        self.assertEqual(res["message"], msg.NO_SANDBOX_RUNNING)
        self.assertEqual(self.requests, [PREFIX])
        self.assertEqual(self.opened, [])

    async def test_sandbox_error_status_counts_as_down(self):
        self.responses[PREFIX] = 503
        res = await self._opener().open(str(self.root / "index.html"))
        self.assertEqual(res["message"], msg.NO_SANDBOX_RUNNING)

    async def test_page_missing(self):
        self.responses[PREFIX + "index.html"] = 404
        res = await self._opener().open(str(self.root / "index.html"))
        self.assertFalse(res["opened"])
        self.assertEqual(res["message"], msg.PAGE_NOT_FOUND)
        self.assertEqual(len(self.requests), 2)
        self.assertEqual(self.opened, [])

    async def test_page_network_error_is_not_found(self):
        self.responses[PREFIX + "index.html"] = None
        res = await self._opener().open(str(self.root / "index.html"))
        self.assertEqual(res["message"], msg.PAGE_NOT_FOUND)

    async def test_non_200_success_is_not_found(self):
        self.responses[PREFIX + "index.html"] = 204
        res = await self._opener().open(str(self.root / "index.html"))
        self.assertEqual(res["message"], msg.PAGE_NOT_FOUND)
