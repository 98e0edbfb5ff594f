# handler_html.py – char-offset map of the sentinels in workbench.html

import re
from pathlib import Path
from typing import List, Optional

from handler_base import BaseHandler, Thing


SESSION_TAG = "<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID {} !! -->"
START_TAG = "<!-- !! VSCODE-CUSTOM-CSS-START !! -->"
END_TAG = "<!-- !! VSCODE-CUSTOM-CSS-END !! -->"

_session = re.compile(r"<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID ([0-9a-fA-F-]+) !! -->")
_any_session = re.compile(r"<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID [\w-]+ !! -->\n*")
_block = re.compile(re.escape(START_TAG) + r"[\s\S]*?" + re.escape(END_TAG) + r"\n*")
_csp = re.compile(r'<meta\s+http-equiv="Content-Security-Policy"[\s\S]*?/>')
_html_close = re.compile(r"</html>")


def clear_existing_patches(html: str) -> str:
    html = _block.sub("", html)
    return _any_session.sub("", html)


def _check_markers(html: str):
    ids = sorted(set(_session.findall(html)))
    if len(ids) > 1:
        raise Exception(f"malformed patch markers: several session ids {ids}")
    starts, ends = html.count(START_TAG), html.count(END_TAG)
    if starts != ends:
        raise Exception(
            f"malformed patch markers: {starts} start vs {ends} end sentinel(s)"
        )
    if starts and not ids:
        raise Exception("malformed patch markers: style block without a session id")


class WorkbenchHandler(BaseHandler):
    @classmethod
    def parse(cls, fpath: Path):
        h = cls(fpath)
        text = h.text
        _check_markers(text)
        h.structure.span = (0, len(text))
        for name, rx in (
            ("session", _session),
            ("block", _block),
            ("html_close", _html_close),
        ):
            m = rx.search(text)
            if m:
                h.structure.children[name] = Thing(name, (m.start(), m.end()))
        return h

    @property
    def session_id(self) -> Optional[str]:
        if not self.has("session"):
            return None
        return _session.match(self.get("session")).group(1)

    @property
    def installed(self) -> bool:
        return self.session_id is not None

    def clean_text(self) -> str:
        return clear_existing_patches(self.text)

    def patched_text(self, session_id: str, style_block: str) -> str:
        html = self.clean_text()
        html = _csp.sub("", html, count=1)
        inject = (
            SESSION_TAG.format(session_id)
            + "\n"
            + START_TAG
            + "\n"
            + style_block
            + END_TAG
            + "\n</html>"
        )
        # callable replacement: the CSS must not be read as a regex template
        return _html_close.sub(lambda _m: inject, html, count=1)


def sentinel_lines(html: str) -> List[str]:
    return [
        line.strip()
        for line in html.splitlines()
        if "!! VSCODE-CUSTOM-CSS-" in line
    ]
