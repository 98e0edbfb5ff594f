# handler_css.py – builds the injected <style> block

import re
from pathlib import Path
from typing import List

from handler_base import error, info, read_text_exact


_rule = re.compile(r"([^{}]+)\{")  # naive: selector till first '{'

DEFAULT_CSS = """
.part.editor>.content .grid-view-container .overflow-guard .margin-view-overlays .current-line {
	border-left: 4px solid #50fa7b;
	background: rgb(116, 207, 136, 0.1);
}
.title.tabs.show-file-icons::before {
	content: '';
	width: 100%;
	height: 1px;
	position: absolute;
	bottom: 0;
	background: #2c2c2c;
	z-index: 999;
}
.tabs-container .tab-border-bottom-container {
	display: none !important;
}
.monaco-list.list_id_2.mouse-support.last-focused.selection-none:focus-within {
	outline: none !important;
}
"""


def selectors(css: str) -> List[str]:
    """Top-level-ish selectors in source order (comments stripped)."""
    css = re.sub(r"/\*.*?\*/", "", css, flags=re.S)
    return [m.group(1).strip() for m in _rule.finditer(css) if m.group(1).strip()]


class CSSPayload:
    def __init__(self, extra_files: List[Path] = None):
        self.extra_files = list(extra_files or [])

    def _read_extra(self) -> List[str]:
        parts = []
        for fpath in self.extra_files:
            try:
                css = read_text_exact(fpath)
            except OSError as exc:
                error(f"Skipping CSS file {fpath}: {exc}")
                continue
            info(f"Loaded {fpath} ({len(selectors(css))} rules)")
            parts.append(css.strip("\n") + "\n")
        return parts

    def css(self) -> str:
        return DEFAULT_CSS.lstrip("\n") + "".join(self._read_extra())

    def style_block(self) -> str:
        return f"<style>\n{self.css()}</style>\n"
