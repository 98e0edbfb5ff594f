# handler_base.py – common helpers + byte-preserving file reader (char-accurate)

import sys
from pathlib import Path
from typing import Dict, Tuple


# ----- helpers ---------------------------------------------------------------
def error(msg: str):
    print(msg, file=sys.stderr, flush=True)


def info(msg: str):
    # stdout belongs to the MCP transport
    print(msg, file=sys.stderr, flush=True)


def read_text_exact(fpath: Path) -> str:
    return fpath.read_bytes().decode("utf-8")


def write_text_exact(fpath: Path, text: str):
    fpath.write_bytes(text.encode("utf-8"))


# ----- core node -------------------------------------------------------------
class Thing:
    def __init__(self, name: str, span: Tuple[int, int]):
        self.name = name  # arbitrary identifier
        self.span = span  # (start_char, end_char) end exclusive
        self.children: Dict[str, "Thing"] = {}


# ----- abstract handler ------------------------------------------------------
class BaseHandler:
    # constructor
    def __init__(self, fpath: Path):
        self.file_path = fpath
        self.text: str = read_text_exact(fpath)
        self.structure: Thing = Thing(".", (0, len(self.text)))

    # resolve reference → Thing
    def _resolve(self, ref: str) -> Thing:
        node = self.structure
        for p in ref.split("::"):
            if p not in node.children:
                raise Exception(f"Unknown reference piece {p}")
            node = node.children[p]
        return node

    def has(self, ref: str) -> bool:
        try:
            self._resolve(ref)
        except Exception:
            return False
        return True

    # public API: get
    def get(self, ref: str) -> str:
        t = self._resolve(ref)
        return self.text[t.span[0] : t.span[1]]

    # subclasses must implement parse -----------------------------------------
    @classmethod
    def parse(cls, fpath: Path) -> "BaseHandler":
        raise NotImplementedError
