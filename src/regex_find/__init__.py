from __future__ import annotations

from .finder import Finder
from .finderconfig import FinderConfig
from .findermodel import FileInfo
from .finderwalker import FinderWalker
from .finderwalker import compile_patterns
from .finderwalker import traverse

__all__ = [
    "FileInfo",
    "Finder",
    "FinderConfig",
    "FinderWalker",
    "compile_patterns",
    "traverse",
]
