"""WFST modules for G2P decoding.

This package implements the decoding side of a joint-sequence G2P model:
- Input acceptor construction
- N-best path enumeration over the composed lattice
- Path deduplication on phoneme labels
"""

from .build_acceptor import build_acceptor
from .decode import G2PDecoder, PathData
from .path_filter import VETO_SET, Path, PathFilter
from .search import shortest_paths

__all__ = [
    "build_acceptor",
    "G2PDecoder",
    "PathData",
    "Path",
    "PathFilter",
    "VETO_SET",
    "shortest_paths",
]
