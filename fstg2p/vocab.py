"""Symbol vocabularies and grapheme/phoneme cluster maps.

Model symbol tables follow the convention:
- 0: "<eps>" (epsilon)
- 1: "|"     (tie, joins the atoms of a composite symbol, e.g. "t|h")
- 2: "_"     (skip, a symbol aligned to nothing)

Composite symbols are registered in a ClusterIndex so the tokenizer can
match multi-character clusters and results can be expanded back to atoms.
"""

import logging
from typing import Dict, Iterator, List, Sequence, Tuple

import pynini

from .errors import MalformedCluster

logger = logging.getLogger(__name__)

EPSILON = "<eps>"
TIE = "|"
SKIP = "_"

# OpenFst returns this for a symbol that is not in the table
NO_SYMBOL = -1

# Ids below this are reserved and never parsed as clusters
FIRST_REGULAR_ID = 3


class Vocabulary:
    """Immutable bidirectional mapping between symbols and integer ids.

    Takes its own copy of the symbol table, so the vocabulary stays valid
    for as long as the decoder holding it.
    """

    def __init__(self, symbols: pynini.SymbolTable):
        """Initialize vocabulary.

        Args:
            symbols: OpenFst symbol table (copied)
        """
        self._table = symbols.copy()
        self._id_to_symbol: Dict[int, str] = {}
        self._symbol_to_id: Dict[str, int] = {}

        for key, symbol in self._table:
            self._id_to_symbol[key] = symbol
            self._symbol_to_id[symbol] = key

    @property
    def table(self) -> pynini.SymbolTable:
        """Copy of the underlying OpenFst symbol table."""
        return self._table.copy()

    @property
    def tie(self) -> str:
        """Cluster separator, read from id 1."""
        return self._id_to_symbol.get(1, TIE)

    def find_symbol(self, key: int) -> str:
        """Return the symbol for an id, or "" when absent."""
        return self._id_to_symbol.get(key, "")

    def find_id(self, symbol: str) -> int:
        """Return the id for a symbol, or NO_SYMBOL when absent."""
        return self._symbol_to_id.get(symbol, NO_SYMBOL)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._symbol_to_id

    def __len__(self) -> int:
        return len(self._id_to_symbol)

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        return iter(sorted(self._id_to_symbol.items()))


class ClusterIndex:
    """Forward and reverse maps for the composite symbols of a vocabulary.

    forward maps the concatenated cluster string ("th" for "t|h") to the
    candidate composite ids, widest (most atoms) first. reverse maps a
    composite id to its atomic ids.
    """

    def __init__(self, vocab: Vocabulary):
        """Index every composite symbol of a vocabulary.

        Args:
            vocab: Vocabulary to index
        """
        self.tie = vocab.tie
        self.forward: Dict[str, Tuple[int, ...]] = {}
        self.reverse: Dict[int, Tuple[int, ...]] = {}
        self.max_width = 0

        widths: Dict[str, List[Tuple[int, int]]] = {}
        for key, symbol in vocab:
            if key < FIRST_REGULAR_ID or self.tie not in symbol:
                continue
            try:
                atoms = self._split(symbol, vocab)
            except MalformedCluster as e:
                logger.debug("%s, keeping it atomic", e)
                continue

            cluster = "".join(vocab.find_symbol(atom) for atom in atoms)
            self.reverse[key] = atoms
            widths.setdefault(cluster, []).append((len(atoms), key))
            self.max_width = max(self.max_width, len(cluster))

        for cluster, candidates in widths.items():
            candidates.sort(key=lambda item: (-item[0], item[1]))
            self.forward[cluster] = tuple(key for _, key in candidates)

    def _split(self, symbol: str, vocab: Vocabulary) -> Tuple[int, ...]:
        pieces = symbol.split(self.tie)
        if len(pieces) < 2 or any(not piece for piece in pieces):
            raise MalformedCluster(symbol, "empty component")

        atoms = []
        for piece in pieces:
            atom = vocab.find_id(piece)
            if atom == NO_SYMBOL:
                raise MalformedCluster(symbol, f"component {piece!r} is not a symbol")
            atoms.append(atom)
        return tuple(atoms)

    def expand(self, ids: Sequence[int]) -> List[int]:
        """Replace each composite id by its atomic ids."""
        expanded = []
        for key in ids:
            expanded.extend(self.reverse.get(key, (key,)))
        return expanded

    def __len__(self) -> int:
        return len(self.reverse)
