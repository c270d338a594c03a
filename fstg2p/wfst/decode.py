"""WFST G2P decoder with n-best search.

Decoding pipeline for a single word:
1. Tokenize the word into input symbol ids
2. Build a linear acceptor for the tokens
3. Compose the acceptor with the pronunciation model
4. Enumerate the n-best distinct pronunciations from the lattice
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pynini

from ..errors import ModelLoadError, ModelNotFound
from ..tokenize import Tokenizer
from ..vocab import NO_SYMBOL, ClusterIndex, Vocabulary
from .build_acceptor import build_acceptor
from .path_filter import VETO_SET, Path, PathFilter
from .search import NO_STATE_ID, shortest_paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathData:
    """A single G2P result."""

    path_weight: float
    path_weights: Tuple[float, ...]
    ilabels: Tuple[int, ...]
    olabels: Tuple[int, ...]
    # Output labels without epsilon/tie/skip markers
    uniques: Tuple[int, ...]

    @classmethod
    def from_path(cls, path: Path, uniques: Tuple[int, ...]) -> "PathData":
        return cls(path_weight=path.path_weight,
                   path_weights=path.path_weights,
                   ilabels=path.ilabels,
                   olabels=path.olabels,
                   uniques=uniques)


class G2PDecoder:
    """FST grapheme-to-phoneme decoder.

    Loads the model once; the model, vocabularies and cluster indices are
    never modified afterwards, so one decoder may serve several threads.
    """

    def __init__(self,
                 model_path: str,
                 delimiter: Optional[str] = None,
                 unknown_symbol: Optional[str] = None,
                 veto_set: Iterable[int] = VETO_SET,
                 dump_dir: str = "."):
        """Initialize G2P decoder.

        Args:
            model_path: Path to the joint-sequence model FST
            delimiter: Input token separator; greedy cluster matching when None
            unknown_symbol: Input symbol used for characters missing from the
                vocabulary instead of failing
            veto_set: Output labels ignored when deduplicating results
            dump_dir: Directory for FSTs written with write_fsts

        Raises:
            ModelNotFound: model_path does not exist
            ModelLoadError: model cannot be read or has no symbol tables
        """
        if not os.path.exists(model_path):
            raise ModelNotFound(model_path)

        self.model = self._load_model(model_path)
        self.isyms = Vocabulary(self.model.input_symbols())
        self.osyms = Vocabulary(self.model.output_symbols())
        self.iclusters = ClusterIndex(self.isyms)
        self.oclusters = ClusterIndex(self.osyms)
        self.veto_set = frozenset(veto_set)
        self.dump_dir = dump_dir

        unknown_id = None
        if unknown_symbol is not None:
            unknown_id = self.isyms.find_id(unknown_symbol)
            if unknown_id == NO_SYMBOL:
                raise ValueError(f"Unknown symbol {unknown_symbol!r} is not in the input vocabulary")

        self.tokenizer = Tokenizer(self.isyms, self.iclusters,
                                   delimiter=delimiter, unknown_id=unknown_id)

        logger.info("Loaded G2P model %s: %d states, %d input / %d output symbols",
                    model_path, self.model.num_states(), len(self.isyms), len(self.osyms))
        logger.info("Clusters: %d input (max width %d), %d output",
                    len(self.iclusters), self.iclusters.max_width, len(self.oclusters))

    @staticmethod
    def _load_model(model_path: str) -> pynini.Fst:
        try:
            model = pynini.Fst.read(model_path)
        except pynini.FstIOError as e:
            raise ModelLoadError(f"Cannot read G2P model {model_path}: {e}") from e

        if model.input_symbols() is None or model.output_symbols() is None:
            raise ModelLoadError(f"G2P model {model_path} has no symbol tables")

        model.arcsort(sort_type="ilabel")
        return model

    def phoneticize(self,
                    word: str,
                    nbest: int = 1,
                    beam: int = 10000,
                    threshold: float = 99.0,
                    write_fsts: bool = False) -> List[PathData]:
        """Decode a word into its n-best distinct pronunciations.

        Args:
            word: Input word
            nbest: Maximum number of results
            beam: Maximum expansions per lattice state
            threshold: Weight margin over the best path
            write_fsts: Write the acceptor and lattice to dump_dir

        Returns:
            Results in non-decreasing weight order, distinct by uniques

        Raises:
            UnknownSymbol: The word cannot be tokenized
        """
        if nbest < 1:
            raise ValueError(f"nbest must be at least 1, got {nbest}")
        if beam < 1:
            raise ValueError(f"beam must be at least 1, got {beam}")

        tokens = self.tokenizer.tokenize(word)
        acceptor = build_acceptor(tokens, self.isyms.table)
        if write_fsts:
            self._dump(acceptor, f"{word}.fst")

        lattice = pynini.compose(acceptor, self.model)
        if write_fsts:
            self._dump(lattice, f"{word}.lat.fst")

        if lattice.start() == NO_STATE_ID:
            logger.debug("Empty lattice for %r", word)
            return []
        logger.debug("Lattice for %r: %d states", word, lattice.num_states())

        path_filter = PathFilter(self.veto_set)
        shortest_paths(lattice, path_filter, nbest=nbest, beam=beam, threshold=threshold)

        return [PathData.from_path(path, uniques) for uniques, path in path_filter]

    def _dump(self, fst: pynini.Fst, filename: str) -> None:
        path = os.path.join(self.dump_dir, filename)
        fst.write(path)
        logger.info("Wrote %s", path)

    def render(self, result: PathData) -> List[str]:
        """Phoneme strings of a result, with output clusters expanded."""
        return [self.osyms.find_symbol(label)
                for label in self.oclusters.expand(result.uniques)]

    # Symbol lookups for bindings and command-line tools

    def find_isym(self, symbol_id: int) -> str:
        return self.isyms.find_symbol(symbol_id)

    def find_isym_id(self, symbol: str) -> int:
        return self.isyms.find_id(symbol)

    def find_osym(self, symbol_id: int) -> str:
        return self.osyms.find_symbol(symbol_id)

    def find_osym_id(self, symbol: str) -> int:
        return self.osyms.find_id(symbol)
