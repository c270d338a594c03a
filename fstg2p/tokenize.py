"""Segment raw input words into input vocabulary ids.

Two modes:
- delimiter: the word is pre-split ("c|a|t" with delimiter "|")
- greedy: left-to-right scan preferring the widest registered cluster at
  each position, falling back to a single character

The greedy scan keeps a single hypothesis and never backtracks.
"""

import logging
from typing import List, Optional

from .errors import UnknownSymbol
from .vocab import NO_SYMBOL, ClusterIndex, Vocabulary

logger = logging.getLogger(__name__)


class Tokenizer:
    """Greedy longest-cluster tokenizer for grapheme input."""

    def __init__(self,
                 vocab: Vocabulary,
                 clusters: ClusterIndex,
                 delimiter: Optional[str] = None,
                 unknown_id: Optional[int] = None):
        """Initialize tokenizer.

        Args:
            vocab: Input vocabulary
            clusters: Cluster index built from vocab
            delimiter: Pre-token separator; greedy matching when None or empty
            unknown_id: Id used for symbols missing from vocab instead of failing
        """
        self.vocab = vocab
        self.clusters = clusters
        self.delimiter = delimiter or None
        self.unknown_id = unknown_id

    def __call__(self, word: str) -> List[int]:
        return self.tokenize(word)

    def tokenize(self, word: str) -> List[int]:
        """Convert a word into a sequence of vocabulary ids.

        Args:
            word: Raw input text

        Returns:
            Ordered list of input symbol ids

        Raises:
            UnknownSymbol: A pre-token or character has no id and no
                unknown_id is configured
        """
        if self.delimiter is not None:
            tokens = [self._lookup(piece, word)
                      for piece in word.split(self.delimiter) if piece]
        else:
            tokens = self._greedy(word)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Tokenized %r as %s", word,
                         " ".join(self.vocab.find_symbol(t) for t in tokens))
        return tokens

    def _greedy(self, word: str) -> List[int]:
        tokens = []
        position = 0

        while position < len(word):
            width = min(self.clusters.max_width, len(word) - position)
            matched = False

            while width > 1:
                candidates = self.clusters.forward.get(word[position:position + width])
                if candidates:
                    tokens.append(candidates[0])
                    position += width
                    matched = True
                    break
                width -= 1

            if not matched:
                tokens.append(self._lookup(word[position], word))
                position += 1

        return tokens

    def _lookup(self, symbol: str, word: str) -> int:
        key = self.vocab.find_id(symbol)
        if key != NO_SYMBOL:
            return key
        if self.unknown_id is not None:
            logger.debug("Mapping unknown symbol %r in %r to id %d",
                         symbol, word, self.unknown_id)
            return self.unknown_id
        raise UnknownSymbol(symbol, word)
