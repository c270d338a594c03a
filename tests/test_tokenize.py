"""Tests for input tokenization."""

import pytest

from fstg2p.errors import UnknownSymbol
from fstg2p.tokenize import Tokenizer
from fstg2p.vocab import ClusterIndex, Vocabulary
from conftest import GRAPHEMES, make_symbol_table


def make_tokenizer(symbols=GRAPHEMES, **kwargs):
    vocab = Vocabulary(make_symbol_table(symbols))
    return Tokenizer(vocab, ClusterIndex(vocab), **kwargs), vocab


def ids(vocab, symbols):
    return [vocab.find_id(s) for s in symbols]


class TestGreedyTokenizer:
    """Test cases for greedy cluster matching."""

    def test_longest_match_preferred(self):
        """Test that "th" is taken as one cluster."""
        tokenizer, vocab = make_tokenizer()

        assert tokenizer.tokenize("the") == ids(vocab, ["t|h", "e"])

    def test_atomic_fallback(self):
        """Test single characters when no cluster matches."""
        tokenizer, vocab = make_tokenizer()

        assert tokenizer.tokenize("cat") == ids(vocab, ["c", "a", "t"])
        assert tokenizer.tokenize("tat") == ids(vocab, ["t", "a", "t"])

    def test_cluster_at_end(self):
        """Test cluster matching against the end of the word."""
        tokenizer, vocab = make_tokenizer()

        assert tokenizer.tokenize("eth") == ids(vocab, ["e", "t|h"])

    def test_widest_cluster_wins(self):
        """Test that wider clusters beat narrower ones at the same position."""
        symbols = ["<eps>", "|", "_", "t", "h", "e", "t|h", "t|h|e"]
        tokenizer, vocab = make_tokenizer(symbols)

        assert tokenizer.tokenize("thee") == ids(vocab, ["t|h|e", "e"])
        assert tokenizer.tokenize("th") == ids(vocab, ["t|h"])

    def test_no_backtracking(self):
        """Test that an earlier wide match is kept even if it strands a character."""
        symbols = ["<eps>", "|", "_", "a", "b", "c", "a|b", "b|c"]
        tokenizer, vocab = make_tokenizer(symbols)

        assert tokenizer.tokenize("abc") == ids(vocab, ["a|b", "c"])

    def test_empty_word(self):
        """Test that an empty word yields no tokens."""
        tokenizer, _ = make_tokenizer()
        assert tokenizer.tokenize("") == []

    def test_unknown_character(self):
        """Test failure on a character outside the vocabulary."""
        tokenizer, _ = make_tokenizer()

        with pytest.raises(UnknownSymbol) as excinfo:
            tokenizer.tokenize("cqt")

        assert excinfo.value.symbol == "q"
        assert excinfo.value.word == "cqt"
        assert "'q'" in str(excinfo.value)

    def test_unknown_fallback_id(self):
        """Test mapping unknown characters to a configured id."""
        symbols = GRAPHEMES
        vocab = Vocabulary(make_symbol_table(symbols))
        unk = vocab.find_id("<unk>")
        tokenizer = Tokenizer(vocab, ClusterIndex(vocab), unknown_id=unk)

        assert tokenizer("cqt") == [vocab.find_id("c"), unk, vocab.find_id("t")]


class TestDelimitedTokenizer:
    """Test cases for delimiter splitting."""

    def test_split_on_delimiter(self):
        """Test resolving pre-split tokens."""
        tokenizer, vocab = make_tokenizer(delimiter="|")

        assert tokenizer.tokenize("c|a|t") == ids(vocab, ["c", "a", "t"])

    def test_multi_character_tokens(self):
        """Test that pre-tokens are looked up whole."""
        tokenizer, vocab = make_tokenizer(delimiter=" ")

        assert tokenizer.tokenize("t|h e") == ids(vocab, ["t|h", "e"])

    def test_empty_pieces_dropped(self):
        """Test repeated and trailing delimiters."""
        tokenizer, vocab = make_tokenizer(delimiter=" ")

        assert tokenizer.tokenize(" c  a t ") == ids(vocab, ["c", "a", "t"])

    def test_unknown_token(self):
        """Test failure on a pre-token outside the vocabulary."""
        tokenizer, _ = make_tokenizer(delimiter="|")

        with pytest.raises(UnknownSymbol) as excinfo:
            tokenizer.tokenize("c|q|t")

        assert excinfo.value.symbol == "q"

    def test_empty_delimiter_means_greedy(self):
        """Test that an empty delimiter falls back to greedy matching."""
        tokenizer, vocab = make_tokenizer(delimiter="")

        assert tokenizer.delimiter is None
        assert tokenizer.tokenize("the") == ids(vocab, ["t|h", "e"])
