"""Exceptions raised by the G2P decoder."""
from typing import Optional


class G2PError(Exception):
    """Base class for G2P errors"""
    pass


class ModelNotFound(G2PError, FileNotFoundError):
    """Raised when the model file does not exist at construction time."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"G2P model not found: {path}")

    def __str__(self):
        return self.args[0]


class ModelLoadError(G2PError):
    """Model file exists but is not a usable FST"""
    pass


class UnknownSymbol(G2PError, KeyError):
    """Raised when part of the input word has no vocabulary symbol.

    Aborts the single decode call only; the decoder stays usable.
    """

    def __init__(self, symbol: str, word: Optional[str] = None):
        self.symbol = symbol
        self.word = word
        if word is None:
            message = f"Symbol {symbol!r} is not in the input vocabulary"
        else:
            message = f"Symbol {symbol!r} in word {word!r} is not in the input vocabulary"
        super().__init__(message)

    def __str__(self):
        # KeyError.__str__ would repr() the message
        return self.args[0]


class MalformedCluster(G2PError):
    """Vocabulary entry looks like a cluster but does not decompose.

    Only raised while indexing clusters, where it is caught and the entry is
    kept as an atomic symbol.
    """

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Malformed cluster {symbol!r}: {reason}")
