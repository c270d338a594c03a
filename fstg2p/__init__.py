"""FST grapheme-to-phoneme decoding.

N-best pronunciations for written words from a pretrained joint-sequence
WFST model.
"""

__version__ = "0.1.0"

from .errors import G2PError, MalformedCluster, ModelLoadError, ModelNotFound, UnknownSymbol
from .tokenize import Tokenizer
from .vocab import ClusterIndex, Vocabulary
from .wfst import G2PDecoder, PathData

__all__ = [
    "G2PDecoder",
    "PathData",
    "Tokenizer",
    "Vocabulary",
    "ClusterIndex",
    "G2PError",
    "ModelNotFound",
    "ModelLoadError",
    "UnknownSymbol",
    "MalformedCluster",
]
