"""Evaluation of a G2P model against a reference lexicon.

Implements evaluation metrics:
- Word Error Rate (WER): top hypothesis not among the references
- Phoneme Error Rate (PER): edit distance to the closest reference
- Oracle WER over the n-best list
- Decode latency statistics
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

import editdistance
import numpy as np
from tqdm import tqdm

from .errors import UnknownSymbol
from .wfst.decode import G2PDecoder

logger = logging.getLogger(__name__)


def load_lexicon(path: str) -> Dict[str, List[List[str]]]:
    """Load a pronunciation lexicon.

    Each line holds a word followed by its phonemes, separated by
    whitespace. A word may appear on several lines.

    Args:
        path: Path to lexicon file

    Returns:
        Dictionary mapping words to lists of phoneme sequences
    """
    lexicon = defaultdict(list)

    with open(path, 'r', encoding='utf-8') as f:
        for line_no, line in enumerate(f, 1):
            parts = line.split()
            if not parts:
                continue
            if len(parts) < 2:
                logger.warning("Skipping line %d of %s: no pronunciation", line_no, path)
                continue
            word, *phonemes = parts
            lexicon[word].append(phonemes)

    return dict(lexicon)


class G2PEvaluator:
    """Evaluator for G2P decoding."""

    def __init__(self,
                 decoder: G2PDecoder,
                 nbest: int = 1,
                 beam: int = 10000,
                 threshold: float = 99.0):
        """Initialize evaluator.

        Args:
            decoder: G2P decoder
            nbest: Hypotheses per word, used for the oracle error rate
            beam: Search beam
            threshold: Search weight threshold
        """
        self.decoder = decoder
        self.nbest = nbest
        self.beam = beam
        self.threshold = threshold

    def evaluate(self, lexicon: Dict[str, List[List[str]]],
                 progress: bool = True) -> Dict[str, float]:
        """Evaluate decoder on a reference lexicon.

        Args:
            lexicon: Words mapped to reference pronunciations
            progress: Show a progress bar

        Returns:
            Dictionary of evaluation metrics
        """
        hypotheses: List[List[List[str]]] = []
        references: List[List[List[str]]] = []
        latencies: List[float] = []
        skipped = 0

        for word, prons in tqdm(lexicon.items(), desc="Evaluating", disable=not progress):
            start = time.perf_counter()
            try:
                results = self.decoder.phoneticize(word, nbest=self.nbest,
                                                   beam=self.beam,
                                                   threshold=self.threshold)
            except UnknownSymbol as e:
                logger.warning("Skipping %r: %s", word, e)
                skipped += 1
                continue
            latencies.append((time.perf_counter() - start) * 1000.0)

            hypotheses.append([self.decoder.render(result) for result in results])
            references.append(prons)

        metrics = self._compute_metrics(hypotheses, references)
        metrics.update(self._compute_latency_stats(latencies))
        metrics['num_words'] = len(hypotheses)
        metrics['num_skipped'] = skipped
        return metrics

    def _compute_metrics(self,
                         hypotheses: List[List[List[str]]],
                         references: List[List[List[str]]]) -> Dict[str, float]:
        """Compute error rates.

        Args:
            hypotheses: N-best phoneme sequences per word
            references: Reference phoneme sequences per word

        Returns:
            Dictionary of metrics
        """
        metrics = {}
        word_errors = 0
        oracle_errors = 0
        phoneme_errors = 0
        phoneme_total = 0

        for nbest, refs in zip(hypotheses, references):
            top = nbest[0] if nbest else []

            if top not in refs:
                word_errors += 1
            if not any(hyp in refs for hyp in nbest):
                oracle_errors += 1

            # Closest reference for the top hypothesis
            distance, ref = min((editdistance.eval(top, ref), ref) for ref in refs)
            phoneme_errors += distance
            phoneme_total += len(ref)

        total_words = max(len(hypotheses), 1)
        metrics['wer'] = word_errors / total_words
        metrics['oracle_wer'] = oracle_errors / total_words
        metrics['per'] = phoneme_errors / max(phoneme_total, 1)

        return metrics

    def _compute_latency_stats(self, latencies: List[float]) -> Dict[str, float]:
        """Compute latency statistics in milliseconds."""
        stats = {}

        if latencies:
            stats['latency_mean'] = float(np.mean(latencies))
            stats['latency_std'] = float(np.std(latencies))
            stats['latency_p95'] = float(np.percentile(latencies, 95))
        else:
            stats['latency_mean'] = 0.0
            stats['latency_std'] = 0.0
            stats['latency_p95'] = 0.0

        return stats


def evaluate_lexicon(decoder: G2PDecoder,
                     lexicon_path: str,
                     nbest: int = 1,
                     beam: int = 10000,
                     threshold: float = 99.0,
                     progress: bool = True) -> Optional[Dict[str, float]]:
    """Load a lexicon file and evaluate the decoder on it."""
    lexicon = load_lexicon(lexicon_path)
    if not lexicon:
        logger.warning("Lexicon %s is empty", lexicon_path)
        return None

    evaluator = G2PEvaluator(decoder, nbest=nbest, beam=beam, threshold=threshold)
    return evaluator.evaluate(lexicon, progress=progress)
