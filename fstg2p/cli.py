"""
fstg2p command-line tool
"""

import argparse
import logging
import sys
from typing import Dict, Iterable, List, Optional, TextIO

import pynini
from tqdm import tqdm

from .config import load_config
from .errors import G2PError, UnknownSymbol
from .evaluate import evaluate_lexicon
from .wfst.decode import G2PDecoder

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def read_words(path: str) -> List[str]:
    """Read one word per line, skipping blank lines."""
    with open(path, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip()]


def apply_overrides(config: Dict, args: argparse.Namespace) -> Dict:
    """Override config values with explicitly given command-line flags."""
    overrides = {
        ('decoder', 'delimiter'): args.delimiter,
        ('decoder', 'unknown_symbol'): args.unknown_symbol,
        ('decoder', 'dump_dir'): getattr(args, 'dump_dir', None),
        ('search', 'nbest'): args.nbest,
        ('search', 'beam'): args.beam,
        ('search', 'threshold'): args.thresh,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            config[section][key] = value
    if getattr(args, 'no_scores', False):
        config['output']['print_scores'] = False

    for key in ('nbest', 'beam'):
        if config['search'][key] < 1:
            raise ValueError(f"{key} must be at least 1, got {config['search'][key]}")
    return config


def build_decoder(model: str, config: Dict) -> G2PDecoder:
    return G2PDecoder(model,
                      delimiter=config['decoder']['delimiter'],
                      unknown_symbol=config['decoder']['unknown_symbol'],
                      dump_dir=config['decoder']['dump_dir'])


def predict(decoder: G2PDecoder, words: Iterable[str], config: Dict, write_fsts: bool = False,
            out: Optional[TextIO] = None, progress: bool = False) -> int:
    """Print n-best pronunciations for each word.

    Returns:
        Number of words skipped because of unknown symbols
    """
    out = out or sys.stdout
    search = config['search']
    output = config['output']
    skipped = 0

    for word in tqdm(words, desc="Decoding", disable=not progress):
        try:
            results = decoder.phoneticize(word, nbest=search['nbest'],
                                          beam=search['beam'],
                                          threshold=search['threshold'],
                                          write_fsts=write_fsts)
        except UnknownSymbol as e:
            logger.warning("Skipping %r: %s", word, e)
            skipped += 1
            continue

        for result in results:
            pron = output['separator'].join(decoder.render(result))
            if output['print_scores']:
                out.write(f"{word}\t{result.path_weight:.4f}\t{pron}\n")
            else:
                out.write(f"{word}\t{pron}\n")

    return skipped


def add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--model", required=True, help="G2P model FST")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--nbest", type=int, help="Pronunciations per word (default: 1)")
    parser.add_argument("--beam", type=int, help="Search beam (default: 10000)")
    parser.add_argument("--thresh", type=float, help="Weight threshold (default: 99)")
    parser.add_argument("--delimiter", help="Input token delimiter (default: greedy clusters)")
    parser.add_argument("--unknown-symbol", help="Input symbol for unknown characters")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def main(argv=None):
    """Command-line entry point"""
    parser = argparse.ArgumentParser(
        prog="fstg2p",
        description="fstg2p - WFST grapheme-to-phoneme decoder",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # predict command
    predict_parser = subparsers.add_parser("predict", help="Pronounce words")
    add_common_arguments(predict_parser)
    source = predict_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--word", help="Single input word")
    source.add_argument("--wordlist", help="File with one word per line")
    predict_parser.add_argument("--write-fsts", action="store_true",
                                help="Write acceptor and lattice FSTs per word")
    predict_parser.add_argument("--dump-dir", help="Directory for --write-fsts output")
    predict_parser.add_argument("--no-scores", action="store_true", help="Omit path weights")

    # evaluate command
    evaluate_parser = subparsers.add_parser("evaluate", help="Score against a lexicon")
    add_common_arguments(evaluate_parser)
    evaluate_parser.add_argument("--lexicon", required=True, help="Reference lexicon")

    # version command
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.command == "version":
        from . import __version__
        print(f"fstg2p v{__version__}")
        return 0

    if args.command not in ("predict", "evaluate"):
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    try:
        config = apply_overrides(load_config(args.config), args)
        decoder = build_decoder(args.model, config)

        if args.command == "predict":
            words = [args.word] if args.word else read_words(args.wordlist)
            predict(decoder, words, config, write_fsts=args.write_fsts,
                    progress=args.wordlist is not None)
            return 0

        search = config['search']
        metrics = evaluate_lexicon(decoder, args.lexicon, nbest=search['nbest'],
                                   beam=search['beam'], threshold=search['threshold'])
    except (G2PError, ValueError, OSError, pynini.FstIOError) as e:
        logger.error("%s", e)
        return 1

    if metrics is None:
        return 1
    for name, value in metrics.items():
        print(f"{name}\t{value:.4f}" if isinstance(value, float) else f"{name}\t{value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
