"""Build the input acceptor for a tokenized word.

The acceptor is a linear chain: one state per token boundary, one arc per
token with identical input and output labels and weight One. It is the
left operand of composition with the pronunciation model.
"""

from typing import Optional, Sequence

import pynini


def build_acceptor(tokens: Sequence[int],
                   symbols: Optional[pynini.SymbolTable] = None) -> pynini.Fst:
    """Build a single-path acceptor for a token sequence.

    Args:
        tokens: Input symbol ids
        symbols: Optional symbol table attached as input and output symbols

    Returns:
        Acceptor with len(tokens) + 1 states
    """
    acceptor = pynini.Fst()
    one = pynini.Weight.one(acceptor.weight_type())

    if symbols is not None:
        acceptor.set_input_symbols(symbols)
        acceptor.set_output_symbols(symbols)

    states = [acceptor.add_state() for _ in range(len(tokens) + 1)]
    acceptor.set_start(states[0])
    acceptor.set_final(states[-1], one)

    for t, label in enumerate(tokens):
        acceptor.add_arc(states[t], pynini.Arc(label, label, one, states[t + 1]))

    return acceptor

