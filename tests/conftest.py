"""Shared fixtures: small G2P models built with pynini."""

import os

import pynini
import pytest

GRAPHEMES = ["<eps>", "|", "_", "c", "a", "t", "h", "e", "x", "t|h", "<unk>"]
PHONEMES = ["<eps>", "|", "_", "k", "ae", "a", "t", "th", "ah", "s", "k|s"]


def make_symbol_table(symbols):
    """Symbol table with ids assigned in list order."""
    table = pynini.SymbolTable()
    for symbol in symbols:
        table.add_symbol(symbol)
    return table


def build_model(arcs, final_states, num_states=None):
    """Build a model FST over the test vocabularies.

    Args:
        arcs: (src, grapheme, phoneme, weight, dst) tuples
        final_states: Final state ids
        num_states: Number of states (inferred from arcs when None)
    """
    isyms = make_symbol_table(GRAPHEMES)
    osyms = make_symbol_table(PHONEMES)

    model = pynini.Fst()
    model.set_input_symbols(isyms)
    model.set_output_symbols(osyms)

    if num_states is None:
        num_states = max(max(a[0], a[4]) for a in arcs) + 1
    for _ in range(num_states):
        model.add_state()
    model.set_start(0)
    for state in final_states:
        model.set_final(state)

    for src, grapheme, phoneme, weight, dst in arcs:
        model.add_arc(src, pynini.Arc(
            isyms.find(grapheme),
            osyms.find(phoneme),
            pynini.Weight(model.weight_type(), weight),
            dst
        ))

    return model


def write_model(model, directory, name):
    path = os.path.join(directory, name)
    model.write(path)
    return path


@pytest.fixture
def cat_model_path(tmp_path):
    """Single-state model: "cat" is [k ae t] @0.1 or [k a t] @0.5."""
    model = build_model([
        (0, "c", "k", 0.0, 0),
        (0, "a", "ae", 0.1, 0),
        (0, "a", "a", 0.5, 0),
        (0, "t", "t", 0.0, 0),
    ], final_states=[0])
    return write_model(model, str(tmp_path), "cat.fst")


@pytest.fixture
def veto_model_path(tmp_path):
    """"cat" as [k | ae t] @0.2 and [k ae t] @0.3, identical up to the tie."""
    model = build_model([
        (0, "c", "k", 0.0, 1),
        (1, "<eps>", "|", 0.0, 4),
        (4, "a", "ae", 0.2, 2),
        (1, "a", "ae", 0.3, 2),
        (2, "t", "t", 0.0, 3),
    ], final_states=[3])
    return write_model(model, str(tmp_path), "veto.fst")


@pytest.fixture
def cluster_model_path(tmp_path):
    """Model with the input cluster "t|h" and the output cluster "k|s"."""
    model = build_model([
        (0, "t|h", "th", 0.1, 0),
        (0, "t", "t", 0.2, 0),
        (0, "h", "_", 0.2, 0),
        (0, "e", "ah", 0.3, 0),
        (0, "x", "k|s", 0.4, 0),
        (0, "a", "ae", 0.1, 0),
        (0, "<unk>", "_", 1.0, 0),
    ], final_states=[0])
    return write_model(model, str(tmp_path), "cluster.fst")
