"""N-best path enumeration over a decoding lattice.

Best-first search on partial paths ordered by cost so far plus the exact
remaining cost (reverse shortest distance). With an exact remaining cost,
complete paths come off the queue in non-decreasing total weight, so the
acceptance callback sees candidates best first.

Pruning:
- beam: each state is expanded at most `beam` times
- threshold: partial paths worse than best + threshold are dropped
"""

import heapq
import itertools
import logging
import math
from collections import defaultdict
from typing import Callable, List, Optional, Tuple

import pynini

from .path_filter import Path

logger = logging.getLogger(__name__)

# Comparison slack for float weights, as in OpenFst
DELTA = 1.0 / 1024.0

NO_STATE_ID = -1

# (parent, ilabel, olabel, weight)
Trace = Optional[Tuple["Trace", int, int, float]]


def _unwind(trace: Trace, path_weight: float) -> Path:
    ilabels, olabels, weights = [], [], []
    while trace is not None:
        trace, ilabel, olabel, weight = trace
        ilabels.append(ilabel)
        olabels.append(olabel)
        weights.append(weight)

    return Path(path_weight=path_weight,
                path_weights=tuple(reversed(weights)),
                ilabels=tuple(reversed(ilabels)),
                olabels=tuple(reversed(olabels)))


def remaining_costs(lattice: pynini.Fst) -> List[float]:
    """Shortest distance from every state to a final state.

    Args:
        lattice: Lattice in the tropical semiring

    Returns:
        Cost per state id; inf for states that cannot reach a final state
    """
    distance = pynini.shortestdistance(lattice, reverse=True)
    costs = [float(weight) for weight in distance]
    if len(costs) < lattice.num_states():
        costs.extend([math.inf] * (lattice.num_states() - len(costs)))
    return costs


def shortest_paths(lattice: pynini.Fst,
                   accept: Callable[[Path], bool],
                   nbest: int = 1,
                   beam: int = 10000,
                   threshold: float = 99.0) -> int:
    """Enumerate lattice paths best first until nbest are accepted.

    Args:
        lattice: Composed lattice
        accept: Callback deciding whether a completed path counts
        nbest: Number of accepted paths to find
        beam: Maximum number of expansions per state
        threshold: Weight margin over the best path

    Returns:
        Number of accepted paths
    """
    start = lattice.start()
    if start == NO_STATE_ID:
        return 0

    costs = remaining_costs(lattice)
    best = costs[start]
    if math.isinf(best):
        return 0

    limit = best + threshold + DELTA
    tie = itertools.count()
    expansions = defaultdict(int)

    # (priority, tie, state, cost so far, trace, complete)
    queue = [(best, next(tie), start, 0.0, None, False)]
    accepted = 0
    completed = 0

    while queue and accepted < nbest:
        priority, _, state, cost, trace, complete = heapq.heappop(queue)

        if complete:
            completed += 1
            if accept(_unwind(trace, cost)):
                accepted += 1
            continue

        expansions[state] += 1
        if expansions[state] > beam:
            continue

        final = float(lattice.final(state))
        if not math.isinf(final) and cost + final <= limit:
            heapq.heappush(queue, (cost + final, next(tie), state, cost + final, trace, True))

        for arc in lattice.arcs(state):
            weight = float(arc.weight)
            arc_cost = cost + weight
            estimate = arc_cost + costs[arc.nextstate]
            if math.isinf(estimate) or estimate > limit:
                continue
            heapq.heappush(queue, (estimate, next(tie), arc.nextstate, arc_cost,
                                   (trace, arc.ilabel, arc.olabel, weight), False))

    logger.debug("N-best search: %d completed, %d accepted, %d states expanded",
                 completed, accepted, len(expansions))
    return accepted
