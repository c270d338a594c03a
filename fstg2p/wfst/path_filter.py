"""Acceptance and deduplication of n-best candidate paths.

Pronunciation variants that differ only in reserved marker labels
(epsilon, tie, skip) are collapsed to the first, lowest-weight path found
for their label sequence.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Tuple

# epsilon, tie, skip
VETO_SET: FrozenSet[int] = frozenset({0, 1, 2})


@dataclass(frozen=True)
class Path:
    """A complete path through the lattice."""

    path_weight: float
    path_weights: Tuple[float, ...]
    ilabels: Tuple[int, ...]
    olabels: Tuple[int, ...]


class PathFilter:
    """Per-search acceptance callback keyed on the unique output labels.

    Keeps an ordered map from the unique-label key to the first path that
    produced it. The search hands over paths in non-decreasing weight order,
    so the recorded path is the best one for its key.
    """

    def __init__(self, veto_set: Iterable[int] = VETO_SET):
        """Initialize path filter.

        Args:
            veto_set: Output labels ignored when building the dedup key
        """
        self.veto_set = frozenset(veto_set)
        self.path_map: Dict[Tuple[int, ...], Path] = {}
        self.ordered_paths: List[Tuple[int, ...]] = []

    def uniques(self, olabels: Iterable[int]) -> Tuple[int, ...]:
        """Output labels with veto set members removed, order preserved."""
        return tuple(label for label in olabels if label not in self.veto_set)

    def __call__(self, path: Path) -> bool:
        """Record a path if its key is new.

        Args:
            path: Completed candidate path

        Returns:
            True if the path was accepted and counts toward nbest
        """
        key = self.uniques(path.olabels)
        if key in self.path_map:
            return False

        self.path_map[key] = path
        self.ordered_paths.append(key)
        return True

    def __len__(self) -> int:
        return len(self.ordered_paths)

    def __iter__(self) -> Iterator[Tuple[Tuple[int, ...], Path]]:
        """Yield (uniques, path) pairs in discovery order."""
        for key in self.ordered_paths:
            yield key, self.path_map[key]
