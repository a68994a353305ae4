"""Candidate store: eliminate / assign with naked- and hidden-single propagation.

A store maps every square to the tuple of digits still possible there, in
alphabet order. The public operations never modify the store they are given:
each works on a private shallow copy (candidate tuples are immutable, so the
copy shares them safely) and returns it, or None when a contradiction is
reached. Propagation runs off an explicit work-list of pending eliminations
rather than assign/eliminate recursion, so stack depth does not grow with the
puzzle size.
"""

from collections import deque
from typing import Deque, Iterable, Optional, Sequence, Tuple

from .model import Candidates, ClueGrid
from .topology import Square, Topology
from src.utils.trace import Tracer, get_tracer

Pending = Deque[Tuple[Square, str]]


def initialize_store(
    clues: ClueGrid,
    alphabet: Sequence[str],
    topology: Topology,
    tracer: Optional[Tracer] = None,
) -> Optional[Candidates]:
    """
    Start every square at the full alphabet, then assign each clue.
    Clue tokens that are not in the alphabet are treated as "no clue".
    Returns the propagated store, or None if the clues contradict each other.
    """
    tracer = tracer or get_tracer()
    digits = tuple(alphabet)
    values: Candidates = {square: digits for square in topology.squares}

    for square in topology.squares:
        digit = clues.get(square)
        if digit is None or digit not in digits:
            continue
        if not _assign(values, square, digit, topology, tracer):
            return None
    return values


def eliminate(
    store: Candidates,
    square: Square,
    digit: str,
    topology: Topology,
    tracer: Optional[Tracer] = None,
) -> Optional[Candidates]:
    """Remove `digit` from `square` and propagate. No-op if it is already gone."""
    tracer = tracer or get_tracer()
    values = dict(store)
    if not _propagate(values, deque([(square, digit)]), topology, tracer):
        return None
    return values


def assign(
    store: Candidates,
    square: Square,
    digit: str,
    topology: Topology,
    tracer: Optional[Tracer] = None,
) -> Optional[Candidates]:
    """Eliminate every candidate of `square` except `digit` and propagate."""
    tracer = tracer or get_tracer()
    values = dict(store)
    if not _assign(values, square, digit, topology, tracer):
        return None
    return values


def is_solved(store: Candidates) -> bool:
    return all(len(candidates) == 1 for candidates in store.values())


def _assign(values: Candidates, square: Square, digit: str, topology: Topology, tracer: Tracer) -> bool:
    if digit not in values[square]:
        tracer.log_contradiction(square, digit, reason="Digit is not a candidate")
        return False
    return _propagate(values, _others(values, square, digit), topology, tracer)


def _others(values: Candidates, square: Square, digit: str) -> Iterable[Tuple[Square, str]]:
    return [(square, other) for other in values[square] if other != digit]


def _propagate(values: Candidates, pending: Iterable[Tuple[Square, str]], topology: Topology, tracer: Tracer) -> bool:
    """Apply pending eliminations in place until nothing is left to do."""
    queue: Pending = deque(pending)
    eliminated = 0

    while queue:
        square, digit = queue.popleft()
        remaining = values[square]
        if digit not in remaining:
            continue

        remaining = tuple(d for d in remaining if d != digit)
        values[square] = remaining
        eliminated += 1

        if not remaining:
            tracer.log_contradiction(square, digit, reason="Removed last candidate")
            return False

        # Naked single: no peer may keep the square's last candidate.
        if len(remaining) == 1:
            last = remaining[0]
            queue.extend((peer, last) for peer in topology.peers[square] if last in values[peer])

        # Hidden single: a digit with one place left in a unit goes there.
        for unit in topology.units[square]:
            places = [s for s in unit if digit in values[s]]
            if not places:
                tracer.log_contradiction(square, digit, reason="No place left in unit")
                return False
            if len(places) == 1:
                queue.extend(_others(values, places[0], digit))

    if eliminated:
        tracer.log_propagation(eliminations=eliminated)
    return True
