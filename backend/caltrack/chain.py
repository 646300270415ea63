"""
Progression chain ordering.

The progressions of one exercise form a doubly-linked list through
``prev_progression_id`` / ``next_progression_id``. These helpers work on any
objects exposing ``id`` and the two pointer attributes (ORM rows or read
schemas) and never touch the database.
"""
from __future__ import annotations
from typing import Protocol, Sequence, TypeVar

from caltrack.errors import ProgressionChainError


class ChainNode(Protocol):
    id: int
    difficulty: int
    prev_progression_id: int | None
    next_progression_id: int | None


N = TypeVar("N", bound=ChainNode)


def order_chain(nodes: Sequence[N]) -> list[N]:
    """Return ``nodes`` head to tail, or raise ProgressionChainError.

    Valid means: every pointer lands on a node of the same set and is mirrored
    by the opposite pointer, exactly one head and one tail (for a non-empty
    set), and walking ``next`` from the head reaches every node once.
    """
    if not nodes:
        return []
    by_id = {n.id: n for n in nodes}

    for n in nodes:
        nxt = n.next_progression_id
        if nxt is not None:
            if nxt not in by_id:
                raise ProgressionChainError(f"progression {n.id} points to {nxt} outside its exercise")
            if by_id[nxt].prev_progression_id != n.id:
                raise ProgressionChainError(f"progression {nxt} does not point back to {n.id}")
        prv = n.prev_progression_id
        if prv is not None:
            if prv not in by_id:
                raise ProgressionChainError(f"progression {n.id} points to {prv} outside its exercise")
            if by_id[prv].next_progression_id != n.id:
                raise ProgressionChainError(f"progression {prv} does not point forward to {n.id}")

    heads = [n for n in nodes if n.prev_progression_id is None]
    tails = [n for n in nodes if n.next_progression_id is None]
    if len(heads) != 1 or len(tails) != 1:
        raise ProgressionChainError(
            f"expected one head and one tail, found {len(heads)} and {len(tails)}"
        )

    ordered: list[N] = []
    seen: set[int] = set()
    cur: N | None = heads[0]
    while cur is not None:
        if cur.id in seen or len(ordered) >= len(nodes):
            raise ProgressionChainError(f"cycle at progression {cur.id}")
        seen.add(cur.id)
        ordered.append(cur)
        cur = by_id.get(cur.next_progression_id) if cur.next_progression_id is not None else None

    if len(ordered) != len(nodes):
        raise ProgressionChainError("chain does not reach every progression")
    return ordered


def insertion_point(ordered: Sequence[N], difficulty: int) -> tuple[N | None, N | None]:
    """Neighbours (prev, next) for a new node of ``difficulty``.

    The node goes after the last node whose difficulty is <= its own, which
    keeps difficulties non-decreasing along a chain that already was.
    """
    idx = 0
    for i, n in enumerate(ordered):
        if n.difficulty <= difficulty:
            idx = i + 1
    prev = ordered[idx - 1] if idx > 0 else None
    nxt = ordered[idx] if idx < len(ordered) else None
    return prev, nxt
