"""Consistency checks over a whole realm."""

from collections import Counter

from .topology import neighbor, opposite_edge
from .types import EDGE_COUNT, Coordinate, Hex, Realm


def check_realm(realm: Realm) -> list[str]:
    """Find every invariant violation in a realm.

    Checks axial coordinate consistency, barrier symmetry, holding and
    landmark exclusivity, myth record consistency and the seat of power.

    Args:
        realm: Realm to inspect. Not modified.

    Returns:
        Human readable violation messages, empty when the realm is consistent.
    """
    violations: list[str] = []
    index: dict[Coordinate, Hex] = {}

    for h in realm.hexes:
        if h.key in index:
            violations.append(f"duplicate hex at ({h.q}, {h.r})")
        index[h.key] = h
        if h.q + h.r + h.s != 0:
            violations.append(f"hex ({h.q}, {h.r}) has s={h.s}, expected {-h.q - h.r}")
        if h.holding is not None and h.landmark is not None:
            violations.append(f"hex ({h.q}, {h.r}) carries both a holding and a landmark")

    violations.extend(_check_barriers(realm.hexes, index))
    violations.extend(_check_myths(realm, index))

    if realm.seat_of_power is not None:
        seat = index.get(realm.seat_of_power.key)
        if seat is None:
            violations.append(f"seat of power {realm.seat_of_power} is outside the realm")
        elif seat.holding is None:
            violations.append(f"seat of power {realm.seat_of_power} has no holding")

    return violations


def _check_barriers(hexes: list[Hex], index: dict[Coordinate, Hex]) -> list[str]:
    violations = []
    for h in hexes:
        for edge in sorted(h.barrier_edges):
            if not 0 <= edge < EDGE_COUNT:
                violations.append(f"hex ({h.q}, {h.r}) has invalid barrier edge {edge}")
                continue
            other = index.get(neighbor(h, edge).key)
            if other is not None and opposite_edge(edge) not in other.barrier_edges:
                violations.append(
                    f"barrier on ({h.q}, {h.r}) edge {edge} is not mirrored on "
                    f"({other.q}, {other.r}) edge {opposite_edge(edge)}"
                )
    return violations


def _check_myths(realm: Realm, index: dict[Coordinate, Hex]) -> list[str]:
    violations = []

    counts = Counter(m.id for m in realm.myths)
    for myth_id, count in sorted(counts.items()):
        if count > 1:
            violations.append(f"myth id {myth_id} is used by {count} records")

    for myth in realm.myths:
        h = index.get(myth.key)
        if h is None:
            violations.append(f"myth {myth.id} at ({myth.q}, {myth.r}) is outside the realm")
        elif h.myth != myth.id:
            violations.append(
                f"myth {myth.id} at ({myth.q}, {myth.r}) but the hex references {h.myth}"
            )

    records = {m.id: m for m in realm.myths}
    for h in index.values():
        if h.myth is None:
            continue
        myth = records.get(h.myth)
        if myth is None:
            violations.append(f"hex ({h.q}, {h.r}) references unknown myth {h.myth}")
        elif myth.key != h.key:
            violations.append(
                f"hex ({h.q}, {h.r}) references myth {h.myth} located at ({myth.q}, {myth.r})"
            )

    return violations
