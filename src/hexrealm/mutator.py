"""Post-generation realm editing.

RealmMutator is the only writer of a realm once it has been generated or
loaded. Each operation validates first and mutates second, so a rejected
edit leaves the realm exactly as it was.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from .invariants import check_realm
from .terrain_types import TileSet
from .topology import neighbor, opposite_edge
from .types import EDGE_COUNT, AxialCoord, Coordinate, Hex, Myth, PoiKind, Realm, coord_key

logger = structlog.get_logger()


class RejectionReason(str, Enum):
    """Why a mutation was refused."""

    UNKNOWN_HEX = "unknown_hex"
    INVALID_EDGE = "invalid_edge"
    INVALID_KIND = "invalid_kind"
    UNKNOWN_TERRAIN = "unknown_terrain"
    UNKNOWN_POI = "unknown_poi"
    SEAT_OF_POWER_HOLDING = "seat_of_power_holding"
    NO_HOLDING = "no_holding"
    UNKNOWN_MYTH = "unknown_myth"
    NO_MYTH = "no_myth"
    HEX_HAS_MYTH = "hex_has_myth"
    HEX_OCCUPIED = "hex_occupied"
    EMPTY_NAME = "empty_name"
    DUPLICATE_HEX = "duplicate_hex"
    INCONSISTENT_BATCH = "inconsistent_batch"
    SESSION_CLOSED = "session_closed"


@dataclass
class MutationResult:
    """Result of a single mutation."""

    success: bool
    changed: list[Hex] = field(default_factory=list)
    failure_reason: RejectionReason | None = None


class RealmMutator:
    """Applies editor operations to a realm while preserving its invariants.

    Args:
        realm: The authoritative realm. Edited in place.
        tile_set: When given, terrain and point of interest ids are checked
            against it.
    """

    def __init__(self, realm: Realm, tile_set: TileSet | None = None):
        self.realm = realm
        self.tile_set = tile_set
        # Never reused, even after the highest myth is removed
        self._next_myth_id = max((m.id for m in realm.myths), default=0) + 1

    def _reject(self, operation: str, reason: RejectionReason, **context: Any) -> MutationResult:
        logger.debug("mutation_rejected", operation=operation, reason=reason.value, **context)
        return MutationResult(success=False, failure_reason=reason)

    # Terrain

    def set_terrain(self, coord: Any, terrain: str) -> MutationResult:
        """Overwrite the terrain of one hex. No neighbor effects."""
        hex_ = self.realm.get_hex(coord)
        if hex_ is None:
            return self._reject("set_terrain", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if not self._terrain_known(terrain):
            return self._reject("set_terrain", RejectionReason.UNKNOWN_TERRAIN, terrain=terrain)

        if hex_.terrain == terrain:
            return MutationResult(success=True)
        hex_.terrain = terrain
        logger.info("terrain_set", q=hex_.q, r=hex_.r, terrain=terrain)
        return MutationResult(success=True, changed=[hex_])

    def _terrain_known(self, terrain: str) -> bool:
        return self.tile_set is None or terrain in self.tile_set.terrain_ids()

    # Barriers

    def toggle_barrier(self, coord: Any, edge: int) -> MutationResult:
        """Flip a barrier edge, together with the matching edge of the neighbor."""
        hex_ = self.realm.get_hex(coord)
        if hex_ is None:
            return self._reject("toggle_barrier", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if not 0 <= edge < EDGE_COUNT:
            return self._reject("toggle_barrier", RejectionReason.INVALID_EDGE, edge=edge)

        present = edge not in hex_.barrier_edges
        changed = self._apply_barrier(hex_, edge, present)
        logger.info("barrier_toggled", q=hex_.q, r=hex_.r, edge=edge, present=present)
        return MutationResult(success=True, changed=changed)

    def set_barrier(self, coord: Any, edge: int, present: bool) -> MutationResult:
        """Add or remove a barrier edge on both sides. Idempotent."""
        hex_ = self.realm.get_hex(coord)
        if hex_ is None:
            return self._reject("set_barrier", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if not 0 <= edge < EDGE_COUNT:
            return self._reject("set_barrier", RejectionReason.INVALID_EDGE, edge=edge)

        changed = self._apply_barrier(hex_, edge, present)
        if changed:
            logger.info("barrier_set", q=hex_.q, r=hex_.r, edge=edge, present=present)
        return MutationResult(success=True, changed=changed)

    def _apply_barrier(self, hex_: Hex, edge: int, present: bool) -> list[Hex]:
        other = self.realm.get_hex(neighbor(hex_, edge))
        sides = [(hex_, edge)]
        if other is not None:
            sides.append((other, opposite_edge(edge)))

        changed = []
        for h, e in sides:
            if present and e not in h.barrier_edges:
                h.barrier_edges.add(e)
                changed.append(h)
            elif not present and e in h.barrier_edges:
                h.barrier_edges.discard(e)
                changed.append(h)
        return changed

    def remove_all_barriers(self) -> MutationResult:
        """Clear every barrier in the realm."""
        changed = [h for h in self.realm.hexes if h.barrier_edges]
        for h in changed:
            h.barrier_edges.clear()
        logger.info("barriers_cleared", hexes=len(changed))
        return MutationResult(success=True, changed=changed)

    # Points of interest

    def set_poi(self, coord: Any, kind: PoiKind | str, poi_id: str | None) -> MutationResult:
        """Set or clear the holding or landmark of a hex.

        Setting one kind clears the other. Any edit that would leave the seat
        of power without a holding is rejected.

        Args:
            coord: Target hex.
            kind: "holding" or "landmark".
            poi_id: Holding or landmark id, or None to clear.

        Returns:
            MutationResult with the touched hex.
        """
        try:
            kind = PoiKind(kind)
        except ValueError:
            return self._reject("set_poi", RejectionReason.INVALID_KIND, kind=str(kind))

        hex_ = self.realm.get_hex(coord)
        if hex_ is None:
            return self._reject("set_poi", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if (
            poi_id is not None
            and self.tile_set is not None
            and poi_id not in self.tile_set.poi_ids(kind.value)
        ):
            return self._reject("set_poi", RejectionReason.UNKNOWN_POI, kind=kind.value, poi_id=poi_id)

        loses_holding = (kind == PoiKind.HOLDING and poi_id is None) or (
            kind == PoiKind.LANDMARK and poi_id is not None
        )
        if loses_holding and self._is_seat(hex_):
            return self._reject(
                "set_poi", RejectionReason.SEAT_OF_POWER_HOLDING, q=hex_.q, r=hex_.r
            )

        if kind == PoiKind.HOLDING:
            hex_.holding = poi_id
            if poi_id is not None:
                hex_.landmark = None
        else:
            hex_.landmark = poi_id
            if poi_id is not None:
                hex_.holding = None

        logger.info("poi_set", q=hex_.q, r=hex_.r, kind=kind.value, poi_id=poi_id)
        return MutationResult(success=True, changed=[hex_])

    def _is_seat(self, hex_: Hex) -> bool:
        seat = self.realm.seat_of_power
        return seat is not None and seat.key == hex_.key

    def set_seat_of_power(self, coord: Any) -> MutationResult:
        """Designate a holding hex as the seat of power."""
        hex_ = self.realm.get_hex(coord)
        if hex_ is None:
            return self._reject("set_seat_of_power", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if hex_.holding is None:
            return self._reject("set_seat_of_power", RejectionReason.NO_HOLDING, q=hex_.q, r=hex_.r)

        previous = self.realm.seat_hex
        self.realm.seat_of_power = AxialCoord(q=hex_.q, r=hex_.r)
        logger.info("seat_of_power_set", q=hex_.q, r=hex_.r)

        changed = [hex_]
        if previous is not None and previous is not hex_:
            changed.insert(0, previous)
        return MutationResult(success=True, changed=changed)

    # Myths

    def add_myth(self, coord: Any) -> MutationResult:
        """Create a myth on an empty hex, named after its new id."""
        hex_ = self.realm.get_hex(coord)
        if hex_ is None:
            return self._reject("add_myth", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if hex_.myth is not None:
            return self._reject("add_myth", RejectionReason.HEX_HAS_MYTH, q=hex_.q, r=hex_.r)
        if hex_.holding is not None or hex_.landmark is not None:
            return self._reject("add_myth", RejectionReason.HEX_OCCUPIED, q=hex_.q, r=hex_.r)

        myth_id = self._next_myth_id
        self._next_myth_id += 1
        self.realm.myths.append(Myth(id=myth_id, name=f"Myth #{myth_id}", q=hex_.q, r=hex_.r))
        hex_.myth = myth_id
        logger.info("myth_added", myth_id=myth_id, q=hex_.q, r=hex_.r)
        return MutationResult(success=True, changed=[hex_])

    def remove_myth(self, coord: Any) -> MutationResult:
        """Delete the myth on a hex together with its record."""
        hex_ = self.realm.get_hex(coord)
        if hex_ is None:
            return self._reject("remove_myth", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if hex_.myth is None:
            return self._reject("remove_myth", RejectionReason.NO_MYTH, q=hex_.q, r=hex_.r)

        myth_id = hex_.myth
        self.realm.myths = [m for m in self.realm.myths if m.id != myth_id]
        hex_.myth = None
        logger.info("myth_removed", myth_id=myth_id, q=hex_.q, r=hex_.r)
        return MutationResult(success=True, changed=[hex_])

    def relocate_myth(self, myth_id: int, coord: Any) -> MutationResult:
        """Move a myth to another hex.

        The target must not carry a different myth, a holding or a landmark.
        """
        myth = self.realm.get_myth(myth_id)
        if myth is None:
            return self._reject("relocate_myth", RejectionReason.UNKNOWN_MYTH, myth_id=myth_id)
        target = self.realm.get_hex(coord)
        if target is None:
            return self._reject("relocate_myth", RejectionReason.UNKNOWN_HEX, coord=str(coord))
        if target.myth is not None and target.myth != myth_id:
            return self._reject(
                "relocate_myth", RejectionReason.HEX_HAS_MYTH, q=target.q, r=target.r
            )
        if target.holding is not None or target.landmark is not None:
            return self._reject(
                "relocate_myth", RejectionReason.HEX_OCCUPIED, q=target.q, r=target.r
            )

        if target.key == myth.key:
            return MutationResult(success=True)

        source = self.realm.get_hex(myth)
        changed = [target]
        if source is not None:
            source.myth = None
            changed.insert(0, source)
        target.myth = myth_id
        myth.q, myth.r = target.q, target.r
        logger.info("myth_relocated", myth_id=myth_id, q=target.q, r=target.r)
        return MutationResult(success=True, changed=changed)

    def rename_myth(self, myth_id: int, name: str) -> MutationResult:
        """Change a myth's display name."""
        myth = self.realm.get_myth(myth_id)
        if myth is None:
            return self._reject("rename_myth", RejectionReason.UNKNOWN_MYTH, myth_id=myth_id)
        name = name.strip()
        if not name:
            return self._reject("rename_myth", RejectionReason.EMPTY_NAME, myth_id=myth_id)

        myth.name = name
        logger.info("myth_renamed", myth_id=myth_id, name=name)
        hex_ = self.realm.get_hex(myth)
        return MutationResult(success=True, changed=[hex_] if hex_ is not None else [])

    # Batches

    def replace_hexes(self, hexes: list[Hex]) -> MutationResult:
        """Swap in a batch of replacement hexes as one atomic change.

        Every replacement must match an existing coordinate. The batch is
        rejected as a whole if the resulting realm would be inconsistent.

        Args:
            hexes: Replacement hexes.

        Returns:
            MutationResult listing the hexes that actually differ.
        """
        replacements: dict[Coordinate, Hex] = {}
        for h in hexes:
            if not self.realm.has_hex(h):
                return self._reject("replace_hexes", RejectionReason.UNKNOWN_HEX, q=h.q, r=h.r)
            if h.key in replacements:
                return self._reject("replace_hexes", RejectionReason.DUPLICATE_HEX, q=h.q, r=h.r)
            replacements[h.key] = h

        candidate = self.realm.model_copy(
            update={"hexes": [replacements.get(h.key, h) for h in self.realm.hexes]}
        )
        violations = check_realm(candidate)
        if violations:
            return self._reject(
                "replace_hexes", RejectionReason.INCONSISTENT_BATCH, violations=violations
            )

        changed = [
            replacements[h.key]
            for h in self.realm.hexes
            if h.key in replacements and replacements[h.key].model_dump() != h.model_dump()
        ]
        self.realm.hexes = candidate.hexes
        self.realm.reindex()
        logger.info("hexes_replaced", requested=len(hexes), changed=len(changed))
        return MutationResult(success=True, changed=changed)

    def paint_session(self) -> "PaintSession":
        """Start staging edits for one paint gesture."""
        return PaintSession(self)


@dataclass
class _PendingEdit:
    """Painted fields of one hex, applied over its committed state."""

    terrain: str | None = None
    barriers: dict[int, bool] = field(default_factory=dict)

    def apply(self, committed: Hex) -> Hex:
        painted = committed.model_copy(deep=True)
        if self.terrain is not None:
            painted.terrain = self.terrain
        for edge, present in self.barriers.items():
            if present:
                painted.barrier_edges.add(edge)
            else:
                painted.barrier_edges.discard(edge)
        return painted


class PaintSession:
    """Staging overlay for a drag-paint gesture.

    Only the painted fields are recorded, keyed by (q, r). They are laid
    over the committed hex whenever it is read, so edits made through the
    mutator during the gesture are kept. The committed realm is untouched
    until ``commit``.
    """

    def __init__(self, mutator: RealmMutator):
        self._mutator = mutator
        self._edits: dict[Coordinate, _PendingEdit] = {}
        self._closed = False

    @property
    def pending(self) -> list[Hex]:
        """Painted hexes, in the order they were first touched."""
        return [h for h in (self.hex_at(key) for key in self._edits) if h is not None]

    @property
    def closed(self) -> bool:
        return self._closed

    def hex_at(self, coord: Any) -> Hex | None:
        """The hex as it would look after commit."""
        key = coord_key(coord)
        committed = self._mutator.realm.get_hex(key)
        if committed is None:
            return None
        edit = self._edits.get(key)
        return edit.apply(committed) if edit is not None else committed

    def hexes(self) -> list[Hex]:
        """All realm hexes with staged edits applied."""
        return [
            self._edits[h.key].apply(h) if h.key in self._edits else h
            for h in self._mutator.realm.hexes
        ]

    def _edit(self, key: Coordinate) -> _PendingEdit:
        return self._edits.setdefault(key, _PendingEdit())

    def paint_terrain(self, coord: Any, terrain: str) -> MutationResult:
        if self._closed:
            return MutationResult(success=False, failure_reason=RejectionReason.SESSION_CLOSED)
        if not self._mutator._terrain_known(terrain):
            return MutationResult(success=False, failure_reason=RejectionReason.UNKNOWN_TERRAIN)
        key = coord_key(coord)
        current = self.hex_at(key)
        if current is None:
            return MutationResult(success=False, failure_reason=RejectionReason.UNKNOWN_HEX)

        if current.terrain == terrain:
            return MutationResult(success=True)
        self._edit(key).terrain = terrain
        return MutationResult(success=True, changed=[self.hex_at(key)])

    def paint_barrier(self, coord: Any, edge: int, present: bool) -> MutationResult:
        if self._closed:
            return MutationResult(success=False, failure_reason=RejectionReason.SESSION_CLOSED)
        if not 0 <= edge < EDGE_COUNT:
            return MutationResult(success=False, failure_reason=RejectionReason.INVALID_EDGE)
        key = coord_key(coord)
        if self.hex_at(key) is None:
            return MutationResult(success=False, failure_reason=RejectionReason.UNKNOWN_HEX)

        sides = [(key, edge)]
        other = neighbor(key, edge).key
        if self._mutator.realm.has_hex(other):
            sides.append((other, opposite_edge(edge)))

        changed = []
        for k, e in sides:
            if (e in self.hex_at(k).barrier_edges) != present:
                self._edit(k).barriers[e] = present
                changed.append(self.hex_at(k))
        return MutationResult(success=True, changed=changed)

    def commit(self) -> MutationResult:
        """Apply the painted fields in one replace_hexes call and close the session."""
        if self._closed:
            return MutationResult(success=False, failure_reason=RejectionReason.SESSION_CLOSED)
        result = self._mutator.replace_hexes(self.pending)
        self._edits.clear()
        self._closed = True
        return result

    def discard(self) -> None:
        """Drop every staged edit and close the session."""
        logger.debug("paint_discarded", hexes=len(self._edits))
        self._edits.clear()
        self._closed = True
