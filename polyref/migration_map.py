"""Migration map between old and new entities, checked to be type-respecting."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from polyref.errors import CoreError
from polyref.ids import EntityId


class MigrationMapError(CoreError, ValueError):
    """A migration map violates its construction rules."""


class KindMismatchError(MigrationMapError):
    """A rewrite maps an entity to one of a different kind."""

    def __init__(self, old: EntityId, new: EntityId) -> None:
        super().__init__(
            f"mapping {old} -> {new} is not type-respecting (kind segment mismatch)"
        )
        self.old = old
        self.new = new


@dataclass(frozen=True)
class ObsPartRewrite:
    """Rewrite of a part of an observation, such as an HTTP path segment."""

    kind: str
    old: Any
    new: Any


@dataclass(frozen=True)
class MigrationConflict:
    """Two proposers named different concrete targets for the same entity."""

    old: EntityId
    first: EntityId
    second: EntityId

    def __post_init__(self) -> None:
        if not all(isinstance(x, EntityId) for x in (self.old, self.first, self.second)):
            raise TypeError("migration conflict fields must be EntityId values")


class MigrationMap:
    """Partial map from old entities to new entities.

    Every rewrite must keep the entity kind; the language may change, so
    cross-language migrations are allowed. Rewrites iterate in sorted order
    of the old id.
    """

    def __init__(
        self,
        entity_rewrites: Mapping[EntityId, EntityId],
        observation_part_rewrites: Iterable[ObsPartRewrite] = (),
        conflicts: Iterable[MigrationConflict] = (),
    ) -> None:
        rewrites = dict(entity_rewrites)
        for old, new in rewrites.items():
            if not isinstance(old, EntityId) or not isinstance(new, EntityId):
                raise TypeError("entity rewrites must map EntityId to EntityId")
        ordered = dict(sorted(rewrites.items()))
        for old, new in ordered.items():
            if old.kind() != new.kind():
                raise KindMismatchError(old, new)

        part_rewrites = tuple(observation_part_rewrites)
        if not all(isinstance(p, ObsPartRewrite) for p in part_rewrites):
            raise TypeError("observation part rewrites must be ObsPartRewrite values")
        recorded = tuple(conflicts)
        if not all(isinstance(c, MigrationConflict) for c in recorded):
            raise TypeError("conflicts must be MigrationConflict values")

        self._rewrites = ordered
        self._observation_part_rewrites = part_rewrites
        self._conflicts = recorded
        self._type_respecting = not recorded

    def get(self, old: EntityId) -> Optional[EntityId]:
        """The new entity ``old`` is rewritten to, or ``None``."""
        return self._rewrites.get(old)

    def items(self) -> Iterator[tuple[EntityId, EntityId]]:
        """Rewrites as ``(old, new)`` pairs in sorted order."""
        return iter(self._rewrites.items())

    def is_type_respecting(self) -> bool:
        """True when no conflicts were recorded (kinds always match)."""
        return self._type_respecting

    @property
    def conflicts(self) -> tuple[MigrationConflict, ...]:
        """Recorded conflicts."""
        return self._conflicts

    @property
    def observation_part_rewrites(self) -> tuple[ObsPartRewrite, ...]:
        """Observation-part rewrites."""
        return self._observation_part_rewrites

    def __contains__(self, old: object) -> bool:
        return old in self._rewrites

    def __len__(self) -> int:
        return len(self._rewrites)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MigrationMap):
            return NotImplemented
        return (
            self._rewrites == other._rewrites
            and self._observation_part_rewrites == other._observation_part_rewrites
            and self._conflicts == other._conflicts
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"MigrationMap({len(self._rewrites)} rewrites, "
            f"{len(self._conflicts)} conflicts)"
        )