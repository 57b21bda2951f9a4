"""Symmetry groups: pairs and self-symmetric modules sharing one axis."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Mapping, Optional

Point = tuple[int, int]

_TOLERANCE = 1e-6


class SymmetryType(Enum):
    """Orientation of a symmetry axis."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

    def flipped(self) -> "SymmetryType":
        """Return the other orientation."""
        if self is SymmetryType.VERTICAL:
            return SymmetryType.HORIZONTAL
        return SymmetryType.VERTICAL


class SymmetryGroup:
    """A named set of symmetry pairs and self-symmetric modules.

    The axis position is an x coordinate for vertical symmetry and a
    y coordinate for horizontal symmetry; a negative value means unset.
    """

    def __init__(
        self, name: str, symmetry_type: SymmetryType = SymmetryType.VERTICAL
    ) -> None:
        self.name = name
        self.symmetry_type = symmetry_type
        self.axis_position: float = -1.0
        self._pairs: list[tuple[str, str]] = []
        self._self_symmetric: list[str] = []
        self._pair_map: dict[str, str] = {}
        self._self_set: set[str] = set()
        # dict keeps insertion order, giving a deterministic traversal start
        self._all_modules: dict[str, None] = {}

    def __repr__(self) -> str:
        return (
            f"SymmetryGroup({self.name!r}, {self.symmetry_type.name}, "
            f"pairs={self._pairs!r}, self_symmetric={self._self_symmetric!r})"
        )

    # -- construction -------------------------------------------------

    def add_symmetry_pair(self, module1: str, module2: str) -> None:
        """Add two modules that mirror each other across the axis."""
        self._pairs.append((module1, module2))
        self._pair_map[module1] = module2
        self._pair_map[module2] = module1
        self._all_modules.setdefault(module1)
        self._all_modules.setdefault(module2)

    def add_self_symmetric(self, module: str) -> None:
        """Add a module that is centred on the axis."""
        self._self_symmetric.append(module)
        self._self_set.add(module)
        self._all_modules.setdefault(module)

    # -- queries ------------------------------------------------------

    @property
    def symmetry_pairs(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._pairs)

    @property
    def self_symmetric(self) -> tuple[str, ...]:
        return tuple(self._self_symmetric)

    @property
    def all_modules(self) -> frozenset[str]:
        return frozenset(self._all_modules)

    @property
    def num_modules(self) -> int:
        return len(self._all_modules)

    @property
    def num_pairs(self) -> int:
        return len(self._pairs)

    @property
    def num_self_symmetric(self) -> int:
        return len(self._self_symmetric)

    def __contains__(self, module_name: object) -> bool:
        return module_name in self._all_modules

    def is_in_group(self, module_name: str) -> bool:
        return module_name in self._all_modules

    def is_self_symmetric(self, module_name: str) -> bool:
        return module_name in self._self_set

    def is_symmetry_pair(self, module1: str, module2: str) -> bool:
        return self._pair_map.get(module1) == module2

    def symmetric_pair(self, module_name: str) -> Optional[str]:
        """Return the partner of a paired module, or None."""
        return self._pair_map.get(module_name)

    def change_symmetry_type(self) -> None:
        """Toggle between vertical and horizontal symmetry."""
        self.symmetry_type = self.symmetry_type.flipped()

    # -- geometry -----------------------------------------------------

    def is_symmetry_island(
        self,
        positions: Mapping[str, Point],
        dimensions: Mapping[str, Point],
    ) -> bool:
        """Check that all modules are placed and form one connected cluster."""
        if not self._all_modules:
            return True
        if any(m not in positions or m not in dimensions for m in self._all_modules):
            return False

        def adjacent(m1: str, m2: str) -> bool:
            x1, y1 = positions[m1]
            w1, h1 = dimensions[m1]
            x2, y2 = positions[m2]
            w2, h2 = dimensions[m2]
            left1, right1, bottom1, top1 = x1, x1 + w1, y1, y1 + h1
            left2, right2, bottom2, top2 = x2, x2 + w2, y2, y2 + h2
            horizontal = (right1 == left2 or right2 == left1) and not (
                top1 <= bottom2 or top2 <= bottom1
            )
            vertical = (top1 == bottom2 or top2 == bottom1) and not (
                right1 <= left2 or right2 <= left1
            )
            return horizontal or vertical

        start = next(iter(self._all_modules))
        visited = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for module in self._all_modules:
                if module not in visited and adjacent(current, module):
                    visited.add(module)
                    queue.append(module)
        return len(visited) == len(self._all_modules)

    def validate_symmetric_placement(
        self,
        positions: Mapping[str, Point],
        dimensions: Mapping[str, Point],
    ) -> bool:
        """Check that module centres respect the symmetry axis."""
        axis = (
            self.calculate_axis_position(positions)
            if self.axis_position < 0
            else self.axis_position
        )
        if axis < 0:
            return False

        vertical = self.symmetry_type is SymmetryType.VERTICAL

        def centre(module: str) -> Optional[tuple[float, float]]:
            if module not in positions or module not in dimensions:
                return None
            x, y = positions[module]
            w, h = dimensions[module]
            return x + w / 2.0, y + h / 2.0

        for first, second in self._pairs:
            c1, c2 = centre(first), centre(second)
            if c1 is None or c2 is None:
                return False
            if vertical:
                mirrored = abs(c1[0] + c2[0] - 2 * axis) <= _TOLERANCE
                aligned = abs(c1[1] - c2[1]) <= _TOLERANCE
            else:
                mirrored = abs(c1[1] + c2[1] - 2 * axis) <= _TOLERANCE
                aligned = abs(c1[0] - c2[0]) <= _TOLERANCE
            if not (mirrored and aligned):
                return False

        for module in self._self_symmetric:
            c = centre(module)
            if c is None:
                return False
            along = c[0] if vertical else c[1]
            if abs(along - axis) > _TOLERANCE:
                return False

        return True

    def calculate_axis_position(self, positions: Mapping[str, Point]) -> float:
        """Average the midpoints of placed pairs; -1.0 when none is placed."""
        index = 0 if self.symmetry_type is SymmetryType.VERTICAL else 1
        midpoints = [
            (positions[a][index] + positions[b][index]) / 2.0
            for a, b in self._pairs
            if a in positions and b in positions
        ]
        if not midpoints:
            return -1.0
        return sum(midpoints) / len(midpoints)