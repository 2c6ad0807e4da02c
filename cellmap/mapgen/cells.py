"""Cell containers shared by the generation phases.

``WorkingCell`` lives only while a map is being built; ``MapCell`` is the
immutable record handed to callers once doors have been placed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

NORTH = "north"
SOUTH = "south"
EAST = "east"
WEST = "west"
SIDES = (NORTH, SOUTH, EAST, WEST)
OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

Coord2D = Tuple[int, int]


@dataclass
class WorkingCell:
    x: int
    y: int
    width: int
    height: int
    index: int
    cost: float
    neighbors: List[int] = field(default_factory=list)

    def units(self) -> Iterator[Coord2D]:
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    def contains(self, px: int, py: int) -> bool:
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height


@dataclass(frozen=True)
class DoorMask:
    """Fixed-length bitset, one bit per unit of wall."""

    length: int
    bits: int = 0

    def __post_init__(self):
        if self.length < 0:
            raise ValueError("length must be non-negative")
        if self.bits >> self.length:
            raise ValueError(f"bits {self.bits:#x} exceed mask length {self.length}")

    def __getitem__(self, offset: int) -> bool:
        if not 0 <= offset < self.length:
            raise IndexError(offset)
        return bool(self.bits >> offset & 1)

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[bool]:
        for offset in range(self.length):
            yield bool(self.bits >> offset & 1)

    def with_door(self, offset: int) -> "DoorMask":
        if not 0 <= offset < self.length:
            raise IndexError(offset)
        return DoorMask(self.length, self.bits | 1 << offset)

    def offsets(self) -> List[int]:
        return [offset for offset in range(self.length) if self.bits >> offset & 1]

    def count(self) -> int:
        return bin(self.bits).count("1")


@dataclass(frozen=True)
class MapCell:
    x: int
    y: int
    width: int
    height: int
    doors_north: DoorMask
    doors_south: DoorMask
    doors_east: DoorMask
    doors_west: DoorMask

    def doors(self, side: str) -> DoorMask:
        return getattr(self, f"doors_{side}")

    def door_count(self) -> int:
        return sum(self.doors(side).count() for side in SIDES)

    def units(self) -> Iterator[Coord2D]:
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    def to_dict(self) -> Dict[str, object]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "doors": {side: list(self.doors(side)) for side in SIDES},
        }
