"""Allowed cell footprints.

Every template size is stored as given and rotated, so a ``3x1`` template
also allows ``1x3`` cells.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .errors import TemplateError

SizeSpec = Tuple[int, int]


class SizeCatalog:
    def __init__(self, sizes: Iterable[SizeSpec]):
        allowed = set()
        for w, h in sizes:
            if w < 1 or h < 1:
                raise TemplateError(f"cell size {w}x{h} must be at least 1x1")
            allowed.add((w, h))
            allowed.add((h, w))
        if not allowed:
            raise TemplateError("size catalog is empty")
        self._sizes: List[SizeSpec] = sorted(allowed)
        self._fitting: Dict[SizeSpec, List[SizeSpec]] = {}
        self.max_dimension = max(max(w, h) for w, h in self._sizes)

    @classmethod
    def from_templates(cls, cell_templates) -> "SizeCatalog":
        return cls(t.size for t in cell_templates)

    def __contains__(self, size) -> bool:
        return tuple(size) in self._sizes

    def __iter__(self):
        return iter(self._sizes)

    def __len__(self) -> int:
        return len(self._sizes)

    def fitting(self, max_w: int, max_h: int) -> List[SizeSpec]:
        """Footprints no larger than ``max_w`` x ``max_h``, memoised per cap pair."""
        key = (max_w, max_h)
        subset = self._fitting.get(key)
        if subset is None:
            subset = [(w, h) for w, h in self._sizes if w <= max_w and h <= max_h]
            self._fitting[key] = subset
        return subset

    def fits_within(self, width: int, height: int) -> bool:
        return bool(self.fitting(width, height))

    def __repr__(self) -> str:
        return f"SizeCatalog({self._sizes!r})"
