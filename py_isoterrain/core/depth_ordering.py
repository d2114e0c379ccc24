"""
Isometric draw-order keys and depth-ordered layers.

A depth key is a single integer:

    (gx + gy) * DIAG_WEIGHT + gx * TIE_WEIGHT + type_bias

Cells further down the screen diagonal draw later; within a diagonal the
larger column draws later; the type bias separates content kinds sharing a
cell. Keys order items and are never used as identifiers.

Two ordering paths exist, incremental insertion for single tiles and a
full bucketed re-sort, and both go through ordering_key() so they always
produce the same sequence for the same items.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import structlog

from ..exceptions import ConfigurationError

logger = structlog.get_logger()

DIAG_WEIGHT = 10000
TIE_WEIGHT = 10

# Content kinds in increasing "draws on top" order; all below TIE_WEIGHT
TYPE_BIAS: Dict[str, int] = {
    "path": 1,
    "plant": 3,
    "token": 5,
    "structure": 7,
}

MAX_GRID_COLUMNS = DIAG_WEIGHT // TIE_WEIGHT


def compute_depth_key(gx: int, gy: int, type_bias: int = 0) -> int:
    """
    Compute the isometric depth key of a cell.

    Args:
        gx: Grid column (0 <= gx < MAX_GRID_COLUMNS)
        gy: Grid row
        type_bias: Content bias in [0, TIE_WEIGHT)

    Returns:
        Integer sort key

    Raises:
        ConfigurationError: If the column or bias would let terms collide
    """
    if not 0 <= type_bias < TIE_WEIGHT:
        raise ConfigurationError(f"type_bias {type_bias} outside [0, {TIE_WEIGHT})")
    if gx >= MAX_GRID_COLUMNS:
        raise ConfigurationError(f"Column {gx} too large for depth keys (max {MAX_GRID_COLUMNS - 1})")
    return (gx + gy) * DIAG_WEIGHT + gx * TIE_WEIGHT + type_bias


def type_bias_for(kind: Optional[str]) -> int:
    return TYPE_BIAS.get(kind, 0) if kind else 0


class LayerKind(IntEnum):
    """Drawable kinds sharing a depth key, in draw order."""

    SHADOW = 0
    OVERLAY_FACE = 1
    TILE = 2


@dataclass
class LayerItem:
    """A drawable in a depth-ordered layer.

    Items without a depth key are not depth-managed and always trail the
    ordered ones.
    """

    depth_key: Optional[int]
    kind: LayerKind = LayerKind.TILE
    payload: Any = field(default=None, compare=False)

    def __post_init__(self):
        try:
            self.kind = LayerKind(self.kind)
        except ValueError as e:
            raise ConfigurationError(f"Unknown layer kind {self.kind!r}") from e

    @property
    def is_underlay(self) -> bool:
        return self.kind == LayerKind.SHADOW


def ordering_key(item: LayerItem) -> Tuple[int, int, int]:
    """The single comparator used by both insertion and re-sort."""
    if item.depth_key is None:
        return (1, 0, 0)
    return (0, item.depth_key, int(item.kind))


def find_insert_index(items: List[LayerItem], new_item: LayerItem) -> int:
    """
    Position before the first item whose ordering key is strictly greater.

    Shadows land before same-key faces and tiles but after same-key
    shadows already present.
    """
    return bisect_right([ordering_key(item) for item in items], ordering_key(new_item))


def insert_ordered(items: List[LayerItem], new_item: LayerItem) -> int:
    """Insert new_item into an ordered list in place; returns its index."""
    index = find_insert_index(items, new_item)
    items.insert(index, new_item)
    return index


def sort_by_depth(items: Iterable[LayerItem]) -> List[LayerItem]:
    """
    Full stable re-sort.

    Orders by ordering_key(), the comparator insert_ordered() uses: ascending
    depth key, then shadows, overlay faces and tiles within a key, keeping
    the incoming order among equals. Items without a depth key follow at
    the end.
    """
    return sorted(items, key=ordering_key)


class DepthOrderedLayer:
    """List of drawables kept in isometric draw order."""

    def __init__(self, items: Optional[Iterable[LayerItem]] = None):
        self.items: List[LayerItem] = sort_by_depth(items) if items else []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def add(self, item: LayerItem) -> int:
        return insert_ordered(self.items, item)

    def remove_where(self, predicate) -> int:
        before = len(self.items)
        self.items = [item for item in self.items if not predicate(item)]
        return before - len(self.items)

    def resort(self) -> None:
        self.items = sort_by_depth(self.items)
        logger.debug(
            "Depth layer re-sorted",
            shadows=sum(1 for i in self.items if i.kind == LayerKind.SHADOW and i.depth_key is not None),
            faces=sum(1 for i in self.items if i.kind == LayerKind.OVERLAY_FACE and i.depth_key is not None),
            tiles=sum(1 for i in self.items if i.kind == LayerKind.TILE and i.depth_key is not None),
            others=sum(1 for i in self.items if i.depth_key is None),
        )
