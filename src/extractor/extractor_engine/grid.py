"""
Normalized sheet representation and merged-cell resolution.

A workbook sheet is held as a rectangular text grid anchored at A1 (0, 0)
plus its merged ranges (0-based, inclusive). Every strategy reads cells
through a CellResolver so merged regions always yield their origin's text.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

# Narrow capability handed to strategies and the cell disambiguator
Resolve = Callable[[int, int], str]


@dataclass(frozen=True)
class MergeRange:
    """Merged cell range (0-based, inclusive)."""
    top: int
    left: int
    bottom: int
    right: int

    def cells(self):
        for r in range(self.top, self.bottom + 1):
            for c in range(self.left, self.right + 1):
                yield r, c


@dataclass(frozen=True)
class CellRange:
    """Coordinate range a strategy scans (0-based, inclusive)."""
    top: int
    left: int
    bottom: int
    right: int

    @property
    def is_empty(self) -> bool:
        return self.bottom < self.top or self.right < self.left

    def rows(self) -> range:
        return range(self.top, self.bottom + 1)

    def cols(self) -> range:
        return range(self.left, self.right + 1)


@dataclass
class SheetGrid:
    """One worksheet as text cells plus merged ranges."""
    name: str
    cells: List[List[str]] = field(default_factory=list)
    merged_cells: List[MergeRange] = field(default_factory=list)

    @property
    def n_rows(self) -> int:
        return len(self.cells)

    @property
    def n_cols(self) -> int:
        return max((len(row) for row in self.cells), default=0)

    @property
    def bounds(self) -> CellRange:
        return CellRange(top=0, left=0, bottom=self.n_rows - 1, right=self.n_cols - 1)

    def value(self, row: int, col: int) -> str:
        """Raw text at (row, col) without merge resolution; "" when absent."""
        if row < 0 or col < 0 or row >= len(self.cells):
            return ""
        line = self.cells[row]
        if col >= len(line):
            return ""
        return line[col]

    @classmethod
    def from_rows(cls, name: str, rows: List[List[object]], merged_cells=None) -> 'SheetGrid':
        """Build a grid from ragged rows, coercing values to text."""
        width = max((len(r) for r in rows), default=0)
        cells = []
        for row in rows:
            values = ["" if v is None else str(v) for v in row]
            cells.append(values + [""] * (width - len(values)))
        return cls(name=name, cells=cells, merged_cells=list(merged_cells or []))


class CellResolver:
    """
    Resolves (row, col) addresses to canonical cell text.

    The merge map is built once per sheet: every non-origin cell inside a
    merged region points at the region's origin. Lookups are pure.
    """

    def __init__(self, sheet: SheetGrid):
        self.sheet = sheet
        self.merge_map: Dict[Tuple[int, int], Tuple[int, int]] = {}
        for region in sheet.merged_cells:
            origin = (region.top, region.left)
            for address in region.cells():
                if address != origin:
                    self.merge_map[address] = origin

    def origin(self, row: int, col: int) -> Tuple[int, int]:
        return self.merge_map.get((row, col), (row, col))

    def resolve(self, row: int, col: int) -> str:
        """
        Return the trimmed text of (row, col), following merged regions.

        Args:
            row: 0-based row index
            col: 0-based column index

        Returns:
            Cell text, or "" for empty/missing cells
        """
        r, c = self.origin(row, col)
        return self.sheet.value(r, c).strip()

    __call__ = resolve
