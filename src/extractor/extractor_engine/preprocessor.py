"""Workbook preprocessing: spreadsheet bytes to normalized sheet grids."""

import zipfile
from datetime import date, datetime, time
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from typing import List, Union
from xml.etree.ElementTree import ParseError

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import MalformedWorkbookError, MissingInputError
from .grid import MergeRange, SheetGrid
from .log_config import get_logger

log = get_logger(__name__)


def cell_to_text(value) -> str:
    """Coerce an openpyxl cell value to display text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        if value.hour == 0 and value.minute == 0 and value.second == 0:
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal):
        return str(value)
    return str(value)


class WorkbookPreprocessor:
    """Loads .xlsx/.xlsm workbooks into SheetGrid objects (one per sheet)."""

    def process(self, source: Union[str, Path, bytes]) -> List[SheetGrid]:
        """
        Load a workbook and return every sheet as a grid.

        Args:
            source: Path to the workbook or its raw bytes

        Returns:
            List of SheetGrid, in workbook order

        Raises:
            MissingInputError: If no bytes were provided
            MalformedWorkbookError: If the bytes are not a readable workbook
        """
        if isinstance(source, (str, Path)):
            data = Path(source).read_bytes()
        else:
            data = source

        if not data:
            raise MissingInputError("No file provided")

        try:
            # read_only mode does not expose merged ranges
            workbook = load_workbook(filename=BytesIO(data), data_only=True, read_only=False)
        except (
            InvalidFileException,
            zipfile.BadZipFile,
            ParseError,  # corrupt XML part inside a valid zip
            KeyError,
            ValueError,
            TypeError,
            AttributeError,
            OSError,
        ) as e:
            raise MalformedWorkbookError(f"Unreadable workbook: {e}") from e

        sheets = [self._sheet_to_grid(ws) for ws in workbook.worksheets]
        log.info(
            "workbook_loaded",
            sheets=len(sheets),
            cells=sum(sheet.n_rows * sheet.n_cols for sheet in sheets),
        )
        return sheets

    def _sheet_to_grid(self, ws) -> SheetGrid:
        """
        Convert one openpyxl worksheet into a SheetGrid anchored at A1.

        Args:
            ws: openpyxl worksheet

        Returns:
            SheetGrid with text cells and 0-based merged ranges
        """
        max_row = int(ws.max_row or 0)
        max_col = int(ws.max_column or 0)

        merges = []
        for cr in ws.merged_cells.ranges:
            merges.append(
                MergeRange(
                    top=cr.min_row - 1,
                    left=cr.min_col - 1,
                    bottom=cr.max_row - 1,
                    right=cr.max_col - 1,
                )
            )

        cells: List[List[str]] = []
        for row in ws.iter_rows(min_row=1, max_row=max_row, max_col=max_col, values_only=True):
            cells.append([cell_to_text(value) for value in row])

        return SheetGrid(name=str(ws.title), cells=cells, merged_cells=merges)

    @staticmethod
    def sample_cells(sheets: List[SheetGrid], limit: int = 35) -> List[str]:
        """First non-empty text cells of the first sheet, row-major."""
        samples: List[str] = []
        if not sheets or limit <= 0:
            return samples
        for row in sheets[0].cells:
            for value in row:
                text = value.strip()
                if text:
                    samples.append(text)
                    if len(samples) >= limit:
                        return samples
        return samples
