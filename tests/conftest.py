import zipfile
from io import BytesIO

import pytest
from openpyxl import Workbook

from extractor_engine.grid import CellResolver, MergeRange, SheetGrid

LECTURE = "Data Structures\nMr. Ahmed Khan\nBSSE-4C"

# Two days, two slots, room cell B2:B3 merged
ROUND_TRIP_ROWS = [
    ["Day", "Room", "08:00-09:30", "09:30-11:00"],
    ["Monday", "Room 5", LECTURE, ""],
    ["", "", "", ""],
    ["Tuesday", "Room 6", "", ""],
]
ROUND_TRIP_MERGES = [MergeRange(top=1, left=1, bottom=2, right=1)]


def make_sheet(rows, merges=None, name="Sheet1"):
    return SheetGrid.from_rows(name, rows, merged_cells=merges)


def make_resolver(rows, merges=None):
    return CellResolver(make_sheet(rows, merges)).resolve


def build_workbook(sheets):
    """Build .xlsx bytes from {title: (rows, ["B2:B3", ...])}."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, (rows, merges) in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
        for ref in merges:
            ws.merge_cells(ref)
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def replace_part(data, part, content):
    """Copy an .xlsx archive with one member's bytes swapped out."""
    src = zipfile.ZipFile(BytesIO(data))
    bio = BytesIO()
    with zipfile.ZipFile(bio, "w") as dst:
        for item in src.infolist():
            dst.writestr(item, content if item.filename == part else src.read(item.filename))
    return bio.getvalue()


@pytest.fixture
def corrupt_workbook(round_trip_workbook):
    return replace_part(round_trip_workbook, "xl/workbook.xml", b"<not-xml")


@pytest.fixture
def round_trip_sheet():
    return make_sheet(ROUND_TRIP_ROWS, ROUND_TRIP_MERGES)


@pytest.fixture
def round_trip_workbook():
    return build_workbook({"Timetable": (ROUND_TRIP_ROWS, ["B2:B3"])})
