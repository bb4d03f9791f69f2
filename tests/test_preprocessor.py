from datetime import date, datetime, time

import pytest

from extractor_engine.errors import MalformedWorkbookError, MissingInputError
from extractor_engine.grid import CellResolver, MergeRange
from extractor_engine.preprocessor import WorkbookPreprocessor, cell_to_text

from conftest import build_workbook


@pytest.mark.parametrize("value, text", [
    (None, ""),
    (5.0, "5"),
    (2.5, "2.5"),
    (date(2024, 9, 2), "2024-09-02"),
    (datetime(2024, 9, 2), "2024-09-02"),
    (time(8, 30), "08:30"),
    ("  Room 5 ", "  Room 5 "),
])
def test_cell_to_text(value, text):
    assert cell_to_text(value) == text


def test_workbook_to_grids(round_trip_workbook):
    sheets = WorkbookPreprocessor().process(round_trip_workbook)
    assert len(sheets) == 1

    sheet = sheets[0]
    assert sheet.name == "Timetable"
    assert sheet.merged_cells == [MergeRange(top=1, left=1, bottom=2, right=1)]
    assert sheet.value(0, 2) == "08:00-09:30"
    assert CellResolver(sheet).resolve(2, 1) == "Room 5"


def test_every_sheet_is_loaded():
    data = build_workbook({
        "BSSE-4C": ([["Time", "Monday"]], []),
        "BSAI-7A": ([["Time", "Tuesday"]], []),
    })
    sheets = WorkbookPreprocessor().process(data)
    assert [sheet.name for sheet in sheets] == ["BSSE-4C", "BSAI-7A"]


def test_path_source(tmp_path, round_trip_workbook):
    path = tmp_path / "timetable.xlsx"
    path.write_bytes(round_trip_workbook)
    assert WorkbookPreprocessor().process(path)[0].name == "Timetable"


def test_empty_input_is_missing():
    with pytest.raises(MissingInputError):
        WorkbookPreprocessor().process(b"")


def test_garbage_is_malformed():
    with pytest.raises(MalformedWorkbookError):
        WorkbookPreprocessor().process(b"definitely not a zip archive")


def test_sample_cells(round_trip_workbook):
    sheets = WorkbookPreprocessor().process(round_trip_workbook)
    assert WorkbookPreprocessor.sample_cells(sheets, limit=3) == ["Day", "Room", "08:00-09:30"]
    assert WorkbookPreprocessor.sample_cells([], limit=3) == []


def test_corrupt_xml_part_is_malformed(corrupt_workbook):
    with pytest.raises(MalformedWorkbookError):
        WorkbookPreprocessor().process(corrupt_workbook)
