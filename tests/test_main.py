import json

import pytest

from extractor_engine.config import EngineConfig
from extractor_engine.errors import MalformedWorkbookError, MissingInputError
from extractor_engine.main import extract_timetable, normalize_section_filter, process_timetable, save_to_json
from extractor_engine.strategies import ROOM_ROWS

from conftest import make_sheet


@pytest.fixture
def config():
    return EngineConfig(diagnostic_enabled=False, diagnostic_sample_cells=5)


COMBINED_ROWS = [
    ["Day", "Room", "08:00-09:30", "09:30-11:00"],
    ["Monday", "Room 5", "Software Design\nDr. Sara\nBSSE-4C / BSAI-7A", "Software Design\nDr. Sara\nBSSE-4C / BSAI-7A"],
    ["Tuesday", "Lab 2", "OOP\nMr. Bilal\nBSCS-2B", ""],
]


@pytest.mark.parametrize("raw, expected", [
    (None, None),
    ("", None),
    ("   ", None),
    (" bsse-4c ", "BSSE-4C"),
])
def test_normalize_section_filter(raw, expected):
    assert normalize_section_filter(raw) == expected


def test_round_trip(round_trip_sheet):
    result = extract_timetable([round_trip_sheet])

    assert result.best_strategy == ROOM_ROWS
    assert result.available_sections == ["BSSE-4C"]
    assert result.total_entries == 1

    info = result.section_data["BSSE-4C"]
    assert info.days == ["Monday"]
    assert info.times == ["8:00 AM – 9:30 AM"]
    assert info.grid["8:00 AM – 9:30 AM"]["Monday"] == {
        "subject": "Data Structures",
        "teacher": "Mr. Ahmed Khan",
        "room": "Room #5",
        "confidence": 1.0,
    }


def test_sections_are_exploded_and_merged():
    result = extract_timetable([make_sheet(COMBINED_ROWS)])

    assert result.available_sections == ["BSAI-7A", "BSCS-2B", "BSSE-4C"]
    assert result.total_entries == 5
    for section in ("BSSE-4C", "BSAI-7A"):
        entries = result.section_data[section].entries
        assert [(e.start_time, e.end_time) for e in entries] == [("8:00 AM", "11:00 AM")]


SECTION_TAB = [
    ["Time", "Monday", "Tuesday", "Wednesday"],
    ["08:00-09:30", "Data Structures\nMr. Ahmed Khan\nRoom 5", "", "Calculus\nMs. Hina\nRoom 6"],
    ["09:30-11:00", "", "OOP\nDr. Sara\nLab 2", ""],
]


def test_available_sections_cover_every_tab():
    sheets = [
        make_sheet(SECTION_TAB, name="BSSE-4A"),
        make_sheet(SECTION_TAB[:1] + [
            ["08:00-09:30", "Networks\nEngr. Usman\nRoom 7", "", ""],
            ["09:30-11:00", "", "", ""],
        ], name="BSSE-4B"),
    ]
    result = extract_timetable(sheets)

    assert result.best_strategy == "sheet_sections"
    assert list(result.section_data) == ["BSSE-4A"]
    assert result.available_sections == ["BSSE-4A", "BSSE-4B"]

    filtered = extract_timetable(sheets, section="BSSE-4A")
    assert filtered.available_sections == ["BSSE-4A", "BSSE-4B"]


def test_section_filter_is_case_insensitive():
    result = extract_timetable([make_sheet(COMBINED_ROWS)], section="bscs-2b")
    assert result.section_filter == "BSCS-2B"
    assert list(result.section_data) == ["BSCS-2B"]
    assert result.total_entries == 1
    # the filter does not shrink the list of sections on offer
    assert len(result.available_sections) == 3


def test_unknown_section_gives_empty_result():
    result = extract_timetable([make_sheet(COMBINED_ROWS)], section="BSEE-1A")
    assert result.section_data == {}
    assert result.total_entries == 0
    assert result.to_payload()["section"] == "BSEE-1A"


def test_sheet_without_timetable_is_valid_and_empty():
    result = extract_timetable([make_sheet([["Notes"], ["Nothing scheduled"]])])
    assert result.best_strategy == "none"
    assert result.total_entries == 0
    assert result.to_payload()["success"] is True


def test_process_bytes(round_trip_workbook, config):
    result = process_timetable(round_trip_workbook, config=config)
    assert result.total_entries == 1
    assert result.sample_cells == ["Day", "Room", "08:00-09:30", "09:30-11:00", "Monday"]
    assert result.file_path is None


def test_process_path_records_file(tmp_path, round_trip_workbook, config):
    path = tmp_path / "timetable.xlsx"
    path.write_bytes(round_trip_workbook)
    result = process_timetable(str(path), section="BSSE-4C", config=config)
    assert result.file_path == str(path.absolute())
    assert result.total_entries == 1


def test_process_errors(config):
    with pytest.raises(MissingInputError):
        process_timetable(b"", config=config)
    with pytest.raises(MalformedWorkbookError):
        process_timetable(b"PK\x03\x04 broken", config=config)


def test_payload_shape(round_trip_sheet):
    payload = extract_timetable([round_trip_sheet]).to_payload()
    assert payload["section"] == "ALL"
    assert payload["bestStrategy"] == ROOM_ROWS
    assert payload["availableSections"] == ["BSSE-4C"]
    assert payload["totalEntries"] == 1
    assert "aiDiagnostic" not in payload

    entry = payload["sectionData"]["BSSE-4C"]["entries"][0]
    assert entry == {
        "day": "Monday",
        "time": "8:00 AM – 9:30 AM",
        "startTime": "8:00 AM",
        "endTime": "9:30 AM",
        "subject": "Data Structures",
        "teacher": "Mr. Ahmed Khan",
        "room": "Room #5",
        "section": "BSSE-4C",
        "confidence": 1.0,
    }


def test_save_to_json(tmp_path, round_trip_sheet):
    result = extract_timetable([round_trip_sheet])
    result.diagnostic = "• Looks like a valid timetable"
    out = tmp_path / "out.json"
    save_to_json(result, str(out))

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["totalEntries"] == 1
    assert data["aiDiagnostic"] == "• Looks like a valid timetable"
    assert data["metadata"]["extraction_timestamp"] == result.extraction_timestamp
