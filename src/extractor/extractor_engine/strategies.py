"""
Layout strategies.

Each strategy scans one sheet under a different structural assumption and
returns a ParseResult. Strategies only read the sheet through the resolver
and build a private result, so they can run in any order or concurrently.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .cell_parser import CellParse, is_teacher_line, parse_cell, split_lines
from .classifiers import (
    extract_sections,
    is_room,
    is_skippable,
    is_time_slot,
    normalize_room,
    normalize_time_slot,
    recognize_day,
    strip_sections,
)
from .grid import CellRange, Resolve, SheetGrid
from .models import DEFAULT_ROOM, LectureEntry, ParseResult, TimeSlot, Weekday
from .utils import sanitize_text

ROOM_ROWS = "room_rows"
COLUMN_TABLE = "column_table"
SHEET_SECTIONS = "sheet_sections"
BRUTE_FORCE = "brute_force"

# Room-row layout
DAY_SCAN_COLS = 5
ROOM_SCAN_COLS = 4
MIN_HEADER_SLOTS = 2

# Column-table layout
HEADER_SCAN_ROWS = 15
MIN_KEYWORD_COLUMNS = 4
MISSING_ROOM_PENALTY = 0.3
HEADER_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('section', ('section',)),
    ('subject', ('course', 'subject')),
    ('teacher', ('teacher', 'instructor', 'faculty')),
    ('day', ('day',)),
    ('time', ('time', 'slot')),
    ('floor', ('floor',)),
    ('room', ('room', 'venue')),
)

# Per-sheet sections layout
MIN_DAY_HEADERS = 3
MIN_TIME_ROWS = 2
UNPLACED_ROOM_FACTOR = 0.5


def _explode(
    cell: CellParse,
    sections: Sequence[str],
    day: Weekday,
    start: str,
    end: str,
    room: str,
    confidence: float,
) -> List[LectureEntry]:
    """One entry per section code, identical otherwise."""
    confidence = min(1.0, max(0.0, confidence))
    return [
        LectureEntry(
            day=day,
            start_time=start,
            end_time=end,
            section=section,
            subject=cell.subject,
            teacher=cell.teacher,
            room=room,
            confidence=confidence,
        )
        for section in sections
    ]


# ─── room-row layout ─────────────────────────────────────────

@dataclass
class DayBlock:
    """Carried scan state: the current day and the active time-slot header."""
    day: Optional[Weekday] = None
    time_slots: List[TimeSlot] = field(default_factory=list)


def _row_time_slots(resolve: Resolve, row: int, bounds: CellRange) -> List[TimeSlot]:
    slots = []
    for col in bounds.cols():
        value = resolve(row, col)
        # a lecture cell may open with its own time line; it is still data
        if not value or extract_sections(value) or not is_time_slot(value):
            continue
        norm = normalize_time_slot(value)
        if norm:
            slots.append(TimeSlot(col=col, raw_text=value, start_time=norm[0], end_time=norm[1]))
    return slots


def _row_day(resolve: Resolve, row: int, bounds: CellRange) -> Optional[Weekday]:
    for col in range(bounds.left, min(bounds.left + DAY_SCAN_COLS, bounds.right + 1)):
        value = resolve(row, col)
        # lecture and time cells are never day markers
        if not value or extract_sections(value) or is_time_slot(value):
            continue
        day = recognize_day(value)
        if day:
            return day
    return None


def _row_room(resolve: Resolve, row: int, bounds: CellRange) -> Optional[str]:
    for col in range(bounds.left, min(bounds.left + ROOM_SCAN_COLS, bounds.right + 1)):
        value = resolve(row, col)
        if value and not extract_sections(value) and is_room(value):
            return normalize_room(value)
    return None


def parse_room_rows(sheet: SheetGrid, resolve: Resolve, bounds: Optional[CellRange] = None) -> ParseResult:
    """
    Layout with one row per room, grouped into day blocks.

    A row with at least two time slots becomes the active header; a row with
    a room name in its first columns is a data row whose cells under the
    header columns are lectures for the current day.
    """
    bounds = bounds or sheet.bounds
    result = ParseResult(strategy=ROOM_ROWS, sheet_name=sheet.name)
    if bounds.is_empty:
        return result

    block = DayBlock()
    for row in bounds.rows():
        day = _row_day(resolve, row, bounds)
        if day:
            block.day = day

        header = _row_time_slots(resolve, row, bounds)
        if len(header) >= MIN_HEADER_SLOTS:
            block.time_slots = header
            continue

        if block.day is None or not block.time_slots:
            continue

        room = _row_room(resolve, row, bounds)
        if room is None:
            continue

        for slot in block.time_slots:
            content = resolve(row, slot.col)
            if not content or is_skippable(content):
                continue
            cell = parse_cell(content, resolve, row, slot.col)
            result.entries.extend(
                _explode(cell, cell.sections, block.day, slot.start_time, slot.end_time, room, cell.confidence)
            )
    return result


# ─── column-table layout ─────────────────────────────────────

def _locate_header(resolve: Resolve, bounds: CellRange) -> Tuple[Optional[int], Dict[str, int]]:
    last_row = min(bounds.top + HEADER_SCAN_ROWS - 1, bounds.bottom)
    for row in range(bounds.top, last_row + 1):
        columns: Dict[str, int] = {}
        for col in bounds.cols():
            text = resolve(row, col).lower()
            if not text:
                continue
            for name, keywords in HEADER_KEYWORDS:
                if name not in columns and any(keyword in text for keyword in keywords):
                    columns[name] = col
                    break
        if len(columns) >= MIN_KEYWORD_COLUMNS:
            return row, columns
    return None, {}


def parse_column_table(sheet: SheetGrid, resolve: Resolve, bounds: Optional[CellRange] = None) -> ParseResult:
    """Flat table: one lecture per row under a keyword header row."""
    bounds = bounds or sheet.bounds
    result = ParseResult(strategy=COLUMN_TABLE, sheet_name=sheet.name)
    if bounds.is_empty:
        return result

    header_row, columns = _locate_header(resolve, bounds)
    if header_row is None:
        return result
    required = ('section', 'subject', 'teacher', 'day', 'time')
    if any(name not in columns for name in required):
        return result

    def cell(row: int, name: str) -> str:
        return resolve(row, columns[name]) if name in columns else ""

    for row in range(header_row + 1, bounds.bottom + 1):
        sections = extract_sections(cell(row, 'section'))
        subject = strip_sections(sanitize_text(cell(row, 'subject')))
        teacher = sanitize_text(cell(row, 'teacher'))
        day = recognize_day(cell(row, 'day'))
        times = normalize_time_slot(cell(row, 'time'))
        if not (sections and subject and teacher and day and times):
            continue

        raw_room = cell(row, 'room')
        confidence = 1.0
        if raw_room:
            room = normalize_room(raw_room)
        else:
            room = DEFAULT_ROOM
            confidence -= MISSING_ROOM_PENALTY

        parsed = CellParse(subject=subject, teacher=teacher, sections=sections, confidence=confidence)
        result.entries.extend(_explode(parsed, sections, day, times[0], times[1], room, confidence))
    return result


# ─── per-sheet sections layout ───────────────────────────────

def _day_header(resolve: Resolve, bounds: CellRange) -> Tuple[Optional[int], Dict[int, Weekday]]:
    for row in bounds.rows():
        days = {}
        for col in bounds.cols():
            value = resolve(row, col)
            if not value or is_time_slot(value) or extract_sections(value):
                continue
            day = recognize_day(value)
            if day:
                days[col] = day
        if len(days) >= MIN_DAY_HEADERS:
            return row, days
    return None, {}


def _time_column(resolve: Resolve, bounds: CellRange, header_row: int, skip: Dict[int, Weekday]) -> Optional[int]:
    for col in bounds.cols():
        if col in skip:
            continue
        hits = sum(1 for row in range(header_row + 1, bounds.bottom + 1) if is_time_slot(resolve(row, col)))
        if hits >= MIN_TIME_ROWS:
            return col
    return None


def _split_room(lines: List[str]) -> Tuple[Optional[str], List[str]]:
    """Pull a room line out of a cell; the rest is lecture text."""
    for idx, line in enumerate(lines):
        if is_teacher_line(line) or not is_room(line):
            continue
        label = normalize_room(line)
        # a bare "Networks Lab" is a subject, not a room
        if label != line or len(line) <= 8:
            return label, lines[:idx] + lines[idx + 1:]
    return None, lines


def parse_sheet_sections(sheet: SheetGrid, resolve: Resolve, bounds: Optional[CellRange] = None) -> ParseResult:
    """
    One tab per section: days across the top, times down a column.

    Section codes come from the cell when present, otherwise from the
    sheet name.
    """
    bounds = bounds or sheet.bounds
    result = ParseResult(strategy=SHEET_SECTIONS, sheet_name=sheet.name)
    if bounds.is_empty:
        return result

    sheet_sections = extract_sections(sheet.name)
    header_row, day_cols = _day_header(resolve, bounds)
    if header_row is None:
        return result
    time_col = _time_column(resolve, bounds, header_row, day_cols)
    if time_col is None:
        return result

    for row in range(header_row + 1, bounds.bottom + 1):
        times = normalize_time_slot(resolve(row, time_col))
        if not times:
            continue
        for col, day in day_cols.items():
            content = resolve(row, col)
            if not content or is_skippable(content):
                continue
            room, lines = _split_room(split_lines(content))
            cell = parse_cell("\n".join(lines), resolve, row, col)
            sections = cell.sections or sheet_sections
            if not sections:
                continue
            factor = 1.0 if room else UNPLACED_ROOM_FACTOR
            result.entries.extend(
                _explode(cell, sections, day, times[0], times[1], room or DEFAULT_ROOM, cell.confidence * factor)
            )
    return result


# ─── brute-force proximity ───────────────────────────────────

def _nearest(markers, row: int, col: int, row_weight: int, above_only: bool = False):
    best, best_dist = None, None
    for marker in markers:
        m_row, m_col = marker[0], marker[1]
        if above_only and m_row > row:
            continue
        dist = row_weight * abs(row - m_row) + abs(col - m_col)
        if best_dist is None or dist < best_dist:
            best, best_dist = marker, dist
    return best


def parse_brute_force(sheet: SheetGrid, resolve: Resolve, bounds: Optional[CellRange] = None) -> ParseResult:
    """
    No layout assumption: attach each lecture cell to its nearest markers.

    Day markers must sit at or above the lecture (10 x rows + cols), time
    markers are weighted 5 x rows + cols and rooms 10 x rows + cols.
    """
    bounds = bounds or sheet.bounds
    result = ParseResult(strategy=BRUTE_FORCE, sheet_name=sheet.name)
    if bounds.is_empty:
        return result

    days, times, rooms, data = [], [], [], []
    for row in bounds.rows():
        for col in bounds.cols():
            value = resolve(row, col)
            if is_skippable(value):
                continue
            if extract_sections(value):
                data.append((row, col, value))
            elif is_time_slot(value):
                norm = normalize_time_slot(value)
                if norm:
                    times.append((row, col, norm))
            elif recognize_day(value):
                days.append((row, col, recognize_day(value)))
            elif is_room(value):
                rooms.append((row, col, normalize_room(value)))

    for row, col, value in data:
        day = _nearest(days, row, col, 10, above_only=True)
        slot = _nearest(times, row, col, 5)
        if day is None or slot is None:
            continue
        room = _nearest(rooms, row, col, 10)
        cell = parse_cell(value, resolve, row, col)
        confidence = cell.confidence if room else cell.confidence * 0.5
        start, end = slot[2]
        result.entries.extend(
            _explode(cell, cell.sections, day[2], start, end, room[2] if room else DEFAULT_ROOM, confidence)
        )
    return result


StrategyFn = Callable[[SheetGrid, Resolve, Optional[CellRange]], ParseResult]

STRATEGIES: Tuple[Tuple[str, StrategyFn], ...] = (
    (ROOM_ROWS, parse_room_rows),
    (COLUMN_TABLE, parse_column_table),
    (SHEET_SECTIONS, parse_sheet_sections),
    (BRUTE_FORCE, parse_brute_force),
)
