"""Token classifiers: independent predicates and normalizers over cell text."""

import re
from typing import List, Optional, Tuple

from .models import Weekday


# Time slot, e.g. "08:00-09:30", "8.00 – 9.30", "1:30 pm - 3:00 pm"
_TIME_RANGE_RE = re.compile(
    r'(\d{1,2})[:.](\d{2})\s*(am|pm)?\s*[-–—]+\s*(\d{1,2})[:.](\d{2})\s*(am|pm)?',
    re.IGNORECASE,
)
# Bare digit run, e.g. "0800-0930", "830-1000"
_DIGIT_RANGE_RE = re.compile(r'(?<!\d)(\d{1,2})(\d{2})\s*[-–—]+\s*(\d{1,2})(\d{2})(?!\d)')

_TIME_SLOT_COMPACT_RE = re.compile(
    r'\d{1,2}[:.]\d{2}(?:am|pm)?[-–—]+\d{1,2}[:.]\d{2}|(?<!\d)\d{3,4}[-–—]+\d{3,4}(?!\d)',
    re.IGNORECASE,
)
_TIME_12_RE = re.compile(r'^\s*(\d{1,2}):(\d{2})\s*(AM|PM)\s*$', re.IGNORECASE)

_ROOM_KEYWORDS = ('room', 'lab', 'auditorium', 'hall')
_ROOM_CODE_RES = (
    re.compile(r'^[a-z]{1,3}\s*-?\s*\d{2,4}$'),
    re.compile(r'^l?r?-?\d{2,4}$'),
)

SECTION_RE = re.compile(r'\b(BS[A-Z]{2,4}-\d{1,2}[A-Z]?)(?:Combined)?\b', re.IGNORECASE)

_FLOOR_RE = re.compile(r'^(ground|1st|2nd|3rd|4th|ist|!st)\s*floor$')
_BREAK_RE = re.compile(r'\b(break|lunch|recess)\b')
_PAGE_RE = re.compile(r'\bpage\s*(no\.?\s*)?\d+')
_NOISE_PHRASES = (
    'prayer', 'time table', 'timetable', 'semester', 'updated', 'effective from',
    'note:', 's.no', 'sr.#', 'used in', 'department of',
)
_NOISE_EXACT = {'rooms', 'it department', 'department'}


# ─── days ────────────────────────────────────────────────────

def recognize_day(text: str) -> Optional[Weekday]:
    return Weekday.from_string(text)


# ─── time slots ──────────────────────────────────────────────

def is_time_slot(text: str) -> bool:
    """True if the text carries a time range such as "08:00-09:30" or "0800-0930"."""
    if not text:
        return False
    return bool(_TIME_SLOT_COMPACT_RE.search(re.sub(r'\s+', '', text)))


def _to_24_hour(hour: int, marker: Optional[str]) -> Optional[int]:
    if marker:
        if not 1 <= hour <= 12:
            return None
        marker = marker.lower()
        if marker == 'pm' and hour != 12:
            return hour + 12
        if marker == 'am' and hour == 12:
            return 0
        return hour
    # No class starts before 8 AM, so bare 1-7 are afternoon hours
    if 1 <= hour <= 7:
        return hour + 12
    return hour


def to_12_hour(hour: int, minute: int) -> str:
    """Format a 24-hour clock time as "H:MM AM/PM"."""
    period = 'PM' if hour >= 12 else 'AM'
    if hour > 12:
        hour -= 12
    if hour == 0:
        hour = 12
    return f"{hour}:{minute:02d} {period}"


def normalize_time_slot(text: str) -> Optional[Tuple[str, str]]:
    """
    Parse a time range into canonical 12-hour start and end strings.

    An explicit AM/PM marker on either end is honoured for that end; without
    one, raw hours 1-7 are read as afternoon/evening hours.

    Args:
        text: Raw cell text containing a time range

    Returns:
        (start, end) such as ("8:00 AM", "9:30 AM"), or None when nothing
        valid can be parsed
    """
    if not text:
        return None
    cleaned = re.sub(r'\s+', ' ', text.strip())
    # "8 : 00" -> "8:00"
    cleaned = re.sub(r'(\d)\s*([:.])\s*(\d)', r'\1\2\3', cleaned)

    candidates = []
    m = _TIME_RANGE_RE.search(cleaned)
    if m:
        candidates.append((m.group(1), m.group(2), m.group(3), m.group(4), m.group(5), m.group(6)))
    m = _DIGIT_RANGE_RE.search(cleaned)
    if m:
        candidates.append((m.group(1), m.group(2), None, m.group(3), m.group(4), None))

    for h1, m1, p1, h2, m2, p2 in candidates:
        start_h = _to_24_hour(int(h1), p1)
        end_h = _to_24_hour(int(h2), p2)
        start_m, end_m = int(m1), int(m2)
        if start_h is None or end_h is None:
            continue
        if start_h > 23 or end_h > 23 or start_m > 59 or end_m > 59:
            continue
        return to_12_hour(start_h, start_m), to_12_hour(end_h, end_m)
    return None


def time12_to_minutes(time12: str) -> int:
    """Minutes since midnight for "H:MM AM/PM"; unparsable values sort last."""
    m = _TIME_12_RE.match(time12 or '')
    if not m:
        return 9999
    hour, minute, period = int(m.group(1)), int(m.group(2)), m.group(3).upper()
    if period == 'PM' and hour != 12:
        hour += 12
    if period == 'AM' and hour == 12:
        hour = 0
    return hour * 60 + minute


# ─── rooms ───────────────────────────────────────────────────

def is_room(text: str) -> bool:
    if not text:
        return False
    lower = text.lower().strip()
    if any(keyword in lower for keyword in _ROOM_KEYWORDS):
        return True
    return any(pattern.match(lower) for pattern in _ROOM_CODE_RES)


def normalize_room(text: str) -> str:
    """
    Map room text to a short canonical label.

    "Lecture Room # 05" -> "Room #05", "Computer Lab 10" -> "Lab-10",
    "Main Auditorium" -> "Auditorium". Anything else is returned trimmed.
    """
    raw = (text or '').strip()
    lower = raw.lower()
    if 'auditorium' in lower:
        return "Auditorium"
    if 'main hall' in lower:
        return "Main Hall"

    num = re.search(r'(\d+)', raw)
    if num:
        if 'lab' in lower or 'computer' in lower:
            return f"Lab-{num.group(1)}"
        if 'room' in lower or 'lecture' in lower:
            return f"Room #{num.group(1)}"
    return raw


# ─── sections ────────────────────────────────────────────────

def extract_sections(text: str) -> List[str]:
    """All section codes in the text, upper-cased, de-duplicated in order."""
    if not text:
        return []
    seen = []
    for match in SECTION_RE.finditer(text):
        code = match.group(1).upper()
        if code not in seen:
            seen.append(code)
    return seen


def strip_sections(text: str) -> str:
    """Remove section codes (and the slashes joining them) from text."""
    stripped = SECTION_RE.sub('', text or '')
    stripped = re.sub(r'\(\s*\)|\[\s*\]', '', stripped)
    stripped = re.sub(r'^[\s/,&-]+|[\s/,&-]+$', '', stripped)
    return re.sub(r'\s{2,}', ' ', stripped).strip()


# ─── noise ───────────────────────────────────────────────────

def is_skippable(text: str) -> bool:
    """True for non-lecture boilerplate: empty, floors, breaks, headers and footers."""
    lower = (text or '').lower().strip()
    if not lower:
        return True
    if lower in _NOISE_EXACT or _FLOOR_RE.match(lower):
        return True
    if _BREAK_RE.search(lower) or _PAGE_RE.search(lower):
        return True
    return any(phrase in lower for phrase in _NOISE_PHRASES)
