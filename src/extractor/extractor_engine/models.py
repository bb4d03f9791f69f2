"""Data models for timetable extraction."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum


DEFAULT_SUBJECT = "Unknown Subject"
DEFAULT_TEACHER = "Unknown Teacher"
DEFAULT_ROOM = "Unknown Room"

# Separator used in the display label of a time window
TIME_LABEL_SEPARATOR = " – "


class Weekday(Enum):
    """Enumeration for days of the week."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def order(self) -> int:
        """Position in the week, Monday=0 ... Sunday=6."""
        return _WEEKDAY_ORDER[self]

    @classmethod
    def from_string(cls, day_str: str) -> Optional['Weekday']:
        """
        Recognize a weekday inside free cell text.

        Non-letters are stripped and the text is lower-cased; the weekday is
        matched if the cleaned text *contains* a full day name or a 3-letter
        abbreviation, so "Monday*", "MON." and "Monday (Lab Day)" all match.

        Args:
            day_str: Raw cell text

        Returns:
            Weekday enum or None if not matched
        """
        if not day_str or not isinstance(day_str, str):
            return None

        cleaned = re.sub(r'[^a-z]', '', day_str.lower())
        if not cleaned:
            return None

        for keyword, day in _DAY_KEYWORDS:
            if keyword in cleaned:
                return day
        return None


_WEEKDAY_ORDER = {day: idx for idx, day in enumerate(Weekday)}

# Full names are listed before abbreviations; both map to the same day.
_DAY_KEYWORDS = (
    [(day.value.lower(), day) for day in Weekday]
    + [(day.value.lower()[:3], day) for day in Weekday]
)


@dataclass(frozen=True)
class TimeSlot:
    """A time-slot header discovered in a header-like row."""
    col: int
    raw_text: str
    start_time: str  # canonical 12-hour form, e.g. "8:00 AM"
    end_time: str


@dataclass
class LectureEntry:
    """One scheduled class occurrence for one section, day and time window."""
    day: Weekday
    start_time: str
    end_time: str
    section: str
    subject: str = DEFAULT_SUBJECT
    teacher: str = DEFAULT_TEACHER
    room: str = DEFAULT_ROOM
    confidence: float = 1.0

    @property
    def time(self) -> str:
        """Display label, e.g. "8:00 AM – 9:30 AM"."""
        return f"{self.start_time}{TIME_LABEL_SEPARATOR}{self.end_time}"

    @property
    def dedupe_key(self) -> tuple:
        return (self.section, self.day, self.start_time, self.subject, self.teacher, self.room)

    def to_dict(self) -> Dict[str, object]:
        return {
            'day': self.day.value,
            'time': self.time,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'subject': self.subject,
            'teacher': self.teacher,
            'room': self.room,
            'section': self.section,
            'confidence': round(self.confidence, 4),
        }

    def __str__(self) -> str:
        return f"{self.section} {self.day.value} {self.time}: {self.subject}"


@dataclass
class ParseResult:
    """Candidate output of one layout strategy over one sheet."""
    strategy: str
    sheet_name: str = ""
    entries: List[LectureEntry] = field(default_factory=list)

    @property
    def avg_confidence(self) -> float:
        if not self.entries:
            return 0.0
        return sum(e.confidence for e in self.entries) / len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class SectionInfo:
    """Final per-section view: merged entries plus a time x day grid."""
    entries: List[LectureEntry]
    grid: Dict[str, Dict[str, Dict[str, object]]]
    days: List[str]
    times: List[str]

    def to_dict(self) -> Dict[str, object]:
        return {
            'entries': [entry.to_dict() for entry in self.entries],
            'grid': self.grid,
            'days': list(self.days),
            'times': list(self.times),
        }


@dataclass
class ExtractionResult:
    """Represents the complete extracted timetable for one workbook."""
    section_data: Dict[str, SectionInfo] = field(default_factory=dict)
    available_sections: List[str] = field(default_factory=list)
    total_entries: int = 0
    best_strategy: str = "none"
    avg_confidence: float = 0.0
    section_filter: Optional[str] = None

    # Metadata
    file_path: Optional[str] = None
    sample_cells: List[str] = field(default_factory=list)
    diagnostic: Optional[str] = None
    extraction_timestamp: Optional[str] = None

    @property
    def entries(self) -> List[LectureEntry]:
        """All merged entries across sections, in section order."""
        return [entry for info in self.section_data.values() for entry in info.entries]

    def to_payload(self) -> Dict[str, object]:
        """Build the response payload served by the API and written by the CLI."""
        payload = {
            'success': True,
            'section': self.section_filter or "ALL",
            'sectionData': {sec: info.to_dict() for sec, info in self.section_data.items()},
            'availableSections': list(self.available_sections),
            'totalEntries': self.total_entries,
            'bestStrategy': self.best_strategy,
            'avgConfidence': round(self.avg_confidence, 4),
        }
        if self.diagnostic:
            payload['aiDiagnostic'] = self.diagnostic
        return payload

    def __len__(self) -> int:
        return self.total_entries
