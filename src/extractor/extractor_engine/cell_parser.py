"""Split one lecture cell into subject, teacher and section codes."""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .classifiers import (
    extract_sections,
    is_room,
    is_skippable,
    is_time_slot,
    recognize_day,
    strip_sections,
)
from .grid import Resolve
from .models import DEFAULT_SUBJECT, DEFAULT_TEACHER

TEACHER_PREFIX_RE = re.compile(r'^(Mr\.?|Ms\.?|Mrs\.?|Dr\.?|Prof\.?|Engr\.?|Sir|Madam)\b', re.IGNORECASE)

# Confidence penalties
SUBJECT_FALLBACK_PENALTY = 0.25
SUBJECT_MISSING_PENALTY = 0.5
TEACHER_FALLBACK_PENALTY = 0.2
TEACHER_MISSING_PENALTY = 0.5


@dataclass
class CellParse:
    subject: str = DEFAULT_SUBJECT
    teacher: str = DEFAULT_TEACHER
    sections: List[str] = field(default_factory=list)
    confidence: float = 1.0


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in re.split(r'[\r\n]+', text or '') if line.strip()]


def is_teacher_line(line: str) -> bool:
    return bool(TEACHER_PREFIX_RE.match(line.strip()))


def is_section_line(line: str) -> bool:
    """True when a line holds nothing but section codes (and separators)."""
    if not extract_sections(line):
        return False
    remainder = re.sub(r'combined', '', strip_sections(line), flags=re.IGNORECASE)
    return len(remainder.strip(' /,&-()')) < 2


def _subject_from_line(line: str) -> Optional[str]:
    cleaned = strip_sections(line)
    return cleaned if len(cleaned) >= 2 else None


def _neighbor_subject(text: str) -> Optional[str]:
    if not text or is_room(text) or is_time_slot(text) or is_skippable(text) or recognize_day(text):
        return None
    for line in split_lines(text):
        if is_teacher_line(line) or is_section_line(line) or is_time_slot(line):
            continue
        return _subject_from_line(line)
    return None


def _neighbor_teacher(text: str) -> Optional[str]:
    lines = split_lines(text)
    if lines and is_teacher_line(lines[0]):
        return lines[0]
    return None


def parse_cell(text: str, resolve: Resolve, row: int, col: int) -> CellParse:
    """
    Disambiguate a lecture cell.

    Lines are classified top to bottom: noise, section-only and time-slot
    lines are skipped; the first line with a teacher title becomes the
    teacher and the first remaining line becomes the subject. Fields not found
    in the cell itself are looked up in neighbouring cells (subject: left,
    then above; teacher: right, then below) at a confidence cost.

    Args:
        text: Raw cell text
        resolve: Cell lookup for the sheet the cell belongs to
        row: Row of the cell
        col: Column of the cell

    Returns:
        CellParse with subject, teacher, section codes and confidence
    """
    result = CellParse(sections=extract_sections(text))
    subject = None
    teacher = None
    penalty = 0.0

    for line in split_lines(text):
        if is_skippable(line) or is_section_line(line) or is_time_slot(line):
            continue
        if is_teacher_line(line):
            if teacher is None:
                teacher = line
        elif subject is None:
            subject = _subject_from_line(line)

    if subject is None:
        for r, c in ((row, col - 1), (row - 1, col)):
            if r < 0 or c < 0:
                continue
            subject = _neighbor_subject(resolve(r, c))
            if subject:
                break
        penalty += SUBJECT_FALLBACK_PENALTY if subject else SUBJECT_MISSING_PENALTY

    if teacher is None:
        for r, c in ((row, col + 1), (row + 1, col)):
            teacher = _neighbor_teacher(resolve(r, c))
            if teacher:
                break
        penalty += TEACHER_FALLBACK_PENALTY if teacher else TEACHER_MISSING_PENALTY

    result.subject = subject or DEFAULT_SUBJECT
    result.teacher = teacher or DEFAULT_TEACHER
    result.confidence = max(0.0, 1.0 - penalty)
    return result
