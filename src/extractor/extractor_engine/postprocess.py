"""Post-processing: dedupe, sort, filter, merge back-to-back classes, build grids."""

from dataclasses import replace
from typing import Dict, List, Optional

from .classifiers import time12_to_minutes
from .models import LectureEntry, SectionInfo, TIME_LABEL_SEPARATOR


def deduplicate(entries: List[LectureEntry]) -> List[LectureEntry]:
    """Drop repeats of section|day|start|subject|teacher|room; first occurrence wins."""
    seen = set()
    unique = []
    for entry in entries:
        key = entry.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def _sort_key(entry: LectureEntry):
    return entry.day.order, time12_to_minutes(entry.start_time)


def sort_entries(entries: List[LectureEntry]) -> List[LectureEntry]:
    """Weekday order first, then start time in minutes. Stable."""
    return sorted(entries, key=_sort_key)


def filter_section(entries: List[LectureEntry], section: Optional[str]) -> List[LectureEntry]:
    if not section:
        return list(entries)
    return [entry for entry in entries if entry.section == section]


def merge_consecutive(entries: List[LectureEntry]) -> List[LectureEntry]:
    """
    Merge back-to-back entries of the same class.

    Entries must already be sorted. Two neighbours merge when section, day,
    subject, teacher and room match and the first ends exactly when the second
    starts; the merged entry keeps the lower confidence.

    Args:
        entries: Sorted entries, typically for one section

    Returns:
        New list of merged entries; the input is left untouched
    """
    if not entries:
        return []

    merged: List[LectureEntry] = []
    current = replace(entries[0])
    for nxt in entries[1:]:
        same_class = (
            current.section == nxt.section
            and current.day == nxt.day
            and current.subject == nxt.subject
            and current.teacher == nxt.teacher
            and current.room == nxt.room
        )
        back_to_back = time12_to_minutes(current.end_time) == time12_to_minutes(nxt.start_time)
        if same_class and back_to_back:
            current.end_time = nxt.end_time
            current.confidence = min(current.confidence, nxt.confidence)
        else:
            merged.append(current)
            current = replace(nxt)
    merged.append(current)
    return merged


def _label_minutes(label: str):
    start, _, end = label.partition(TIME_LABEL_SEPARATOR)
    return time12_to_minutes(start), time12_to_minutes(end)


def build_section_info(entries: List[LectureEntry]) -> SectionInfo:
    """Merge one section's sorted entries and derive its days, times and grid."""
    merged = merge_consecutive(entries)

    days = sorted({entry.day for entry in merged}, key=lambda day: day.order)
    times = sorted({entry.time for entry in merged}, key=_label_minutes)

    grid: Dict[str, Dict[str, Dict[str, object]]] = {}
    for label in times:
        grid[label] = {}
        for day in days:
            match = next((e for e in merged if e.day == day and e.time == label), None)
            if match is not None:
                grid[label][day.value] = {
                    'subject': match.subject,
                    'teacher': match.teacher,
                    'room': match.room,
                    'confidence': round(match.confidence, 4),
                }

    return SectionInfo(entries=merged, grid=grid, days=[day.value for day in days], times=times)


def build_section_data(
    entries: List[LectureEntry],
    sections: List[str],
) -> Dict[str, SectionInfo]:
    """Partition filtered, sorted entries by section; sections without entries are omitted."""
    section_data: Dict[str, SectionInfo] = {}
    for section in sections:
        section_entries = [entry for entry in entries if entry.section == section]
        if section_entries:
            section_data[section] = build_section_info(section_entries)
    return section_data
