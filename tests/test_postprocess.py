from extractor_engine.models import LectureEntry, Weekday
from extractor_engine.postprocess import (
    build_section_data,
    build_section_info,
    deduplicate,
    filter_section,
    merge_consecutive,
    sort_entries,
)


def entry(day, start, end, section="BSSE-4C", subject="Data Structures", confidence=1.0, room="Room #5"):
    return LectureEntry(
        day=day,
        start_time=start,
        end_time=end,
        section=section,
        subject=subject,
        teacher="Mr. Ahmed Khan",
        room=room,
        confidence=confidence,
    )


def test_deduplicate_keeps_first_occurrence():
    a = entry(Weekday.MONDAY, "8:00 AM", "9:30 AM", confidence=0.9)
    b = entry(Weekday.MONDAY, "8:00 AM", "9:30 AM", confidence=0.4)
    c = entry(Weekday.MONDAY, "8:00 AM", "9:30 AM", section="BSAI-7A")
    assert deduplicate([a, b, c]) == [a, c]


def test_sort_by_weekday_then_start_minutes():
    late = entry(Weekday.MONDAY, "1:30 PM", "3:00 PM")
    early = entry(Weekday.MONDAY, "9:30 AM", "11:00 AM")
    tuesday = entry(Weekday.TUESDAY, "8:00 AM", "9:30 AM")
    noon = entry(Weekday.MONDAY, "12:00 PM", "1:30 PM")
    assert sort_entries([tuesday, late, noon, early]) == [early, noon, late, tuesday]


def test_filter_section():
    a = entry(Weekday.MONDAY, "8:00 AM", "9:30 AM")
    b = entry(Weekday.MONDAY, "8:00 AM", "9:30 AM", section="BSAI-7A")
    assert filter_section([a, b], "BSAI-7A") == [b]
    assert filter_section([a, b], None) == [a, b]


def test_merge_back_to_back_lectures():
    first = entry(Weekday.MONDAY, "8:00 AM", "9:30 AM", confidence=0.9)
    second = entry(Weekday.MONDAY, "9:30 AM", "11:00 AM", confidence=0.6)
    merged = merge_consecutive([first, second])
    assert len(merged) == 1
    assert (merged[0].start_time, merged[0].end_time) == ("8:00 AM", "11:00 AM")
    assert merged[0].confidence == 0.6
    # inputs are not mutated
    assert first.end_time == "9:30 AM"


def test_merge_requires_gapless_identical_class():
    gap = [
        entry(Weekday.MONDAY, "8:00 AM", "9:30 AM"),
        entry(Weekday.MONDAY, "9:45 AM", "11:00 AM"),
    ]
    assert len(merge_consecutive(gap)) == 2

    other_room = [
        entry(Weekday.MONDAY, "8:00 AM", "9:30 AM"),
        entry(Weekday.MONDAY, "9:30 AM", "11:00 AM", room="Lab-2"),
    ]
    assert len(merge_consecutive(other_room)) == 2


def test_merge_chains_three_slots():
    chain = [
        entry(Weekday.MONDAY, "8:00 AM", "9:30 AM"),
        entry(Weekday.MONDAY, "9:30 AM", "11:00 AM"),
        entry(Weekday.MONDAY, "11:00 AM", "12:30 PM"),
    ]
    merged = merge_consecutive(chain)
    assert [(e.start_time, e.end_time) for e in merged] == [("8:00 AM", "12:30 PM")]


def test_section_info_grid():
    entries = sort_entries([
        entry(Weekday.WEDNESDAY, "8:00 AM", "9:30 AM", subject="Calculus"),
        entry(Weekday.MONDAY, "8:00 AM", "9:30 AM"),
        entry(Weekday.MONDAY, "11:00 AM", "12:30 PM", subject="OOP"),
    ])
    info = build_section_info(entries)

    assert info.days == ["Monday", "Wednesday"]
    assert info.times == ["8:00 AM – 9:30 AM", "11:00 AM – 12:30 PM"]
    assert info.grid["8:00 AM – 9:30 AM"]["Wednesday"]["subject"] == "Calculus"
    assert info.grid["11:00 AM – 12:30 PM"] == {
        "Monday": {"subject": "OOP", "teacher": "Mr. Ahmed Khan", "room": "Room #5", "confidence": 1.0},
    }


def test_times_with_same_start_order_by_end():
    entries = [
        entry(Weekday.MONDAY, "8:00 AM", "9:30 AM"),
        entry(Weekday.TUESDAY, "8:00 AM", "11:00 AM", subject="Lab Work"),
    ]
    assert build_section_info(entries).times == ["8:00 AM – 9:30 AM", "8:00 AM – 11:00 AM"]


def test_section_data_omits_empty_sections():
    entries = [entry(Weekday.MONDAY, "8:00 AM", "9:30 AM")]
    data = build_section_data(entries, ["BSSE-4C", "BSAI-7A"])
    assert list(data) == ["BSSE-4C"]
