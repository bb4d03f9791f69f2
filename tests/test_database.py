from sqlalchemy import select
from sqlalchemy.orm import Session

from extractor_engine.database import (
    ExtractedLecture,
    WorkbookSource,
    archive_result,
    create_tables,
    get_db_engine,
)
from extractor_engine.main import extract_timetable


def test_archive_round_trip(tmp_path, round_trip_sheet):
    engine = get_db_engine(str(tmp_path / "archive" / "runs.sqlite"))
    create_tables(engine)
    assert (tmp_path / "archive").is_dir()

    result = extract_timetable([round_trip_sheet])
    source_id = archive_result(engine, result, file_path="timetable.xlsx")

    with Session(engine) as session:
        source = session.get(WorkbookSource, source_id)
        assert source.file_path == "timetable.xlsx"
        assert source.best_strategy == "room_rows"

        lectures = session.scalars(
            select(ExtractedLecture).where(ExtractedLecture.source_id == source_id)
        ).all()
        assert len(lectures) == 1
        assert lectures[0].section == "BSSE-4C"
        assert lectures[0].day == "Monday"
        assert lectures[0].room == "Room #5"


def test_each_run_gets_its_own_source(tmp_path, round_trip_sheet):
    engine = get_db_engine(str(tmp_path / "runs.sqlite"))
    create_tables(engine)
    result = extract_timetable([round_trip_sheet])

    first = archive_result(engine, result)
    second = archive_result(engine, result)
    assert second != first

    with Session(engine) as session:
        assert len(session.scalars(select(ExtractedLecture)).all()) == 2
