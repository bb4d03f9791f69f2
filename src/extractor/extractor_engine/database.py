"""Database setup and models for archiving extraction runs."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Session

from .models import ExtractionResult


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class WorkbookSource(Base):
    """Represents one processed workbook."""
    __tablename__ = "workbook_sources"

    id = Column(Integer, primary_key=True)
    file_path = Column(String(500), nullable=False)
    processed_at = Column(DateTime, nullable=True)
    best_strategy = Column(String(50), nullable=False)
    avg_confidence = Column(Float, nullable=False, default=0.0)
    section_filter = Column(String(20), nullable=True)


class ExtractedLecture(Base):
    """Represents a single merged lecture entry of one section."""
    __tablename__ = "extracted_lectures"

    id = Column(Integer, primary_key=True)
    source_id = Column(Integer, ForeignKey("workbook_sources.id"), nullable=False)
    section = Column(String(20), nullable=False)
    day = Column(String(20), nullable=False)
    start_time = Column(String(20), nullable=False)
    end_time = Column(String(20), nullable=False)
    subject = Column(String(200), nullable=False)
    teacher = Column(String(200), nullable=False)
    room = Column(String(100), nullable=False)
    confidence = Column(Float, nullable=False)


def get_db_engine(db_path: str = "timetable.sqlite"):
    """
    Create and return a SQLAlchemy Engine connected to SQLite database.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        sqlalchemy.Engine: Database engine instance
    """
    full_db_path = Path(db_path).expanduser().absolute()
    full_db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{full_db_path}", echo=False)


def create_tables(engine) -> None:
    """
    Create all database tables defined in Base.metadata.

    Args:
        engine: SQLAlchemy Engine instance
    """
    Base.metadata.create_all(engine)


def archive_result(engine, result: ExtractionResult, file_path: Optional[str] = None) -> int:
    """
    Store a finished extraction and return the new workbook source id.

    Args:
        engine: SQLAlchemy Engine instance
        result: ExtractionResult to archive
        file_path: Source path, defaults to result.file_path

    Returns:
        Primary key of the WorkbookSource row
    """
    with Session(engine) as session:
        source = WorkbookSource(
            file_path=str(file_path or result.file_path or ""),
            processed_at=datetime.now(timezone.utc),
            best_strategy=result.best_strategy,
            avg_confidence=result.avg_confidence,
            section_filter=result.section_filter,
        )
        session.add(source)
        session.flush()
        source_id = source.id

        for entry in result.entries:
            session.add(
                ExtractedLecture(
                    source_id=source_id,
                    section=entry.section,
                    day=entry.day.value,
                    start_time=entry.start_time,
                    end_time=entry.end_time,
                    subject=entry.subject,
                    teacher=entry.teacher,
                    room=entry.room,
                    confidence=entry.confidence,
                )
            )

        session.commit()
        return source_id
