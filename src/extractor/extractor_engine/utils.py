"""Validation and utility functions for timetable processing."""

import re
from pathlib import Path
from typing import List

from .errors import InputError, UnsupportedFileError
from .models import DEFAULT_ROOM, DEFAULT_SUBJECT, DEFAULT_TEACHER, ExtractionResult

SUPPORTED_EXTENSIONS = {'.xlsx', '.xlsm'}


class ValidationError(InputError):
    """Custom exception for validation errors."""
    pass


def validate_file_path(file_path: str, supported_extensions: set = SUPPORTED_EXTENSIONS) -> Path:
    """
    Validate file path and extension.

    Args:
        file_path: Path to validate
        supported_extensions: Set of supported file extensions

    Returns:
        Validated Path object

    Raises:
        ValidationError: If the path does not exist or is not a file
        UnsupportedFileError: If the extension is not supported
    """
    path = Path(file_path)

    if not path.exists():
        raise ValidationError(f"File not found: {path}")

    if not path.is_file():
        raise ValidationError(f"Path is not a file: {path}")

    if path.suffix.lower() not in supported_extensions:
        raise UnsupportedFileError(
            f"Unsupported file format: {path.suffix}. "
            f"Supported formats: {', '.join(sorted(supported_extensions))}"
        )

    return path


def validate_result(result: ExtractionResult) -> List[str]:
    """
    Validate an extraction result and return warnings.

    Args:
        result: ExtractionResult to validate

    Returns:
        List of validation warning messages
    """
    warnings = []
    entries = result.entries

    # Check if any entries were extracted
    if not entries:
        if result.section_filter:
            warnings.append(f"No timetable entries were extracted for section {result.section_filter}")
        else:
            warnings.append("No timetable entries were extracted")
        return warnings

    unknown_subjects = sum(1 for e in entries if e.subject == DEFAULT_SUBJECT)
    if unknown_subjects > 0:
        warnings.append(f"{unknown_subjects} entries missing subject information")

    unknown_teachers = sum(1 for e in entries if e.teacher == DEFAULT_TEACHER)
    if unknown_teachers > 0:
        warnings.append(f"{unknown_teachers} entries missing teacher information")

    unknown_rooms = sum(1 for e in entries if e.room == DEFAULT_ROOM)
    if unknown_rooms > 0:
        warnings.append(f"{unknown_rooms} entries missing room information")

    # Check for entries with low confidence
    low_confidence = sum(1 for e in entries if e.confidence < 0.5)
    if low_confidence > 0:
        warnings.append(f"{low_confidence} entries have low confidence (< 50%)")

    return warnings


def sanitize_text(text: str) -> str:
    """Collapse whitespace (line breaks and non-breaking spaces included) to single spaces."""
    if not text:
        return ""
    text = text.replace('\x00', '')
    return re.sub(r'\s+', ' ', text).strip()


def format_confidence_report(result: ExtractionResult) -> str:
    """
    Generate a confidence report for the extracted timetable.

    Args:
        result: ExtractionResult to analyze

    Returns:
        Formatted report string
    """
    scores = [e.confidence for e in result.entries]
    if not scores:
        return "No entries to analyze"

    high = sum(1 for s in scores if s >= 0.8)
    medium = sum(1 for s in scores if 0.5 <= s < 0.8)
    low = len(scores) - high - medium

    lines = [
        "Confidence Report:",
        f"  Strategy: {result.best_strategy}",
        f"  Average: {sum(scores) / len(scores):.2%}",
        f"  Range: {min(scores):.2%} - {max(scores):.2%}",
        "",
        "  Distribution:",
        f"    High (≥80%): {high} entries",
        f"    Medium (50-80%): {medium} entries",
        f"    Low (<50%): {low} entries",
    ]

    if len(result.section_data) > 1:
        lines += ["", "  Per section:"]
        for section, info in result.section_data.items():
            section_scores = [e.confidence for e in info.entries]
            lines.append(f"    {section}: {sum(section_scores) / len(section_scores):.2%}")

    return "\n".join(lines)


def is_supported_file(file_path: str) -> bool:
    """
    Quick check if file is supported.

    Args:
        file_path: Path to check

    Returns:
        True if file extension is supported
    """
    return Path(file_path).suffix.lower() in SUPPORTED_EXTENSIONS
