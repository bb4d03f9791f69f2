"""Command-line entry point for the extraction engine."""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .config import get_config
from .database import archive_result, create_tables, get_db_engine
from .diagnostic import get_diagnostic
from .errors import ExtractionError
from .log_config import setup_logging
from .main import process_timetable, save_to_json
from .models import ExtractionResult
from .utils import format_confidence_report, validate_file_path, validate_result

USAGE = """\
Usage: timetable-extract <file_path> [options]

Arguments:
  file_path            Path to timetable workbook (required)

Options:
  --section CODE       Only output this section, e.g. BSSE-4C
  --output PATH        Output JSON file (default: <name>_extracted.json)
  --db [PATH]          Also archive the result into this SQLite file
                       (default: DB_PATH setting)
  --diagnostic         Ask the diagnostic service for commentary

Supported formats: XLSX, XLSM

Examples:
  timetable-extract timetable.xlsx
  timetable-extract timetable.xlsx --section BSSE-4C --output bsse.json
"""


def _option(argv: List[str], name: str) -> Optional[str]:
    if name not in argv:
        return None
    idx = argv.index(name)
    if idx + 1 < len(argv) and not argv[idx + 1].startswith('--'):
        return argv[idx + 1]
    return None


def _print_summary(result: ExtractionResult) -> None:
    """Print a summary of the extracted timetable."""
    print(f"  Strategy: {result.best_strategy} (avg confidence: {result.avg_confidence:.2%})")
    print(f"  Sections found: {', '.join(result.available_sections) or 'none'}")
    print(f"\n  Total Entries: {result.total_entries}")

    for section, info in result.section_data.items():
        print(f"\n  {section}: {len(info.entries)} classes on {', '.join(info.days)}")
        for entry in info.entries[:3]:
            subject = entry.subject[:40] + "..." if len(entry.subject) > 40 else entry.subject
            print(f"    {entry.day.value} | {entry.time} | {subject} | {entry.room}")
        if len(info.entries) > 3:
            print(f"    ... and {len(info.entries) - 3} more entries")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command-line execution."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0].startswith('-'):
        print(USAGE)
        return 1

    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    file_path = argv[0]
    section = _option(argv, '--section')
    output_path = _option(argv, '--output') or Path(file_path).stem + "_extracted.json"
    db_path = _option(argv, '--db')
    if db_path is None and '--db' in argv:
        db_path = config.db_path

    try:
        path = validate_file_path(file_path)
        print(f"▶ Processing Timetable: {path.name}")
        result = process_timetable(path, section=section, config=config)
    except ExtractionError as e:
        print(f"\n✗ Error: {e}")
        return 1

    if '--diagnostic' in argv:
        result.diagnostic = asyncio.run(
            get_diagnostic(result.sample_cells, result.total_entries, result.available_sections, config=config)
        )

    print("\n" + "=" * 70)
    print("EXTRACTION SUMMARY")
    print("=" * 70)
    _print_summary(result)

    warnings = validate_result(result)
    if warnings:
        print("\n" + "=" * 70)
        print("VALIDATION WARNINGS")
        print("=" * 70)
        for warning in warnings:
            print(f"⚠ {warning}")

    print("\n" + "=" * 70)
    print("CONFIDENCE ANALYSIS")
    print("=" * 70)
    print(format_confidence_report(result))

    if result.diagnostic:
        print("\n" + "=" * 70)
        print("DIAGNOSTIC")
        print("=" * 70)
        print(result.diagnostic)

    save_to_json(result, output_path)
    print(f"\n✓ Saved to: {output_path}")

    if db_path:
        engine = get_db_engine(db_path)
        create_tables(engine)
        source_id = archive_result(engine, result)
        print(f"✓ Archived as source #{source_id} in {db_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
