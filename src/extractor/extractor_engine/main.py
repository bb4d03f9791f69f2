"""Core execution logic for the extraction engine."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .config import EngineConfig, get_config
from .grid import SheetGrid
from .log_config import get_logger
from .models import ExtractionResult
from .postprocess import build_section_data, deduplicate, filter_section, sort_entries
from .preprocessor import WorkbookPreprocessor
from .table_detector import TableDetector, collect_sections

log = get_logger(__name__)


def normalize_section_filter(section: Optional[str]) -> Optional[str]:
    """Trim and upper-case a requested section; blank means no filter."""
    if section is None:
        return None
    section = section.strip().upper()
    return section or None


def extract_timetable(
    sheets: Sequence[SheetGrid],
    section: Optional[str] = None,
    max_workers: int = 1,
) -> ExtractionResult:
    """
    Run detection and post-processing over already loaded sheets.

    Args:
        sheets: Every sheet of the workbook
        section: Optional section code to restrict the output to
        max_workers: Thread pool size for the strategy scans

    Returns:
        ExtractionResult; an empty result (zero entries) is not an error
    """
    section = normalize_section_filter(section)
    detector = TableDetector(max_workers=max_workers)
    candidates = detector.run_all(sheets)
    best = detector.choose(candidates)

    entries = sort_entries(deduplicate(best.entries))
    # every tab's codes stay requestable, not only the winner's
    available: List[str] = collect_sections(candidates)
    filtered = filter_section(entries, section)
    shown = [section] if section else available

    result = ExtractionResult(
        section_data=build_section_data(filtered, shown),
        available_sections=available,
        total_entries=len(filtered),
        best_strategy=best.strategy,
        avg_confidence=best.avg_confidence,
        section_filter=section,
        extraction_timestamp=datetime.now(timezone.utc).isoformat(),
    )
    log.info(
        "timetable_extracted",
        strategy=result.best_strategy,
        sections=len(available),
        total_entries=result.total_entries,
        section_filter=section or "ALL",
    )
    return result


def process_timetable(
    source: Union[str, Path, bytes],
    section: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> ExtractionResult:
    """
    Process one workbook and extract the per-section timetable.

    Args:
        source: Path to a .xlsx/.xlsm file or its raw bytes
        section: Optional section code filter (case-insensitive)
        config: Engine configuration (defaults to the singleton)

    Returns:
        ExtractionResult with sample cells attached for diagnostics

    Raises:
        MissingInputError: If no workbook bytes were provided
        MalformedWorkbookError: If the workbook cannot be read
    """
    config = config or get_config()
    preprocessor = WorkbookPreprocessor()
    sheets = preprocessor.process(source)

    result = extract_timetable(sheets, section=section, max_workers=config.max_workers)
    result.sample_cells = preprocessor.sample_cells(sheets, config.diagnostic_sample_cells)
    if isinstance(source, (str, Path)):
        result.file_path = str(Path(source).absolute())
    return result


def save_to_json(result: ExtractionResult, output_path: str) -> None:
    """
    Save extracted timetable data to JSON file.

    Args:
        result: ExtractionResult to save
        output_path: Path to output JSON file
    """
    data = result.to_payload()
    data['metadata'] = {
        'file_path': result.file_path,
        'extraction_timestamp': result.extraction_timestamp,
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
