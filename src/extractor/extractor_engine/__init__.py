"""Extraction engine for spreadsheet timetables."""

__version__ = "0.1.0"

from .main import extract_timetable, process_timetable, save_to_json
from .models import ExtractionResult, LectureEntry, ParseResult, SectionInfo, TimeSlot, Weekday
from .grid import CellResolver, MergeRange, SheetGrid
from .preprocessor import WorkbookPreprocessor
from .table_detector import TableDetector, select_best
from .cell_parser import parse_cell
from .utils import validate_result, is_supported_file

__all__ = [
    'extract_timetable',
    'process_timetable',
    'save_to_json',
    'ExtractionResult',
    'LectureEntry',
    'ParseResult',
    'SectionInfo',
    'TimeSlot',
    'Weekday',
    'CellResolver',
    'MergeRange',
    'SheetGrid',
    'WorkbookPreprocessor',
    'TableDetector',
    'select_best',
    'parse_cell',
    'validate_result',
    'is_supported_file',
]
