"""Heuristic spreadsheet and clipboard ingestion for quotes."""

from .orchestrator import IngestionOptions, parse_clipboard_paste, parse_quote_info_grid, parse_workbook
from .results import ParsedResult, PasteResult
from .section_scanner import ScanLimits

__all__ = [
    "IngestionOptions",
    "ParsedResult",
    "PasteResult",
    "ScanLimits",
    "parse_clipboard_paste",
    "parse_quote_info_grid",
    "parse_workbook",
]
