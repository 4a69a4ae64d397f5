"""
Decodes uploaded spreadsheets into plain grids for the ingestion core.

xlsx/xlsm files are read with openpyxl (cached formula values, not
formulas); csv files with pandas. Each sheet becomes a list of rows of
raw cell values, with trailing empty cells trimmed and dates rendered as
ISO strings.
"""
import io
from collections import OrderedDict
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd
from openpyxl import load_workbook

from app.core.logging import get_logger

logger = get_logger(__name__)

EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}
CSV_EXTENSIONS = {".csv", ".txt"}
CSV_ENCODINGS = ("utf-8-sig", "cp1252", "latin1")

Sheets = Dict[str, List[List[Any]]]


class WorkbookReadError(ValueError):
    """The upload could not be decoded as a spreadsheet."""


def _normalize_cell(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return value


def _trim_row(values: List[Any]) -> List[Any]:
    row = [_normalize_cell(v) for v in values]
    while row and (row[-1] is None or row[-1] == ""):
        row.pop()
    return row


def read_excel_bytes(content: bytes) -> Sheets:
    """All sheets of an xlsx workbook, in workbook order."""
    try:
        workbook = load_workbook(io.BytesIO(content), data_only=True, read_only=True)
    except Exception as e:
        raise WorkbookReadError(f"Unable to read Excel file: {e}") from e

    sheets: Sheets = OrderedDict()
    try:
        for worksheet in workbook.worksheets:
            sheets[worksheet.title] = [_trim_row(list(row)) for row in worksheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

    logger.info(f"Read workbook with sheets {list(sheets.keys())}")
    return sheets


def read_csv_bytes(content: bytes, sheet_name: str = "Sheet1") -> Sheets:
    """A csv file as a single-sheet workbook; encodings tried in order."""
    frame = None
    for encoding in CSV_ENCODINGS:
        try:
            frame = pd.read_csv(
                io.BytesIO(content),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                encoding=encoding,
            )
            break
        except UnicodeDecodeError:
            continue
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise WorkbookReadError(f"Unable to read CSV file: {e}") from e

    if frame is None:
        raise WorkbookReadError("Unable to decode CSV file")

    rows = [_trim_row(list(values)) for values in frame.itertuples(index=False, name=None)]
    return OrderedDict([(sheet_name, rows)])


def read_workbook(content: bytes, filename: str) -> Sheets:
    """
    Decode an upload by its file extension.

    Raises:
        WorkbookReadError: unsupported extension, empty or corrupt file
    """
    if not content:
        raise WorkbookReadError("Uploaded file is empty")

    extension = Path(filename or "").suffix.lower()
    if extension in EXCEL_EXTENSIONS:
        return read_excel_bytes(content)
    if extension in CSV_EXTENSIONS:
        return read_csv_bytes(content, sheet_name=Path(filename).stem or "Sheet1")
    raise WorkbookReadError(f"Unsupported file type '{extension or filename}'. Upload an .xlsx or .csv file")


def read_workbook_path(path: Union[str, Path]) -> Sheets:
    """Decode a spreadsheet from disk."""
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise WorkbookReadError(f"Unable to open {path}: {e}") from e
    return read_workbook(content, path.name)
