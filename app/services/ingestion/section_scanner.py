"""
Section scanning for BOM and cost sheets.

A BOM sheet is searched for "📦 GROUP n: name" banners, each anchored by
a header row a few rows below it. Without banners, the first header row
near the top turns the whole sheet into one implicit group. Every row of
a section is then classified, and data rows are built into records.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from app.core.logging import get_logger
from app.services.ingestion.column_mapper import ColumnMap, map_bom_columns, map_cost_columns
from app.services.ingestion.grid import SheetRow
from app.services.ingestion.record_builder import build_bom_record, build_cost_record
from app.services.ingestion.row_classifier import (
    DEFAULT_LONG_WORD_LENGTH,
    RowKind,
    is_primary_header,
    match_group_label,
    workbook_classifier,
)
from app.services.ingestion.stats import IngestionStats
from app.ui.viewmodels import BomGroup, BomItem, CostItem

logger = get_logger(__name__)

IMPLICIT_GROUP_NAME = "Imported Items"


@dataclass(frozen=True)
class ScanLimits:
    """How far the scanner looks for headers."""
    header_scan_rows: int = 25
    group_header_lookahead: int = 4
    cost_header_scan_rows: int = 5
    long_word_length: int = DEFAULT_LONG_WORD_LENGTH

    @classmethod
    def from_settings(cls, config: Any) -> "ScanLimits":
        return cls(
            header_scan_rows=config.INGEST_HEADER_SCAN_ROWS,
            group_header_lookahead=config.INGEST_GROUP_HEADER_LOOKAHEAD,
            cost_header_scan_rows=config.INGEST_COST_HEADER_SCAN_ROWS,
            long_word_length=config.INGEST_LONG_WORD_LENGTH,
        )


@dataclass
class BomSection:
    """One group of BOM rows: its banner, header and extent."""
    ordinal: int
    name: str
    label_row: Optional[int]  # None for the implicit whole-sheet group
    header_row: int
    headers: List[str]
    columns: ColumnMap
    end_row: int = 0  # exclusive

    @property
    def label(self) -> str:
        return f"BOM {self.ordinal}"


@dataclass
class SheetScan:
    """Outcome of scanning one sheet."""
    header_found: bool = False
    groups: List[BomGroup] = field(default_factory=list)
    cost_items: List[CostItem] = field(default_factory=list)

    @property
    def bom_items(self) -> List[BomItem]:
        return [item for group in self.groups for item in group.items]


def _find_header(rows: List[SheetRow], start: int, stop: int) -> Optional[SheetRow]:
    for row in rows[start:stop]:
        if is_primary_header(row):
            return row
    return None


def find_bom_sections(rows: List[SheetRow], limits: ScanLimits = ScanLimits()) -> List[BomSection]:
    """
    Locate BOM sections and their header rows.

    Banner search first; only a sheet with no usable banner anywhere falls
    back to a single implicit group anchored by the first header row.
    """
    sections: List[BomSection] = []

    for row in rows:
        label = match_group_label(row)
        if label is None:
            continue
        ordinal, name = label
        stop = min(row.index + 1 + limits.group_header_lookahead, len(rows))
        header = _find_header(rows, row.index + 1, stop)
        if header is None:
            logger.debug(f"Group banner on row {row.number} has no header within {limits.group_header_lookahead} rows")
            continue
        sections.append(BomSection(
            ordinal=ordinal,
            name=name,
            label_row=row.index,
            header_row=header.index,
            headers=header.texts(),
            columns=map_bom_columns(header.cells),
        ))

    if not sections:
        header = _find_header(rows, 0, min(len(rows), limits.header_scan_rows))
        if header is not None:
            sections.append(BomSection(
                ordinal=1,
                name=IMPLICIT_GROUP_NAME,
                label_row=None,
                header_row=header.index,
                headers=header.texts(),
                columns=map_bom_columns(header.cells),
            ))

    for position, section in enumerate(sections):
        if position + 1 < len(sections):
            section.end_row = sections[position + 1].label_row or len(rows)
        else:
            section.end_row = len(rows)

    return sections


def scan_bom_sheet(
    rows: List[SheetRow],
    warnings: List[str],
    stats: IngestionStats,
    validate: bool = True,
    limits: ScanLimits = ScanLimits(),
) -> SheetScan:
    """Partition a BOM sheet into groups of built items."""
    scan = SheetScan()
    sections = find_bom_sections(rows, limits)
    if not sections:
        return scan
    scan.header_found = True

    classifier = workbook_classifier(limits.long_word_length)

    for position, section in enumerate(sections, start=1):
        section_classifier = classifier.for_header(section.headers)
        items: List[BomItem] = []

        for row in rows[section.header_row + 1:section.end_row]:
            if row.is_blank:
                stats.skip("blank")
                continue

            verdict = section_classifier.classify(row)
            if verdict.kind is not RowKind.DATA:
                warnings.append(f"Row {row.number}: Skipped non-data row")
                logger.debug(f"Row {row.number} classified {verdict.kind.value} by rule '{verdict.rule}'")
                stats.skip(verdict.rule or verdict.kind.value)
                continue

            item, decision = build_bom_record(row, section.columns, warnings, validate)
            stats.commit_row(decision)
            if item is None:
                continue
            item.no = len(items) + 1
            items.append(item)

        if not items:
            logger.debug(f"Dropping empty group '{section.name}'")
            continue

        scan.groups.append(BomGroup(
            id=f"bom-{position}",
            name=section.label,
            title=section.name,
            items=items,
        ))

    return scan


def find_cost_header(rows: List[SheetRow], limits: ScanLimits = ScanLimits()) -> Optional[SheetRow]:
    """Header row of a cost sheet: product description plus a price column."""
    for row in rows[:limits.cost_header_scan_rows]:
        text = row.joined_text
        if "product description" in text and ("unit price" in text or "total price" in text):
            return row
    return None


def scan_cost_sheet(
    rows: List[SheetRow],
    warnings: List[str],
    stats: IngestionStats,
    validate: bool = True,
    limits: ScanLimits = ScanLimits(),
) -> SheetScan:
    """Build cost lines from every data row below the cost header."""
    scan = SheetScan()
    header = find_cost_header(rows, limits)
    if header is None:
        return scan
    scan.header_found = True

    columns = map_cost_columns(header.cells)
    classifier = workbook_classifier(limits.long_word_length).for_header(header.texts())

    for row in rows[header.index + 1:]:
        if row.is_blank:
            stats.skip("blank")
            continue

        verdict = classifier.classify(row)
        if verdict.kind is not RowKind.DATA:
            warnings.append(f"Row {row.number}: Skipped non-data row")
            stats.skip(verdict.rule or verdict.kind.value)
            continue

        item, decision = build_cost_record(row, columns, warnings, validate)
        stats.commit_row(decision)
        if item is not None:
            scan.cost_items.append(item)

    return scan


def bom_group_summary(groups: List[BomGroup]) -> List[Tuple[str, int]]:
    """(name, item count) per group, for logging."""
    return [(group.name, len(group.items)) for group in groups]
