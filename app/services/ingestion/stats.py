"""
Row-based ingestion statistics for one sheet or paste.
Every visited row is committed exactly once, so counts never overlap.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Set

EXTRACTED = "EXTRACTED"
CORRECTED = "CORRECTED"
SKIPPED = "SKIPPED"


@dataclass
class RowDecision:
    """
    What happened to a single row.

    Attributes:
        status: EXTRACTED, CORRECTED (extracted with a fix-up) or SKIPPED
        reasons: reason codes, e.g. "blank", "header_repeat", "quantity_clamped"
    """
    status: str = EXTRACTED
    reasons: Set[str] = field(default_factory=set)

    def add_reason(self, reason: str) -> None:
        self.reasons.add(reason)

    @property
    def is_kept(self) -> bool:
        return self.status in (EXTRACTED, CORRECTED)


class IngestionStats:
    """Tallies row decisions for one source (sheet name or "clipboard")."""

    def __init__(self, source: str):
        self.source = source
        self.rows_total = 0
        self.rows_extracted = 0
        self.rows_corrected = 0
        self.rows_skipped = 0
        self.reason_counts: Counter = Counter()

    def commit_row(self, decision: RowDecision) -> None:
        self.rows_total += 1
        if decision.status == EXTRACTED:
            self.rows_extracted += 1
        elif decision.status == CORRECTED:
            self.rows_extracted += 1
            self.rows_corrected += 1
        else:
            self.rows_skipped += 1
        for reason in decision.reasons:
            self.reason_counts[reason] += 1

    def skip(self, reason: str) -> None:
        """Shorthand for committing a skipped row with one reason."""
        self.commit_row(RowDecision(status=SKIPPED, reasons={reason}))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "source": self.source,
            "rows_total": self.rows_total,
            "rows_extracted": self.rows_extracted,
            "rows_corrected": self.rows_corrected,
            "rows_skipped": self.rows_skipped,
        }
        for reason, count in sorted(self.reason_counts.items()):
            result[f"reason_{reason}"] = count
        return result

    def __repr__(self) -> str:
        return (
            f"IngestionStats(source={self.source!r}, total={self.rows_total}, "
            f"extracted={self.rows_extracted}, corrected={self.rows_corrected}, "
            f"skipped={self.rows_skipped})"
        )
