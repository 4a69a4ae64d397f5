"""
Row classification for spreadsheet and clipboard ingestion.

Classification is an ordered table of named rules. The first rule whose
predicate matches decides the row's kind; rows that match nothing are
data. Ambiguous rows lean toward NOISE: a dropped row is reported as a
warning, a fabricated one silently corrupts a total.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from app.services.ingestion.grid import SheetRow
from app.services.ingestion.value_coercion import parse_leading_int

GROUP_MARKER = "📦"
GROUP_LABEL_PATTERN = re.compile(r"📦\s*GROUP\s*(\d+):\s*(.+)", re.IGNORECASE)

# Glyphs the template uses for banners and tips
DECORATIVE_GLYPHS = ("📦", "🔧", "💻", "📋", "💡", "📊", "⚡", "🔽")

HEADER_KEYWORDS = (
    "part number",
    "product description",
    "qty",
    "quantity",
    "unit price",
    "total price",
    "no.",
)

INSTRUCTION_MARKERS = (
    "===",
    "how to use",
    "column order",
    "note:",
    "notes:",
    "example",
    "template",
    "instructions",
    "enter your",
    "add items",
    "please",
    "sample",
    "total:",
    "subtotal",
    "copy and paste",
    "multiple bom groups",
    "manufacturer part",
    "detailed product",
    "quantity needed",
    "price per unit",
)

PRODUCT_CODE_PATTERN = re.compile(r"\w{3,}-\w")
DIGIT_PATTERN = re.compile(r"[0-9]")

DEFAULT_LONG_WORD_LENGTH = 15
PASTE_MIN_CELLS = 3


class RowKind(str, Enum):
    """What a row is, structurally."""
    DATA = "data"
    HEADER = "header"
    GROUP_LABEL = "group_label"
    NOISE = "noise"


@dataclass(frozen=True)
class ClassifierContext:
    """Inputs a rule may consult besides the row itself."""
    header_keywords: Tuple[str, ...] = HEADER_KEYWORDS
    known_header: Optional[Tuple[str, ...]] = None  # the section's own header, lowercased
    long_word_length: int = DEFAULT_LONG_WORD_LENGTH

    def with_header(self, headers: Sequence[str]) -> "ClassifierContext":
        return ClassifierContext(
            header_keywords=self.header_keywords,
            known_header=_normalized_cells(headers),
            long_word_length=self.long_word_length,
        )


Predicate = Callable[[SheetRow, ClassifierContext], bool]


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    kind: RowKind
    predicate: Predicate


@dataclass(frozen=True)
class Classification:
    kind: RowKind
    rule: Optional[str] = None  # name of the rule that matched

    @property
    def is_data(self) -> bool:
        return self.kind is RowKind.DATA


def _normalized_cells(cells: Sequence[str]) -> Tuple[str, ...]:
    """Lowercased cells with trailing empties dropped."""
    values = [str(c or "").strip().lower() for c in cells]
    while values and not values[-1]:
        values.pop()
    return tuple(values)


# ========== Predicates ==========

def is_blank(row: SheetRow, ctx: ClassifierContext) -> bool:
    return row.is_blank


def is_group_label(row: SheetRow, ctx: ClassifierContext) -> bool:
    text = row.joined_text
    return GROUP_MARKER in text and "group" in text


def has_decorative_glyph(row: SheetRow, ctx: ClassifierContext) -> bool:
    text = row.joined_text
    return any(glyph in text for glyph in DECORATIVE_GLYPHS)


def is_repeated_header(row: SheetRow, ctx: ClassifierContext) -> bool:
    if ctx.known_header and _normalized_cells(row.texts()) == ctx.known_header:
        return True
    text = row.joined_text
    return sum(1 for keyword in ctx.header_keywords if keyword in text) >= 2


def has_instruction_marker(row: SheetRow, ctx: ClassifierContext) -> bool:
    text = row.joined_text
    return any(marker in text for marker in INSTRUCTION_MARKERS)


def is_wrapped_prose(row: SheetRow, ctx: ClassifierContext) -> bool:
    """
    First three cells are all long words with no digits or product codes.

    Known false-positive source: a legitimate row whose leading cells are
    only very long words is dropped. Kept because existing sheets rely on
    it to skip wrapped paragraphs.
    """
    first_three = " ".join(row.texts()[:3]).lower()
    if not first_three:
        return False
    if DIGIT_PATTERN.search(first_three) or PRODUCT_CODE_PATTERN.search(first_three):
        return False
    return all(len(word) > ctx.long_word_length for word in first_three.split(" "))


def fails_paste_shape(row: SheetRow, ctx: ClassifierContext) -> bool:
    """Paste rows need part number, description and a positive integer quantity."""
    if row.width < PASTE_MIN_CELLS:
        return True
    if not row.text(0) or not row.text(1):
        return True
    quantity = parse_leading_int(row.text(2))
    return quantity is None or quantity <= 0


# ========== Rule tables ==========

WORKBOOK_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("blank", RowKind.NOISE, is_blank),
    ClassificationRule("group_label", RowKind.GROUP_LABEL, is_group_label),
    ClassificationRule("header_repeat", RowKind.HEADER, is_repeated_header),
    ClassificationRule("instructional_text", RowKind.NOISE, has_instruction_marker),
    ClassificationRule("decorative_banner", RowKind.NOISE, has_decorative_glyph),
    ClassificationRule("wrapped_prose", RowKind.NOISE, is_wrapped_prose),
)

PASTE_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("blank", RowKind.NOISE, is_blank),
    ClassificationRule("instructional_text", RowKind.NOISE, has_instruction_marker),
    ClassificationRule("header_repeat", RowKind.HEADER, is_repeated_header),
    ClassificationRule("paste_shape", RowKind.NOISE, fails_paste_shape),
)


@dataclass(frozen=True)
class RowClassifier:
    """First-match-wins classifier over an ordered rule table."""
    rules: Tuple[ClassificationRule, ...] = WORKBOOK_RULES
    context: ClassifierContext = field(default_factory=ClassifierContext)
    default: RowKind = RowKind.DATA

    def classify(self, row: SheetRow) -> Classification:
        for rule in self.rules:
            if rule.predicate(row, self.context):
                return Classification(kind=rule.kind, rule=rule.name)
        return Classification(kind=self.default)

    def for_header(self, headers: Sequence[str]) -> "RowClassifier":
        """Same rules, with a section header to recognise repeats of."""
        return RowClassifier(rules=self.rules, context=self.context.with_header(headers), default=self.default)


def workbook_classifier(long_word_length: int = DEFAULT_LONG_WORD_LENGTH) -> RowClassifier:
    return RowClassifier(rules=WORKBOOK_RULES, context=ClassifierContext(long_word_length=long_word_length))


def paste_classifier() -> RowClassifier:
    return RowClassifier(rules=PASTE_RULES)


def is_primary_header(row: SheetRow) -> bool:
    """
    Strict header test used to anchor a section.

    Needs an exact "part number" cell or a short "product description"
    cell, together with an exact "qty"/"quantity" cell.
    """
    cells = [text.lower() for text in row.texts()]
    has_part_number = any(c == "part number" for c in cells)
    has_description = any("product description" in c and len(c.split(" ")) <= 3 for c in cells)
    has_qty = any(c in ("qty", "quantity") for c in cells)
    return (has_part_number or has_description) and has_qty


def match_group_label(row: SheetRow) -> Optional[Tuple[int, str]]:
    """(ordinal, name) from a "📦 GROUP n: name" banner in the first cell."""
    text = row.joined_text
    if GROUP_MARKER not in text or "group" not in text:
        return None
    match = GROUP_LABEL_PATTERN.search(row.text(0))
    if not match:
        return None
    return int(match.group(1)), match.group(2).strip()
