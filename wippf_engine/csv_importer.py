# wippf_engine/csv_importer.py
# Maps delimited text with one question column and one score column per
# respondent onto assessment results.

import logging
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from .models import AssessmentResult

if TYPE_CHECKING:
    from .engine import AssessmentEngine

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r"\r?\n")
CELL_DELIMITER = re.compile(r"[,;]")
LEADING_INT = re.compile(r"^[+-]?[0-9]+")

MIN_SCORE = 1
MAX_SCORE = 4
PREVIEW_ROWS = 5


class ParsedTable(BaseModel):
    header: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.header and not self.rows

    @property
    def column_count(self) -> int:
        return max([len(self.header)] + [len(r) for r in self.rows])


class ColumnMapping(BaseModel):
    """Which column holds question ids, which hold scores, and display names per score column."""
    question_column: Optional[int] = None
    score_columns: List[int] = Field(default_factory=list)
    names: Dict[int, str] = Field(default_factory=dict)

    def is_ready(self) -> bool:
        """A negative index counts as unchosen, and each score column may be picked once."""
        if self.question_column is None or self.question_column < 0:
            return False
        if not self.score_columns or any(c < 0 for c in self.score_columns):
            return False
        if len(set(self.score_columns)) != len(self.score_columns):
            return False
        return self.question_column not in self.score_columns

    def name_for(self, column: int) -> str:
        name = (self.names.get(column) or "").strip()
        return name or f"Person {column}"


def parse_table(raw: Union[str, bytes, None]) -> ParsedTable:
    """
    Splits text into trimmed cells on line breaks and on ',' or ';'.

    Rows with no non-empty cell are dropped. The first remaining row becomes
    the header. Quoting is not supported. Input that cannot be decoded
    yields an empty table.
    """
    if raw is None:
        logger.warning("No content to parse; returning empty table")
        return ParsedTable()
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning("Could not decode import content as UTF-8: %s", e)
            return ParsedTable()

    rows = [
        [cell.strip() for cell in CELL_DELIMITER.split(line)]
        for line in LINE_BREAK.split(raw)
    ]
    rows = [row for row in rows if any(row)]
    if not rows:
        return ParsedTable()
    return ParsedTable(header=rows[0], rows=rows[1:])


def parse_int(cell: Optional[str]) -> Optional[int]:
    """
    Reads the leading integer of a cell ("3.7" -> 3, "12 pts" -> 12).
    Returns None when the cell does not start with one.
    """
    if cell is None:
        return None
    match = LEADING_INT.match(cell.strip())
    if match is None:
        return None
    return int(match.group(0))


def clamp_score(value: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def _cell(row: List[str], column: int) -> Optional[str]:
    if 0 <= column < len(row):
        return row[column]
    return None


def suggest_names(table: ParsedTable, columns: List[int]) -> Dict[int, str]:
    """Header text for each column whose header cell is not blank."""
    suggestions = {}
    for column in columns:
        header = _cell(table.header, column)
        if header and header.strip():
            suggestions[column] = header
    return suggestions


def preview(table: ParsedTable, limit: int = PREVIEW_ROWS) -> Dict[str, object]:
    return {
        "header": table.header,
        "rows": table.rows[:limit],
        "remaining_rows": max(0, len(table.rows) - limit),
        "column_count": table.column_count,
    }


def extract_answers(table: ParsedTable, question_column: int, score_column: int) -> Dict[int, int]:
    """
    Builds one respondent's answer set from a single score column.

    Rows where either cell is not an integer are skipped for this column.
    Scores are clamped into 1-4.
    """
    answers: Dict[int, int] = {}
    skipped = 0
    for row in table.rows:
        question_id = parse_int(_cell(row, question_column))
        score = parse_int(_cell(row, score_column))
        if question_id is None or score is None:
            skipped += 1
            continue
        answers[question_id] = clamp_score(score)

    if skipped:
        logger.debug("Column %d: skipped %d row(s) without integer question id or score", score_column, skipped)
    return answers


def import_results(
    table: ParsedTable,
    mapping: ColumnMapping,
    engine: "AssessmentEngine",
    created_at: Optional[datetime] = None,
) -> List[AssessmentResult]:
    """
    Produces one AssessmentResult per mapped score column.

    Nothing is produced when the mapping is incomplete or the table is empty.
    """
    if not mapping.is_ready():
        logger.info("Import mapping incomplete; nothing imported")
        return []
    if table.is_empty:
        logger.info("Import table is empty; nothing imported")
        return []

    created_at = created_at or datetime.now(timezone.utc)
    results = []
    for score_column in mapping.score_columns:
        answers = extract_answers(table, mapping.question_column, score_column)
        results.append(engine.build_result(mapping.name_for(score_column), answers, created_at=created_at))

    logger.info("Imported %d result(s) from %d data row(s)", len(results), len(table.rows))
    return results
