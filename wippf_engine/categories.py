"""
Category taxonomy and category-code resolution.

A question's category code is a decimal base number followed by an optional
lowercase sub-axis letter ("1a", "20", "24g"). Category 24 is split into three
synthetic buckets by letter; every other base number is its own bucket.
"""
from enum import Enum
from typing import NamedTuple, Optional, Union


class CategoryGroup(str, Enum):
    SECONDARY = "secondary"
    PRIMARY = "primary"
    CONFLICT = "conflict"
    MODEL = "model"


class CategoryId(str, Enum):
    """Every bucket a score can be accumulated into."""
    C1 = "1"
    C2 = "2"
    C3 = "3"
    C4 = "4"
    C5 = "5"
    C6 = "6"
    C7 = "7"
    C8 = "8"
    C9 = "9"
    C10 = "10"
    C11 = "11"
    C12 = "12"
    C13 = "13"
    C14 = "14"
    C15 = "15"
    C16 = "16"
    C17 = "17"
    C18 = "18"
    C19 = "19"
    C20 = "20"
    C21 = "21"
    C22 = "22"
    C23 = "23"
    C24M = "24m"
    C24F = "24f"
    C24O = "24o"
    C25 = "25"
    C26 = "26"
    C27 = "27"


FOLDED_CATEGORY = "24"

CATEGORY_24_FOLDS = {
    "a": CategoryId.C24M, "b": CategoryId.C24M, "c": CategoryId.C24M,
    "d": CategoryId.C24F, "e": CategoryId.C24F, "f": CategoryId.C24F,
    "g": CategoryId.C24O, "h": CategoryId.C24O, "i": CategoryId.C24O,
}

_NUMERIC_IDS = {c.value: c for c in CategoryId if c.value.isdigit()}


class ParsedCode(NamedTuple):
    base: str
    letter: Optional[str]

    @property
    def number(self) -> int:
        return int(self.base)


class Resolved(NamedTuple):
    category_id: CategoryId


class Unresolved(NamedTuple):
    code: str


CategoryResolution = Union[Resolved, Unresolved]


def parse_category_code(code: str) -> Optional[ParsedCode]:
    """
    Parses the leading ``<digits><optional letter>`` of a category code.

    Anything after the optional letter is ignored. Returns None when the
    code does not start with a digit.
    """
    if not isinstance(code, str):
        return None

    end = 0
    while end < len(code) and "0" <= code[end] <= "9":
        end += 1
    if end == 0:
        return None

    letter = None
    if end < len(code) and "a" <= code[end] <= "z":
        letter = code[end]
    return ParsedCode(code[:end], letter)


def resolve_parsed(parsed: ParsedCode) -> Optional[CategoryId]:
    if parsed.base == FOLDED_CATEGORY:
        return CATEGORY_24_FOLDS.get(parsed.letter)
    return _NUMERIC_IDS.get(parsed.base)


def resolve_category(code: str) -> CategoryResolution:
    """Resolves a category code to its bucket, or Unresolved. Never raises."""
    parsed = parse_category_code(code)
    if parsed is None:
        return Unresolved(code)
    category_id = resolve_parsed(parsed)
    if category_id is None:
        return Unresolved(code)
    return Resolved(category_id)
