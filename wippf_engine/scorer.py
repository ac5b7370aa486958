# wippf_engine/scorer.py
# Aggregates raw answers into per-category sums and the macro profile.

import logging
from typing import Dict, Iterable, Mapping, Optional

from .categories import CategoryId, Resolved, parse_category_code, resolve_category
from .models import MacroProfile, Question

logger = logging.getLogger(__name__)

# --- Macro ranges (inclusive base-number bounds) ---

SOCIAL_RANGE = (1, 11)      # secondary capacities
EMOTIONAL_RANGE = (12, 19)  # primary capacities

SOCIAL_AXES = {"a": "active", "b": "passive", "c": "concept"}
EMOTIONAL_AXES = {"a": "self_", "b": "we", "c": "ideal"}


def empty_score_map() -> Dict[str, int]:
    """Returns a score map with every category id set to 0."""
    return {category_id.value: 0 for category_id in CategoryId}


def _answer_value(answers: Mapping[int, Optional[int]], question_id: int) -> int:
    # None and 0 both mean unanswered
    return answers.get(question_id) or 0


def calculate_scores(
    answers: Mapping[int, Optional[int]],
    questions: Iterable[Question],
) -> Dict[str, int]:
    """
    Sums answer values per resolved category.

    Args:
        answers: Question id -> answer value. Need not be complete.
        questions: The catalogue questions.

    Returns:
        A map holding every category id, including those with a sum of 0.
    """
    scores = empty_score_map()

    for question in questions:
        value = _answer_value(answers, question.id)
        if not value:
            continue
        resolution = resolve_category(question.category_code)
        if isinstance(resolution, Resolved):
            scores[resolution.category_id.value] += value

    return scores


def calculate_macro_scores(
    answers: Mapping[int, Optional[int]],
    questions: Iterable[Question],
) -> MacroProfile:
    """
    Sums answer values per sub-axis letter for the social (1-11) and
    emotional (12-19) ranges. Codes without a letter, letters other than
    a/b/c, and base numbers outside both ranges are ignored.
    """
    macro = MacroProfile()

    for question in questions:
        parsed = parse_category_code(question.category_code)
        if parsed is None or parsed.letter is None:
            continue
        value = _answer_value(answers, question.id)
        if not value:
            continue

        if SOCIAL_RANGE[0] <= parsed.number <= SOCIAL_RANGE[1]:
            axis = SOCIAL_AXES.get(parsed.letter)
            if axis:
                setattr(macro.social, axis, getattr(macro.social, axis) + value)
        elif EMOTIONAL_RANGE[0] <= parsed.number <= EMOTIONAL_RANGE[1]:
            axis = EMOTIONAL_AXES.get(parsed.letter)
            if axis:
                setattr(macro.emotional, axis, getattr(macro.emotional, axis) + value)

    return macro
