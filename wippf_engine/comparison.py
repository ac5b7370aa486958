"""Side-by-side comparison of two assessment results."""
from typing import Dict, Iterable, List

from pydantic import BaseModel

from .categories import CategoryGroup
from .models import AssessmentResult, CategoryDefinition, MacroProfile


class CategoryComparison(BaseModel):
    category_id: str
    name: str
    group: CategoryGroup
    first: int
    second: int
    delta: int  # second - first


class ResultComparison(BaseModel):
    first_id: str
    first_name: str
    second_id: str
    second_name: str
    categories: List[CategoryComparison]
    first_macro: MacroProfile
    second_macro: MacroProfile
    macro_delta: MacroProfile


def group_profile(
    scores: Dict[str, int],
    categories: Iterable[CategoryDefinition],
    group: CategoryGroup,
) -> List[Dict[str, object]]:
    """Scores of one taxonomy group, in taxonomy order."""
    return [
        {"category_id": c.id.value, "name": c.name, "score": scores.get(c.id.value, 0)}
        for c in categories
        if c.group == group
    ]


def _macro_delta(first: MacroProfile, second: MacroProfile) -> MacroProfile:
    delta = MacroProfile()
    for triad in ("social", "emotional"):
        a, b, d = getattr(first, triad), getattr(second, triad), getattr(delta, triad)
        for axis in type(d).model_fields:
            setattr(d, axis, getattr(b, axis) - getattr(a, axis))
    return delta


def compare_results(
    first: AssessmentResult,
    second: AssessmentResult,
    categories: Iterable[CategoryDefinition],
) -> ResultComparison:
    rows = []
    for category in categories:
        key = category.id.value
        a = first.scores.get(key, 0)
        b = second.scores.get(key, 0)
        rows.append(CategoryComparison(
            category_id=key,
            name=category.name,
            group=category.group,
            first=a,
            second=b,
            delta=b - a,
        ))

    return ResultComparison(
        first_id=first.id,
        first_name=first.name,
        second_id=second.id,
        second_name=second.name,
        categories=rows,
        first_macro=first.macro,
        second_macro=second.macro,
        macro_delta=_macro_delta(first.macro, second.macro),
    )
