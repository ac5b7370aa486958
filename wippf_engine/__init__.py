# This file makes the 'wippf_engine' directory a Python package.

from .categories import CategoryGroup, CategoryId, Resolved, Unresolved, resolve_category
from .engine import AssessmentEngine
from .models import AssessmentResult, InvalidSubmissionError, MacroProfile
from .scorer import calculate_macro_scores, calculate_scores

__all__ = [
    "AssessmentEngine",
    "AssessmentResult",
    "CategoryGroup",
    "CategoryId",
    "InvalidSubmissionError",
    "MacroProfile",
    "Resolved",
    "Unresolved",
    "calculate_macro_scores",
    "calculate_scores",
    "resolve_category",
]
