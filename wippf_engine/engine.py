import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .catalogue import DEFAULT_CATALOGUE_PATH, load_catalogue_from_file
from .categories import CategoryGroup, CategoryId, Resolved, resolve_category
from .models import (
    AssessmentResult,
    Catalogue,
    CategoryDefinition,
    InvalidSubmissionError,
    MacroProfile,
    Question,
)
from .scorer import calculate_macro_scores, calculate_scores

logger = logging.getLogger(__name__)

VALID_ANSWER_VALUES = (1, 2, 3, 4)
LOW_ANSWER_THRESHOLD = 2


class AssessmentEngine:
    """
    Holds the question catalogue and turns answer sets into assessment results.
    """
    def __init__(self, catalogue_path: Union[str, Path] = DEFAULT_CATALOGUE_PATH):
        """
        Initializes the engine by loading the YAML question catalogue.

        Args:
            catalogue_path: Path to the catalogue YAML file.
        """
        self.catalogue_path = Path(catalogue_path)
        self._set_catalogue(load_catalogue_from_file(self.catalogue_path))

    @classmethod
    def from_catalogue(cls, catalogue: Catalogue) -> "AssessmentEngine":
        """Builds an engine around an already validated catalogue."""
        engine = cls.__new__(cls)
        engine.catalogue_path = None
        engine._set_catalogue(catalogue)
        return engine

    def _set_catalogue(self, catalogue: Catalogue):
        self.catalogue = catalogue
        self._build_lookup_maps()

    def _build_lookup_maps(self):
        """Builds dictionaries for quick lookup of questions and categories."""
        self.questions_by_id = {q.id: q for q in self.catalogue.questions}
        self.categories_by_id = {c.id: c for c in self.catalogue.categories}
        self.questions_by_category: Dict[CategoryId, List[Question]] = {cid: [] for cid in CategoryId}
        for question in self.catalogue.questions:
            resolution = resolve_category(question.category_code)
            if isinstance(resolution, Resolved):
                self.questions_by_category[resolution.category_id].append(question)

    # --- Catalogue access ---

    def get_questions(self) -> List[Question]:
        return list(self.catalogue.questions)

    def get_categories(self, group: Optional[CategoryGroup] = None) -> List[CategoryDefinition]:
        return [c for c in self.catalogue.categories if group is None or c.group == group]

    def questions_for_category(self, category_id: Union[CategoryId, str]) -> List[Question]:
        """Returns the questions whose code resolves to the given category."""
        return list(self.questions_by_category.get(CategoryId(category_id), []))

    # --- Scoring ---

    def calculate_scores(self, answers: Mapping[int, Optional[int]]) -> Dict[str, int]:
        return calculate_scores(answers, self.catalogue.questions)

    def calculate_macro(self, answers: Mapping[int, Optional[int]]) -> MacroProfile:
        return calculate_macro_scores(answers, self.catalogue.questions)

    def build_result(
        self,
        name: str,
        answers: Mapping[int, Optional[int]],
        *,
        result_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> AssessmentResult:
        """
        Finalizes an answer set into an AssessmentResult.

        Unanswered entries (None or 0) are dropped. Any other value outside
        1-4 raises InvalidSubmissionError.
        """
        cleaned: Dict[int, int] = {}
        for question_id, value in answers.items():
            if not value:
                continue
            if value not in VALID_ANSWER_VALUES:
                raise InvalidSubmissionError(
                    f"Invalid answer value '{value}' for question '{question_id}'. Expected 1, 2, 3 or 4."
                )
            cleaned[int(question_id)] = int(value)

        result = AssessmentResult(
            id=result_id or uuid.uuid4().hex,
            date=created_at or datetime.now(timezone.utc),
            name=name,
            answers=cleaned,
            scores=self.calculate_scores(cleaned),
            macro=self.calculate_macro(cleaned),
        )
        logger.debug("Built result %s for '%s' from %d answers", result.id, name, len(cleaned))
        return result

    def category_breakdown(
        self, result: AssessmentResult, partner: Optional[AssessmentResult] = None
    ) -> List[Dict[str, Any]]:
        """
        Returns, per taxonomy group, each category's score together with
        the answers that produced it. Answers at or below
        LOW_ANSWER_THRESHOLD are flagged `low`. With a `partner`, each row
        also carries the partner's score and the partner's answer per question.
        """
        breakdown = []
        for group in CategoryGroup:
            rows = []
            for category in self.get_categories(group):
                answers = []
                for q in self.questions_for_category(category.id):
                    value = result.answers.get(q.id)
                    answers.append({
                        "question_id": q.id,
                        "category_code": q.category_code,
                        "value": value,
                        "low": value is not None and value <= LOW_ANSWER_THRESHOLD,
                        "partner_value": partner.answers.get(q.id) if partner else None,
                    })
                rows.append({
                    "category_id": category.id.value,
                    "name": category.name,
                    "name_zh": category.name_zh,
                    "score": result.scores.get(category.id.value, 0),
                    "partner_score": partner.scores.get(category.id.value, 0) if partner else None,
                    "answers": answers,
                })
            breakdown.append({"group": group.value, "categories": rows})
        return breakdown
