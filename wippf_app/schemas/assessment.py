from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from wippf_engine.categories import CategoryGroup


class AssessmentRequest(BaseModel):
    name: str
    answers: Dict[int, int]  # question_id -> 1..4 (0 = unanswered)


class ImportPreviewRequest(BaseModel):
    text: str


class ImportPreviewResponse(BaseModel):
    header: List[str]
    rows: List[List[str]]
    remaining_rows: int
    column_count: int
    suggested_names: Dict[int, str]


class ImportRequest(BaseModel):
    text: str
    question_column: Optional[int] = None
    score_columns: List[int] = Field(default_factory=list)
    names: Dict[int, str] = Field(default_factory=dict)


class QuestionOut(BaseModel):
    id: int
    category_code: str
    text: str
    text_zh: Optional[str] = None


class CategoryOut(BaseModel):
    id: str
    name: str
    name_zh: Optional[str] = None
    group: CategoryGroup


class AnswerDetail(BaseModel):
    question_id: int
    category_code: str
    value: Optional[int] = None
    low: bool = False
    partner_value: Optional[int] = None


class CategoryBreakdown(BaseModel):
    category_id: str
    name: str
    name_zh: Optional[str] = None
    score: int
    partner_score: Optional[int] = None
    answers: List[AnswerDetail]


class GroupBreakdown(BaseModel):
    group: CategoryGroup
    categories: List[CategoryBreakdown]
