from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .categories import CategoryGroup, CategoryId

AnswerValue = Literal[1, 2, 3, 4]  # 1: No, 2: Rather no, 3: Rather yes, 4: Yes


class Question(BaseModel):
    id: int
    category_code: str
    text: str
    text_zh: Optional[str] = None


class CategoryDefinition(BaseModel):
    id: CategoryId
    name: str
    name_zh: Optional[str] = None
    group: CategoryGroup


class Catalogue(BaseModel):
    version: str
    questions: List[Question]
    categories: List[CategoryDefinition]


class SocialProfile(BaseModel):
    active: int = 0   # 'a' codes in categories 1-11
    passive: int = 0  # 'b' codes in categories 1-11
    concept: int = 0  # 'c' codes in categories 1-11


class EmotionalProfile(BaseModel):
    self_: int = Field(0, alias="self")  # 'a' codes in categories 12-19
    we: int = 0                          # 'b' codes in categories 12-19
    ideal: int = 0                       # 'c' codes in categories 12-19

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)


class MacroProfile(BaseModel):
    social: SocialProfile = Field(default_factory=SocialProfile)
    emotional: EmotionalProfile = Field(default_factory=EmotionalProfile)


class AssessmentResult(BaseModel):
    """One respondent's finalized answers with the scores derived from them."""
    id: str
    date: datetime
    name: str
    answers: Dict[int, AnswerValue]
    scores: Dict[str, int]  # resolved category id -> raw sum
    macro: MacroProfile

    model_config = ConfigDict(frozen=True)


# Custom Error Classes
class InvalidSubmissionError(ValueError):
    """Custom exception for invalid submission data (e.g., out-of-range answer values)."""
    pass
