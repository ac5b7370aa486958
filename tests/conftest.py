import pytest

from wippf_engine.catalogue import load_catalogue_data
from wippf_engine.engine import AssessmentEngine


@pytest.fixture(scope="session")
def engine():
    """An engine loaded with the bundled 88-question catalogue."""
    return AssessmentEngine()


@pytest.fixture
def question_id_for(engine):
    """Looks up the catalogue question id for a category code."""
    by_code = {q.category_code: q.id for q in engine.get_questions()}

    def _lookup(code):
        return by_code[code]
    return _lookup


@pytest.fixture
def small_catalogue_data():
    """A minimal catalogue exercising folding, macro ranges and unknown codes."""
    return {
        "version": "0.0.1",
        "questions": [
            {"id": 1, "category_code": "1a", "text": "Q1"},
            {"id": 2, "category_code": "1b", "text": "Q2"},
            {"id": 3, "category_code": "5a", "text": "Q3"},
            {"id": 4, "category_code": "15b", "text": "Q4"},
            {"id": 5, "category_code": "20a", "text": "Q5"},
            {"id": 6, "category_code": "24b", "text": "Q6"},
            {"id": 7, "category_code": "24e", "text": "Q7"},
            {"id": 8, "category_code": "24z", "text": "Q8"},
            {"id": 9, "category_code": "x1", "text": "Q9"},
            {"id": 10, "category_code": "3d", "text": "Q10"},
            {"id": 11, "category_code": "12", "text": "Q11"},
        ],
        "categories": [
            {"id": "1", "name": "Punctuality", "group": "secondary"},
            {"id": "12", "name": "Patience", "group": "primary"},
            {"id": "20", "name": "Body / Senses", "group": "conflict"},
            {"id": "24m", "name": "Model: Mother", "group": "model"},
        ],
    }


@pytest.fixture
def small_engine(small_catalogue_data):
    return AssessmentEngine.from_catalogue(load_catalogue_data(small_catalogue_data))
