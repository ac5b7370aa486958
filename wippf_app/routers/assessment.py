import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from wippf_app.core.config import get_settings
from wippf_app.schemas.assessment import (
    AssessmentRequest,
    CategoryOut,
    GroupBreakdown,
    ImportPreviewRequest,
    ImportPreviewResponse,
    ImportRequest,
    QuestionOut,
)
from wippf_app.services.history import HistoryStore
from wippf_engine.categories import CategoryGroup
from wippf_engine.comparison import ResultComparison, compare_results
from wippf_engine.csv_importer import ColumnMapping, import_results, parse_table, preview, suggest_names
from wippf_engine.engine import AssessmentEngine
from wippf_engine.models import AssessmentResult, InvalidSubmissionError

router = APIRouter()
logger = logging.getLogger(__name__)


@lru_cache
def get_assessment_engine() -> AssessmentEngine:
    return AssessmentEngine(catalogue_path=get_settings().catalogue_path)


@lru_cache
def get_history_store() -> HistoryStore:
    return HistoryStore.load(get_settings().history_path)


def _get_or_404(history: HistoryStore, result_id: str) -> AssessmentResult:
    result = history.get(result_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Assessment '{result_id}' not found")
    return result


# --- Catalogue ---

@router.get("/questions", response_model=List[QuestionOut])
async def list_questions(engine: AssessmentEngine = Depends(get_assessment_engine)):
    return [QuestionOut(**q.model_dump()) for q in engine.get_questions()]


@router.get("/categories", response_model=List[CategoryOut])
async def list_categories(
    group: Optional[CategoryGroup] = Query(None, description="Restrict to one taxonomy group"),
    engine: AssessmentEngine = Depends(get_assessment_engine),
):
    return [
        CategoryOut(id=c.id.value, name=c.name, name_zh=c.name_zh, group=c.group)
        for c in engine.get_categories(group)
    ]


# --- Assessments ---

@router.post("/assessments", response_model=AssessmentResult, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    request: AssessmentRequest,
    engine: AssessmentEngine = Depends(get_assessment_engine),
    history: HistoryStore = Depends(get_history_store),
):
    """
    Scores a finished answer set and stores the result.
    """
    try:
        result = engine.build_result(request.name, request.answers)
    except InvalidSubmissionError as e:
        logger.error(f"Invalid submission: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error while scoring assessment: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    history.append(result)
    logger.info(f"Assessment {result.id} stored for '{result.name}'")
    return result


@router.get("/assessments", response_model=List[AssessmentResult])
async def list_assessments(history: HistoryStore = Depends(get_history_store)):
    return history.list()


@router.get("/assessments/{result_id}", response_model=AssessmentResult)
async def get_assessment(result_id: str, history: HistoryStore = Depends(get_history_store)):
    return _get_or_404(history, result_id)


@router.delete("/assessments/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assessment(result_id: str, history: HistoryStore = Depends(get_history_store)):
    if not history.delete(result_id):
        raise HTTPException(status_code=404, detail=f"Assessment '{result_id}' not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/assessments/{result_id}/breakdown", response_model=List[GroupBreakdown])
async def get_breakdown(
    result_id: str,
    partner: Optional[str] = Query(None, description="Id of a result to show alongside"),
    engine: AssessmentEngine = Depends(get_assessment_engine),
    history: HistoryStore = Depends(get_history_store),
):
    result = _get_or_404(history, result_id)
    partner_result = _get_or_404(history, partner) if partner else None
    return engine.category_breakdown(result, partner_result)


@router.get("/compare", response_model=ResultComparison)
async def compare_assessments(
    first: str = Query(..., description="Id of the first result"),
    second: str = Query(..., description="Id of the second result"),
    engine: AssessmentEngine = Depends(get_assessment_engine),
    history: HistoryStore = Depends(get_history_store),
):
    return compare_results(
        _get_or_404(history, first),
        _get_or_404(history, second),
        engine.get_categories(),
    )


# --- CSV import ---

@router.post("/import/preview", response_model=ImportPreviewResponse)
async def preview_import(request: ImportPreviewRequest):
    table = parse_table(request.text)
    summary = preview(table)
    return ImportPreviewResponse(
        **summary,
        suggested_names=suggest_names(table, list(range(table.column_count))),
    )


@router.post("/import", response_model=List[AssessmentResult], status_code=status.HTTP_201_CREATED)
async def import_assessments(
    request: ImportRequest,
    engine: AssessmentEngine = Depends(get_assessment_engine),
    history: HistoryStore = Depends(get_history_store),
):
    """
    Imports one result per mapped score column. Nothing is stored unless
    a question column and at least one score column are chosen.
    """
    mapping = ColumnMapping(
        question_column=request.question_column,
        score_columns=request.score_columns,
        names=request.names,
    )
    if not mapping.is_ready():
        raise HTTPException(status_code=422, detail="Import mapping incomplete")

    table = parse_table(request.text)
    if table.is_empty:
        raise HTTPException(status_code=422, detail="No rows to import")

    results = import_results(table, mapping, engine)
    history.append(results)
    return results
