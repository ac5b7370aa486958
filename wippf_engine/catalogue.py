import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from .models import Catalogue

logger = logging.getLogger(__name__)

DEFAULT_CATALOGUE_PATH = Path(__file__).resolve().parent / "assets" / "wippf_questions.yml"


class CatalogueValidationError(ValueError):
    """Custom exception for catalogue errors not covered by Pydantic."""
    pass


def load_catalogue_data(data: Dict[str, Any]) -> Catalogue:
    """
    Validates the raw dictionary data against the Catalogue model
    and checks that question and category IDs are unique.

    Category codes are not checked; codes the resolver cannot place
    simply score nothing.
    """
    try:
        catalogue = Catalogue.model_validate(data)
    except ValidationError as e:
        raise CatalogueValidationError(f"Invalid catalogue structure: {e}") from e

    question_ids = set()
    for question in catalogue.questions:
        if question.id in question_ids:
            raise CatalogueValidationError(f"Duplicate question ID found: {question.id}")
        question_ids.add(question.id)

    category_ids = set()
    for category in catalogue.categories:
        if category.id in category_ids:
            raise CatalogueValidationError(f"Duplicate category ID found: {category.id.value}")
        category_ids.add(category.id)

    return catalogue


def load_catalogue_from_file(file_path: Union[str, Path] = DEFAULT_CATALOGUE_PATH) -> Catalogue:
    """
    Loads the question catalogue from a YAML file, validates it,
    and returns a Catalogue object.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogueValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise CatalogueValidationError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise CatalogueValidationError(f"YAML file is empty or invalid: {file_path}")

    catalogue = load_catalogue_data(data)
    logger.info(
        "Loaded catalogue %s: %d questions, %d categories",
        catalogue.version, len(catalogue.questions), len(catalogue.categories),
    )
    return catalogue
