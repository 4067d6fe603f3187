"""
Lesson log loading.

A lesson log is either an original document that goes through OCR and AI
extraction, or a JSON file of lessons extracted earlier.
"""

import logging
from pathlib import Path
from typing import List

from .document_parser import DocumentParseClient
from .lesson_extractor import LessonExtractor
from ..models.lesson import LessonRecord
from ..models.result import Result
from ..utils.file_utils import load_json
from ..validation.validators import MalformedRecordError


logger = logging.getLogger(__name__)


def load_lesson_log(
    filepath: Path,
    parse_client: DocumentParseClient,
    extractor: LessonExtractor,
    target_year: int
) -> Result[List[LessonRecord]]:
    """
    Parse a lesson log document into lesson records.

    Args:
        filepath: PDF/HWP/HWPX lesson log
        parse_client: OCR client
        extractor: AI extractor structuring the OCR text
        target_year: Year assumed for dates written without one

    Returns:
        Result containing lessons in log order
    """
    text_result = parse_client.parse(filepath)
    if text_result.is_failure:
        return Result.failure(text_result.message, text_result.error)

    return extractor.extract(text_result.value, target_year)


def load_lessons_json(filepath: Path) -> Result[List[LessonRecord]]:
    """
    Load previously extracted lessons.

    Accepts either a JSON array of lessons or an object with a
    ``lessons`` array. Unlike AI output, a malformed lesson here is an
    error for the whole file.

    Examples:
        >>> result = load_lessons_json(Path("output/lessons.json"))
        >>> lessons = result.unwrap()
    """
    data = load_json(filepath)
    if data is None:
        return Result.failure(f"Could not read lessons file: {filepath}")

    items = data.get("lessons") if isinstance(data, dict) else data
    if not isinstance(items, list):
        return Result.failure(
            f"Lessons file must contain a list or a 'lessons' array: {filepath}"
        )

    try:
        lessons = [LessonRecord.from_dict(item, index) for index, item in enumerate(items)]
    except MalformedRecordError as e:
        return Result.failure(str(e), e)

    logger.info(f"Loaded {len(lessons)} lessons from {filepath.name}")
    return Result.success(lessons, f"Loaded {len(lessons)} lessons")
