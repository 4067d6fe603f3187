"""
AI-powered lesson record extractor using Claude API.

This module turns the OCR text of a supplementary lesson log into
structured lesson records using Claude via Vertex AI.
"""

import json
import logging
import re
from typing import Any, List, Optional

from anthropic import AnthropicVertex

from ..models.lesson import LessonRecord
from ..models.result import Result
from ..validation.validators import MalformedRecordError


logger = logging.getLogger(__name__)


LESSONS_OBJECT_PATTERN = re.compile(r'\{[\s\S]*"lessons"[\s\S]*\}')


class LessonExtractor:
    """
    Extracts lesson records from lesson-log text with Claude.

    Examples:
        >>> extractor = LessonExtractor(project_id="my-gcp-project")
        >>> result = extractor.extract(document_text, target_year=2025)
        >>> for lesson in result.unwrap_or([]):
        ...     print(lesson.date, lesson.time_range, lesson.duration)
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        region: str = "global",
        model: str = "claude-sonnet-4-5@20250929",
        client: Optional[Any] = None
    ):
        """
        Initialize the extractor.

        Args:
            project_id: Google Cloud project hosting Claude on Vertex AI
            region: Vertex AI region
            model: Claude model identifier
            client: Pre-built messages client (used instead of creating one)

        Raises:
            ValueError: If neither a client nor a project id is given
        """
        self.model = model

        if client is not None:
            self.client = client
            return

        if not project_id:
            raise ValueError(
                "ANTHROPIC_VERTEX_PROJECT_ID is required for lesson extraction"
            )

        self.client = AnthropicVertex(project_id=project_id, region=region)
        logger.info(
            f"LessonExtractor initialized with project={project_id}, "
            f"region={region}, model={model}"
        )

    def _create_extraction_prompt(self, document_text: str, target_year: int) -> str:
        """
        Create the structuring prompt for one lesson log.

        Args:
            document_text: OCR text of the lesson log
            target_year: Year assumed for dates written without one
        """
        return f"""당신은 한국 초등학교 키다리샘(기초학력 보충) 지도일지 분석 전문가입니다.

다음 지도일지 텍스트에서 각 수업 정보를 추출해주세요.

[지도일지 텍스트]
{document_text}

[추출 규칙]
1. 각 수업의 날짜, 시작시간, 종료시간, 수업시간(분)을 추출합니다.
2. 날짜 형식: "4. 18. (금)" → "4. 18. (금)"
3. 시간 형식: "13:40~14:20" → startTime: "13:40", endTime: "14:20"
4. 수업시간 계산: 종료시간 - 시작시간 (분 단위)
5. 연도는 {target_year}년으로 가정합니다.
6. 수업은 지도일지에 기록된 순서대로 나열합니다.

[출력 형식]
반드시 다음 JSON 형식으로만 응답하세요. 다른 텍스트는 포함하지 마세요.
{{
  "lessons": [
    {{
      "date": "4. 18. (금)",
      "startTime": "13:40",
      "endTime": "14:20",
      "duration": 40,
      "fullDate": "{target_year}-04-18"
    }}
  ]
}}
"""

    def extract(self, document_text: str, target_year: int) -> Result[List[LessonRecord]]:
        """
        Extract lesson records from lesson-log text.

        Args:
            document_text: OCR text of the lesson log
            target_year: Year assumed for dates written without one

        Returns:
            Result containing lessons in log order
        """
        prompt = self._create_extraction_prompt(document_text, target_year)

        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=8192,
                temperature=0.1,
                messages=[
                    {
                        "role": "user",
                        "content": prompt
                    }
                ]
            )
            response_text = message.content[0].text

        except Exception as e:
            logger.error(f"AI extraction failed: {e}", exc_info=True)
            return Result.failure(f"AI extraction failed: {e}", e)

        return self.parse_response(response_text)

    def parse_response(self, response_text: str) -> Result[List[LessonRecord]]:
        """
        Parse the model response into lesson records.

        Items that are not valid lessons are skipped with a warning.
        """
        items = self._load_lessons_array(response_text)
        if items is None:
            logger.debug(f"Response text: {response_text[:500]}")
            return Result.failure(
                "Could not extract lessons from the document. Check the lesson log format."
            )

        lessons: List[LessonRecord] = []
        for index, item in enumerate(items):
            try:
                lessons.append(LessonRecord.from_dict(item, index))
            except MalformedRecordError as e:
                logger.warning(f"Skipping extracted lesson: {e}")

        logger.info(f"Extracted {len(lessons)} lessons ({len(items) - len(lessons)} skipped)")
        return Result.success(lessons, f"Extracted {len(lessons)} lessons")

    @staticmethod
    def _load_lessons_array(response_text: str) -> Optional[List[Any]]:
        json_text = response_text.strip()
        if json_text.startswith("```json"):
            json_text = json_text[7:]
        if json_text.startswith("```"):
            json_text = json_text[3:]
        if json_text.endswith("```"):
            json_text = json_text[:-3]

        match = LESSONS_OBJECT_PATTERN.search(json_text)
        if not match:
            return None

        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            return None

        lessons = parsed.get("lessons") if isinstance(parsed, dict) else None
        if not isinstance(lessons, list):
            return None
        return lessons
