"""
Upstage Document Parse client.

Sends a scanned or exported lesson log (PDF, HWP, HWPX) to the Upstage
document digitization endpoint and returns the recognised text.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import requests

from ..models.result import Result
from ..utils.config import SecureString
from ..utils.logger import mask_api_key


logger = logging.getLogger(__name__)


SUPPORTED_EXTENSIONS = (".pdf", ".hwp", ".hwpx")


def get_file_type(filepath: Path) -> str:
    """
    Map a lesson log path to the document type label.

    Examples:
        >>> get_file_type(Path("지도일지.hwpx"))
        'hwpx'
        >>> get_file_type(Path("notes.txt"))
        'unknown'
    """
    extension = filepath.suffix.lower()
    if extension in SUPPORTED_EXTENSIONS:
        return extension[1:]
    return "unknown"


class DocumentParseClient:
    """
    Client for the Upstage Document Parse API.

    Examples:
        >>> client = DocumentParseClient(api_key=config.upstage_api_key)
        >>> result = client.parse(Path("지도일지.pdf"))
        >>> if result.is_success:
        ...     print(result.value[:100])
    """

    ENDPOINT = "document-digitization"
    MODEL = "document-parse"

    def __init__(
        self,
        api_key: SecureString,
        base_url: str = "https://api.upstage.ai/v1",
        timeout: int = 120
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        logger.debug(
            f"DocumentParseClient initialized with url={self.url}, "
            f"key={mask_api_key(api_key.get_value())}, timeout={timeout}s"
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.ENDPOINT}"

    def parse(self, filepath: Path) -> Result[str]:
        """
        Run OCR/layout parsing on a document.

        Args:
            filepath: Lesson log file

        Returns:
            Result containing the document text
        """
        if get_file_type(filepath) == "unknown":
            return Result.failure(
                f"Unsupported document type: {filepath.name} "
                f"(expected {', '.join(SUPPORTED_EXTENSIONS)})"
            )

        if not filepath.exists():
            return Result.failure(f"Document not found: {filepath}")

        logger.info(f"Parsing document {filepath.name} with Upstage Document Parse")

        try:
            with open(filepath, "rb") as f:
                response = requests.post(
                    self.url,
                    headers={"Authorization": f"Bearer {self.api_key.get_value()}"},
                    files={"document": (filepath.name, f)},
                    data={
                        "output_formats": json.dumps(["text"]),
                        "ocr": "auto",
                        "model": self.MODEL,
                    },
                    timeout=self.timeout
                )
            response.raise_for_status()
            payload = response.json()

        except requests.HTTPError as e:
            body = e.response.text if e.response is not None else ""
            logger.error(f"Document Parse API error: {e} {body[:200]}")
            return Result.failure(f"Document Parse API error: {body or e}", e)

        except requests.RequestException as e:
            logger.error(f"Document Parse request failed: {e}")
            return Result.failure(f"Document Parse request failed: {e}", e)

        except ValueError as e:
            logger.error(f"Document Parse returned invalid JSON: {e}")
            return Result.failure("Document Parse returned an invalid response", e)

        text = self._extract_text(payload)
        if not text:
            return Result.failure(f"No text recognised in {filepath.name}")

        logger.debug(f"Recognised {len(text)} characters from {filepath.name}")
        return Result.success(text, f"Parsed {filepath.name}")

    @staticmethod
    def _extract_text(payload: dict) -> Optional[str]:
        """Text lives at ``text`` or, for some models, ``content.text``."""
        if not isinstance(payload, dict):
            return None
        text = payload.get("text")
        if not text:
            content = payload.get("content") or {}
            text = content.get("text") if isinstance(content, dict) else None
        return text.strip() if isinstance(text, str) else None
