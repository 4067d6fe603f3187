"""
Result<T> wrapper for ingestion steps that may fail.

OCR calls, LLM extraction and spreadsheet reads depend on external
services and user-supplied files. They return a Result instead of raising
so the command line can report each step's outcome.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar


T = TypeVar('T')


class ResultStatus(Enum):
    """Status of a Result."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome of an ingestion step.

    Attributes:
        status: SUCCESS or FAILURE
        value: Produced value (None on failure)
        error: Exception that caused the failure, if any
        message: Human-readable description of the outcome

    Examples:
        >>> result = load_schedules(Path("duty.xlsx"), ScheduleKind.DUTY)
        >>> if result.is_failure:
        ...     print(f"ERROR: {result.message}")
        >>> schedules = result.unwrap_or([])
    """

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILURE

    @classmethod
    def success(cls, value: T, message: Optional[str] = None) -> 'Result[T]':
        """Create a successful result."""
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def failure(
        cls,
        message: str,
        error: Optional[Exception] = None
    ) -> 'Result[T]':
        """
        Create a failure result.

        Args:
            message: What went wrong, suitable for showing to the user
            error: Underlying exception, kept for logging
        """
        return cls(status=ResultStatus.FAILURE, message=message, error=error)

    def unwrap(self) -> T:
        """
        Return the value of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if self.is_failure:
            raise ValueError(f"Cannot unwrap failure result: {self.message}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` for a failure."""
        return self.value if self.is_success else default
