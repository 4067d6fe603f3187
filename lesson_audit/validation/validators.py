"""
Record validation primitives.

Validators collect errors (record is unusable) and warnings (record is
checked anyway) in a ValidationResult. Model constructors turn errors into
MalformedRecordError.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from ..checking.timeutils import is_valid_time_of_day


@dataclass
class ValidationResult:
    """
    Result of record validation.

    Attributes:
        is_valid: Whether validation passed
        errors: Structural problems that make the record unusable
        warnings: Suspicious but checkable values
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> 'ValidationResult':
        """
        Add an error message and mark the result invalid.

        Returns:
            Self for method chaining
        """
        self.errors.append(message)
        self.is_valid = False
        return self

    def add_warning(self, message: str) -> 'ValidationResult':
        """Add a warning message. Warnings never affect validity."""
        self.warnings.append(message)
        return self

    @property
    def has_errors(self) -> bool:
        """Check if there are errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if there are warnings."""
        return len(self.warnings) > 0

    def get_summary(self) -> str:
        """Multi-line listing of errors and warnings, for log output."""
        if self.is_valid and not self.has_warnings:
            return "Validation passed"

        lines: List[str] = []
        for title, messages in (("Errors", self.errors), ("Warnings", self.warnings)):
            if messages:
                lines.append(f"{title} ({len(messages)}):")
                lines.extend(f"  - {message}" for message in messages)

        return "\n".join(lines)


class MalformedRecordError(ValueError):
    """
    Raised when an input record is structurally unusable.

    Attributes:
        record_kind: "lesson" or "schedule"
        index: Position of the record in its input sequence
        errors: Validation error messages
    """

    def __init__(self, record_kind: str, index: int, errors: Sequence[str]):
        self.record_kind = record_kind
        self.index = index
        self.errors = list(errors)
        super().__init__(
            f"Malformed {record_kind} record at index {index}: {'; '.join(self.errors)}"
        )


class Validator(ABC):
    """
    Abstract base class for record validators.

    Subclasses implement validate() for one record shape and reuse the
    field-level helpers below.
    """

    @abstractmethod
    def validate(self, data: Any) -> ValidationResult:
        """
        Validate data.

        Args:
            data: Data to validate

        Returns:
            ValidationResult with errors and warnings
        """
        pass

    def validate_required_fields(
        self,
        data: dict,
        required_fields: List[str]
    ) -> List[str]:
        """
        Validate that required fields exist and are not None.

        Returns:
            List of error messages for missing fields
        """
        errors = []
        for name in required_fields:
            if name not in data or data[name] is None:
                errors.append(f"Missing required field: {name}")
        return errors

    def validate_string(self, value: Any, field_name: str) -> Optional[str]:
        """Validate that value is a string."""
        if not isinstance(value, str):
            return f"{field_name} must be a string, got {type(value).__name__}"
        return None

    def validate_time_of_day(self, value: Any, field_name: str) -> Optional[str]:
        """
        Validate a ``HH:MM`` 24-hour time string.

        Returns:
            Error message if invalid, None if valid
        """
        error = self.validate_string(value, field_name)
        if error:
            return error

        if not is_valid_time_of_day(value):
            return f"Invalid {field_name} format: {value} (expected HH:MM)"
        return None

    def validate_non_negative_integer(
        self,
        value: Any,
        field_name: str
    ) -> Optional[str]:
        """
        Validate that value is an integer >= 0.

        Booleans are rejected even though they subclass int.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            return f"{field_name} must be an integer, got {type(value).__name__}"

        if value < 0:
            return f"{field_name} must not be negative, got {value}"

        return None
