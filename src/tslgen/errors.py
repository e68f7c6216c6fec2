"""
Error types raised by the TSL generator.

Parsing problems are reported by the parsing layer before any frame is
generated. The generator itself only raises ContractViolation (a broken
object graph was handed in) and GenerationLimitExceeded (step budget).
"""

from enum import Enum
from typing import Optional


class TslErrorType(Enum):
    """Classification of a TslError."""

    SYNTAX = "syntax"
    PROPERTY = "property"
    EXPRESSION = "expression"
    CONSTRAINT = "constraint"
    FILE_SYSTEM = "fileSystem"
    CONTRACT = "contract"
    LIMIT = "limit"


class TslError(Exception):
    """
    Base class for all TSL errors.

    Properties:
        message: What went wrong
        error_type: TslErrorType classification
        file_path: Source file (or "<string>"), if known
        line_number: 1-based line number, if known
        line_content: The offending source line, if known
    """

    default_type = TslErrorType.SYNTAX

    def __init__(
        self,
        message: str,
        error_type: Optional[TslErrorType] = None,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type or self.default_type
        self.file_path = file_path
        self.line_number = line_number
        self.line_content = line_content

    def location(self) -> Optional[str]:
        """Return "file:line" (or just the file), None when unknown."""
        if self.file_path is None:
            return None
        if self.line_number is None:
            return self.file_path
        return f"{self.file_path}:{self.line_number}"

    def __str__(self) -> str:
        lines = [f"Error: {self.error_type.value}: {self.message}"]
        location = self.location()
        if location:
            lines.append(f"  at {location}")
        if self.line_content is not None:
            lines.append(f"  | {self.line_content}")
        return "\n".join(lines)


class TslParseError(TslError):
    """Raised when TSL text cannot be parsed."""
    pass


class ExpressionParseError(TslParseError):
    """Raised when an [if ...] expression is malformed or uses an undefined property."""

    default_type = TslErrorType.EXPRESSION


class ContractViolation(TslError):
    """
    Raised when the generator receives a structurally invalid object graph.

    These are programming errors in whatever built the graph, not user
    input errors. Generation is aborted before any frame is produced.
    """

    default_type = TslErrorType.CONTRACT


class GenerationLimitExceeded(TslError):
    """Raised when frame generation exceeds its configured step budget."""

    default_type = TslErrorType.LIMIT


__all__ = [
    "TslErrorType",
    "TslError",
    "TslParseError",
    "ExpressionParseError",
    "ContractViolation",
    "GenerationLimitExceeded",
]
