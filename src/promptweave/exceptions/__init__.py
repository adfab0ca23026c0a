"""
promptweave exception classes.

This package provides all exception types used throughout promptweave for
consistent error handling and reporting.
"""

from promptweave.exceptions.core import (
    CircularReferenceError,
    CompileError,
    DirectiveError,
    ErrorContext,
    HoistedNameError,
    MalformedTreeError,
    PromptWeaveError,
    ResolutionError,
    SchemaValidationError,
)

__all__ = [
    "PromptWeaveError",
    "ErrorContext",
    "CompileError",
    "DirectiveError",
    "HoistedNameError",
    "MalformedTreeError",
    "SchemaValidationError",
    "ResolutionError",
    "CircularReferenceError",
]
