"""
Validation errors raised while turning salary inputs into a calculation.
All of them are recoverable by the caller: fix the input and calculate again.
"""
from typing import Dict, Optional

FIELD_FORMAT_MESSAGE = "Enter a positive number up to KES 100M (max 2 decimals)"
MISSING_BASIC_SALARY_MESSAGE = "Please enter a valid Basic Salary"
FIX_INPUT_ERRORS_MESSAGE = "Please fix input errors"

class SalaryValidationError(ValueError):
    """Base error: a field-keyed message map plus an optional global message."""

    def __init__(self, global_message: Optional[str] = None, field_errors: Optional[Dict[str, str]] = None):
        self.global_message = global_message
        self.field_errors = {k: v for k, v in (field_errors or {}).items() if v}
        super().__init__(global_message or "; ".join(f"{k}: {v}" for k, v in self.field_errors.items()))

class FieldFormatError(SalaryValidationError):
    """Raw text failed the amount pattern, the decimal limit or the maximum."""

    def __init__(self, field_errors: Dict[str, str]):
        super().__init__(None, field_errors)

class MissingRequiredInput(SalaryValidationError):
    """Basic salary is absent, zero, negative or not a number."""

    def __init__(self, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(MISSING_BASIC_SALARY_MESSAGE, field_errors)

class StaleErrorState(SalaryValidationError):
    """A field still holds an uncorrected error."""

    def __init__(self, field_errors: Dict[str, str]):
        super().__init__(FIX_INPUT_ERRORS_MESSAGE, field_errors)
