"""
Field-level validation of raw salary amounts.

A raw value is accepted when it is empty (treated as 0) or a plain decimal
with at most two fractional digits that does not exceed the configured
maximum. Rejections are recorded in a caller-owned error map keyed by field.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from netpay.core.config import settings
from netpay.core.utils import CENT
from netpay.tax.errors import FIELD_FORMAT_MESSAGE, FieldFormatError

AMOUNT_PATTERN = re.compile(r"[0-9]+(\.[0-9]{1,2})?")

SALARY_FIELDS = (
    "basic_salary",
    "benefits",
    "pension_contribution",
    "mortgage_interest",
    "medical_fund_contribution",
)

FIELD_LABELS = {
    "basic_salary": "Basic Salary",
    "benefits": "Benefits / Allowances",
    "pension_contribution": "Pension Contribution",
    "mortgage_interest": "Mortgage Interest",
    "medical_fund_contribution": "Post-Retirement Medical Fund",
}

def is_valid_amount(raw: str, max_amount: Optional[Decimal] = None) -> bool:
    if max_amount is None:
        max_amount = settings.MAX_INPUT_AMOUNT
    if not AMOUNT_PATTERN.fullmatch(raw):
        return False
    return Decimal(raw) <= max_amount

def validate_amount(raw: str, errors: Dict[str, str], field: str, max_amount: Optional[Decimal] = None) -> bool:
    """Accept or reject one raw value, clearing or recording the field's error."""
    if raw == "" or is_valid_amount(raw, max_amount):
        errors.pop(field, None)
        return True
    errors[field] = FIELD_FORMAT_MESSAGE
    return False

def parse_amount(raw: Optional[str], field: str = "amount") -> Optional[Decimal]:
    """Parse a raw amount; empty means absent (None). Raises FieldFormatError."""
    if raw is None or raw == "":
        return None
    errors: Dict[str, str] = {}
    if not validate_amount(raw, errors, field):
        raise FieldFormatError(errors)
    return Decimal(raw)

def check_amount(field: str, value: Decimal, max_amount: Optional[Decimal] = None):
    """Enforce the amount invariants on an already-numeric value."""
    if max_amount is None:
        max_amount = settings.MAX_INPUT_AMOUNT
    try:
        ok = value.is_finite() and value >= 0 and value == value.quantize(CENT) and value <= max_amount
    except InvalidOperation:
        ok = False
    if not ok:
        raise FieldFormatError({field: FIELD_FORMAT_MESSAGE})
