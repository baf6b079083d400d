from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Tuple

from netpay.core.utils import to_decimal
from netpay.tax.errors import FIELD_FORMAT_MESSAGE, FieldFormatError
from netpay.tax.validation import SALARY_FIELDS, check_amount, is_valid_amount, parse_amount

ZERO = Decimal("0")

@dataclass(frozen=True)
class SalaryInputs:
    """Immutable snapshot of one employee's monthly salary inputs."""
    basic_salary: Optional[Decimal] = None
    benefits: Decimal = ZERO
    pension_contribution: Decimal = ZERO
    mortgage_interest: Decimal = ZERO
    medical_fund_contribution: Decimal = ZERO

    def __post_init__(self):
        for name in SALARY_FIELDS:
            value = getattr(self, name)
            if value is None:
                if name == "basic_salary":
                    continue
                value = ZERO
            # text must match the same pattern the form applies
            if isinstance(value, str) and not is_valid_amount(value):
                raise FieldFormatError({name: FIELD_FORMAT_MESSAGE})
            try:
                value = to_decimal(value)
            except (InvalidOperation, TypeError, ValueError):
                raise FieldFormatError({name: FIELD_FORMAT_MESSAGE})
            # a non-positive basic salary is representable; the engine refuses it
            if name == "basic_salary" and (not value.is_finite() or value <= 0):
                object.__setattr__(self, name, value)
                continue
            check_amount(name, value)
            object.__setattr__(self, name, value)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "SalaryInputs":
        """Build from raw text values, collecting every field error before raising."""
        errors: Dict[str, str] = {}
        values = {}
        for name in SALARY_FIELDS:
            text = raw.get(name)
            try:
                values[name] = parse_amount(None if text is None else str(text), name)
            except FieldFormatError as e:
                errors.update(e.field_errors)
        if errors:
            raise FieldFormatError(errors)
        return cls(**values)

@dataclass(frozen=True)
class TaxBandEntry:
    """One row of the progressive PAYE breakdown."""
    range_label: str
    amount_taxed_in_band: Decimal
    rate: Decimal
    tax_in_band: Decimal

    @property
    def rate_label(self) -> str:
        return f"{format((self.rate * 100).normalize(), 'f')}%"

    def to_dict(self) -> Dict[str, str]:
        return {
            "range_label": self.range_label,
            "amount_taxed_in_band": str(self.amount_taxed_in_band),
            "rate": self.rate_label,
            "tax_in_band": str(self.tax_in_band),
        }

@dataclass(frozen=True)
class CalculationResult:
    """Fully itemised outcome of one calculation. Never mutated after construction."""
    gross: Decimal
    taxable: Decimal
    paye_tax_gross: Decimal
    paye_tax: Decimal
    pension_fund_levy: Decimal
    health_fund_levy: Decimal
    housing_levy: Decimal
    pension_deduction_applied: Decimal
    mortgage_deduction_applied: Decimal
    medical_deduction_applied: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    personal_relief: Decimal
    tax_band_breakdown: Tuple[TaxBandEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "tax_band_breakdown":
                out[f.name] = [entry.to_dict() for entry in value]
            else:
                out[f.name] = str(value)
        return out
