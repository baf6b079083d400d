"""
Calculator form state: the stored raw field values, their errors, and the
last calculation outcome. Presentation layers keep one SalaryForm per user
session and call into it; the form never computes anything itself.
"""
from decimal import Decimal
from typing import Dict, Optional

from netpay.core.utils import setup_logging
from netpay.payroll.engine import TaxEngine, compute
from netpay.tax.errors import SalaryValidationError
from netpay.tax.models import CalculationResult, SalaryInputs
from netpay.tax.validation import SALARY_FIELDS, validate_amount

logger = setup_logging("form")

class SalaryForm:
    def __init__(self, engine: Optional[TaxEngine] = None):
        self.engine = engine
        self.values: Dict[str, str] = {f: "" for f in SALARY_FIELDS}
        self.errors: Dict[str, str] = {}
        self.global_error = ""
        self.result: Optional[CalculationResult] = None

    @property
    def has_errors(self) -> bool:
        return any(self.errors.values())

    def handle_input(self, field: str, value: str) -> bool:
        """Store value if it validates; otherwise keep the previous value and record the error."""
        if field not in self.values:
            raise KeyError(field)
        if validate_amount(value, self.errors, field):
            self.values[field] = value
            return True
        logger.warning("rejected input field=%s value=%r message=%s", field, value, self.errors[field])
        return False

    def to_inputs(self) -> SalaryInputs:
        return SalaryInputs(**{f: (Decimal(v) if v else None) for f, v in self.values.items()})

    def calculate(self) -> Optional[CalculationResult]:
        try:
            inputs = self.to_inputs()
            if self.engine is not None:
                result = self.engine.compute(inputs, self.errors)
            else:
                result = compute(inputs, self.errors)
        except SalaryValidationError as exc:
            self.global_error = exc.global_message or str(exc)
            self.result = None
            return None
        self.global_error = ""
        self.result = result
        return result

    def reset(self):
        self.values = {f: "" for f in SALARY_FIELDS}
        self.errors = {}
        self.global_error = ""
        self.result = None
