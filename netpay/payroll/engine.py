from typing import Dict, Mapping, Optional

from netpay.core.config import Settings, settings as default_settings
from netpay.core.utils import round2, setup_logging
from netpay.tax.errors import MissingRequiredInput, StaleErrorState
from netpay.tax.models import CalculationResult, SalaryInputs
from netpay.tax.payroll import KenyanPayroll

class TaxEngine:
    """Maps one SalaryInputs snapshot to one CalculationResult. Holds no per-call state."""

    def __init__(self, config: Settings = None):
        self.settings = config or default_settings
        self.payroll = KenyanPayroll(self.settings)
        self.logger = setup_logging("engine")

    def _check_inputs(self, inputs: SalaryInputs, field_errors: Optional[Mapping[str, str]]) -> Dict[str, str]:
        errors = {k: v for k, v in (field_errors or {}).items() if v}
        basic = inputs.basic_salary
        if basic is None or not basic.is_finite() or basic <= 0:
            self.logger.warning("calculation refused: missing basic salary inputs=%s errors=%s", inputs, errors)
            raise MissingRequiredInput(errors)
        if errors:
            self.logger.warning("calculation refused: unresolved field errors inputs=%s errors=%s", inputs, errors)
            raise StaleErrorState(errors)
        return errors

    def compute(self, inputs: SalaryInputs, field_errors: Optional[Mapping[str, str]] = None) -> CalculationResult:
        """
        Compute gross, statutory levies, taxable income, PAYE and net pay.

        Every intermediate amount is rounded to the cent as soon as it is
        produced. Raises MissingRequiredInput or StaleErrorState instead of
        returning a partial result.
        """
        self._check_inputs(inputs, field_errors)
        p = self.payroll

        gross = round2(inputs.basic_salary + inputs.benefits)
        nssf = p.compute_nssf(gross)
        shif = p.compute_shif(gross)
        housing = p.compute_housing_levy(gross)
        pension, mortgage, medical = p.capped_deductions(inputs)

        # may go negative when deductions exceed gross; the band step still runs
        taxable = round2(gross - nssf - shif - housing - pension - mortgage - medical)
        breakdown, paye_gross, paye = p.compute_paye(taxable)

        total_deductions = round2(paye + nssf + shif + housing + pension + mortgage + medical)
        net_pay = round2(gross - total_deductions)

        result = CalculationResult(
            gross=gross,
            taxable=taxable,
            paye_tax_gross=paye_gross,
            paye_tax=paye,
            pension_fund_levy=nssf,
            health_fund_levy=shif,
            housing_levy=housing,
            pension_deduction_applied=pension,
            mortgage_deduction_applied=mortgage,
            medical_deduction_applied=medical,
            total_deductions=total_deductions,
            net_pay=net_pay,
            personal_relief=round2(self.settings.PERSONAL_RELIEF_MONTHLY),
            tax_band_breakdown=tuple(breakdown),
        )
        self.logger.debug("computed gross=%s taxable=%s paye=%s net=%s", gross, taxable, paye, net_pay)
        return result

_default_engine: Optional[TaxEngine] = None

def compute(inputs: SalaryInputs, field_errors: Optional[Mapping[str, str]] = None) -> CalculationResult:
    """Module-level entry point backed by a shared engine on the default settings."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TaxEngine()
    return _default_engine.compute(inputs, field_errors)
