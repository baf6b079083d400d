import logging
import logging.handlers
from decimal import Decimal as D
import pytest

from netpay.core.config import Settings
from netpay.payroll import engine as engine_module
from netpay.payroll.engine import TaxEngine, compute
from netpay.tax.errors import (
    FIELD_FORMAT_MESSAGE, FIX_INPUT_ERRORS_MESSAGE, MISSING_BASIC_SALARY_MESSAGE,
    MissingRequiredInput, StaleErrorState,
)
from netpay.tax.models import SalaryInputs

@pytest.fixture
def eng():
    return TaxEngine()

def test_typical_salary(eng):
    r = eng.compute(SalaryInputs(basic_salary=D("50000")))
    assert r.gross == D("50000.00")
    assert r.pension_fund_levy == D("3000.00")
    assert r.health_fund_levy == D("1375.00")
    assert r.housing_levy == D("750.00")
    assert r.taxable == D("44875.00")
    assert r.paye_tax_gross == D("8245.85")
    assert r.paye_tax == D("5845.85")
    assert r.total_deductions == D("10970.85")
    assert r.net_pay == D("39029.15")
    assert r.personal_relief == D("2400.00")
    assert len(r.tax_band_breakdown) == 3

def test_low_salary_relief_wipes_out_paye(eng):
    r = eng.compute(SalaryInputs(basic_salary=D("5000")))
    assert (r.pension_fund_levy, r.health_fund_levy, r.housing_levy) == (D("300.00"), D("300.00"), D("75.00"))
    assert r.taxable == D("4325.00")
    assert r.paye_tax_gross == D("432.50")
    assert r.paye_tax == D("0.00")
    assert r.net_pay == D("4325.00")
    assert r.total_deductions == D("675.00")

def test_high_earner_reaches_top_band(eng):
    r = eng.compute(SalaryInputs(basic_salary=D("1000000")))
    assert r.pension_fund_levy == D("4320.00")
    assert r.health_fund_levy == D("27500.00")
    assert r.housing_levy == D("15000.00")
    assert r.taxable == D("953180.00")
    assert r.paye_tax_gross == D("295896.35")
    assert r.paye_tax == D("293496.35")
    assert r.net_pay == D("659683.65")
    assert [e.range_label for e in r.tax_band_breakdown][-1] == "Above KES 800,000"

def test_voluntary_deductions_are_capped(eng):
    r = eng.compute(SalaryInputs(
        basic_salary=D("100000"), pension_contribution=D("50000"),
        mortgage_interest=D("30000"), medical_fund_contribution=D("20000"),
    ))
    assert r.pension_deduction_applied == D("30000")
    assert r.mortgage_deduction_applied == D("25000")
    assert r.medical_deduction_applied == D("15000")
    assert r.taxable == D("21430.00")
    assert r.paye_tax == D("0.00")
    assert r.total_deductions == D("78570.00")
    assert r.net_pay == D("21430.00")

def test_net_pay_may_go_negative(eng):
    r = eng.compute(SalaryInputs(
        basic_salary=D("1000"), pension_contribution=D("30000"),
        mortgage_interest=D("25000"), medical_fund_contribution=D("15000"),
    ))
    assert r.taxable == D("-69375.00")
    assert r.paye_tax_gross == D("-6937.50")
    assert r.paye_tax == D("0.00")
    assert r.total_deductions == D("70375.00")
    assert r.net_pay == D("-69375.00")
    assert len(r.tax_band_breakdown) == 1

def test_every_step_is_rounded_to_the_cent(eng):
    r = eng.compute(SalaryInputs(basic_salary=D("60000.55"), benefits=D("4999.99")))
    assert r.gross == D("65000.54")
    assert r.pension_fund_levy == D("3900.03")
    assert r.health_fund_levy == D("1787.51")
    assert r.housing_levy == D("975.01")
    assert r.taxable == D("58337.99")
    assert r.tax_band_breakdown[2].tax_in_band == D("7801.50")
    assert r.paye_tax_gross == D("12284.75")
    assert r.paye_tax == D("9884.75")
    assert r.total_deductions == D("16547.30")
    assert r.net_pay == D("48453.24")

def test_small_decimal_salary(eng):
    r = eng.compute(SalaryInputs(basic_salary=D("12345.67")))
    assert r.pension_fund_levy == D("740.74")
    assert r.health_fund_levy == D("339.51")
    assert r.housing_levy == D("185.19")
    assert r.taxable == D("11080.23")
    assert r.paye_tax == D("0.00")
    assert r.net_pay == D("11080.23")

@pytest.mark.parametrize("basic,benefits", [("5000", "0"), ("24000", "0"), ("50000", "2500.50"), ("333333.33", "0"), ("1000000", "125000")])
def test_result_identities(eng, basic, benefits):
    r = eng.compute(SalaryInputs(basic_salary=D(basic), benefits=D(benefits)))
    assert r.net_pay + r.total_deductions == r.gross
    assert sum(e.tax_in_band for e in r.tax_band_breakdown) == r.paye_tax_gross
    assert r.paye_tax >= 0
    assert all(v == v.quantize(D("0.01")) for v in (r.gross, r.taxable, r.paye_tax, r.net_pay, r.total_deductions))

def test_compute_is_idempotent(eng):
    inputs = SalaryInputs(basic_salary=D("75000"), benefits=D("1234.56"), mortgage_interest=D("9000"))
    assert eng.compute(inputs) == eng.compute(inputs)

@pytest.mark.parametrize("basic", [None, D("0"), D("-5"), D("NaN")])
def test_missing_basic_salary_refused(eng, basic):
    with pytest.raises(MissingRequiredInput) as exc:
        eng.compute(SalaryInputs(basic_salary=basic))
    assert exc.value.global_message == MISSING_BASIC_SALARY_MESSAGE

def test_missing_basic_takes_precedence_over_field_errors(eng):
    with pytest.raises(MissingRequiredInput) as exc:
        eng.compute(SalaryInputs(), {"benefits": FIELD_FORMAT_MESSAGE})
    assert exc.value.field_errors == {"benefits": FIELD_FORMAT_MESSAGE}

def test_outstanding_field_error_blocks_calculation(eng):
    with pytest.raises(StaleErrorState) as exc:
        eng.compute(SalaryInputs(basic_salary=D("50000")), {"benefits": FIELD_FORMAT_MESSAGE})
    assert exc.value.global_message == FIX_INPUT_ERRORS_MESSAGE

def test_cleared_field_errors_are_ignored(eng):
    r = eng.compute(SalaryInputs(basic_salary=D("50000")), {"benefits": "", "mortgage_interest": ""})
    assert r.net_pay == D("39029.15")

def test_module_level_compute_shares_default_engine():
    r = compute(SalaryInputs(basic_salary=D("50000")))
    assert r.net_pay == D("39029.15")
    assert isinstance(engine_module._default_engine, TaxEngine)

def test_settings_override():
    eng = TaxEngine(Settings(PERSONAL_RELIEF_MONTHLY=D("0")))
    r = eng.compute(SalaryInputs(basic_salary=D("50000")))
    assert r.personal_relief == D("0.00")
    assert r.paye_tax == D("8245.85")

def test_to_dict_serialises_amounts_as_strings(eng):
    d = eng.compute(SalaryInputs(basic_salary=D("50000"))).to_dict()
    assert d["net_pay"] == "39029.15"
    assert d["tax_band_breakdown"][0]["range_label"] == "Up to KES 24,000"

def test_refused_calculation_is_logged_as_warning(eng):
    handler = next(h for h in eng.logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler))
    with pytest.raises(MissingRequiredInput):
        eng.compute(SalaryInputs())
    with pytest.raises(StaleErrorState):
        eng.compute(SalaryInputs(basic_salary=D("50000")), {"benefits": FIELD_FORMAT_MESSAGE})
    handler.flush()
    with open(handler.baseFilename) as f:
        lines = f.read().splitlines()
    assert any("WARNING" in l and "missing basic salary" in l for l in lines)
    assert any("WARNING" in l and "unresolved field errors" in l for l in lines)
