
from decimal import Decimal
from typing import List, Tuple

from netpay.core.config import Settings, settings as default_settings
from netpay.core.utils import round2
from netpay.tax.bands import apply_relief, build_band_table, compute_band_breakdown
from netpay.tax.models import SalaryInputs, TaxBandEntry

class KenyanPayroll:
    """Statutory deductions on monthly gross pay: NSSF, SHIF, Housing Levy and PAYE."""

    def __init__(self, config: Settings = None):
        self.settings = config or default_settings
        self.bands = build_band_table(self.settings.PAYE_BANDS, self.settings.CURRENCY)

    def compute_nssf(self, gross: Decimal) -> Decimal:
        s = self.settings
        if gross <= s.NSSF_TIER_1_UPPER:
            return round2(gross * s.NSSF_RATE)
        tier1 = round2(s.NSSF_TIER_1_UPPER * s.NSSF_RATE)
        # earnings above the Tier II ceiling are not pensionable
        pensionable = min(gross, s.NSSF_TIER_2_UPPER) - s.NSSF_TIER_1_UPPER
        tier2 = round2(pensionable * s.NSSF_RATE)
        return round2(tier1 + tier2)

    def compute_shif(self, gross: Decimal) -> Decimal:
        return round2(max(gross * self.settings.SHIF_RATE, self.settings.SHIF_MINIMUM))

    def compute_housing_levy(self, gross: Decimal) -> Decimal:
        return round2(gross * self.settings.HOUSING_LEVY_RATE)

    def capped_deductions(self, inputs: SalaryInputs) -> Tuple[Decimal, Decimal, Decimal]:
        s = self.settings
        return (
            min(inputs.pension_contribution, s.PENSION_DEDUCTION_CAP),
            min(inputs.mortgage_interest, s.MORTGAGE_INTEREST_CAP),
            min(inputs.medical_fund_contribution, s.MEDICAL_FUND_CAP),
        )

    def compute_paye(self, taxable: Decimal) -> Tuple[List[TaxBandEntry], Decimal, Decimal]:
        """Return (band rows, tax before relief, tax payable after relief)."""
        rows, tax_before_relief = compute_band_breakdown(taxable, self.bands)
        payable = apply_relief(tax_before_relief, self.settings.PERSONAL_RELIEF_MONTHLY)
        return rows, tax_before_relief, payable
