
import io
from decimal import Decimal
from typing import Dict
import pandas as pd

from netpay.core.config import settings
from netpay.tax.models import CalculationResult

def format_currency(amount: Decimal, currency: str = None) -> str:
    currency = currency or settings.CURRENCY
    return f"{currency} {amount:,.2f}"

class PayslipReport:
    """Read-only views of a single CalculationResult for display, print and download."""

    def __init__(self, result: CalculationResult, currency: str = None):
        self.result = result
        self.currency = currency or settings.CURRENCY

    def fmt(self, amount: Decimal) -> str:
        return format_currency(amount, self.currency)

    def summary(self) -> Dict[str, Decimal]:
        r = self.result
        return {
            "Gross Pay": r.gross,
            "Taxable Income": r.taxable,
            "Total Deductions": r.total_deductions,
            "PAYE": r.paye_tax,
            "Net Pay": r.net_pay,
        }

    def deductions_frame(self) -> pd.DataFrame:
        r = self.result
        lines = [
            ("PAYE", r.paye_tax),
            ("NSSF", r.pension_fund_levy),
            ("SHIF", r.health_fund_levy),
            ("Housing Levy", r.housing_levy),
        ]
        # voluntary deductions are only listed when claimed
        for label, amount in (
            ("Pension Contribution", r.pension_deduction_applied),
            ("Mortgage Interest", r.mortgage_deduction_applied),
            ("Post-Retirement Medical Fund", r.medical_deduction_applied),
        ):
            if amount != 0:
                lines.append((label, amount))
        return pd.DataFrame(lines, columns=["Deduction", "Amount"])

    def band_frame(self) -> pd.DataFrame:
        rows = [
            {
                "Range": e.range_label,
                "Amount": e.amount_taxed_in_band,
                "Rate": e.rate_label,
                "Tax": e.tax_in_band,
            }
            for e in self.result.tax_band_breakdown
        ]
        return pd.DataFrame(rows, columns=["Range", "Amount", "Rate", "Tax"])

    def to_text(self, width: int = 48) -> str:
        r = self.result
        label_w = width - 18
        lines = ["NET PAY CALCULATION".center(width), "=" * width]
        for label, amount in self.summary().items():
            lines.append(f"{label:<{label_w}}{self.fmt(amount):>18}")
        lines += ["-" * width, "Deductions"]
        for _, row in self.deductions_frame().iterrows():
            lines.append(f"  {row['Deduction']:<{label_w - 2}}{self.fmt(row['Amount']):>18}")
        lines += ["-" * width, "PAYE Tax Bands"]
        for e in r.tax_band_breakdown:
            lines.append(f"  {e.range_label} @ {e.rate_label}")
            lines.append(f"    {self.fmt(e.amount_taxed_in_band):<{label_w - 4}}{self.fmt(e.tax_in_band):>18}")
        lines.append(f"{'Tax before relief':<{label_w}}{self.fmt(r.paye_tax_gross):>18}")
        lines.append(f"{'Personal Relief':<{label_w}}{self.fmt(r.personal_relief):>18}")
        lines.append(f"{'PAYE payable':<{label_w}}{self.fmt(r.paye_tax):>18}")
        lines.append("=" * width)
        return "\n".join(lines) + "\n"

    def to_csv(self) -> str:
        rows = [{"Item": k, "Amount": v} for k, v in self.summary().items()]
        rows += [{"Item": row["Deduction"], "Amount": row["Amount"]} for _, row in self.deductions_frame().iterrows()]
        rows.append({"Item": "Personal Relief", "Amount": self.result.personal_relief})
        return pd.DataFrame(rows, columns=["Item", "Amount"]).to_csv(index=False)

    def to_excel_bytes(self) -> bytes:
        buffer = io.BytesIO()
        summary = pd.DataFrame(
            [{"Item": k, "Amount": float(v)} for k, v in self.summary().items()]
        )
        deductions = self.deductions_frame().assign(Amount=lambda d: d["Amount"].astype(float))
        bands = self.band_frame()
        bands["Amount"] = bands["Amount"].astype(float)
        bands["Tax"] = bands["Tax"].astype(float)
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            summary.to_excel(writer, sheet_name="Summary", index=False)
            deductions.to_excel(writer, sheet_name="Deductions", index=False)
            bands.to_excel(writer, sheet_name="Tax Bands", index=False)
        return buffer.getvalue()
