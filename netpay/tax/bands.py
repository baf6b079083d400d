"""
Progressive PAYE band table and the per-band breakdown.

Bands are cumulative: every band below the one containing the taxable income
is taxed over its full width, the containing band over the remainder. Each
row's tax is rounded to the cent before the rows are summed.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from netpay.core.utils import round2
from netpay.tax.models import TaxBandEntry

ZERO = Decimal("0")

@dataclass(frozen=True)
class TaxBand:
    floor: Decimal
    ceiling: Optional[Decimal]
    rate: Decimal
    label: str

    @property
    def width(self) -> Optional[Decimal]:
        if self.ceiling is None:
            return None
        return self.ceiling - self.floor

    def contains(self, taxable: Decimal) -> bool:
        return self.ceiling is None or taxable <= self.ceiling

    def entry(self, amount: Decimal) -> TaxBandEntry:
        return TaxBandEntry(
            range_label=self.label,
            amount_taxed_in_band=amount,
            rate=self.rate,
            tax_in_band=round2(amount * self.rate),
        )

def band_label(floor: Decimal, ceiling: Optional[Decimal], currency: str = "KES") -> str:
    if ceiling is None:
        return f"Above {currency} {floor:,}"
    if floor == 0:
        return f"Up to {currency} {ceiling:,}"
    return f"{currency} {floor + 1:,} - {ceiling:,}"

def build_band_table(bands: Sequence[Tuple[Optional[Decimal], Decimal]], currency: str = "KES") -> List[TaxBand]:
    if not bands:
        raise ValueError("PAYE band table is empty")
    table = []
    floor = ZERO
    for i, (ceiling, rate) in enumerate(bands):
        if ceiling is None and i != len(bands) - 1:
            raise ValueError("Only the last PAYE band may be open-ended")
        if ceiling is not None and ceiling <= floor:
            raise ValueError(f"PAYE band ceilings must increase: {ceiling} after {floor}")
        table.append(TaxBand(floor=floor, ceiling=ceiling, rate=rate, label=band_label(floor, ceiling, currency)))
        if ceiling is not None:
            floor = ceiling
    if table[-1].ceiling is not None:
        raise ValueError("The last PAYE band must be open-ended")
    return table

def compute_band_breakdown(taxable: Decimal, table: Sequence[TaxBand]) -> Tuple[List[TaxBandEntry], Decimal]:
    """Return (rows, total tax before relief). A non-positive income stays in the first band."""
    rows: List[TaxBandEntry] = []
    for band in table:
        if band.contains(taxable):
            rows.append(band.entry(taxable - band.floor))
            break
        rows.append(band.entry(band.width))
    total = round2(sum(row.tax_in_band for row in rows))
    return rows, total

def apply_relief(tax_before_relief: Decimal, relief: Decimal) -> Decimal:
    return round2(max(round2(tax_before_relief - relief), ZERO))
