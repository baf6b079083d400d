"""
Batch net-pay processing: one calculation per row of an uploaded salary file.
Rows are independent; a rejected row is reported and the rest still compute.
"""
import math
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from ..core.upload_manager import ColumnMapping, UploadManager
from ..core.utils import round2, setup_logging
from ..tax.errors import SalaryValidationError
from ..tax.models import SalaryInputs
from ..tax.validation import SALARY_FIELDS
from .engine import TaxEngine

RESULT_COLUMNS = [
    'gross', 'taxable', 'paye_tax_gross', 'paye_tax', 'pension_fund_levy',
    'health_fund_levy', 'housing_levy', 'pension_deduction_applied',
    'mortgage_deduction_applied', 'medical_deduction_applied',
    'total_deductions', 'net_pay', 'personal_relief'
]

TOTAL_COLUMNS = {
    'gross': 'total_gross',
    'paye_tax': 'total_paye',
    'pension_fund_levy': 'total_nssf',
    'health_fund_levy': 'total_shif',
    'housing_levy': 'total_housing_levy',
    'net_pay': 'total_net_pay',
}

@dataclass
class BatchResult:
    """Outcome of one batch with per-row results and errors."""
    total_rows: int
    processed_rows: int
    error_rows: int
    results: pd.DataFrame
    row_errors: List[Dict[str, Any]] = field(default_factory=list)
    totals: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.processed_rows > 0

def cell_to_text(value: Any) -> str:
    """Render a loaded cell as the raw text the amount validator expects."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        return str(Decimal(str(value)))
    return str(value)

class PayrollBulkProcessor:
    """Computes net pay for every employee row in a CSV/Excel/JSON file."""

    def __init__(self, engine: Optional[TaxEngine] = None):
        self.engine = engine or TaxEngine()
        self.upload_manager = UploadManager('salary_inputs')
        self.logger = setup_logging("batch")

    def get_template(self) -> pd.DataFrame:
        """Get salary upload template."""
        return self.upload_manager.generate_template()

    def process_file(
        self,
        file_path: Union[str, Path],
        column_mappings: Optional[List[Dict[str, str]]] = None
    ) -> BatchResult:
        """
        Load a salary file and compute every row.

        Args:
            file_path: Path to CSV/Excel/JSON file
            column_mappings: Optional list of {'source': 'col_name', 'target': 'field', 'transform': ...}
        """
        df = self.upload_manager.load_file(file_path)
        if column_mappings:
            mappings = [
                ColumnMapping(
                    source_column=m['source'],
                    target_field=m['target'],
                    transform=m.get('transform')
                )
                for m in column_mappings
            ]
            df = self.upload_manager.map_columns(df, mappings)
        return self.process_frame(df)

    def process_frame(self, df: pd.DataFrame) -> BatchResult:
        missing = self.upload_manager.missing_columns(df)
        if missing:
            raise ValueError(f"Missing required column(s): {', '.join(missing)}")

        rows: List[Dict[str, Any]] = []
        row_errors: List[Dict[str, Any]] = []

        for idx, (_, row) in enumerate(df.iterrows(), start=1):
            record = {k: cell_to_text(v) for k, v in row.to_dict().items()}
            text_problems = self.upload_manager.check_text_fields(record)
            if text_problems:
                row_errors.append({'row': idx, 'errors': {}, 'message': "; ".join(text_problems)})
                continue
            try:
                inputs = SalaryInputs.from_raw({f: record.get(f, "") for f in SALARY_FIELDS})
                result = self.engine.compute(inputs)
            except SalaryValidationError as e:
                row_errors.append({
                    'row': idx,
                    'errors': dict(e.field_errors),
                    'message': e.global_message or "Invalid amount(s)"
                })
                self.logger.warning("batch row %s rejected: %s", idx, e)
                continue

            line = {'row': idx}
            for key in ('employee_id', 'full_name'):
                if record.get(key):
                    line[key] = record[key]
            for col in RESULT_COLUMNS:
                line[col] = getattr(result, col)
            line['band_count'] = len(result.tax_band_breakdown)
            rows.append(line)

        results = pd.DataFrame(rows)
        totals = self._totals(rows)
        self.logger.info(
            "batch processed total=%s ok=%s errors=%s net=%s",
            len(df), len(rows), len(row_errors), totals.get('total_net_pay')
        )
        return BatchResult(
            total_rows=len(df),
            processed_rows=len(rows),
            error_rows=len(row_errors),
            results=results,
            row_errors=row_errors,
            totals=totals
        )

    def _totals(self, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        totals = {}
        for col, name in TOTAL_COLUMNS.items():
            totals[name] = round2(sum((r[col] for r in rows), Decimal("0")))
        totals['employees'] = len(rows)
        return totals
