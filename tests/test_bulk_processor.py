import json
from decimal import Decimal as D
import pandas as pd
import pytest

from netpay.core.schemas import SchemaRegistry
from netpay.payroll.bulk_processor import PayrollBulkProcessor, cell_to_text
from netpay.tax.errors import FIELD_FORMAT_MESSAGE, MISSING_BASIC_SALARY_MESSAGE

CSV = """employee_id,basic_salary,benefits
EMP001,50000,
EMP002,12.345,0
EMP003,,100
EMP004,4000,1000
"""

@pytest.fixture
def proc():
    return PayrollBulkProcessor()

def test_csv_mixed_rows(tmp_path, proc):
    file = tmp_path / "salaries.csv"; file.write_text(CSV)
    res = proc.process_file(file)
    assert (res.total_rows, res.processed_rows, res.error_rows) == (4, 2, 2)
    assert res.success
    assert list(res.results["employee_id"]) == ["EMP001", "EMP004"]
    assert list(res.results["row"]) == [1, 4]
    assert res.results.loc[0, "net_pay"] == D("39029.15")
    assert res.results.loc[1, "net_pay"] == D("4325.00")
    assert res.totals["total_net_pay"] == D("43354.15")
    assert res.totals["total_gross"] == D("55000.00")
    assert res.totals["employees"] == 2
    bad_format, missing = res.row_errors
    assert bad_format["row"] == 2
    assert bad_format["errors"] == {"basic_salary": FIELD_FORMAT_MESSAGE}
    assert bad_format["message"] == "Invalid amount(s)"
    assert missing["row"] == 3
    assert missing["message"] == MISSING_BASIC_SALARY_MESSAGE

def test_json_numbers(tmp_path, proc):
    file = tmp_path / "salaries.json"
    file.write_text(json.dumps([{"basic_salary": 50000}, {"basic_salary": 5000, "benefits": 0.5}]))
    res = proc.process_file(file)
    assert res.processed_rows == 2
    assert res.results.loc[0, "paye_tax"] == D("5845.85")
    assert res.results.loc[1, "gross"] == D("5000.50")

def test_column_mapping(tmp_path, proc):
    file = tmp_path / "payroll.csv"
    file.write_text("Staff No,Basic Pay\n emp9 ,50000\n")
    res = proc.process_file(file, column_mappings=[
        {"source": "Staff No", "target": "employee_id", "transform": "strip"},
        {"source": "Basic Pay", "target": "basic_salary"},
    ])
    assert res.processed_rows == 1
    assert res.results.loc[0, "employee_id"] == "emp9"
    assert res.results.loc[0, "band_count"] == 3

def test_missing_required_column(tmp_path, proc):
    file = tmp_path / "s.csv"; file.write_text("employee_id,benefits\nEMP1,100\n")
    with pytest.raises(ValueError, match="basic_salary"):
        proc.process_file(file)

def test_unsupported_and_missing_files(tmp_path, proc):
    file = tmp_path / "s.txt"; file.write_text("basic_salary\n1000\n")
    with pytest.raises(ValueError):
        proc.process_file(file)
    with pytest.raises(FileNotFoundError):
        proc.process_file(tmp_path / "nope.csv")

def test_text_field_too_long_is_row_error(proc):
    df = pd.DataFrame([{"employee_id": "X" * 21, "basic_salary": "50000"}, {"employee_id": "OK", "basic_salary": "50000"}])
    res = proc.process_frame(df)
    assert res.processed_rows == 1
    assert res.row_errors[0]["row"] == 1
    assert "employee_id" in res.row_errors[0]["message"]

def test_all_rows_rejected(proc):
    res = proc.process_frame(pd.DataFrame([{"basic_salary": "0"}]))
    assert not res.success
    assert res.results.empty
    assert res.totals["total_net_pay"] == D("0.00")

def test_template_has_every_column(proc):
    tpl = proc.get_template()
    assert len(tpl) == 1
    assert list(tpl.columns) == [
        "employee_id", "full_name", "basic_salary", "benefits",
        "pension_contribution", "mortgage_interest", "medical_fund_contribution",
    ]
    assert tpl.loc[0, "employee_id"] == "EMP001"

def test_cell_to_text():
    assert cell_to_text(None) == ""
    assert cell_to_text(float("nan")) == ""
    assert cell_to_text(1000.5) == "1000.5"
    assert cell_to_text(42) == "42"

def test_schema_registry_serves_salary_inputs_only():
    reg = SchemaRegistry()
    assert reg.get_schema("salary_inputs")["required"] == ["basic_salary"]
    assert not hasattr(reg, "get_available_entities")
    with pytest.raises(ValueError):
        reg.get_schema("vendors")
