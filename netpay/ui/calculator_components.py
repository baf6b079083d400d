"""
Streamlit components for the single-employee net pay calculator.
The widgets only collect text and render a CalculationResult; all state lives
in a SalaryForm kept in st.session_state.
"""
import streamlit as st
import plotly.express as px

from netpay.core.config import settings
from netpay.reports.payslip import PayslipReport
from netpay.tax.form import SalaryForm
from netpay.tax.models import CalculationResult
from netpay.tax.validation import FIELD_LABELS, SALARY_FIELDS

FORM_KEY = "salary_form"

def get_form() -> SalaryForm:
    if FORM_KEY not in st.session_state:
        st.session_state[FORM_KEY] = SalaryForm()
    return st.session_state[FORM_KEY]

def _input_key(field: str) -> str:
    return f"input_{field}"

def _on_field_change(field: str):
    form = get_form()
    key = _input_key(field)
    if not form.handle_input(field, st.session_state[key]):
        # rejected text never replaces the stored value
        st.session_state[key] = form.values[field]

def _on_reset():
    get_form().reset()
    for field in SALARY_FIELDS:
        st.session_state[_input_key(field)] = ""

def render_salary_form(form: SalaryForm):
    st.markdown("### Enter Salary Details")

    for field in SALARY_FIELDS:
        st.text_input(
            f"{FIELD_LABELS[field]} ({settings.CURRENCY})",
            key=_input_key(field),
            on_change=_on_field_change,
            args=(field,),
            placeholder="0.00"
        )
        if form.errors.get(field):
            st.error(form.errors[field])

    col1, col2 = st.columns(2)
    with col1:
        calculate = st.button("🧮 Calculate", type="primary", key="calculate_btn", use_container_width=True)
    with col2:
        st.button("↺ Reset", key="reset_btn", on_click=_on_reset, use_container_width=True)

    if calculate:
        form.calculate()

    if form.global_error:
        st.error(form.global_error)

def render_results(result: CalculationResult):
    report = PayslipReport(result)

    st.markdown("### Results")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("💰 Gross Pay", report.fmt(result.gross))
    with col2:
        st.metric("📉 Total Deductions", report.fmt(result.total_deductions))
    with col3:
        st.metric("🏛️ PAYE", report.fmt(result.paye_tax))
    with col4:
        st.metric("✅ Net Pay", report.fmt(result.net_pay))

    if result.net_pay < 0:
        st.warning("Deductions exceed gross pay for these inputs; net pay is negative.")

    detail_col, chart_col = st.columns(2)
    with detail_col:
        st.markdown("#### Deductions")
        deductions = report.deductions_frame()
        st.dataframe(
            deductions.assign(Amount=deductions["Amount"].map(report.fmt)),
            use_container_width=True,
            hide_index=True
        )
        st.write(f"**Taxable Income:** {report.fmt(result.taxable)}")
        st.write(f"**Personal Relief:** {report.fmt(result.personal_relief)}")

    with chart_col:
        st.markdown("#### Deduction Breakdown")
        chart_df = deductions[deductions["Amount"] > 0]
        if chart_df.empty:
            st.info("No deductions to chart")
        else:
            fig = px.pie(
                values=chart_df["Amount"].astype(float),
                names=chart_df["Deduction"],
                hole=0.4
            )
            fig.update_layout(height=300, showlegend=True)
            st.plotly_chart(fig, use_container_width=True)

    st.markdown("#### PAYE Tax Bands")
    bands = report.band_frame()
    st.dataframe(
        bands.assign(Amount=bands["Amount"].map(report.fmt), Tax=bands["Tax"].map(report.fmt)),
        use_container_width=True,
        hide_index=True
    )

    st.markdown("#### Download Payslip")
    d1, d2, d3 = st.columns(3)
    with d1:
        st.download_button("🖨️ Printable (.txt)", report.to_text(), file_name="payslip.txt", mime="text/plain")
    with d2:
        st.download_button("📄 CSV", report.to_csv(), file_name="payslip.csv", mime="text/csv")
    with d3:
        st.download_button(
            "📊 Excel",
            report.to_excel_bytes(),
            file_name="payslip.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
