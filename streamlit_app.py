
import streamlit as st

from netpay.core.config import settings
from netpay.payroll.bulk_processor import PayrollBulkProcessor
from netpay.ui.calculator_components import get_form, render_results, render_salary_form
from netpay.ui.upload_components import render_batch_widget

st.set_page_config(
    page_title="Net Pay Calculator | PAYE, NSSF, SHIF & Housing Levy",
    layout="wide",
    page_icon="🇰🇪",
    initial_sidebar_state="collapsed"
)

# Custom CSS for the header band
st.markdown("""
<style>
    .main-header {
        background: linear-gradient(135deg, #2F4F4F 0%, #1E3E3E 70%, #0D2C2C 100%);
        padding: 1rem;
        border-radius: 10px;
        color: #67e8f9;
        margin-bottom: 2rem;
    }
    .main-header p { color: #a5f3fc; opacity: 0.9; }
</style>
""", unsafe_allow_html=True)

def show_header():
    st.markdown('<div class="main-header"><h1>Net Pay Calculator</h1><p>Calculate Net Pay, PAYE, NSSF & Deductions</p></div>', unsafe_allow_html=True)

def show_calculator():
    form = get_form()
    input_col, result_col = st.columns([1, 2])
    with input_col:
        render_salary_form(form)
    with result_col:
        if form.result is not None:
            render_results(form.result)
        else:
            st.info(f"Enter a basic salary in {settings.CURRENCY} and press Calculate.")

def show_batch():
    if "batch_processor" not in st.session_state:
        st.session_state["batch_processor"] = PayrollBulkProcessor()
    render_batch_widget(st.session_state["batch_processor"])

def main():
    show_header()
    calc_tab, batch_tab = st.tabs(["🧮 Calculator", "📁 Batch"])
    with calc_tab:
        show_calculator()
    with batch_tab:
        show_batch()

if __name__=="__main__":
    main()
