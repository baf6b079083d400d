"""
Streamlit components for batch salary uploads.
Wraps PayrollBulkProcessor with template download, file upload and result display.
"""
import os
import tempfile
from typing import Optional

import streamlit as st

from netpay.payroll.bulk_processor import BatchResult, PayrollBulkProcessor
from netpay.reports.payslip import format_currency
from netpay.tax.validation import FIELD_LABELS

def render_batch_widget(processor: PayrollBulkProcessor) -> Optional[BatchResult]:
    """
    Upload widget for a salary file, one calculation per row.

    Returns:
        BatchResult or None if nothing was processed
    """
    st.subheader("📁 Batch Net Pay")

    template_tab, upload_tab = st.tabs(["📋 Template", "⬆️ Upload"])

    with template_tab:
        st.write("Download the template to see the expected columns and a sample row.")
        template_df = processor.get_template()
        st.download_button(
            label="💾 Save Template as CSV",
            data=template_df.to_csv(index=False),
            file_name="salary_inputs_template.csv",
            mime="text/csv",
            key="save_salary_inputs_template"
        )
        st.dataframe(template_df, use_container_width=True)
        with st.expander("📖 Column Descriptions"):
            st.write("**employee_id**: Optional employee reference")
            st.write("**full_name**: Optional employee name")
            for field, label in FIELD_LABELS.items():
                st.write(f"**{field}**: {label} (max 2 decimals, up to 100,000,000)")

    with upload_tab:
        uploaded_file = st.file_uploader(
            "Choose salary file",
            type=['csv', 'xlsx', 'xls', 'json'],
            key="upload_salary_inputs_file"
        )
        if uploaded_file is None:
            return None

        if not st.button("🚀 Calculate Batch", key="process_salary_inputs", type="primary"):
            return None

        suffix = f".{uploaded_file.name.split('.')[-1]}"
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp_file:
            tmp_file.write(uploaded_file.getvalue())
            tmp_file_path = tmp_file.name

        try:
            with st.spinner("Calculating net pay..."):
                result = processor.process_file(tmp_file_path)
        except (ValueError, FileNotFoundError) as e:
            st.error(f"Error processing upload: {str(e)}")
            return None
        finally:
            os.unlink(tmp_file_path)

        metrics_cols = st.columns(4)
        with metrics_cols[0]:
            st.metric("Total Rows", result.total_rows)
        with metrics_cols[1]:
            st.metric("Processed", result.processed_rows)
        with metrics_cols[2]:
            st.metric("Errors", result.error_rows)
        with metrics_cols[3]:
            st.metric("Net Pay", format_currency(result.totals.get('total_net_pay', 0)))

        if result.row_errors:
            with st.expander(f"❌ Row Errors ({len(result.row_errors)})"):
                for error in result.row_errors[:20]:
                    details = ", ".join(f"{k}: {v}" for k, v in error['errors'].items())
                    st.error(f"Row {error['row']}: {error['message']}" + (f" ({details})" if details else ""))

        if result.success:
            st.success("✅ Batch completed")
            st.dataframe(result.results.astype(str), use_container_width=True, hide_index=True)
            st.download_button(
                "📥 Download Results (CSV)",
                result.results.to_csv(index=False),
                file_name="net_pay_batch.csv",
                mime="text/csv",
                key="download_batch_results"
            )
        return result
