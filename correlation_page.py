"""
Correlation Reminders Page
Three reminders about computing and interpreting correlation coefficients
"""

import logging

import streamlit as st

from correlation_utils.exceptions import CorrelationReportError
from correlation_utils.report import build_report_sections, render_report_html


logger = logging.getLogger(__name__)


@st.cache_resource
def _get_sections():
    return build_report_sections()


def show():
    """
    Main function to display the Correlation Reminders page
    """
    st.title("📈 Correlation Coefficients: Three Reminders")
    st.markdown("""
    Pearson, Kendall and Spearman coefficients compress a whole scatter plot
    into one number. The three examples below show what that number hides.
    """)

    try:
        sections = _get_sections()
    except CorrelationReportError as e:
        st.error(f"❌ Could not build the report: {str(e)}")
        raise

    st.markdown("---")

    tabs = st.tabs([f"{i + 1}. {section.title.split(': ', 1)[-1].capitalize()}"
                    for i, section in enumerate(sections)])

    for tab, section in zip(tabs, sections):
        with tab:
            st.markdown(f"## {section.title}")
            st.markdown(section.narrative)
            st.plotly_chart(section.figure, use_container_width=True)

            if section.table is not None:
                with st.expander("📋 Coefficients"):
                    st.dataframe(section.table.round(4), use_container_width=True)

    # === EXPORT ===
    st.markdown("---")
    st.markdown("## 💾 Export")

    st.download_button(
        label="📥 Download report (HTML)",
        data=render_report_html(sections),
        file_name="correlation_reminders.html",
        mime="text/html"
    )
