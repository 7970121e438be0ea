"""
Correlation Report
Builds the three reminder sections (narrative, figure, supporting table) and
exports them as one static HTML document
"""

import html
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

import pandas as pd
import plotly.graph_objects as go

import report_settings

from .datasets import augment_with_outliers, load_anscombe, load_mtcars, sample_bivariate_normal
from .exceptions import CorrelationReportError
from .plotting import plot_anscombe_quartet, plot_method_comparison, plot_outlier_sample_sizes
from .statistics import get_correlation_summary, method_robustness_table, outlier_influence_table


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportSection:
    """One reminder of the report"""
    title: str
    narrative: str
    figure: go.Figure
    table: Optional[pd.DataFrame] = None


_ANSCOMBE_TEXT = """
Anscombe's quartet holds four sets of eleven points with almost identical
means, variances, regression lines and Pearson coefficients (about 0.816).
Only a plot shows that set 2 is curved, set 3 is a straight line with one
outlier and set 4 depends on a single high-leverage point.
**A coefficient is a summary, not a substitute for looking at the data.**
"""

_SAMPLE_SIZE_TEXT = """
Samples of increasing size are drawn from the same bivariate normal
population (correlation -0.7) and the same point far from the bulk of the
data is appended to each of them. On a small sample that single point can
flip the sign of Pearson's r; on hundreds of points it barely moves it.
**Be wary of coefficients computed on few observations.**
"""

_METHODS_TEXT = """
The car-performance table is augmented with synthetic cars placed 2 to 8
standard deviations above the mean of both variables. Pearson's r, built
on raw values, is dragged along by them; Kendall's tau and Spearman's rho,
built on ranks, move much less.
**Prefer a rank-based coefficient when outliers cannot be ruled out.**
"""


def _run_step(name: str, builder: Callable[[], ReportSection]) -> ReportSection:
    try:
        return builder()
    except CorrelationReportError:
        logger.error("Correlation report step '%s' failed", name)
        raise


def build_anscombe_section() -> ReportSection:
    long_data = load_anscombe()
    return ReportSection(
        title="Reminder 1: always plot your data",
        narrative=_ANSCOMBE_TEXT,
        figure=plot_anscombe_quartet(long_data),
        table=get_correlation_summary(long_data, 'x', 'y', methods=('pearson',), group_col='label')
    )


def build_sample_size_section() -> ReportSection:
    full = sample_bivariate_normal(
        report_settings.BIVARIATE_MEAN,
        report_settings.BIVARIATE_COV,
        report_settings.BIVARIATE_SIZE,
        seed=report_settings.RANDOM_SEED
    )
    figure = plot_outlier_sample_sizes(
        full,
        report_settings.OUTLIER_POINT,
        report_settings.SUBSAMPLE_SIZES,
        seed=report_settings.SUBSAMPLE_SEED
    )
    table = outlier_influence_table(
        full,
        report_settings.OUTLIER_POINT,
        report_settings.SUBSAMPLE_SIZES,
        seed=report_settings.SUBSAMPLE_SEED
    )
    return ReportSection(
        title="Reminder 2: small samples are fragile",
        narrative=_SAMPLE_SIZE_TEXT,
        figure=figure,
        table=table
    )


def build_methods_section() -> ReportSection:
    x_col = report_settings.CARS_X_COLUMN
    y_col = report_settings.CARS_Y_COLUMN

    cars = load_mtcars()
    augmented = augment_with_outliers(cars, x_col, y_col, report_settings.OUTLIER_MULTIPLIERS)

    return ReportSection(
        title="Reminder 3: rank-based coefficients resist outliers",
        narrative=_METHODS_TEXT,
        figure=plot_method_comparison(
            cars, augmented, x_col, y_col,
            methods=report_settings.CORRELATION_METHODS
        ),
        table=method_robustness_table(
            cars, augmented, x_col, y_col,
            methods=report_settings.CORRELATION_METHODS
        )
    )


def build_report_sections() -> List[ReportSection]:
    """All reminders, in reading order; fails on the first failing step"""
    sections = [
        _run_step('anscombe quartet', build_anscombe_section),
        _run_step('outlier vs sample size', build_sample_size_section),
        _run_step('method comparison', build_methods_section),
    ]
    logger.info("Built %d report sections", len(sections))
    return sections


def build_reminder_figures() -> dict:
    """Reminder title -> figure, in reading order"""
    return {section.title: section.figure for section in build_report_sections()}


def _markdown_to_html(text: str) -> str:
    """Enough markdown for the narratives: blank-line paragraphs and **bold**"""
    paragraphs = []
    for block in re.split(r'\n\s*\n', text.strip()):
        parts = html.escape(' '.join(block.split())).split('**')
        for i in range(1, len(parts), 2):
            parts[i] = f"<strong>{parts[i]}</strong>"
        paragraphs.append(f"<p>{''.join(parts)}</p>")
    return "\n".join(paragraphs)


def render_report_html(sections: Optional[List[ReportSection]] = None) -> str:
    """Static HTML document with every section's narrative, figure and table"""
    if sections is None:
        sections = build_report_sections()

    body = []
    for i, section in enumerate(sections):
        body.append(f"<h2>{html.escape(section.title)}</h2>")
        body.append(_markdown_to_html(section.narrative))
        body.append(section.figure.to_html(
            full_html=False,
            include_plotlyjs='cdn' if i == 0 else False
        ))
        if section.table is not None:
            body.append(section.table.to_html(float_format=lambda v: f"{v:.4f}", border=0))

    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n<meta charset=\"utf-8\">\n"
        "<title>Correlation coefficients: three reminders</title>\n"
        "</head>\n<body>\n"
        "<h1>Correlation coefficients: three reminders</h1>\n"
        + "\n".join(body)
        + "\n</body>\n</html>\n"
    )


def export_report_html(
    path: Union[str, Path],
    sections: Optional[List[ReportSection]] = None
) -> Path:
    """
    Write the report to ``path``

    Every section is built before the file is opened, so a failing step
    never leaves a partial document behind.
    """
    document = render_report_html(sections)

    path = Path(path)
    path.write_text(document, encoding='utf-8')
    logger.info("Correlation report written to %s", path)
    return path
