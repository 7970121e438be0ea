"""
Correlation Report Utilities
Datasets, coefficients and Plotly figures for three reminders about
interpreting Pearson, Kendall and Spearman correlation coefficients
"""

from .exceptions import (
    CorrelationReportError,
    InvalidParameterError,
    InsufficientDataError,
    SubsampleSizeError
)

from .datasets import (
    load_anscombe,
    load_anscombe_wide,
    melt_paired_columns,
    pivot_paired_columns,
    sample_bivariate_normal,
    draw_subsample,
    append_points,
    load_mtcars,
    build_outlier_rows,
    augment_with_outliers
)

from .statistics import (
    CorrelationResult,
    LinearFit,
    compute_correlation,
    compute_correlations,
    fit_linear_trend,
    get_correlation_summary,
    outlier_influence_table,
    method_robustness_table
)

from .plotting import (
    add_correlation_panel,
    create_correlation_scatter,
    deduplicate_legend,
    plot_anscombe_quartet,
    plot_outlier_sample_sizes,
    plot_method_comparison
)

from .report import (
    ReportSection,
    build_report_sections,
    build_reminder_figures,
    render_report_html,
    export_report_html
)

__all__ = [
    # Errors
    'CorrelationReportError',
    'InvalidParameterError',
    'InsufficientDataError',
    'SubsampleSizeError',
    # Datasets
    'load_anscombe',
    'load_anscombe_wide',
    'melt_paired_columns',
    'pivot_paired_columns',
    'sample_bivariate_normal',
    'draw_subsample',
    'append_points',
    'load_mtcars',
    'build_outlier_rows',
    'augment_with_outliers',
    # Statistics
    'CorrelationResult',
    'LinearFit',
    'compute_correlation',
    'compute_correlations',
    'fit_linear_trend',
    'get_correlation_summary',
    'outlier_influence_table',
    'method_robustness_table',
    # Plots
    'add_correlation_panel',
    'create_correlation_scatter',
    'deduplicate_legend',
    'plot_anscombe_quartet',
    'plot_outlier_sample_sizes',
    'plot_method_comparison',
    # Report
    'ReportSection',
    'build_report_sections',
    'build_reminder_figures',
    'render_report_html',
    'export_report_html'
]
