"""
Correlation Plotting Utilities
Annotated scatter panels and multi-panel comparison figures using Plotly
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from color_utils import (
    create_categorical_color_map,
    get_method_colors,
    get_unified_color_schemes
)
from report_settings import ANNOTATION_STEP, COEFFICIENT_DECIMALS, PANEL_SIZE

from .datasets import append_points, draw_subsample
from .exceptions import InvalidParameterError
from .statistics import (
    CorrelationResult,
    LinearFit,
    compute_correlation,
    compute_correlations,
    fit_linear_trend
)


logger = logging.getLogger(__name__)

FIT_LINE_NAME = 'least-squares fit'


# ──────────────────────────────────────────────
#  BUILDING BLOCKS
# ──────────────────────────────────────────────

def _padded_range(values, padding: float = 0.05) -> List[float]:
    """Axis range with 5% padding on each side"""
    values = pd.Series(np.asarray(values, dtype=float)).dropna()
    v_min, v_max = values.min(), values.max()
    span = v_max - v_min
    pad = span * padding if span > 0 else 0.5
    return [v_min - pad, v_max + pad]


def _add_points(
    fig: go.Figure,
    x,
    y,
    name: str,
    color: str,
    row: int,
    col: int,
    x_var: str = 'x',
    y_var: str = 'y',
    symbol: str = 'circle',
    size: int = 8,
    opacity: float = 0.7
) -> None:
    fig.add_trace(
        go.Scatter(
            x=np.asarray(x),
            y=np.asarray(y),
            mode='markers',
            name=name,
            legendgroup=name,
            marker=dict(
                color=color,
                size=size,
                symbol=symbol,
                opacity=opacity,
                line=dict(color='white', width=0.5)
            ),
            hovertemplate=f'{name}<br>{x_var}: %{{x:.3f}}<br>{y_var}: %{{y:.3f}}<extra></extra>'
        ),
        row=row,
        col=col
    )


def _add_fit_line(
    fig: go.Figure,
    fit: LinearFit,
    x_range: Sequence[float],
    name: str,
    color: str,
    row: int,
    col: int,
    dash: str = 'solid'
) -> None:
    xs = np.asarray(x_range, dtype=float)
    fig.add_trace(
        go.Scatter(
            x=xs,
            y=fit.predict(xs),
            mode='lines',
            name=name,
            legendgroup=name,
            line=dict(color=color, width=2, dash=dash),
            hovertemplate=f'y = {fit.intercept:.3f} + {fit.slope:.3f}·x<extra></extra>'
        ),
        row=row,
        col=col
    )


def _annotate(
    fig: go.Figure,
    lines: Sequence[Tuple[str, str]],
    row: int,
    col: int,
    top: float = 0.98,
    step: float = ANNOTATION_STEP
) -> None:
    """Stack (text, color) lines in the top-left corner of one panel"""
    for i, (text, color) in enumerate(lines):
        fig.add_annotation(
            text=text,
            x=0.02,
            y=top - i * step,
            xref='x domain',
            yref='y domain',
            xanchor='left',
            yanchor='top',
            showarrow=False,
            align='left',
            font=dict(size=12, color=color),
            bgcolor='rgba(255, 255, 255, 0.8)',
            row=row,
            col=col
        )


def _highlight_mask(data: pd.DataFrame, highlight) -> np.ndarray:
    if highlight is None:
        return np.zeros(len(data), dtype=bool)

    mask = np.asarray(highlight, dtype=bool)
    if mask.shape != (len(data),):
        raise InvalidParameterError(
            f"Highlight mask has {mask.size} entries for {len(data)} observations"
        )
    return mask


def _apply_layout(
    fig: go.Figure,
    title: str,
    width: int,
    height: int,
    showlegend: bool = True
) -> None:
    color_scheme = get_unified_color_schemes()
    fig.update_layout(
        title=dict(text=f"<b>{title}</b>", x=0.5, xanchor='center'),
        plot_bgcolor=color_scheme['background'],
        paper_bgcolor=color_scheme['paper'],
        font=dict(color=color_scheme['text']),
        hovermode='closest',
        width=width,
        height=height,
        showlegend=showlegend,
        legend=dict(orientation='h', x=0.5, xanchor='center', y=-0.12, yanchor='top'),
        margin=dict(l=60, r=30, t=80, b=90)
    )
    fig.update_xaxes(showgrid=True, gridcolor=color_scheme['grid'])
    fig.update_yaxes(showgrid=True, gridcolor=color_scheme['grid'])


def deduplicate_legend(fig: go.Figure) -> go.Figure:
    """
    Keep a single legend entry per trace name

    Panels of a comparison figure repeat the same traces (points, fit line);
    only the first occurrence of each name stays in the legend.
    """
    seen = set()
    for trace in fig.data:
        if trace.showlegend is False or not trace.name:
            continue
        if trace.name in seen:
            trace.showlegend = False
        else:
            seen.add(trace.name)
            trace.showlegend = True

    return fig


# ──────────────────────────────────────────────
#  SINGLE-DATASET PANEL
# ──────────────────────────────────────────────

def add_correlation_panel(
    fig: go.Figure,
    data: pd.DataFrame,
    x_var: str,
    y_var: str,
    row: int = 1,
    col: int = 1,
    methods: Sequence[str] = ('pearson',),
    highlight=None,
    point_name: str = 'observations',
    highlight_name: str = 'highlighted',
    point_color: Optional[str] = None,
    x_range: Optional[Sequence[float]] = None,
    y_range: Optional[Sequence[float]] = None,
    decimals: int = COEFFICIENT_DECIMALS
) -> Dict[str, CorrelationResult]:
    """
    Draw an annotated scatter panel into one subplot cell

    Coefficients and the fit are computed before any trace is added, so a
    failure leaves the figure untouched.

    Parameters
    ----------
    fig : go.Figure
        Figure created with ``make_subplots``
    data : pd.DataFrame
        Dataset to plot
    x_var, y_var : str
        Column names
    row, col : int
        Subplot cell (1-based)
    methods : sequence of str
        Coefficients annotated in the panel, stacked top to bottom
    highlight : array-like of bool, optional
        Points drawn with the highlight style
    point_name, highlight_name : str
        Legend names of the regular and highlighted points
    point_color : str, optional
        Color of the regular points (default: scheme point color)
    x_range, y_range : sequence of 2 floats, optional
        Axis ranges (default: data range with 5% padding)
    decimals : int
        Decimal places of the coefficient annotations

    Returns
    -------
    dict
        method -> CorrelationResult
    """
    mask = _highlight_mask(data, highlight)
    results = compute_correlations(data[x_var], data[y_var], methods)
    fit = fit_linear_trend(data[x_var], data[y_var])

    color_scheme = get_unified_color_schemes()
    method_colors = get_method_colors(methods)

    if x_range is None:
        x_range = _padded_range(data[x_var])
    if y_range is None:
        y_range = _padded_range(data[y_var])

    regular = data[~mask]
    _add_points(
        fig, regular[x_var], regular[y_var],
        name=point_name,
        color=point_color or color_scheme['point_color'],
        row=row, col=col, x_var=x_var, y_var=y_var
    )

    if mask.any():
        special = data[mask]
        _add_points(
            fig, special[x_var], special[y_var],
            name=highlight_name,
            color=color_scheme['highlight_color'],
            row=row, col=col, x_var=x_var, y_var=y_var,
            symbol='diamond', size=11, opacity=0.9
        )

    _add_fit_line(fig, fit, x_range, FIT_LINE_NAME, color_scheme['fit_line'], row, col)

    _annotate(
        fig,
        [(result.format(decimals), method_colors[method]) for method, result in results.items()],
        row, col
    )

    fig.update_xaxes(title_text=x_var, range=list(x_range), row=row, col=col)
    fig.update_yaxes(title_text=y_var, range=list(y_range), row=row, col=col)

    return results


def create_correlation_scatter(
    data: pd.DataFrame,
    x_var: str,
    y_var: str,
    methods: Sequence[str] = ('pearson',),
    highlight=None,
    highlight_name: str = 'highlighted',
    title: Optional[str] = None,
    decimals: int = COEFFICIENT_DECIMALS,
    width: int = 700,
    height: int = 700
) -> go.Figure:
    """
    Scatter plot annotated with correlation coefficients and a trend line

    Parameters
    ----------
    data : pd.DataFrame
        Input dataset
    x_var, y_var : str
        Variable names for the axes
    methods : sequence of str
        'pearson', 'kendall' and/or 'spearman'; several methods are stacked
        at distinct vertical offsets
    highlight : array-like of bool, optional
        Points drawn with a distinct marker (e.g. an outlier)
    highlight_name : str
        Legend name of the highlighted points
    title : str, optional
        Plot title (default "<x_var> vs <y_var>")
    decimals : int
        Decimal places of the annotations (default 2)
    width, height : int
        Figure size in px

    Returns
    -------
    go.Figure
        Plotly figure object
    """
    fig = make_subplots(rows=1, cols=1)
    add_correlation_panel(
        fig, data, x_var, y_var,
        methods=methods,
        highlight=highlight,
        highlight_name=highlight_name,
        decimals=decimals
    )

    if title is None:
        title = f"{x_var} vs {y_var}"

    _apply_layout(fig, title, width, height)
    return fig


# ──────────────────────────────────────────────
#  COMPARISON FIGURES
# ──────────────────────────────────────────────

def plot_anscombe_quartet(
    long_data: pd.DataFrame,
    x_var: str = 'x',
    y_var: str = 'y',
    group_col: str = 'label',
    n_cols: int = 2,
    decimals: int = COEFFICIENT_DECIMALS
) -> go.Figure:
    """
    One annotated panel per set of a long-form quartet, on a fixed grid

    All panels share the same axis ranges so the shapes compare directly.
    """
    groups = list(pd.unique(long_data[group_col]))
    if not groups:
        raise InvalidParameterError("No groups to plot")

    n_rows = math.ceil(len(groups) / n_cols)
    colors = create_categorical_color_map(groups)

    fig = make_subplots(
        rows=n_rows,
        cols=n_cols,
        subplot_titles=[str(group) for group in groups],
        horizontal_spacing=0.08,
        vertical_spacing=0.14
    )

    x_range = _padded_range(long_data[x_var])
    y_range = _padded_range(long_data[y_var])

    for i, group in enumerate(groups):
        subset = long_data[long_data[group_col] == group]
        add_correlation_panel(
            fig, subset, x_var, y_var,
            row=i // n_cols + 1,
            col=i % n_cols + 1,
            point_name=str(group),
            point_color=colors[group],
            x_range=x_range,
            y_range=y_range,
            decimals=decimals
        )

    deduplicate_legend(fig)
    _apply_layout(
        fig,
        "Same Pearson r, different data",
        width=PANEL_SIZE * n_cols,
        height=PANEL_SIZE * n_rows + 100
    )
    return fig


def plot_outlier_sample_sizes(
    full: pd.DataFrame,
    outlier: Tuple[float, float],
    sizes: Sequence[int],
    seed: int,
    x_var: str = 'x',
    y_var: str = 'y',
    method: str = 'pearson',
    decimals: int = COEFFICIENT_DECIMALS
) -> go.Figure:
    """
    Horizontal row of panels: the same outlier appended to samples of
    increasing size

    Each panel shows the sample, the outlier, the trend line without and
    with the outlier, and both coefficients. The legend is shared.
    """
    if not sizes:
        raise InvalidParameterError("At least one sample size is required")

    point = {x_var: outlier[0], y_var: outlier[1]}
    color_scheme = get_unified_color_schemes()
    without_color, with_color = color_scheme['line_colors']

    # Compute everything first: no partial figure on failure
    panels = []
    for size in sizes:
        sample = draw_subsample(full[[x_var, y_var]], size, seed)
        with_outlier = append_points(sample, [point])
        panels.append((
            size,
            sample,
            compute_correlation(sample[x_var], sample[y_var], method),
            compute_correlation(with_outlier[x_var], with_outlier[y_var], method),
            fit_linear_trend(sample[x_var], sample[y_var]),
            fit_linear_trend(with_outlier[x_var], with_outlier[y_var]),
        ))

    everything = append_points(full[[x_var, y_var]], [point])
    x_range = _padded_range(everything[x_var])
    y_range = _padded_range(everything[y_var])

    fig = make_subplots(
        rows=1,
        cols=len(sizes),
        subplot_titles=[f"n = {size}" for size in sizes],
        horizontal_spacing=0.06
    )

    for i, (size, sample, r_without, r_with, fit_without, fit_with) in enumerate(panels):
        col = i + 1
        _add_points(
            fig, sample[x_var], sample[y_var],
            name='sample', color=color_scheme['point_color'],
            row=1, col=col, x_var=x_var, y_var=y_var, size=6, opacity=0.5
        )
        _add_points(
            fig, [outlier[0]], [outlier[1]],
            name='outlier', color=color_scheme['highlight_color'],
            row=1, col=col, x_var=x_var, y_var=y_var, symbol='star', size=14, opacity=1.0
        )
        _add_fit_line(fig, fit_without, x_range, 'without outlier', without_color, 1, col, dash='dash')
        _add_fit_line(fig, fit_with, x_range, 'with outlier', with_color, 1, col)
        _annotate(
            fig,
            [
                (f"without: {r_without.format(decimals)}", without_color),
                (f"with: {r_with.format(decimals)}", with_color),
            ],
            1, col
        )
        fig.update_xaxes(title_text=x_var, range=x_range, row=1, col=col)
        fig.update_yaxes(title_text=y_var, range=y_range, row=1, col=col)

        logger.debug(
            "n=%d: %s %.4f without, %.4f with outlier",
            size, method, r_without.coefficient, r_with.coefficient
        )

    deduplicate_legend(fig)
    _apply_layout(
        fig,
        "One outlier, growing sample size",
        width=PANEL_SIZE * len(sizes),
        height=PANEL_SIZE + 100
    )
    return fig


def plot_method_comparison(
    base: pd.DataFrame,
    augmented: pd.DataFrame,
    x_var: str,
    y_var: str,
    methods: Sequence[str] = ('pearson', 'kendall', 'spearman'),
    outlier_col: str = 'is_outlier',
    decimals: int = COEFFICIENT_DECIMALS
) -> go.Figure:
    """
    Original vs outlier-augmented data, every method annotated per panel

    The synthetic outlier rows of ``augmented`` (``outlier_col`` True) are
    highlighted.
    """
    highlight = augmented[outlier_col] if outlier_col in augmented.columns else None

    x_range = _padded_range(pd.concat([base[x_var], augmented[x_var]]))
    y_range = _padded_range(pd.concat([base[y_var], augmented[y_var]]))

    fig = make_subplots(
        rows=1,
        cols=2,
        subplot_titles=['Original data', 'With synthetic outliers'],
        horizontal_spacing=0.08
    )

    for col, data, mask in ((1, base, None), (2, augmented, highlight)):
        add_correlation_panel(
            fig, data, x_var, y_var,
            row=1, col=col,
            methods=methods,
            highlight=mask,
            highlight_name='synthetic outlier',
            x_range=x_range,
            y_range=y_range,
            decimals=decimals
        )

    deduplicate_legend(fig)
    _apply_layout(
        fig,
        "Rank-based coefficients resist outliers",
        width=PANEL_SIZE * 2,
        height=PANEL_SIZE + 100
    )
    return fig
