"""
Correlation Statistics
Pearson, Spearman and Kendall coefficients, least-squares trend lines and the
comparison tables behind the correlation report
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from .datasets import append_points, draw_subsample
from .exceptions import InsufficientDataError, InvalidParameterError


logger = logging.getLogger(__name__)

CORRELATION_METHODS = ('pearson', 'kendall', 'spearman')

METHOD_LABELS = {
    'pearson': 'Pearson r',
    'kendall': 'Kendall τ',
    'spearman': 'Spearman ρ',
}

# Spearman ranks ties by their average; Kendall is tau-b (tie-adjusted)
_CORRELATION_FUNCTIONS = {
    'pearson': stats.pearsonr,
    'spearman': stats.spearmanr,
    'kendall': stats.kendalltau,
}


@dataclass(frozen=True)
class CorrelationResult:
    """Coefficient computed for one dataset with one method"""
    method: str
    coefficient: float
    p_value: float
    sample_size: int

    @property
    def label(self) -> str:
        return METHOD_LABELS[self.method]

    def format(self, decimals: int = 2) -> str:
        """Annotation text, e.g. 'Pearson r = 0.82'"""
        return f"{self.label} = {self.coefficient:.{decimals}f}"


@dataclass(frozen=True)
class LinearFit:
    """Ordinary least-squares line of y on x"""
    slope: float
    intercept: float
    sample_size: int

    def predict(self, x) -> np.ndarray:
        return self.intercept + self.slope * np.asarray(x, dtype=float)


def _clean_pair(x, y) -> Tuple[pd.Series, pd.Series]:
    """Drop incomplete pairs and check there is something to correlate"""
    x = pd.Series(np.asarray(x, dtype=float))
    y = pd.Series(np.asarray(y, dtype=float))

    if len(x) != len(y):
        raise InvalidParameterError(
            f"x and y must have the same length ({len(x)} != {len(y)})"
        )

    if np.isinf(x).any() or np.isinf(y).any():
        raise InvalidParameterError("x and y must not contain infinite values")

    # Remove rows with NaN in either variable
    complete = x.notna() & y.notna()
    x, y = x[complete], y[complete]

    if len(x) < 2:
        raise InsufficientDataError(
            f"Need at least 2 complete observations, got {len(x)}"
        )

    for name, values in (('x', x), ('y', y)):
        if values.nunique() < 2:
            raise InsufficientDataError(
                f"Variable {name} has zero variance; correlation is undefined"
            )

    return x, y


def compute_correlation(x, y, method: str = 'pearson') -> CorrelationResult:
    """
    Compute one correlation coefficient between two variables

    Parameters
    ----------
    x, y : array-like
        Paired observations (pairs containing NaN are dropped)
    method : str
        Correlation method: 'pearson', 'spearman', or 'kendall'

    Returns
    -------
    CorrelationResult

    Raises
    ------
    InvalidParameterError
        Unknown method, x/y length mismatch or infinite values
    InsufficientDataError
        Fewer than 2 complete pairs or a constant variable
    """
    if method not in _CORRELATION_FUNCTIONS:
        raise InvalidParameterError(f"Unknown correlation method: {method}")

    x_clean, y_clean = _clean_pair(x, y)

    corr, pval = _CORRELATION_FUNCTIONS[method](x_clean, y_clean)

    return CorrelationResult(
        method=method,
        coefficient=float(corr),
        p_value=float(pval),
        sample_size=len(x_clean)
    )


def compute_correlations(
    x,
    y,
    methods: Iterable[str] = CORRELATION_METHODS
) -> Dict[str, CorrelationResult]:
    """Several methods on the same pair, keyed by method (input order kept)"""
    return {method: compute_correlation(x, y, method) for method in methods}


def fit_linear_trend(x, y) -> LinearFit:
    """
    Least-squares trend line of y on x

    Used for the overlay line only, so no confidence band is returned.
    """
    x_clean, y_clean = _clean_pair(x, y)
    result = stats.linregress(x_clean, y_clean)

    return LinearFit(
        slope=float(result.slope),
        intercept=float(result.intercept),
        sample_size=len(x_clean)
    )


def get_correlation_summary(
    data: pd.DataFrame,
    x_col: str,
    y_col: str,
    methods: Iterable[str] = CORRELATION_METHODS,
    group_col: Optional[str] = None
) -> pd.DataFrame:
    """
    Summary table of coefficients, optionally one block per group

    Returns
    -------
    pd.DataFrame
        Columns: ['Group', 'Method', 'Coefficient', 'P-value', 'N']
    """
    methods = list(methods)
    if group_col is None:
        groups = [('All', data)]
    else:
        groups = list(data.groupby(group_col, sort=False))

    results = []
    for group, group_data in groups:
        for method in methods:
            result = compute_correlation(group_data[x_col], group_data[y_col], method)
            results.append({
                'Group': group,
                'Method': result.label,
                'Coefficient': result.coefficient,
                'P-value': result.p_value,
                'N': result.sample_size
            })

    return pd.DataFrame(results)


def outlier_influence_table(
    data: pd.DataFrame,
    outlier: Tuple[float, float],
    sizes: Sequence[int],
    seed: int,
    x_col: str = 'x',
    y_col: str = 'y',
    method: str = 'pearson'
) -> pd.DataFrame:
    """
    Shift of a coefficient caused by one outlier, for several sample sizes

    For each size a deterministic sub-sample is drawn from ``data``, the
    coefficient is computed without and with ``outlier`` appended.

    Returns
    -------
    pd.DataFrame
        Columns: ['n', 'without_outlier', 'with_outlier', 'delta', 'abs_delta']
    """
    point = {x_col: outlier[0], y_col: outlier[1]}

    results = []
    for size in sizes:
        sample = draw_subsample(data[[x_col, y_col]], size, seed)
        with_outlier = append_points(sample, [point])

        without = compute_correlation(sample[x_col], sample[y_col], method)
        with_ = compute_correlation(with_outlier[x_col], with_outlier[y_col], method)

        delta = with_.coefficient - without.coefficient
        logger.debug("n=%d: %s %.4f -> %.4f", size, method, without.coefficient, with_.coefficient)

        results.append({
            'n': size,
            'without_outlier': without.coefficient,
            'with_outlier': with_.coefficient,
            'delta': delta,
            'abs_delta': abs(delta)
        })

    return pd.DataFrame(results)


def method_robustness_table(
    base: pd.DataFrame,
    augmented: pd.DataFrame,
    x_col: str,
    y_col: str,
    methods: Iterable[str] = CORRELATION_METHODS
) -> pd.DataFrame:
    """
    How far each method moves when the outlier rows are added

    Returns
    -------
    pd.DataFrame
        Index: method label; columns ['without_outliers', 'with_outliers',
        'shift'] where shift is the absolute difference
    """
    methods = list(methods)
    before = compute_correlations(base[x_col], base[y_col], methods)
    after = compute_correlations(augmented[x_col], augmented[y_col], methods)

    table = pd.DataFrame(
        {
            'without_outliers': [before[m].coefficient for m in before],
            'with_outliers': [after[m].coefficient for m in before],
        },
        index=pd.Index([before[m].label for m in before], name='Method')
    )
    table['shift'] = (table['with_outliers'] - table['without_outliers']).abs()

    return table
